"""A growable text buffer for response bodies."""

from __future__ import annotations

INITIAL_SLACK = 24576


class Page:
    """An append-only text buffer with a tracked capacity."""

    def __init__(self, text: str = "") -> None:
        self._parts: list[str] = [text] if text else []
        self._length = len(text)
        self.size = self._length + INITIAL_SLACK

    def concat(self, text: str, length: int) -> None:
        """Append the first ``length`` characters of ``text``.

        Nothing is appended when ``text`` is empty or ``length`` is negative.
        """
        if not text or length < 0:
            return
        chunk = text[:length]
        if self._length + len(chunk) > self.size:
            self.size += len(chunk) + 1
        self._parts.append(chunk)
        self._length += len(chunk)

    def clear(self) -> None:
        """Discard the contents, keeping the capacity."""
        self._parts.clear()
        self._length = 0

    def __len__(self) -> int:
        return self._length

    def __str__(self) -> str:
        if len(self._parts) > 1:
            self._parts = ["".join(self._parts)]
        return self._parts[0] if self._parts else ""