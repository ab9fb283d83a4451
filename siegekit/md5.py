"""MD5 message digest (RFC 1321) of byte strings and binary streams."""

from __future__ import annotations

import struct
from typing import BinaryIO

BLOCK_SIZE = 64
DIGEST_SIZE = 16
STREAM_CHUNK = 4096

_MASK = 0xFFFFFFFF
_INITIAL_STATE = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476)

_CONSTANTS = (
    0xD76AA478, 0xE8C7B756, 0x242070DB, 0xC1BDCEEE,
    0xF57C0FAF, 0x4787C62A, 0xA8304613, 0xFD469501,
    0x698098D8, 0x8B44F7AF, 0xFFFF5BB1, 0x895CD7BE,
    0x6B901122, 0xFD987193, 0xA679438E, 0x49B40821,
    0xF61E2562, 0xC040B340, 0x265E5A51, 0xE9B6C7AA,
    0xD62F105D, 0x02441453, 0xD8A1E681, 0xE7D3FBC8,
    0x21E1CDE6, 0xC33707D6, 0xF4D50D87, 0x455A14ED,
    0xA9E3E905, 0xFCEFA3F8, 0x676F02D9, 0x8D2A4C8A,
    0xFFFA3942, 0x8771F681, 0x6D9D6122, 0xFDE5380C,
    0xA4BEEA44, 0x4BDECFA9, 0xF6BB4B60, 0xBEBFBC70,
    0x289B7EC6, 0xEAA127FA, 0xD4EF3085, 0x04881D05,
    0xD9D4D039, 0xE6DB99E5, 0x1FA27CF8, 0xC4AC5665,
    0xF4292244, 0x432AFF97, 0xAB9423A7, 0xFC93A039,
    0x655B59C3, 0x8F0CCC92, 0xFFEFF47D, 0x85845DD1,
    0x6FA87E4F, 0xFE2CE6E0, 0xA3014314, 0x4E0811A1,
    0xF7537E82, 0xBD3AF235, 0x2AD7D2BB, 0xEB86D391,
)

_SHIFTS = (
    (7, 12, 17, 22),
    (5, 9, 14, 20),
    (4, 11, 16, 23),
    (6, 10, 15, 21),
)

_WORDS = struct.Struct("<16I")
_STATE = struct.Struct("<4I")
_LENGTH = struct.Struct("<Q")


def _rotate(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (32 - shift))) & _MASK


def _compress(state: tuple[int, int, int, int], block: bytes) -> tuple[int, int, int, int]:
    """Run the four MD5 rounds over one 64-byte block."""
    words = _WORDS.unpack(block)
    a, b, c, d = state
    for step, constant in enumerate(_CONSTANTS):
        stage = step // 16
        if stage == 0:
            mixed = d ^ (b & (c ^ d))
            index = step
        elif stage == 1:
            mixed = c ^ (d & (b ^ c))
            index = (5 * step + 1) % 16
        elif stage == 2:
            mixed = b ^ c ^ d
            index = (3 * step + 5) % 16
        else:
            mixed = c ^ (b | (~d & _MASK))
            index = (7 * step) % 16
        total = (a + mixed + words[index] + constant) & _MASK
        a, d, c = d, c, b
        b = (b + _rotate(total, _SHIFTS[stage][step % 4])) & _MASK
    return (
        (state[0] + a) & _MASK,
        (state[1] + b) & _MASK,
        (state[2] + c) & _MASK,
        (state[3] + d) & _MASK,
    )


def _as_bytes(data: object) -> bytes:
    """Accept any bytes-like object; refuse text and integers."""
    if isinstance(data, str):
        raise TypeError("MD5 input must be bytes-like, not str")
    return memoryview(data).tobytes()  # type: ignore[arg-type]


class Md5:
    """Incremental MD5 computation."""

    digest_size = DIGEST_SIZE
    block_size = BLOCK_SIZE

    def __init__(self, data: bytes = b"") -> None:
        self._state = _INITIAL_STATE
        self._pending = b""
        self._length = 0
        if data:
            self.update(data)

    def update(self, data: bytes) -> None:
        """Feed more bytes into the computation; any length is accepted."""
        chunk = _as_bytes(data)
        self._length += len(chunk)
        buffered = self._pending + chunk
        full = len(buffered) - len(buffered) % BLOCK_SIZE
        state = self._state
        for offset in range(0, full, BLOCK_SIZE):
            state = _compress(state, buffered[offset:offset + BLOCK_SIZE])
        self._state = state
        self._pending = buffered[full:]

    def read(self) -> bytes:
        """Return the current chaining state as 16 little-endian bytes.

        Bytes still waiting for a full block are not taken into account.
        """
        return _STATE.pack(*self._state)

    def digest(self) -> bytes:
        """Return the digest of everything fed so far, leaving this object usable."""
        pending = len(self._pending)
        pad = (BLOCK_SIZE + 56 - pending) if pending >= 56 else (56 - pending)
        tail = (
            self._pending
            + b"\x80"
            + b"\x00" * (pad - 1)
            + _LENGTH.pack((self._length * 8) & 0xFFFFFFFFFFFFFFFF)
        )
        state = self._state
        for offset in range(0, len(tail), BLOCK_SIZE):
            state = _compress(state, tail[offset:offset + BLOCK_SIZE])
        return _STATE.pack(*state)

    def hexdigest(self) -> str:
        """Return the digest as lower-case hexadecimal text."""
        return self.digest().hex()

    def copy(self) -> Md5:
        """Return an independent copy of the computation so far."""
        clone = Md5()
        clone._state = self._state
        clone._pending = self._pending
        clone._length = self._length
        return clone


def md5_buffer(data: bytes) -> bytes:
    """Return the MD5 digest of ``data``."""
    return Md5(data).digest()


def md5_stream(stream: BinaryIO) -> bytes:
    """Return the MD5 digest of everything read from a binary stream.

    Errors raised while reading propagate to the caller.
    """
    context = Md5()
    while True:
        chunk = stream.read(STREAM_CHUNK)
        if not chunk:
            break
        context.update(chunk)
    return context.digest()