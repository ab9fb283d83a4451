"""Building blocks for HTTP load testing: URLs, responses, links and digests."""

__version__ = "4.1.7"

__all__ = [
    "md5",
    "normalize",
    "page",
    "parser",
    "response",
    "text",
    "url",
    "util",
]