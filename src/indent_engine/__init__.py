"""Regex-driven newline auto-indentation engine for text editors."""

__all__ = [
    "adapters",
    "buffer",
    "config",
    "host",
    "indent",
    "runtime",
]

__version__ = "0.1.0"
