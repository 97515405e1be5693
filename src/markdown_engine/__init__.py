"""UI-agnostic live markdown editing engine."""

__all__ = [
    "adapters",
    "buffer",
    "editing",
    "formatting",
    "parsing",
    "runtime",
    "session",
]

__version__ = "0.1.0"
