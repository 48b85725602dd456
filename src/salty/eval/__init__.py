"""Evaluator helper modules for the Salty runtime."""

__all__ = [
    "bind",
    "blocks",
    "chains",
    "common",
    "control",
    "expr",
    "fn",
    "loops",
]
