"""Evaluator helper modules for the elang runtime."""

__all__ = [
    "common",
    "helpers",
    "expr",
    "postfix",
    "collections",
]
