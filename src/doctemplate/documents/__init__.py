"""Template document input and output."""

from .client import DocumentIOError, TextDocument, WordDocument, open_document

__all__ = ["DocumentIOError", "TextDocument", "WordDocument", "open_document"]
