"""
Errors raised by the document composer.
"""


class ComposerError(Exception):
    """Base class for all composer errors."""


class MalformedImageError(ComposerError, ValueError):
    """Image bytes are not a JPEG stream with a readable frame header."""


class NoPagesError(ComposerError, RuntimeError):
    """A document was built without any pages."""

    def __init__(self, message: str = "Cannot build a document with no pages"):
        super().__init__(message)


class AlreadyBuiltError(ComposerError, RuntimeError):
    """The document has been finalized and can no longer be changed."""

    def __init__(self, message: str = "Document has already been built"):
        super().__init__(message)
