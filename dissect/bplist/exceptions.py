class Error(Exception):
    """Base class for exceptions for this module.

    It is used to recognize errors specific to this module"""

    pass


class UnexpectedEndOfInputError(Error, EOFError):
    """Raised when a read returns fewer bytes than requested."""


class IOFailureError(Error, OSError):
    """Raised when the underlying file object fails to read or seek."""


class TextEncodingError(Error, ValueError):
    """Raised when string bytes are not valid UTF-8 or UTF-16BE."""


class MalformedFormatError(Error, ValueError):
    pass


class NotFoundError(Error, LookupError):
    pass


class ReferenceNotFoundError(NotFoundError, MalformedFormatError):
    """Raised when an object reference points outside of the offset table."""


class UnsupportedObjectError(Error, NotImplementedError):
    """Raised for object types that are recognized but not decoded (date and set)."""
