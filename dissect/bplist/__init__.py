from dissect.bplist.bplist import BPLIST_MAX_DEPTH, BinaryPlist, Marker, load, loads
from dissect.bplist.exceptions import (
    Error,
    IOFailureError,
    MalformedFormatError,
    NotFoundError,
    ReferenceNotFoundError,
    TextEncodingError,
    UnexpectedEndOfInputError,
    UnsupportedObjectError,
)
from dissect.bplist.trailer import ReferenceTable, Trailer
from dissect.bplist.value import (
    UID,
    Array,
    Bool,
    Data,
    Dict,
    Filler,
    Int,
    Null,
    Real,
    Str,
    Value,
    get,
    geti,
    gets,
    pformat,
)

__all__ = [
    "BPLIST_MAX_DEPTH",
    "UID",
    "Array",
    "BinaryPlist",
    "Bool",
    "Data",
    "Dict",
    "Error",
    "Filler",
    "IOFailureError",
    "Int",
    "MalformedFormatError",
    "Marker",
    "NotFoundError",
    "Null",
    "Real",
    "ReferenceNotFoundError",
    "ReferenceTable",
    "Str",
    "TextEncodingError",
    "Trailer",
    "UnexpectedEndOfInputError",
    "UnsupportedObjectError",
    "Value",
    "get",
    "geti",
    "gets",
    "load",
    "loads",
    "pformat",
]
