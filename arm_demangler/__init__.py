"""
Python package which implements an ARM (cfront) demangler for C++ symbols.
"""

from arm_demangler.demangler import (
    MAX_ITERATIONS,
    MAX_NESTING,
    ARMDemangler,
    demangle,
    is_arm_mangled,
    try_demangle,
)
from arm_demangler.errors import (
    BackReferenceOutOfRange,
    DemangleError,
    IterationLimitExceeded,
    MalformedLength,
    UnexpectedEnd,
    UnknownOperatorCode,
    UnsupportedTypeCode,
)
from arm_demangler.token import EncodingKind

__all__ = [
    "demangle",
    "try_demangle",
    "is_arm_mangled",
    "ARMDemangler",
    "MAX_ITERATIONS",
    "MAX_NESTING",
    "EncodingKind",
    "DemangleError",
    "MalformedLength",
    "UnexpectedEnd",
    "UnknownOperatorCode",
    "BackReferenceOutOfRange",
    "UnsupportedTypeCode",
    "IterationLimitExceeded",
]
