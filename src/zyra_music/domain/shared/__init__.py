"""
Shared Domain Kernel

Contains exceptions and constrained types shared across all bounded contexts.
"""

from zyra_music.domain.shared.exceptions import (
    AlreadyExistsError,
    DomainError,
    InsufficientItemsError,
    InvalidStateError,
    NotFoundError,
    OperationTimeoutError,
    OutOfRangeError,
    UnsupportedInputError,
    UpstreamFailureError,
)

__all__ = [
    "DomainError",
    "NotFoundError",
    "UnsupportedInputError",
    "OutOfRangeError",
    "InvalidStateError",
    "InsufficientItemsError",
    "AlreadyExistsError",
    "UpstreamFailureError",
    "OperationTimeoutError",
]
