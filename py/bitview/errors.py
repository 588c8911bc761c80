"""Exceptions raised by the format compiler and the register value model."""

from __future__ import annotations

__all__ = [
    'BitfieldError',
    'NumeralSyntaxError',
    'InvalidRadixError',
    'MalformedEnumError',
    'MalformedFormatError',
    'InvalidWidthError',
]


class BitfieldError(ValueError):
    """Base class for all bitview errors."""
    pass


class NumeralSyntaxError(BitfieldError):
    """Raised when a numeral is not valid in its radix."""
    pass


class InvalidRadixError(BitfieldError):
    """Raised when a radix other than 2, 8, 10 or 16 is requested."""
    pass


class MalformedEnumError(BitfieldError):
    """Raised when an enum definition does not follow the C enum grammar."""
    pass


class MalformedFormatError(BitfieldError):
    """Raised when a format description cannot be compiled.

    No partial Format is produced; callers keep their previous layout.
    """
    pass


class InvalidWidthError(BitfieldError):
    """Raised when a float operation is used on a register that is not 32 or 64 bits wide."""
    pass
