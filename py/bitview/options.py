"""Display options for a register view."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .enums import Radix
from .errors import InvalidRadixError

__all__ = [ 'DisplayOptions', 'DEFAULT_RADIX', ]

DEFAULT_RADIX = Radix.Hex


@dataclass
class DisplayOptions:
    radix: int = DEFAULT_RADIX
    signed: bool = False
    as_float: bool = False

    def __post_init__(self) -> None:
        try:
            self.radix = Radix(self.radix)
        except ValueError as e:
            raise InvalidRadixError(f'radix must be 2, 8, 10 or 16, got {self.radix!r}') from e

    @classmethod
    def from_mapping(cls, settings: Mapping[str, str]) -> DisplayOptions:
        """Build options from stored settings.

        Settings are strings, as a key-value store keeps them. A missing key
        keeps the default; an empty string is false.
        """
        radix = settings.get('radix')
        signed = settings.get('signed')
        as_float = settings.get('float')

        try:
            radix = int(radix, 10) if radix is not None else DEFAULT_RADIX
        except ValueError as e:
            raise InvalidRadixError(f'radix must be 2, 8, 10 or 16, got {radix!r}') from e

        return cls(
            radix=radix,
            signed=bool(signed) if signed is not None else False,
            as_float=bool(as_float) if as_float is not None else False,
        )

    def to_mapping(self) -> dict[str, str]:
        return {
            'radix': str(int(self.radix)),
            'signed': '1' if self.signed else '',
            'float': '1' if self.as_float else '',
        }
