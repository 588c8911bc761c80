from __future__ import annotations

from enum import Enum, IntEnum

__all__ = [ 'TokenKind', 'FieldKind', 'Radix', ]


class TokenKind(Enum):
    EOF = 0
    Identifier = 1
    String = 2
    Char = 3
    Numeric = 4
    Operator = 5


class FieldKind(Enum):
    Ranged = 0
    Indicator = 1


class Radix(IntEnum):
    Bin = 2
    Oct = 8
    Dec = 10
    Hex = 16
