"""Prefixed numerals in base 2, 8, 10 and 16.

Numerals carry their radix in a C-like prefix: ``0b`` for binary, ``0o``
or a leading ``0`` for octal, ``0x`` for hexadecimal and none for decimal.
Text without a prefix is read in the caller's default radix.
"""

from __future__ import annotations

from .errors import InvalidRadixError, NumeralSyntaxError

__all__ = [ 'parse_numeral', 'format_numeral', 'format_padded', ]

_DIGITS = '0123456789abcdef'

_PREFIXES = {
    '0b': 2,
    '0o': 8,
    '0x': 16,
}

_FORMAT_PREFIXES = {
    2: '0b',
    8: '0',
    10: '',
    16: '0x',
}


def _check_radix(radix: int) -> None:
    if radix not in _FORMAT_PREFIXES:
        raise InvalidRadixError(f'radix must be 2, 8, 10 or 16, got {radix!r}')


def _parse_digits(text: str, digits: str, radix: int) -> int:
    allowed = _DIGITS[:radix]
    if not digits or any(c not in allowed for c in digits.lower()):
        raise NumeralSyntaxError(f'Invalid base {radix} numeral: {text!r}')
    return int(digits, radix)


def parse_numeral(text: str, radix: int = 10) -> int:
    """Convert a numeral to an int, based on its prefix.

    ``radix`` is used only if ``text`` has no prefix. A ``0`` followed by
    another digit marks an octal numeral, as in C.

    Raises InvalidRadixError if ``radix`` is not 2, 8, 10 or 16, and
    NumeralSyntaxError if ``text`` is not a valid numeral.
    """
    _check_radix(radix)

    text = text.strip()
    negative = text.startswith('-')
    body = text[1:] if negative else text

    prefix = body[:2].lower()
    if prefix in _PREFIXES:
        base = _PREFIXES[prefix]
        body = body[2:]
    elif len(body) > 1 and body[0] == '0' and body[1].isdigit():
        base = 8
        body = body[1:]
    else:
        base = radix

    value = _parse_digits(text, body, base)
    return -value if negative else value


def format_numeral(value: int, radix: int = 10) -> str:
    """Return the prefixed representation of ``value`` in ``radix``."""
    _check_radix(radix)

    if radix == 2:
        digits = f'{abs(value):b}'
    elif radix == 8:
        digits = f'{abs(value):o}'
    elif radix == 16:
        digits = f'{abs(value):x}'
    else:
        digits = str(abs(value))

    s = _FORMAT_PREFIXES[radix] + digits
    if value < 0:
        s = '-' + s
    return s


def format_padded(value: int, radix: int, width_bits: int) -> str:
    """Format a non-negative value zero padded to a register of ``width_bits``."""
    _check_radix(radix)

    if radix == 16:
        nchars = (width_bits + 3) // 4
        return f'0x{value:0{nchars}x}'
    elif radix == 8:
        nchars = (width_bits + 2) // 3
        return f'0{value:0{nchars}o}'
    elif radix == 2:
        return f'0b{value:0{width_bits}b}'
    return str(value)
