from __future__ import annotations

import logging
import math
import struct
from typing import TYPE_CHECKING

from .errors import InvalidWidthError, NumeralSyntaxError
from .helpers import get_field_value, set_field_value, to_signed, toggle_bit
from .numeral import format_numeral, parse_numeral

if TYPE_CHECKING:
    from .format import Format
    from .options import DisplayOptions

__all__ = [ 'Value', 'Register', ]

logger = logging.getLogger(__name__)

# struct codes for IEEE754 binary32/binary64, keyed by width in bits
_FLOAT_CODES = {
    32: ('<f', '<I'),
    64: ('<d', '<Q'),
}


class Value:
    """An integer of unbounded width.

    The value is never truncated; views that need a width mask it on read.
    """

    def __init__(self, value: int | str = 0, radix: int = 10) -> None:
        if isinstance(value, str):
            value = parse_numeral(value, radix)
        self.value = value

    def __int__(self):
        return self.value

    def from_text(self, text: str, radix: int = 10) -> int:
        """Parse ``text`` as a numeral and store it. Returns the new value."""
        self.value = parse_numeral(text, radix)
        return self.value

    def parse(self, text: str, radix: int = 10) -> bool:
        """Parse ``text`` as a numeral and store it.

        Returns False, leaving the value unchanged, on bad syntax. Subclass
        fallbacks of ``from_text`` are not tried.
        """
        try:
            Value.from_text(self, text, radix)
        except NumeralSyntaxError:
            return False
        return True

    def to_text(self, radix: int = 10) -> str:
        return format_numeral(self.value, radix)

    def __str__(self):
        return self.to_text(10)

    def toggle_bit(self, index: int) -> int:
        self.value = toggle_bit(self.value, index)
        return self.value

    def read_field(self, index: int, width: int) -> int:
        return get_field_value(self.value, index, width)

    def write_field(self, index: int, width: int, value: int) -> int:
        """Set the ``width`` bits at ``index``. Excess bits of ``value`` are dropped."""
        self.value = set_field_value(self.value, index, width, value)
        return self.value


class Register(Value):
    """A register value and its width.

    ``value`` is the raw storage. ``unsigned`` and ``signed`` are the views
    of its low ``width`` bits.
    """

    def __init__(self, width: int = 1, value: int = 0) -> None:
        super().__init__(value)
        self.width = width

    def __repr__(self) -> str:
        return f'Register(width={self.width}, value={self.unsigned:#x})'

    @property
    def raw(self) -> int:
        return self.value

    @raw.setter
    def raw(self, value: int) -> None:
        self.value = value

    def set_width(self, width: int) -> None:
        self.width = width

    @property
    def exp_width(self) -> int:
        return 1 << self.width

    @property
    def unsigned(self) -> int:
        return self.value & (self.exp_width - 1)

    @property
    def signed(self) -> int:
        return to_signed(self.unsigned, self.width)

    @property
    def min_width(self) -> int:
        """Minimum width to represent the unsigned value."""
        return max(self.unsigned.bit_length(), 1)

    def to_text(self, radix: int = 10, signed: bool = False) -> str:
        return format_numeral(self.signed if signed else self.unsigned, radix)

    def __str__(self):
        return self.to_text(16)

    def dump(self) -> str:
        """Return the unsigned value in binary, exactly ``width`` digits long."""
        if self.width <= 0:
            return ''
        return f'{self.unsigned:0{self.width}b}'

    def from_text(self, text: str, radix: int = 10) -> int:
        """Parse ``text`` and store it. Returns the new raw value.

        On a 32 or 64-bit register, text with a decimal point that is not a
        valid numeral is read as a float. The register is left unchanged if
        the text cannot be parsed.
        """
        try:
            return super().from_text(text, radix)
        except NumeralSyntaxError as e:
            if not (self.is_float_capable() and '.' in text):
                raise
            logger.debug('Reading %r as a float', text)
            if not self.parse_float(text):
                raise e
            return self.value

    def read_text(self, text: str, options: DisplayOptions) -> bool:
        """Read user input the way the value entry box does.

        Tries a numeral in ``options.radix``, then a float if
        ``options.as_float`` is set and the width allows it.
        """
        if self.parse(text, options.radix):
            return True
        return options.as_float and self.is_float_capable() and self.parse_float(text)

    def summary(self, options: DisplayOptions) -> str:
        """Return the value as shown in the output line."""
        s = self.to_text(options.radix, options.signed)
        if options.as_float and self.is_float_capable():
            s += f', {self.to_float()!r}'
        return f'{s} ({self.to_text(16)})'

    def is_float_capable(self) -> bool:
        return self.width in _FLOAT_CODES

    def _check_float(self) -> None:
        if not self.is_float_capable():
            raise InvalidWidthError(f'Register width must be 32 or 64 for float, got {self.width}')

    def parse_float(self, text: str) -> bool:
        """Store the IEEE754 encoding of the float in ``text``.

        Returns False, leaving the register unchanged, if ``text`` is not a
        number. The whole text must be a float literal; trailing characters
        such as a unit (``'1.5V'``) are not skipped.
        """
        self._check_float()

        try:
            value = float(text)
        except ValueError:
            value = math.nan
        if math.isnan(value):
            logger.debug('Not a float: %r', text)
            return False

        float_code, int_code = _FLOAT_CODES[self.width]
        try:
            packed = struct.pack(float_code, value)
        except OverflowError:
            # out of binary32 range
            packed = struct.pack(float_code, math.copysign(math.inf, value))
        self.value = struct.unpack(int_code, packed)[0]
        return True

    def to_float(self) -> float:
        """Return the low ``width`` bits interpreted as an IEEE754 float."""
        self._check_float()

        float_code, int_code = _FLOAT_CODES[self.width]
        return struct.unpack(float_code, struct.pack(int_code, self.unsigned))[0]

    def __getitem__(self, idx):
        if isinstance(idx, int):
            if idx < 0:
                raise IndexError('Index out of bounds')
            return self.read_field(idx, 1)
        elif isinstance(idx, slice):
            high, low = idx.start, idx.stop
            if high is None or low is None or high < 0 or low < 0:
                raise IndexError('Bit range needs non-negative high and low bits')
            if low > high:
                low, high = high, low
            return self.read_field(low, high - low + 1)
        else:
            raise IndexError('Field not found')

    def __setitem__(self, idx, val):
        if isinstance(idx, int):
            if idx < 0:
                raise IndexError('Index out of bounds')
            self.write_field(idx, 1, val)
        elif isinstance(idx, slice):
            high, low = idx.start, idx.stop
            if high is None or low is None or high < 0 or low < 0:
                raise IndexError('Bit range needs non-negative high and low bits')
            if low > high:
                low, high = high, low
            self.write_field(low, high - low + 1, val)
        else:
            raise IndexError('Field not found')

    def field_values(self, fmt: Format) -> dict[str, int]:
        """Return the value of every field and bit indicator of ``fmt``, by name."""
        fields = {}
        for f in fmt.fields:
            if not f.name:
                # padding
                continue
            fields[f.name] = self.read_field(f.index, f.width)
        for f in fmt.bits.values():
            fields[f.name] = self.read_field(f.index, 1)
        return fields
