"""Compiler from format descriptions to bit layouts.

A format description is a sequence of lines::

    #define NAME NUMBER
    [typedef] enum [Name] { A [= N], B, ... } [Name];
    name[:width][:color][:enum_refs][:comment]
    name:~bit_index[:color]

Ranged fields are declared most significant first.
"""

from __future__ import annotations

import logging
from types import MappingProxyType

from .cenum import EnumMap, parse_enum
from .enums import FieldKind, TokenKind
from .errors import BitfieldError, MalformedEnumError, MalformedFormatError
from .field import Field, parse_field
from .lexer import Lexer
from .numeral import parse_numeral

__all__ = [ 'Format', 'compile_format', ]

logger = logging.getLogger(__name__)


class Format:
    """Collection of bit fields, bit indicators and enum definitions."""

    def __init__(self, fields: list[Field] | None = None,
                 bits: dict[int, Field] | None = None,
                 enum_types: dict[str | None, EnumMap] | None = None) -> None:
        self.fields = fields if fields is not None else []
        self.bits = bits if bits is not None else {}
        self.enum_types = enum_types if enum_types is not None else {None: {}}
        self.width = 0

    def __repr__(self) -> str:
        return f'Format(width={self.width}, fields={self.fields!r}, bits={list(self.bits)!r})'

    @property
    def is_empty(self) -> bool:
        return not self.fields and not self.bits

    @property
    def has_enums(self) -> bool:
        return any(f.enum_refs for f in self.fields)

    def __iter__(self):
        return iter(self.fields)

    def __getitem__(self, name: str) -> Field:
        for field in self.fields:
            if field.name == name:
                return field
        for field in self.bits.values():
            if field.name == name:
                return field
        raise KeyError(name)

    @classmethod
    def from_string(cls, text: str) -> Format:
        """Compile a format description.

        Raises MalformedFormatError if any part of the description does not
        parse. An empty result is not an error, see ``is_empty``.
        """
        try:
            fmt = _Compiler(text).compile()
        except MalformedFormatError as e:
            logger.info('Format parse error: %s', e)
            raise

        if not fmt.is_empty:
            fmt._resolve()
            logger.debug('Compiled format: width %d, %d fields, %d bit indicators',
                         fmt.width, len(fmt.fields), len(fmt.bits))

        fmt._freeze()
        return fmt

    def _resolve(self) -> None:
        """Calculate the register width and field indices, and collect enums."""
        width = sum(f.width for f in self.fields)

        new_width = width
        for index in self.bits:
            new_width = max(new_width, index + 1)

        if new_width > width:
            # pad above the declared fields to reach the highest bit indicator
            self.fields.insert(0, Field('', new_width - width, width))
            width = new_width

        self.width = width

        current = width
        for field in self.fields:
            current -= field.width
            field.index = current

        for field in (*self.fields, *self.bits.values()):
            field.collect_enums(self.enum_types)

    def _freeze(self) -> None:
        self.fields = tuple(self.fields)
        self.bits = MappingProxyType(self.bits)
        self.enum_types = MappingProxyType(
            {k: MappingProxyType(v) for k, v in self.enum_types.items()})


class _Compiler:
    def __init__(self, text: str) -> None:
        self.lexer = Lexer(text)
        self.fields: list[Field] = []
        self.bits: dict[int, Field] = {}
        self.anon_enum: EnumMap = {}
        self.enum_types: dict[str | None, EnumMap] = {None: self.anon_enum}

    def compile(self) -> Format:
        lexer = self.lexer

        for token in lexer:
            if token.text == '#':
                self._parse_define()
            elif token.text == 'typedef':
                self._parse_typedef()
            elif token.text == 'enum':
                lexer.pos = token.offset
                self._parse_enum_decl()
            else:
                self._parse_field(token.offset)

        return Format(self.fields, self.bits, self.enum_types)

    def _parse_define(self) -> None:
        lexer = self.lexer
        start = lexer.pos
        matched = lexer.match(['define', TokenKind.Identifier, TokenKind.Numeric])
        if len(matched) < 3:
            raise MalformedFormatError(f'Cannot parse C macro as a numeric define at {start}')
        _, key, value = matched
        try:
            self.anon_enum[key] = parse_numeral(value, 10)
        except BitfieldError as e:
            raise MalformedFormatError(f'Bad value for macro {key!r} at {start}: {e}') from e
        lexer.split('\n')

    def _read_enum(self) -> tuple[EnumMap, str | None]:
        start = self.lexer.pos
        try:
            return parse_enum(self.lexer)
        except MalformedEnumError as e:
            raise MalformedFormatError(f'Cannot parse an enum at {start}: {e}') from e

    def _parse_typedef(self) -> None:
        lexer = self.lexer
        members, enum_name = self._read_enum()

        token = lexer.want_kind(TokenKind.Identifier)
        if token is None and enum_name is None:
            self.anon_enum.update(members)
        else:
            if token is not None:
                self.enum_types[token.text] = members
            if enum_name is not None:
                self.enum_types[enum_name] = members

        lexer.exhaust(';')

    def _parse_enum_decl(self) -> None:
        members, enum_name = self._read_enum()

        if enum_name is None:
            self.anon_enum.update(members)
        else:
            self.enum_types[enum_name] = members

        self.lexer.exhaust(';')

    def _parse_field(self, start: int) -> None:
        lexer = self.lexer
        line = lexer.slice(start, lexer.split('\n')).replace('\\\n', ' ')
        field = parse_field(line, is_content_line=True)
        if field is None:
            raise MalformedFormatError(f'Cannot parse a field description at {start}: {line!r}')

        if field.kind == FieldKind.Indicator:
            self.bits[field.index] = field
        else:
            self.fields.append(field)


def compile_format(text: str) -> Format | None:
    """Compile ``text``, returning None if it describes no fields yet.

    Raises MalformedFormatError if the description does not parse.
    """
    if not text.strip():
        return None
    fmt = Format.from_string(text)
    if fmt.is_empty:
        return None
    return fmt
