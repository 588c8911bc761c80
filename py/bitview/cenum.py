"""Parser for C enum definitions."""

from __future__ import annotations

from .enums import TokenKind
from .errors import MalformedEnumError, NumeralSyntaxError
from .lexer import Lexer, Token
from .numeral import parse_numeral

__all__ = [ 'EnumMap', 'parse_enum', ]

# Member name -> value, in declaration order
EnumMap = dict[str, int]


def _member_name(token: Token) -> str:
    text = token.text
    if token.kind == TokenKind.String:
        # unterminated literals have no closing quote
        text = text[1:]
        if text.endswith('"'):
            text = text[:-1]
    return text


def _parse_member_value(lexer: Lexer) -> int:
    token = lexer.next()
    negative = token.text == '-'
    if negative:
        token = lexer.next()
    if token.kind != TokenKind.Numeric:
        raise MalformedEnumError(f'Expected a number after "=" at {lexer.pos}, got {token.text!r}')
    try:
        value = parse_numeral(token.text, 10)
    except NumeralSyntaxError as e:
        raise MalformedEnumError(f'Bad enum value at {token.offset}: {e}') from e
    return -value if negative else value


def parse_enum(lexer: Lexer) -> tuple[EnumMap, str | None]:
    """Parse ``enum [Name] { A [= N], B, ... }`` at the lexer's cursor.

    Members without an explicit value continue counting from the previous
    member. Commas between members are optional.

    Returns the members and the enum name, or None for an anonymous enum.
    Raises MalformedEnumError if the definition does not parse.
    """
    if not lexer.want_text('enum'):
        raise MalformedEnumError(f'Expected "enum" at {lexer.pos}')

    result: EnumMap = {}
    name = None

    token = lexer.next()
    if token.kind == TokenKind.Identifier:
        name = token.text
        token = lexer.next()
    if token.text != '{':
        raise MalformedEnumError(f'Expected "{{" at {token.offset}, got {token.text!r}')

    counter = 0
    while not lexer.exhaust(','):
        token = lexer.next()
        if token.text == '}':
            break

        if token.kind not in (TokenKind.Identifier, TokenKind.String):
            raise MalformedEnumError(f'Expected an enum member at {token.offset}, got {token.text!r}')
        key = _member_name(token)
        result[key] = counter
        counter += 1

        token = lexer.next()
        if token.kind in (TokenKind.Identifier, TokenKind.String) or token.text == ',':
            lexer.pos = token.offset
            continue
        if token.text == '}':
            break
        if token.text != '=':
            raise MalformedEnumError(f'Unexpected {token.text!r} after enum member {key!r} at {token.offset}')

        value = _parse_member_value(lexer)
        result[key] = value
        counter = value + 1

    return result, name
