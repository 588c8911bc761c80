"""Built-in formats and conversion from register field definitions."""

from __future__ import annotations

from typing import Iterable

__all__ = [ 'PRESETS', 'format_from_definitions', ]

PRESETS = (
    (
        'IEEE754 single-precision',
        'enum Exponent {\n'
        '  EXPONENT_SUBNORMAL\n'
        '  EXPONENT_SPECIAL = 0xff\n'
        '}\n'
        '\n'
        'sign:1:lightblue\n'
        'exponent:8:lightgreen:Exponent\n'
        'fraction:23:lightpink',
    ),
    (
        'IEEE754 double-precision',
        'enum Exponent {\n'
        '  EXPONENT_SUBNORMAL\n'
        '  EXPONENT_SPECIAL = 0x7ff\n'
        '}\n'
        '\n'
        'sign:1:lightblue\n'
        'exponent:11:lightgreen:Exponent\n'
        'fraction:52:lightpink',
    ),
)


def format_from_definitions(defs: Iterable[tuple[str, int | str | None]]) -> str:
    """Return format text with one ``name:width`` line per (name, width) pair.

    A missing width leaves the field one bit wide.
    """
    lines = []
    for name, width in defs:
        name = (name or '').strip()
        width = '' if width is None else str(width).strip()
        lines.append(f'{name}:{width}')
    return '\n'.join(lines)
