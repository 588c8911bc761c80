from __future__ import annotations

from typing import Mapping, Sequence

from .cenum import EnumMap
from .enums import FieldKind

__all__ = [ 'Field', 'parse_field', ]

# Lines that belong to the enum/macro grammar, not to a field
_NON_FIELD_PREFIXES = ('#', 'enum', 'typedef')


class Field:
    """A bit field, or a bit indicator if ``width`` is 0.

    Ranged fields get their ``index`` when the format is resolved. Bit
    indicators are pinned to the ``index`` given in the description.
    """

    def __init__(self, name: str, width: int, index: int | None = None,
                 color: str | None = None, enum_refs: Sequence[str] | None = None,
                 comment: str | None = None) -> None:
        self.name = name
        self.width = width
        self.index = index
        self.color = color
        self.enum_refs = list(enum_refs) if enum_refs else None
        self.comment = comment
        self.enums: EnumMap = {}

    def __repr__(self) -> str:
        return f'Field({self.name!r}, width={self.width}, index={self.index})'

    @property
    def kind(self) -> FieldKind:
        return FieldKind.Indicator if self.width == 0 else FieldKind.Ranged

    @property
    def high(self) -> int | None:
        """Most significant bit of the field, or None if not resolved."""
        if self.index is None:
            return None
        return self.index + max(self.width, 1) - 1

    @property
    def low(self) -> int | None:
        return self.index

    def to_text(self) -> str:
        """Return the field description that parses back to this field."""
        if self.kind == FieldKind.Indicator:
            width = f'~{self.index}'
        elif self.width != 1:
            width = str(self.width)
        else:
            width = ''

        parts = [
            self.name,
            width,
            self.color or '',
            ','.join(self.enum_refs) if self.enum_refs else '',
            self.comment.replace('\n', '\\n') if self.comment else '',
        ]
        while len(parts) > 1 and not parts[-1]:
            parts.pop()
        return ':'.join(parts)

    def collect_enums(self, enum_types: Mapping[str | None, EnumMap]) -> None:
        """Collect the members of the referenced enum types into ``enums``.

        References naming an enum type take all of its members. The
        remaining references are matched as case-insensitive prefixes
        against the anonymous enum (the ``#define`` macros). A macro never
        replaces a member taken from a named type.
        """
        self.enums = {}
        if not self.enum_refs:
            return

        prefixes = []
        for ref in self.enum_refs:
            members = enum_types.get(ref)
            if members is not None:
                self.enums.update(members)
            else:
                prefixes.append(ref.upper())

        if not prefixes:
            return

        for key, value in enum_types.get(None, {}).items():
            if key in self.enums:
                continue
            if key.upper().startswith(tuple(prefixes)):
                self.enums[key] = value


def _split_refs(text: str) -> list[str] | None:
    refs = [x.strip() for x in text.split(',')]
    refs = [x for x in refs if x]
    return refs or None


def parse_field(line: str, is_content_line: bool = False) -> Field | None:
    """Parse ``name[:width][:color][:enum_refs][:comment]``.

    A width starting with a non-digit (e.g. ``~10``) makes a bit indicator
    at the given absolute bit index. An omitted width means one bit. A
    literal ``\\n`` in the comment becomes a newline.

    ``is_content_line`` marks a line taken from a format body, where enum
    and macro definitions have already been dispatched. A standalone line
    starting with one of those is rejected.

    Returns None if the line is not a valid field description.
    """
    line = line.strip()
    if not is_content_line and line.startswith(_NON_FIELD_PREFIXES):
        return None

    segments = [x.strip() for x in line.split(':', 4)]
    segments += [''] * (5 - len(segments))
    name, width_spec, color, refs, comment = segments

    index = None
    if not width_spec:
        width = 1
    elif not ('0' <= width_spec[0] <= '9'):
        rest = width_spec[1:].strip()
        if not (rest.isascii() and rest.isdigit()):
            return None
        index = int(rest)
        width = 0
    else:
        if not (width_spec.isascii() and width_spec.isdigit()):
            return None
        width = int(width_spec)
        if width == 0:
            return None

    return Field(name, width, index,
                 color=color or None,
                 enum_refs=_split_refs(refs),
                 comment=comment.replace('\\n', '\n') or None)
