"""A small C-like lexer for format descriptions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

from .enums import TokenKind

__all__ = [ 'Token', 'Lexer', ]

OPERATORS = '+-*/%=<>!~&|^;,.?:()[]{}#'
WHITESPACE = ' \t\r\n'


def _is_word_char(c: str) -> bool:
    return c.isascii() and (c.isalnum() or c == '_')


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str = ''
    offset: int = -1

    def matches(self, want: TokenKind | str) -> bool:
        """Test if the token is of the given kind, or has the given text."""
        if isinstance(want, TokenKind):
            return self.kind == want
        return self.text == want


EOF_TOKEN = Token(TokenKind.EOF)


class Lexer:
    """Tokenizer over a format description.

    ``pos`` is the read cursor. Once the end of the buffer is reached the
    lexer stays at EOF.
    """

    def __init__(self, text: str) -> None:
        # backslash-newline joins lines; it is skipped as a blank, and split()
        # does not stop at it
        self.buffer = text.rstrip()
        self.pos = 0
        self._eof = False

    @property
    def is_eof(self) -> bool:
        return self._eof or self.pos >= len(self.buffer)

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next()
            if token.kind == TokenKind.EOF:
                return
            yield token

    def slice(self, start: int | None = None, end: int | None = None) -> str:
        return self.buffer[start:end]

    def _skip_blanks(self) -> bool:
        """Skip whitespace, stray escapes and comments. Returns False at EOF."""
        buf = self.buffer
        while True:
            old = self.pos
            while self.pos < len(buf) and buf[self.pos] in WHITESPACE:
                self.pos += 1
            if buf.startswith('\\', self.pos):
                self.pos += 2
            if buf.startswith('//', self.pos):
                end = buf.find('\n', self.pos + 2)
                if end < 0:
                    return False
                self.pos = end + 1
            if buf.startswith('/*', self.pos):
                end = buf.find('*/', self.pos + 2)
                if end < 0:
                    return False
                self.pos = end + 2
            if old == self.pos:
                return self.pos < len(buf)

    def _literal_end(self, quote: str) -> int:
        buf = self.buffer
        i = self.pos + 1
        while i < len(buf):
            c = buf[i]
            if c == '\\':
                i += 2
                continue
            if c == quote:
                return i + 1
            i += 1
        return len(buf)

    def next(self, peek: bool = False) -> Token:
        """Return the next token.

        If ``peek`` is true the read cursor is left where it was.
        """
        if self._eof:
            return EOF_TOKEN

        start = self.pos
        if not self._skip_blanks():
            self.pos = len(self.buffer)
            self._eof = True
            return EOF_TOKEN

        buf = self.buffer
        i = self.pos
        c = buf[i]

        if c in '"\'':
            end = self._literal_end(c)
            kind = TokenKind.String if c == '"' else TokenKind.Char
        elif c in OPERATORS:
            end = i + 1
            kind = TokenKind.Operator
        else:
            end = i + 1
            while end < len(buf) and _is_word_char(buf[end]):
                end += 1
            kind = TokenKind.Numeric if '0' <= c <= '9' else TokenKind.Identifier

        token = Token(kind, buf[i:end], i)

        self.pos = start if peek else end
        return token

    def split(self, delim: str = '\n') -> int:
        """Skip past the first ``delim``.

        Returns the index right before ``delim``, or the buffer length if it
        was not found, in which case the lexer is at EOF. A newline escaped
        by a backslash does not count as a ``'\\n'`` delimiter.
        """
        idx = self.buffer.find(delim, self.pos)
        while delim == '\n' and idx > 0 and self.buffer[idx - 1] == '\\':
            idx = self.buffer.find(delim, idx + 1)
        if idx < 0:
            self.pos = len(self.buffer)
            self._eof = True
            return len(self.buffer)
        self.pos = idx + len(delim)
        return idx

    def exhaust(self, want: TokenKind | str) -> bool:
        """Consume repeated ``want`` tokens. Returns True if EOF was reached."""
        while True:
            token = self.next()
            if token.kind == TokenKind.EOF:
                return True
            if not token.matches(want):
                self.pos = token.offset
                return False

    def want(self, want: TokenKind | str) -> Token | None:
        """Consume the next token if it matches ``want``, else rewind and return None."""
        old = self.pos
        old_eof = self._eof
        token = self.next()
        if not token.matches(want):
            self.pos = old
            self._eof = old_eof
            return None
        return token

    def want_kind(self, kind: TokenKind) -> Token | None:
        return self.want(kind)

    def want_text(self, text: str) -> Token | None:
        return self.want(text)

    def match(self, grammar: Sequence[TokenKind | str]) -> list[str]:
        """Match a sequence of tokens.

        Returns the texts of the matched tokens. If fewer than
        ``len(grammar)`` are returned the sequence was not accepted and the
        cursor is rewound.
        """
        old = self.pos
        old_eof = self._eof
        result = []
        for want in grammar:
            token = self.next()
            if not token.matches(want):
                self.pos = old
                self._eof = old_eof
                break
            result.append(token.text)
        return result
