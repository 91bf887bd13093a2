from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config_lexer import LexState, Position


class LexErrorKind(str, Enum):
    EOF = "eof"
    UNEXPECTED = "unexpected"
    INVALID_UNICODE = "invalid_unicode"


class DeserErrorKind(str, Enum):
    LEX = "lex"
    UNEXPECTED_IDENTIFIER = "unexpected_identifier"
    INVALID_KEY = "invalid_key"
    MISSING_COMMA = "missing_comma"
    FLOAT_CAST = "float_cast"
    INT_CAST = "int_cast"


class ConfigSyntaxError(RuntimeError):
    def __init__(self, message: str, position: Position | None = None) -> None:
        self.detail = message
        if position:
            message = f"{message} at {position}"
        super().__init__(message)
        self.position = position


class LexError(ConfigSyntaxError):
    """Raised by the lexer when a character cannot appear in the current state.

    ``got`` holds the offending character for ``UNEXPECTED`` and the decoded
    code point for ``INVALID_UNICODE``; it is ``None`` for ``EOF``.
    """

    def __init__(
        self,
        kind: LexErrorKind,
        position: Position,
        state: LexState,
        got: str | int | None = None,
    ) -> None:
        if kind == LexErrorKind.EOF:
            message = f"Unexpected end of input in state {state.name}"
        elif kind == LexErrorKind.INVALID_UNICODE:
            message = f"Invalid unicode code point {got:#x} in state {state.name}"
        else:
            message = f"Unexpected character {got!r} in state {state.name}"
        super().__init__(message, position)
        self.kind = kind
        self.state = state
        self.got = got


class DeserError(ConfigSyntaxError):
    _MESSAGES = {
        DeserErrorKind.UNEXPECTED_IDENTIFIER: "Unexpected identifier",
        DeserErrorKind.INVALID_KEY: "Array key must be a string",
        DeserErrorKind.MISSING_COMMA: "Missing ',' between values",
        DeserErrorKind.FLOAT_CAST: "Invalid float literal",
        DeserErrorKind.INT_CAST: "Invalid integer literal",
    }

    def __init__(
        self,
        kind: DeserErrorKind,
        position: Position | None,
        text: str | None = None,
        lex_error: LexError | None = None,
    ) -> None:
        if lex_error is not None:
            message = lex_error.detail
        else:
            message = self._MESSAGES.get(kind, kind.value)
            if text is not None:
                message = f"{message} {text!r}"
        super().__init__(message, position)
        self.kind = kind
        self.text = text
        self.lex_error = lex_error

    @classmethod
    def from_lex_error(cls, error: LexError) -> DeserError:
        return cls(DeserErrorKind.LEX, error.position, lex_error=error)

    @property
    def lex_kind(self) -> LexErrorKind | None:
        return self.lex_error.kind if self.lex_error is not None else None


class ConfigIOError(OSError):
    """Raised when a configuration file cannot be decoded as UTF-8."""
