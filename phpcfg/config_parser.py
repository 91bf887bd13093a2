from __future__ import annotations

import math
from typing import List, Optional, Tuple

from .config_lexer import LexState, Lexer, Position, Token, TokenKind
from .config_model import INT64_MAX, INT64_MIN, KeyValuePair, Value, ValueKind
from .errors import DeserError, DeserErrorKind, LexError, LexErrorKind

KEYWORDS = {"true": True, "false": False, "null": None}


def deserialize(text: str) -> List[KeyValuePair]:
    lexer = Lexer()
    try:
        lexer.feed(text)
        lexer.eof()
    except LexError as exc:
        raise DeserError.from_lex_error(exc) from exc
    return _TreeBuilder(lexer.tokens, lexer.position).build()


class _TreeBuilder:
    def __init__(self, tokens: List[Token], end: Position) -> None:
        self.tokens = tokens
        self.end = end
        self.frames: List[Tuple[Optional[str], List[KeyValuePair]]] = []
        self.current: List[KeyValuePair] = []
        self.pending_key: Optional[str] = None
        self.pending_value: Optional[Value] = None
        self.root_open = False

    @property
    def staged(self) -> bool:
        return self.pending_value is not None

    def build(self) -> List[KeyValuePair]:
        for token in self.tokens:
            if self._step(token):
                return self.current
        if self.root_open:
            error = LexError(LexErrorKind.EOF, self.end, LexState.INITIAL)
            raise DeserError.from_lex_error(error)
        return self.current

    def _step(self, token: Token) -> bool:
        # True once the root set is closed
        kind = token.kind
        if kind == TokenKind.INTEGRAL:
            self._stage(token, self._parse_int(token))
        elif kind == TokenKind.FLOAT:
            self._stage(token, self._parse_float(token))
        elif kind in (TokenKind.SINGLE_QUOTE_STRING, TokenKind.DOUBLE_QUOTE_STRING):
            self._stage(token, Value.string(token.value))
        elif kind == TokenKind.IDENTIFIER:
            self._identifier(token)
        elif kind == TokenKind.ASSIGNMENT:
            self._assignment(token)
        elif kind == TokenKind.SEPARATOR:
            self._commit()
        elif kind == TokenKind.OPEN_SET:
            self._open_set(token)
        elif kind == TokenKind.CLOSE_SET:
            return self._close_set()
        return False

    def _stage(self, token: Token, value: Value) -> None:
        if self.staged:
            raise DeserError(DeserErrorKind.MISSING_COMMA, token.position)
        self.pending_value = value

    def _commit(self) -> None:
        if not self.staged and self.pending_key is None:
            return
        # a key left without a value by "=>" holds null
        value = self.pending_value if self.pending_value is not None else Value.null()
        self.current.append(KeyValuePair(self.pending_key, value))
        self.pending_key = None
        self.pending_value = None

    def _identifier(self, token: Token) -> None:
        word = token.value.lower()
        if word == "return":
            return
        if word not in KEYWORDS:
            raise DeserError(DeserErrorKind.UNEXPECTED_IDENTIFIER, token.position, token.value)
        self._stage(token, Value.from_native(KEYWORDS[word]))

    def _assignment(self, token: Token) -> None:
        value = self.pending_value
        if value is None or value.kind != ValueKind.STR:
            raise DeserError(DeserErrorKind.INVALID_KEY, token.position)
        self.pending_key = value.data
        self.pending_value = None

    def _open_set(self, token: Token) -> None:
        if self.staged:
            raise DeserError(DeserErrorKind.MISSING_COMMA, token.position)
        if not self.root_open:
            self.root_open = True
            self.pending_key = None
            return
        self.frames.append((self.pending_key, self.current))
        self.pending_key = None
        self.current = []

    def _close_set(self) -> bool:
        self._commit()
        if not self.frames:
            self.root_open = False
            return True
        key, parent = self.frames.pop()
        parent.append(KeyValuePair(key, Value.set_of(self.current)))
        self.current = parent
        return False

    @staticmethod
    def _parse_int(token: Token) -> Value:
        try:
            number = int(token.value)
        except ValueError:
            raise DeserError(DeserErrorKind.INT_CAST, token.position, token.value) from None
        if not INT64_MIN <= number <= INT64_MAX:
            raise DeserError(DeserErrorKind.INT_CAST, token.position, token.value)
        return Value.integer(number)

    @staticmethod
    def _parse_float(token: Token) -> Value:
        try:
            number = float(token.value)
        except ValueError:
            raise DeserError(DeserErrorKind.FLOAT_CAST, token.position, token.value) from None
        if not math.isfinite(number):
            raise DeserError(DeserErrorKind.FLOAT_CAST, token.position, token.value)
        return Value.floating(number)
