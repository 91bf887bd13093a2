from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from string import ascii_letters
from typing import Callable, Dict, Iterable, List

from .errors import LexError, LexErrorKind

WHITESPACE = " \t\r\n"
DIGITS = "0123456789"
OCTAL_DIGITS = "01234567"
HEX_DIGITS = "0123456789abcdefABCDEF"
IDENTIFIER_START = ascii_letters + "_"
IDENTIFIER_CHARS = IDENTIFIER_START + DIGITS
LEXEME_CLOSERS = WHITESPACE + ";,[]=/'\""

MAX_CODE_POINT = 0x10FFFF

DOUBLE_QUOTE_ESCAPES = {
    "a": "\x07",
    "e": "\x1b",
    "f": "\x0c",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "$": "$",
    '"': '"',
    "\\": "\\",
}


@dataclass(frozen=True)
class Position:
    index: int = 0
    line: int = 0
    column: int = 0

    def advanced(self, newline: bool) -> Position:
        if newline:
            return Position(self.index + 1, self.line + 1, 0)
        return Position(self.index + 1, self.line, self.column + 1)

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column}"


class TokenKind(str, Enum):
    SEPARATOR = "separator"
    ASSIGNMENT = "assignment"
    OPEN_SET = "open_set"
    CLOSE_SET = "close_set"
    INTEGRAL = "integral"
    FLOAT = "float"
    IDENTIFIER = "identifier"
    SINGLE_QUOTE_STRING = "single_quote_string"
    DOUBLE_QUOTE_STRING = "double_quote_string"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    position: Position


class LexState(Enum):
    INITIAL = auto()
    PREPARE_COMMENT = auto()
    LINE_COMMENT = auto()
    BLOCK_COMMENT = auto()
    BLOCK_COMMENT_EXIT = auto()
    PREPARE_ASSIGNMENT = auto()
    SIGN = auto()
    INTEGER = auto()
    DECIMAL = auto()
    IDENTIFIER = auto()
    SINGLE_QUOTE = auto()
    SINGLE_QUOTE_ESCAPE = auto()
    DOUBLE_QUOTE = auto()
    DOUBLE_QUOTE_ESCAPE = auto()
    ESCAPE_CONTROL = auto()
    ESCAPE_OCTAL_2 = auto()
    ESCAPE_OCTAL_3 = auto()
    ESCAPE_HEX = auto()
    ESCAPE_HEX_2 = auto()
    ESCAPE_HEX_BRACE = auto()
    ESCAPE_HEX_BRACED = auto()
    OPEN_TAG_QUESTION = auto()
    OPEN_TAG_P = auto()
    OPEN_TAG_H = auto()
    OPEN_TAG_P2 = auto()
    CLOSE_TAG = auto()


# States in which end of input completes the document without a pending token.
QUIESCENT_STATES = frozenset(
    {
        LexState.INITIAL,
        LexState.LINE_COMMENT,
        LexState.BLOCK_COMMENT,
        LexState.BLOCK_COMMENT_EXIT,
    }
)

PENDING_TOKEN_KINDS = {
    LexState.INTEGER: TokenKind.INTEGRAL,
    LexState.DECIMAL: TokenKind.FLOAT,
    LexState.IDENTIFIER: TokenKind.IDENTIFIER,
}

# expected character (case-insensitive) and the state that follows it
TAG_SEQUENCE = {
    LexState.OPEN_TAG_QUESTION: ("?", LexState.OPEN_TAG_P),
    LexState.OPEN_TAG_P: ("p", LexState.OPEN_TAG_H),
    LexState.OPEN_TAG_H: ("h", LexState.OPEN_TAG_P2),
    LexState.OPEN_TAG_P2: ("p", LexState.INITIAL),
    LexState.CLOSE_TAG: (">", LexState.INITIAL),
}


class Lexer:
    def __init__(self) -> None:
        self.state = LexState.INITIAL
        self.position = Position()
        self.token_start = Position()
        self.buffer: List[str] = []
        self.codepoint = 0
        self.tokens: List[Token] = []
        self._handlers: Dict[LexState, Callable[[str], None]] = {
            LexState.INITIAL: self._initial,
            LexState.PREPARE_COMMENT: self._prepare_comment,
            LexState.LINE_COMMENT: self._line_comment,
            LexState.BLOCK_COMMENT: self._block_comment,
            LexState.BLOCK_COMMENT_EXIT: self._block_comment_exit,
            LexState.PREPARE_ASSIGNMENT: self._prepare_assignment,
            LexState.SIGN: self._sign,
            LexState.INTEGER: self._integer,
            LexState.DECIMAL: self._decimal,
            LexState.IDENTIFIER: self._identifier,
            LexState.SINGLE_QUOTE: self._single_quote,
            LexState.SINGLE_QUOTE_ESCAPE: self._single_quote_escape,
            LexState.DOUBLE_QUOTE: self._double_quote,
            LexState.DOUBLE_QUOTE_ESCAPE: self._double_quote_escape,
            LexState.ESCAPE_CONTROL: self._escape_control,
            LexState.ESCAPE_OCTAL_2: self._escape_octal,
            LexState.ESCAPE_OCTAL_3: self._escape_octal,
            LexState.ESCAPE_HEX: self._escape_hex,
            LexState.ESCAPE_HEX_2: self._escape_hex_2,
            LexState.ESCAPE_HEX_BRACE: self._escape_hex_brace,
            LexState.ESCAPE_HEX_BRACED: self._escape_hex_braced,
            LexState.OPEN_TAG_QUESTION: self._tag,
            LexState.OPEN_TAG_P: self._tag,
            LexState.OPEN_TAG_H: self._tag,
            LexState.OPEN_TAG_P2: self._tag,
            LexState.CLOSE_TAG: self._tag,
        }

    def feed(self, chars: Iterable[str]) -> None:
        for char in chars:
            self.position = self.position.advanced(char == "\n")
            self._dispatch(char)

    def eof(self) -> None:
        if self.state in QUIESCENT_STATES:
            return
        if self.state in PENDING_TOKEN_KINDS:
            self._close_lexeme()
            return
        raise self._error(LexErrorKind.EOF)

    def _dispatch(self, char: str) -> None:
        self._handlers[self.state](char)

    def _error(self, kind: LexErrorKind, got: str | int | None = None) -> LexError:
        return LexError(kind, self.position, self.state, got)

    def _unexpected(self, char: str) -> LexError:
        return self._error(LexErrorKind.UNEXPECTED, char)

    def _emit(self, kind: TokenKind, value: str, position: Position) -> None:
        self.tokens.append(Token(kind, value, position))

    def _begin(self, state: LexState, char: str | None = None) -> None:
        self.token_start = self.position
        self.buffer.clear()
        if char is not None:
            self.buffer.append(char)
        self.state = state

    def _close_lexeme(self) -> None:
        self._emit(PENDING_TOKEN_KINDS[self.state], "".join(self.buffer), self.token_start)
        self.state = LexState.INITIAL

    def _close_and_redispatch(self, char: str) -> None:
        self._close_lexeme()
        self._dispatch(char)

    def _push_codepoint(self, codepoint: int) -> None:
        if codepoint > MAX_CODE_POINT or 0xD800 <= codepoint <= 0xDFFF:
            raise self._error(LexErrorKind.INVALID_UNICODE, codepoint)
        self.buffer.append(chr(codepoint))

    # -- structure ---------------------------------------------------------

    def _initial(self, char: str) -> None:
        if char in WHITESPACE or char == ";":
            return
        if char == "[":
            self._emit(TokenKind.OPEN_SET, char, self.position)
        elif char == "]":
            self._emit(TokenKind.CLOSE_SET, char, self.position)
        elif char == ",":
            self._emit(TokenKind.SEPARATOR, char, self.position)
        elif char == "/":
            self.state = LexState.PREPARE_COMMENT
        elif char == "=":
            self.token_start = self.position
            self.state = LexState.PREPARE_ASSIGNMENT
        elif char == "'":
            self._begin(LexState.SINGLE_QUOTE)
        elif char == '"':
            self._begin(LexState.DOUBLE_QUOTE)
        elif char in DIGITS:
            self._begin(LexState.INTEGER, char)
        elif char == "-":
            self._begin(LexState.SIGN, char)
        elif char in IDENTIFIER_START:
            self._begin(LexState.IDENTIFIER, char)
        elif char == "<":
            self.state = LexState.OPEN_TAG_QUESTION
        elif char == "?":
            self.state = LexState.CLOSE_TAG
        else:
            raise self._unexpected(char)

    def _prepare_assignment(self, char: str) -> None:
        if char != ">":
            raise self._unexpected(char)
        self._emit(TokenKind.ASSIGNMENT, "=>", self.token_start)
        self.state = LexState.INITIAL

    def _tag(self, char: str) -> None:
        expected, following = TAG_SEQUENCE[self.state]
        if char.lower() != expected:
            raise self._unexpected(char)
        self.state = following

    # -- comments ----------------------------------------------------------

    def _prepare_comment(self, char: str) -> None:
        if char == "/":
            self.state = LexState.LINE_COMMENT
        elif char == "*":
            self.state = LexState.BLOCK_COMMENT
        else:
            raise self._unexpected(char)

    def _line_comment(self, char: str) -> None:
        if char == "\n":
            self.state = LexState.INITIAL

    def _block_comment(self, char: str) -> None:
        if char == "*":
            self.state = LexState.BLOCK_COMMENT_EXIT

    def _block_comment_exit(self, char: str) -> None:
        if char == "/":
            self.state = LexState.INITIAL
        elif char != "*":
            self.state = LexState.BLOCK_COMMENT

    # -- numbers and identifiers -------------------------------------------

    def _sign(self, char: str) -> None:
        if char not in DIGITS:
            raise self._unexpected(char)
        self.buffer.append(char)
        self.state = LexState.INTEGER

    def _integer(self, char: str) -> None:
        if char in DIGITS:
            self.buffer.append(char)
        elif char in ".eE":
            self.buffer.append(char)
            self.state = LexState.DECIMAL
        elif char in LEXEME_CLOSERS:
            self._close_and_redispatch(char)
        else:
            raise self._unexpected(char)

    def _decimal(self, char: str) -> None:
        if char in DIGITS or char in ".eE+-":
            self.buffer.append(char)
        elif char in LEXEME_CLOSERS:
            self._close_and_redispatch(char)
        else:
            raise self._unexpected(char)

    def _identifier(self, char: str) -> None:
        if char in IDENTIFIER_CHARS:
            self.buffer.append(char)
        elif char in LEXEME_CLOSERS:
            self._close_and_redispatch(char)
        else:
            raise self._unexpected(char)

    # -- single-quoted strings ---------------------------------------------

    def _single_quote(self, char: str) -> None:
        if char == "'":
            self._emit(TokenKind.SINGLE_QUOTE_STRING, "".join(self.buffer), self.token_start)
            self.state = LexState.INITIAL
        elif char == "\\":
            self.state = LexState.SINGLE_QUOTE_ESCAPE
        else:
            self.buffer.append(char)

    def _single_quote_escape(self, char: str) -> None:
        if char in "\\'":
            self.buffer.append(char)
        else:
            # only \\ and \' are escapes inside single quotes
            self.buffer.append("\\" + char)
        self.state = LexState.SINGLE_QUOTE

    # -- double-quoted strings ---------------------------------------------

    def _double_quote(self, char: str) -> None:
        if char == '"':
            self._emit(TokenKind.DOUBLE_QUOTE_STRING, "".join(self.buffer), self.token_start)
            self.state = LexState.INITIAL
        elif char == "\\":
            self.state = LexState.DOUBLE_QUOTE_ESCAPE
        else:
            self.buffer.append(char)

    def _double_quote_escape(self, char: str) -> None:
        if char in DOUBLE_QUOTE_ESCAPES:
            self.buffer.append(DOUBLE_QUOTE_ESCAPES[char])
            self.state = LexState.DOUBLE_QUOTE
        elif char == "c":
            self.state = LexState.ESCAPE_CONTROL
        elif char in DIGITS:
            self.codepoint = int(char)
            self.state = LexState.ESCAPE_OCTAL_2
        elif char == "x":
            self.state = LexState.ESCAPE_HEX
        else:
            self.buffer.append("\\" + char)
            self.state = LexState.DOUBLE_QUOTE

    def _escape_control(self, char: str) -> None:
        upper = char.upper()
        if len(upper) != 1:
            raise self._error(LexErrorKind.INVALID_UNICODE, ord(char))
        self._push_codepoint(ord(upper) ^ 0x60)
        self.state = LexState.DOUBLE_QUOTE

    def _escape_octal(self, char: str) -> None:
        if char in OCTAL_DIGITS:
            self.codepoint = self.codepoint * 8 + int(char)
            if self.state == LexState.ESCAPE_OCTAL_2:
                self.state = LexState.ESCAPE_OCTAL_3
                return
            self._push_codepoint(self.codepoint)
            self.state = LexState.DOUBLE_QUOTE
            return
        self._push_codepoint(self.codepoint)
        self.state = LexState.DOUBLE_QUOTE
        self._dispatch(char)

    def _escape_hex(self, char: str) -> None:
        if char == "{":
            self.state = LexState.ESCAPE_HEX_BRACE
        elif char in HEX_DIGITS:
            self.codepoint = int(char, 16)
            self.state = LexState.ESCAPE_HEX_2
        else:
            raise self._unexpected(char)

    def _escape_hex_2(self, char: str) -> None:
        if char not in HEX_DIGITS:
            raise self._unexpected(char)
        self._push_codepoint(self.codepoint * 16 + int(char, 16))
        self.state = LexState.DOUBLE_QUOTE

    def _escape_hex_brace(self, char: str) -> None:
        if char not in HEX_DIGITS:
            raise self._unexpected(char)
        self.codepoint = int(char, 16)
        self.state = LexState.ESCAPE_HEX_BRACED

    def _escape_hex_braced(self, char: str) -> None:
        if char in HEX_DIGITS:
            self.codepoint = self.codepoint * 16 + int(char, 16)
        elif char == "}":
            self._push_codepoint(self.codepoint)
            self.state = LexState.DOUBLE_QUOTE
        else:
            raise self._unexpected(char)


def tokenize(text: str) -> List[Token]:
    lexer = Lexer()
    lexer.feed(text)
    lexer.eof()
    return lexer.tokens
