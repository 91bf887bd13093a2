"""Read and write PHP array literal configuration files."""

from .config_lexer import Lexer, LexState, Position, Token, TokenKind, tokenize
from .config_loader import ConfigLoader, ConfigWriter
from .config_model import KeyValuePair, Value, ValueKind, pairs_from_native, pairs_to_native
from .config_parser import deserialize
from .config_writer import WriterOptions, quote_string, render_scalar, serialize, write
from .errors import (
    ConfigIOError,
    ConfigSyntaxError,
    DeserError,
    DeserErrorKind,
    LexError,
    LexErrorKind,
)

__all__ = [
    "ConfigIOError",
    "ConfigLoader",
    "ConfigSyntaxError",
    "ConfigWriter",
    "DeserError",
    "DeserErrorKind",
    "KeyValuePair",
    "LexError",
    "LexErrorKind",
    "LexState",
    "Lexer",
    "Position",
    "Token",
    "TokenKind",
    "Value",
    "ValueKind",
    "WriterOptions",
    "deserialize",
    "pairs_from_native",
    "pairs_to_native",
    "quote_string",
    "render_scalar",
    "serialize",
    "tokenize",
    "write",
]
