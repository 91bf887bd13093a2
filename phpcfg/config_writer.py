from __future__ import annotations

import io
import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Sequence, TextIO

from .config_model import KeyValuePair, Value, ValueKind

# control characters and their double-quoted escapes; none can be written
# inside single quotes
CONTROL_ESCAPES = {
    "\x00": "\\x00",
    "\x07": "\\a",
    "\x1b": "\\e",
    "\x0c": "\\f",
    "\r": "\\r",
    "\n": "\\n",
    "\t": "\\t",
}

DOUBLE_QUOTE_ESCAPES = {
    **CONTROL_ESCAPES,
    "\\": "\\\\",
    '"': '\\"',
    "$": "\\$",
}


@dataclass
class WriterOptions:
    indent: str = "\t"
    open_tag: str = "<?php"
    return_statement: bool = True


class QuoteMode(Enum):
    UNDECIDED = auto()
    UNDECIDED_ESCAPE = auto()
    DECIDED = auto()


def quote_string(text: str) -> str:
    """Return ``text`` as a PHP string literal, single-quoted when possible."""
    single: List[str] = []
    double: List[str] = []
    mode = QuoteMode.UNDECIDED
    for char in text:
        if mode == QuoteMode.DECIDED:
            double.append(DOUBLE_QUOTE_ESCAPES.get(char, char))
        elif mode == QuoteMode.UNDECIDED:
            mode = _undecided(char, single, double)
        else:
            mode = _after_backslash(char, single, double)
    if mode == QuoteMode.DECIDED:
        return '"' + "".join(double) + '"'
    if mode == QuoteMode.UNDECIDED_ESCAPE:
        # a trailing backslash would escape the closing quote
        single.append("\\\\")
    return "'" + "".join(single) + "'"


def _undecided(char: str, single: List[str], double: List[str]) -> QuoteMode:
    if char in CONTROL_ESCAPES:
        double.append(CONTROL_ESCAPES[char])
        return QuoteMode.DECIDED
    if char == "\\":
        # the single-quoted form depends on the next character
        double.append("\\\\")
        return QuoteMode.UNDECIDED_ESCAPE
    if char == "'":
        single.append("\\'")
        double.append(char)
    elif char in "\"$":
        single.append(char)
        double.append(DOUBLE_QUOTE_ESCAPES[char])
    else:
        single.append(char)
        double.append(char)
    return QuoteMode.UNDECIDED


def _after_backslash(char: str, single: List[str], double: List[str]) -> QuoteMode:
    if char in CONTROL_ESCAPES:
        double.append(CONTROL_ESCAPES[char])
        return QuoteMode.DECIDED
    if char == "'":
        single.append("\\\\\\'")
        double.append(char)
    elif char == "\\":
        single.append("\\\\\\\\")
        double.append("\\\\")
    elif char in "\"$":
        single.append("\\" + char)
        double.append(DOUBLE_QUOTE_ESCAPES[char])
    else:
        single.append("\\" + char)
        double.append(char)
    return QuoteMode.UNDECIDED


def render_float(number: float) -> str:
    if not math.isfinite(number):
        raise ValueError(f"Cannot write non-finite float {number!r}")
    text = repr(number)
    if "." not in text and "e" not in text:
        text += ".0"
    return text


def render_scalar(value: Value) -> str:
    kind = value.kind
    if kind == ValueKind.NULL:
        return "null"
    if kind == ValueKind.BOOL:
        return "true" if value.data else "false"
    if kind == ValueKind.INT:
        return str(value.data)
    if kind == ValueKind.FLOAT:
        return render_float(value.data)
    if kind == ValueKind.STR:
        return quote_string(value.data)
    raise ValueError(f"{kind.name} is not a scalar value")


def write(pairs: Sequence[KeyValuePair], sink: TextIO, options: WriterOptions | None = None) -> None:
    options = options or WriterOptions()
    if options.open_tag:
        sink.write(options.open_tag + "\n")
    sink.write("return [\n" if options.return_statement else "[\n")
    _write_pairs(pairs, sink, options.indent, 1)
    sink.write("];\n")


def _write_pairs(pairs: Sequence[KeyValuePair], sink: TextIO, indent: str, depth: int) -> None:
    prefix = indent * depth
    for pair in pairs:
        sink.write(prefix)
        if pair.key is not None:
            sink.write(quote_string(pair.key) + " => ")
        value = pair.value
        if value.kind != ValueKind.SET:
            sink.write(render_scalar(value))
        elif not value.data:
            sink.write("[]")
        else:
            sink.write("[\n")
            _write_pairs(value.data, sink, indent, depth + 1)
            sink.write(prefix + "]")
        sink.write(",\n")


def serialize(pairs: Sequence[KeyValuePair], options: WriterOptions | None = None) -> str:
    buffer = io.StringIO()
    write(pairs, buffer, options)
    return buffer.getvalue()
