import io
import math

import pytest

from phpcfg.config_lexer import TokenKind, tokenize
from phpcfg.config_model import KeyValuePair, Value
from phpcfg.config_writer import WriterOptions, quote_string, render_float, render_scalar, serialize, write


@pytest.mark.parametrize(
    ("text", "literal"),
    [
        ("plain", "'plain'"),
        ("", "''"),
        ("it's", "'it\\'s'"),
        ('say "hi"', "'say \"hi\"'"),
        ("$var", "'$var'"),
        ("C:\\path", "'C:\\path'"),
        ("ends\\", "'ends\\\\'"),
        ("\\'", "'\\\\\\''"),
        ("a\\\\b", "'a\\\\\\\\b'"),
        ('\\"$', "'\\\"$'"),
        ("\\$", "'\\$'"),
        ("a\nb", '"a\\nb"'),
        ("tab\there", '"tab\\there"'),
        ("\x00\x07\x1b\x0c\r", '"\\x00\\a\\e\\f\\r"'),
        ("$x\n", '"\\$x\\n"'),
        ('"q"\t', '"\\"q\\"\\t"'),
        ("a\\\n", '"a\\\\\\n"'),
        ("it's\n", '"it\'s\\n"'),
    ],
)
def test_quote_string(text: str, literal: str) -> None:
    assert quote_string(text) == literal


@pytest.mark.parametrize("char", ["\x00", "\x07", "\x1b", "\x0c", "\r", "\n", "\t"])
def test_control_characters_force_double_quotes(char: str) -> None:
    assert quote_string(f"it's {char} here").startswith('"')
    assert quote_string(f"\\{char}").startswith('"')


@pytest.mark.parametrize(
    "text",
    [
        "it's",
        "back\\slash",
        "\\\\'\\",
        "mixed \\' and \\\" and \\$ and $",
        "\x00 nul \x07 bel \x1b esc",
        "multi\nline\r\n\ttabbed \"quoted\" $dollar \\ slash",
        "\x00123",
        "unicode \u00e9 \U0001F600",
        "\x0b vertical tab stays raw",
    ],
)
def test_quoted_literal_reads_back(text: str) -> None:
    tokens = tokenize(quote_string(text))

    assert len(tokens) == 1
    assert tokens[0].kind in (TokenKind.SINGLE_QUOTE_STRING, TokenKind.DOUBLE_QUOTE_STRING)
    assert tokens[0].value == text


def test_floats_always_have_a_decimal_point() -> None:
    assert render_float(2.0) == "2.0"
    assert render_float(0.1) == "0.1"
    assert render_float(-3.0) == "-3.0"
    assert render_float(1e16) == "1e+16"
    assert render_float(2.5e-7) == "2.5e-07"


@pytest.mark.parametrize("number", [math.inf, -math.inf, math.nan])
def test_non_finite_floats_are_rejected(number: float) -> None:
    with pytest.raises(ValueError):
        render_float(number)


def test_render_scalar() -> None:
    assert render_scalar(Value.null()) == "null"
    assert render_scalar(Value.boolean(True)) == "true"
    assert render_scalar(Value.boolean(False)) == "false"
    assert render_scalar(Value.integer(-42)) == "-42"
    assert render_scalar(Value.floating(2.0)) == "2.0"
    assert render_scalar(Value.string("x")) == "'x'"
    with pytest.raises(ValueError):
        render_scalar(Value.set_of())


def test_serialize_layout() -> None:
    pairs = [
        KeyValuePair("name", Value.string("app")),
        KeyValuePair(
            "db",
            Value.set_of(
                [
                    KeyValuePair("port", Value.integer(5432)),
                    KeyValuePair(None, Value.set_of([KeyValuePair(None, Value.null())])),
                ]
            ),
        ),
        KeyValuePair(None, Value.floating(1.0)),
    ]

    assert serialize(pairs) == (
        "<?php\n"
        "return [\n"
        "\t'name' => 'app',\n"
        "\t'db' => [\n"
        "\t\t'port' => 5432,\n"
        "\t\t[\n"
        "\t\t\tnull,\n"
        "\t\t],\n"
        "\t],\n"
        "\t1.0,\n"
        "];\n"
    )


def test_empty_set_stays_on_one_line() -> None:
    assert serialize([KeyValuePair("empty", Value.set_of())]) == "<?php\nreturn [\n\t'empty' => [],\n];\n"


def test_empty_document() -> None:
    assert serialize([]) == "<?php\nreturn [\n];\n"


def test_keys_use_string_quoting() -> None:
    text = serialize([KeyValuePair("it's\n", Value.boolean(False))])

    assert "\t\"it's\\n\" => false,\n" in text


def test_writer_options() -> None:
    options = WriterOptions(indent="    ", open_tag="", return_statement=False)
    pairs = [KeyValuePair("a", Value.set_of([KeyValuePair(None, Value.integer(1))]))]

    assert serialize(pairs, options) == "[\n    'a' => [\n        1,\n    ],\n];\n"


def test_write_streams_into_sink() -> None:
    sink = io.StringIO()

    write([KeyValuePair(None, Value.integer(1))], sink)

    assert sink.getvalue() == "<?php\nreturn [\n\t1,\n];\n"


class _FailingSink:
    def __init__(self, fail_after: int) -> None:
        self.writes = 0
        self.fail_after = fail_after

    def write(self, text: str) -> int:
        self.writes += 1
        if self.writes > self.fail_after:
            raise OSError("disk full")
        return len(text)


def test_sink_errors_propagate() -> None:
    sink = _FailingSink(fail_after=3)

    with pytest.raises(OSError, match="disk full"):
        write([KeyValuePair(None, Value.integer(n)) for n in range(10)], sink)

    assert sink.writes == 4
