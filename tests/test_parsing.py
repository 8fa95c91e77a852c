from fractions import Fraction

import pytest

from mandelplot import parse_bounds, parse_complex, parse_pair


@pytest.mark.parametrize(
    "text, separator, convert, expected",
    [
        ("", ",", int, None),
        ("10,", ",", int, None),
        (",10", ",", int, None),
        ("10,20", ",", int, (10, 20)),
        ("10,20xy", ",", int, None),
        ("10,20,30", ",", int, None),
        ("0.5x", "x", float, None),
        ("0.5x1.5", "x", float, (0.5, 1.5)),
        ("1/3:2/3", ":", Fraction, (Fraction(1, 3), Fraction(2, 3))),
    ],
)
def test_parse_pair(text, separator, convert, expected):
    assert parse_pair(text, separator, convert) == expected


@pytest.mark.parametrize("text", ["1020", "abc", "1.5 2.5", "-", "x"])
def test_parse_pair_without_separator(text):
    assert parse_pair(text, ",", float) is None


def test_parse_pair_rejects_padded_fields():
    assert parse_pair("10, 20", ",", int) is None
    assert parse_pair(" 10,20", ",", int) is None


def test_parse_pair_defaults_to_float():
    assert parse_pair("-1,2.5", ",") == (-1.0, 2.5)


def test_parse_pair_requires_single_character_separator():
    with pytest.raises(ValueError):
        parse_pair("1::2", "::")
    with pytest.raises(ValueError):
        parse_pair("12", "")


def test_parse_complex():
    assert parse_complex("1.25,-0.0625") == complex(1.25, -0.0625)
    assert parse_complex("-1.20,0.35") == complex(-1.2, 0.35)
    assert parse_complex(",-0.0625") is None
    assert parse_complex("1.25;-0.0625") is None


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1000x750", (1000, 750)),
        ("1x1", (1, 1)),
        ("0x750", None),
        ("1000x-750", None),
        ("1000x750.5", None),
        ("1000,750", None),
    ],
)
def test_parse_bounds(text, expected):
    assert parse_bounds(text) == expected
