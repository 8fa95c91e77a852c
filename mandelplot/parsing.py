"""Parsers for the coordinate pairs accepted on the command line."""

from __future__ import annotations

from typing import Callable, Optional, TypeVar

T = TypeVar("T")


def parse_pair(s: str, separator: str, convert: Callable[[str], T] = float) -> Optional[tuple[T, T]]:
    """Parse ``s`` as a pair like ``"400x600"`` or ``"1.0,0.5"``.

    ``s`` must have the form ``<left><separator><right>`` where both halves are
    accepted by ``convert``, which signals malformed input by raising
    ``ValueError``. Only the first occurrence of ``separator`` splits the
    string, so ``"10,20,30"`` leaves ``"20,30"`` for the right half and fails.

    Returns ``(left, right)`` on success and ``None`` otherwise.
    """

    if len(separator) != 1:
        raise ValueError(f"separator must be a single character, got {separator!r}")

    index = s.find(separator)
    if index < 0:
        return None

    left = _convert_field(s[:index], convert)
    right = _convert_field(s[index + 1:], convert)
    if left is None or right is None:
        return None
    return left, right


def _convert_field(field: str, convert: Callable[[str], T]) -> Optional[T]:
    # int() and float() accept padding; a field is the exact text between separators.
    if not field or field != field.strip():
        return None
    try:
        return convert(field)
    except (ValueError, TypeError, ArithmeticError):
        return None


def parse_complex(s: str) -> Optional[complex]:
    """Parse ``"<re>,<im>"`` into a complex number."""

    pair = parse_pair(s, ",", float)
    if pair is None:
        return None
    re, im = pair
    return complex(re, im)


def parse_bounds(s: str) -> Optional[tuple[int, int]]:
    """Parse ``"<width>x<height>"`` into positive pixel bounds."""

    pair = parse_pair(s, "x", int)
    if pair is None:
        return None
    width, height = pair
    if width <= 0 or height <= 0:
        return None
    return width, height
