"""Typed keyword extraction from specification text.

Specification text is a run of ``Keyword=value`` fragments, the same
format ``show`` prints, e.g.::

    NodeName=lx01 State=DRAIN Reason="disk replaced" Weight=16

``extract`` looks up each declared field, converts its value, stores it on
the destination and blanks the matched text in the buffer. Whatever is
left afterwards was not declared, which lets the caller reject unknown or
repeated keywords:

    >>> spec = SpecBuffer("NodeName=foo State=DOWN")
    >>> values = {}
    >>> extract(spec, [Field("NodeName"), Field("State")], values)
    >>> values
    {'NodeName': 'foo', 'State': 'DOWN'}
    >>> spec.residual()
    []

Input that has already been split into words goes through
``extract_words`` instead, which matches one word per fragment:

    >>> extract_words(["NodeName=lx01", "Reason=power State=DOWN"], [Field("State")], values)
    ['NodeName=lx01', 'Reason=power State=DOWN']
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, MutableMapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from rmctl.core.errors import ErrorCode, SpecParseError

logger = logging.getLogger(__name__)


class FieldType(Enum):
    """Value type of a specification keyword."""

    INT = "d"
    FLOAT = "f"
    STRING = "s"
    LONG = "l"


@dataclass(frozen=True)
class Field:
    """One keyword to extract.

    Attributes:
        keyword: Keyword without the ``=`` (matched case-insensitively).
        type: How to convert the value.
        dest: Attribute or key on the destination. Defaults to the keyword.
    """

    keyword: str
    type: FieldType = FieldType.STRING
    dest: str | None = None

    @property
    def target(self) -> str:
        return self.dest or self.keyword


# Values meaning "no limit" for numeric fields
UNLIMITED_WORDS = ("UNLIMITED", "INFINITE")
UNLIMITED = -1

_UNIT_SHIFT = {"K": 10, "M": 20, "G": 30, "T": 40}

_INTEGER_RE = re.compile(r"([+-]?\d+)([KMGT]?)", re.IGNORECASE)
_FLOAT_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")

_LIMITS = {
    FieldType.INT: (-(2**31), 2**31 - 1),
    FieldType.LONG: (-(2**63), 2**63 - 1),
}

QUOTES = ("'", '"')


class SpecBuffer:
    """Mutable specification text.

    Extracted fragments are overwritten with spaces, so the buffer keeps its
    length and the offsets of everything not yet consumed.
    """

    def __init__(self, text: str):
        self._chars = list(text)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"SpecBuffer({self.text!r})"

    def __len__(self) -> int:
        return len(self._chars)

    @property
    def text(self) -> str:
        return "".join(self._chars)

    def blank(self, start: int, end: int) -> None:
        """Overwrite ``[start, end)`` with spaces."""
        for i in range(start, end):
            self._chars[i] = " "

    def find_keyword(self, keyword: str) -> int:
        """Return the offset of ``keyword=`` starting a fragment, or -1.

        The keyword must begin the buffer or follow whitespace, so that
        ``Name=`` does not match inside ``NodeName=``. Text inside a quoted
        run is a value, never a keyword.
        """
        text = self.text
        spans = _quoted_spans(text)
        pattern = re.compile(rf"(?<!\S){re.escape(keyword)}=", re.IGNORECASE)
        for match in pattern.finditer(text):
            if not any(start < match.start() < end for start, end in spans):
                return match.start()
        return -1

    def residual(self) -> list[str]:
        """Words still present in the buffer."""
        return self.text.split()

    def is_empty(self) -> bool:
        return not self.text.strip()


def _quoted_spans(text: str) -> list[tuple[int, int]]:
    """Quoted runs as (opening quote, one past closing quote) offsets."""
    spans = []
    quote: str | None = None
    start = 0
    for i, ch in enumerate(text):
        if quote is None:
            if ch in QUOTES:
                quote, start = ch, i
        elif ch == quote:
            spans.append((start, i + 1))
            quote = None
    if quote is not None:
        spans.append((start, len(text)))
    return spans


def _scan_string(text: str, start: int) -> tuple[str, int, bool]:
    """Read a string value starting at ``start``.

    Returns:
        (value, end offset, whether the value was quoted).
    """
    if start < len(text) and text[start] in QUOTES:
        quote = text[start]
        close = text.find(quote, start + 1)
        if close == -1:
            return text[start + 1 :], len(text), True
        return text[start + 1 : close], close + 1, True

    chars: list[str] = []
    i = start
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text) and text[i + 1].isspace():
            chars.append(text[i + 1])
            i += 2
            continue
        if ch.isspace():
            break
        chars.append(ch)
        i += 1
    return "".join(chars), i, False


def _parse_integer(field: Field, raw: str) -> int:
    if raw.upper() in UNLIMITED_WORDS:
        return UNLIMITED

    match = _INTEGER_RE.fullmatch(raw)
    if not match:
        raise SpecParseError(field.keyword, ErrorCode.INVALID_NUMBER, raw)

    value = int(match.group(1))
    unit = match.group(2).upper()
    if unit:
        value <<= _UNIT_SHIFT[unit]

    low, high = _LIMITS[field.type]
    if not low <= value <= high:
        raise SpecParseError(field.keyword, ErrorCode.INVALID_NUMBER, raw)
    return value


def _parse_float(field: Field, raw: str) -> float:
    if not _FLOAT_RE.fullmatch(raw):
        raise SpecParseError(field.keyword, ErrorCode.INVALID_NUMBER, raw)
    return float(raw)


def _convert(field: Field, raw: str, quoted: bool) -> Any:
    """Convert a raw value; an empty value must have been quoted."""
    if not raw and not quoted:
        raise SpecParseError(field.keyword, ErrorCode.MISSING_VALUE)
    if field.type is FieldType.STRING:
        return raw
    if field.type is FieldType.FLOAT:
        return _parse_float(field, raw)
    return _parse_integer(field, raw)


def _store(target: Any, name: str, value: Any) -> None:
    if isinstance(target, MutableMapping):
        target[name] = value
    else:
        setattr(target, name, value)


def extract(spec: SpecBuffer, fields: Sequence[Field], target: Any) -> None:
    """Extract declared fields from ``spec`` into ``target``.

    Only the first occurrence of each keyword is consumed. Fields that are
    absent leave the destination untouched. Text that matches no field is
    left in the buffer.

    Args:
        spec: Specification text; matched fragments are blanked.
        fields: Keywords to look for, in any order.
        target: Mapping or object receiving the values.

    Raises:
        SpecParseError: A keyword has no value or a malformed number.
    """
    for field in fields:
        offset = spec.find_keyword(field.keyword)
        if offset < 0:
            continue

        text = spec.text
        value_start = offset + len(field.keyword) + 1
        raw, end, quoted = _scan_string(text, value_start)
        value = _convert(field, raw, quoted)

        _store(target, field.target, value)
        spec.blank(offset, end)
        logger.debug("spec_field: keyword=%s value=%r", field.keyword, value)


def extract_words(words: Iterable[str], fields: Sequence[Field], target: Any) -> list[str]:
    """Extract declared fields from already tokenized words.

    Each word is one ``Keyword=value`` fragment; its value is taken whole,
    so text inside a value can never be read as another keyword. A word
    with an empty value is accepted only if it was quoted
    (``Word.quoted``). Only the first occurrence of each keyword is
    consumed.

    Returns:
        Words that matched no field (or repeated one), in input order.

    Raises:
        SpecParseError: A keyword has no value or a malformed number.
    """
    by_keyword = {field.keyword.lower(): field for field in fields}
    seen: set[str] = set()
    leftover: list[str] = []

    for word in words:
        keyword, sep, raw = word.partition("=")
        field = by_keyword.get(keyword.lower()) if sep else None
        if field is None or field.keyword in seen:
            leftover.append(word)
            continue

        value = _convert(field, raw, getattr(word, "quoted", False))
        _store(target, field.target, value)
        seen.add(field.keyword)
        logger.debug("spec_field: keyword=%s value=%r", field.keyword, value)

    return leftover
