"""
Amount Parser - Money, percent and rounding helpers for cost cells
"""
import re
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Optional

_CURRENCY_STRIP = re.compile(r"[$€£,\s()]")
_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)$")
_BLANK_MONEY = {'', '-', '--', '\u2014'}
_CENTS = Decimal('0.01')


@dataclass(frozen=True)
class ParsedAmount:
    """Result of parsing one cost cell."""
    value: float = 0.0
    blank: bool = True
    parseable: bool = True
    negative: bool = False


def round2(value: float) -> float:
    """Round money half-up to cents. Idempotent."""
    try:
        return float(Decimal(repr(float(value))).quantize(_CENTS, rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError, OverflowError):
        return value


def parse_money(text: Optional[str]) -> ParsedAmount:
    """
    Parse a currency cell into its absolute magnitude.

    Currency symbols, thousands separators, spaces and accounting
    parentheses are stripped. Blank cells and lone dashes read as zero.
    Negative signs and parentheses are recorded but never change the
    magnitude.
    """
    if text is None:
        return ParsedAmount()

    raw = str(text).strip()
    negative = raw.startswith('(') and raw.endswith(')')
    cleaned = _CURRENCY_STRIP.sub('', raw)

    if cleaned in _BLANK_MONEY:
        return ParsedAmount(blank=raw == '')

    if cleaned.startswith('-'):
        negative = True
    if not _NUMBER.match(cleaned):
        return ParsedAmount(blank=False, parseable=False)

    try:
        value = abs(float(cleaned))
    except ValueError:
        return ParsedAmount(blank=False, parseable=False)

    return ParsedAmount(value=value, blank=False, parseable=True, negative=negative and value > 0)


@dataclass(frozen=True)
class ParsedPercent:
    """Result of parsing one markup cell. value is the non-negative fraction, or None."""
    value: Optional[float] = None
    blank: bool = True
    parseable: bool = True
    negative: bool = False


def parse_markup(text: Optional[str]) -> ParsedPercent:
    """
    Parse a markup cell into a non-negative fraction.

    "25%" -> 0.25, "25" -> 0.25, "0.25" -> 0.25, "1" -> 1.0.
    Values above 1 without a percent sign are read as percentages.
    A minus sign or accounting parentheses are recorded in negative;
    the value is always the magnitude.
    """
    if text is None:
        return ParsedPercent()

    raw = str(text).strip()
    if raw == '':
        return ParsedPercent()

    has_percent = '%' in raw
    negative = raw.startswith('(') and raw.endswith(')')
    cleaned = re.sub(r"[\s()%]", "", raw)
    if not _NUMBER.match(cleaned):
        return ParsedPercent(blank=False, parseable=False)

    if cleaned.startswith('-'):
        negative = True
    value = abs(float(cleaned))
    if has_percent or value > 1:
        value = value / 100
    return ParsedPercent(value=value, blank=False, parseable=True, negative=negative and value > 0)


def parse_percent(text: Optional[str]) -> Optional[float]:
    """Markup fraction of a cell, or None for blank or non-numeric text."""
    return parse_markup(text).value


def is_currency_shaped(text: Optional[str]) -> bool:
    """True for non-blank cells that parse as a positive amount."""
    parsed = parse_money(text)
    return parsed.parseable and not parsed.blank and parsed.value > 0
