"""Salary text parsing into (min, max) in thousands."""

import re

# Amount with optional thousands separators, decimals and a k/K suffix
_AMOUNT = r"(\d{1,3}(?:[,.]\d{3})+|\d+(?:\.\d+)?)\s*[kK]?"
_CURRENCY = r"[$£€]|USD|GBP|EUR"
_DASH = r"\s*(?:-|–|—|to)\s*"

# Tried in order; the first plausible match wins
SALARY_PATTERNS = [
    re.compile(rf"(?:{_CURRENCY})\s*{_AMOUNT}{_DASH}(?:{_CURRENCY})?\s*{_AMOUNT}"),
    re.compile(rf"(?:{_CURRENCY})\s*{_AMOUNT}"),
]

# Plausible annual salary bounds, in thousands
MIN_ANNUAL_K = 10
MAX_ANNUAL_K = 5000


def _to_thousands(number: str) -> int | None:
    """Interpret "405", "405K" and "405,000" alike, as 405 thousand."""
    digits = re.sub(r"[,.](?=\d{3}\b)", "", number)
    try:
        value = float(digits)
    except ValueError:
        return None
    if value >= 1000:
        value /= 1000
    return round(value)


def parse_salary(text: str | None) -> tuple[int | None, int | None]:
    """Parse the first salary figure or range in `text`.

        >>> parse_salary("$405K – $590K")
        (405, 590)
        >>> parse_salary("$300,000 - $450,000 USD")
        (300, 450)
    """
    if not text:
        return None, None

    for pattern in SALARY_PATTERNS:
        for match in pattern.finditer(text):
            values = [_to_thousands(g) for g in match.groups()]
            if None in values:
                continue
            low, high = min(values), max(values)
            if low < MIN_ANNUAL_K or high > MAX_ANNUAL_K:
                continue
            return low, high

    return None, None


def format_salary(low: int | None, high: int | None) -> str | None:
    if low is None and high is None:
        return None
    if low is None or high is None or low == high:
        return f"${low if low is not None else high}K"
    return f"${low}K - ${high}K"
