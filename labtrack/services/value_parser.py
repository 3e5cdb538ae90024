import math
import re
from decimal import Decimal

# Exponent only with an explicit sign, the way str(float) writes it ("1e-05", "1.2e+19").
# Analyst text such as "2e3 UFC" reads as 2.
_NUMBER_RE = re.compile(r"-?\d+(\.\d+)?([eE][-+]\d+)?")

# Two-character operators first, so "<= 5" is not read as "<".
_OPERATORS = ("<=", ">=", "<", ">")


def _is_blank(raw) -> bool:
    return raw is None or (isinstance(raw, str) and raw == "")


def parse_numeric_value(raw) -> float | None:
    """Magnitude of an analyst entry: "< 0,05" -> 0.05, "7,5" -> 7.5, "N.D." -> None."""
    if _is_blank(raw):
        return None
    if isinstance(raw, (int, float, Decimal)) and not isinstance(raw, bool):
        try:
            value = float(raw)
        except (OverflowError, ValueError):
            return None
        return value if math.isfinite(value) else None

    text = str(raw).strip().replace(",", ".", 1)
    match = _NUMBER_RE.search(text)
    if not match:
        return None
    value = float(match.group(0))
    return value if math.isfinite(value) else None


def get_operator(raw) -> str | None:
    if raw is None:
        return None
    text = str(raw).strip()
    for operator in _OPERATORS:
        if text.startswith(operator):
            return operator
    return None
