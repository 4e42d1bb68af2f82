"""Currency formatting for display

Amounts render in Vietnamese grouping with a literal "đ" suffix:
300000 -> "300.000đ". Arithmetic never goes through these strings.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

CURRENCY_SUFFIX = "đ"


def format_vnd(amount: float) -> str:
    """Round to whole đồng (half away from zero) and group thousands with '.'"""
    rounded = int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    sign = "-" if rounded < 0 else ""
    grouped = f"{abs(rounded):,}".replace(",", ".")
    return f"{sign}{grouped}{CURRENCY_SUFFIX}"


def parse_vnd(text: str) -> int:
    """Inverse of format_vnd: "300.000đ" -> 300000"""
    value = text.strip()
    if value.endswith(CURRENCY_SUFFIX):
        value = value[: -len(CURRENCY_SUFFIX)]
    value = value.strip().replace(".", "")
    if not value.lstrip("-").isdigit():
        raise ValueError(f"not a VND amount: {text!r}")
    return int(value)
