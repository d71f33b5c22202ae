"""
Money conversion between fixed-decimal text and integer minor units.

"10.50" at precision 2 <-> 1050. All scaling goes through Decimal, so
values like 0.1 + 0.2 never pick up binary floating-point error.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation


def to_minor_units(value: str, precision: int) -> int:
    """
    Convert a decimal string to integer minor units.

    Rounds half away from zero when the text has more digits than the
    precision allows. Empty or unparseable input gives 0.
    """
    if value is None:
        return 0
    text = str(value).strip()
    if not text:
        return 0
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return 0
    if not amount.is_finite():
        return 0
    scaled = amount.scaleb(precision).to_integral_value(rounding=ROUND_HALF_UP)
    return int(scaled)


def from_minor_units(value: int, precision: int) -> str:
    """
    Convert integer minor units to a fixed-decimal string.

    Always emits exactly `precision` fractional digits; precision 0
    drops the decimal point.
    """
    value = int(value)
    if precision <= 0:
        return str(value)
    whole, fraction = divmod(abs(value), 10 ** precision)
    sign = "-" if value < 0 else ""
    return f"{sign}{whole}.{fraction:0{precision}d}"
