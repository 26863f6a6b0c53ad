from decimal import Decimal, ROUND_HALF_UP, ROUND_DOWN, InvalidOperation, getcontext

getcontext().prec = 28
CENTS = Decimal("0.01")
# Absolute tolerance when comparing a bill total against its shares
TOLERANCE = Decimal("0.01")

def qround(d: Decimal) -> Decimal:
    return d.quantize(CENTS, rounding=ROUND_HALF_UP)

def qfloor(d: Decimal) -> Decimal:
    return d.quantize(CENTS, rounding=ROUND_DOWN)

def to_decimal(value) -> Decimal | None:
    """Coerce ints, floats and numeric strings; None for anything else."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    try:
        d = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return d if d.is_finite() else None

def unique_in_order(items):
    seen = set()
    out = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out
