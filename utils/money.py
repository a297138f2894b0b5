from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

ZERO = Decimal("0.00")


def parse_money(value) -> Decimal:
    """Parse a sheet amount into a ``Decimal`` rounded to cents.

    Accepts plain numbers, ``"1234.56"``, pt-BR formatted ``"1.234,56"`` and
    an optional ``R$`` prefix. Parenthesised values are negative.
    """
    if value is None:
        raise ValueError("missing money value")

    if isinstance(value, (int, float, Decimal)):
        normalized = str(value)
    else:
        normalized = value.strip()
    if not normalized:
        raise ValueError("empty money value")

    is_negative = normalized.startswith("(") and normalized.endswith(")")
    if is_negative:
        normalized = normalized[1:-1]

    normalized = normalized.replace("R$", "").replace("$", "").replace(" ", "")

    if "," in normalized:
        # pt-BR: dots group thousands, comma marks decimals
        normalized = normalized.replace(".", "").replace(",", ".")

    try:
        amount = Decimal(normalized).quantize(
            Decimal("0.01"),
            rounding=ROUND_HALF_UP
        )
    except InvalidOperation as exc:
        raise ValueError("invalid money value") from exc

    return -amount if is_negative else amount


def parse_money_or_zero(value) -> Decimal:
    try:
        return parse_money(value)
    except ValueError:
        return ZERO
