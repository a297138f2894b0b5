from calendar import monthrange
from datetime import MAXYEAR, MINYEAR, date

MONTH_ABBREVIATIONS = (
    "jan", "fev", "mar", "abr", "mai", "jun",
    "jul", "ago", "set", "out", "nov", "dez",
)


def parse_iso_date(raw_date: str) -> date:
    """Build a date from a ``YYYY-MM-DD`` string using its integer parts only.

    Any time suffix (``T...``) is ignored; no timezone handling is involved.
    """
    if not raw_date:
        raise ValueError("missing date value")

    parts = raw_date.strip()[:10].split("-")
    if len(parts) != 3:
        raise ValueError(f"invalid date value: {raw_date!r}")

    try:
        year, month, day = (int(p) for p in parts)
    except ValueError as exc:
        raise ValueError(f"invalid date value: {raw_date!r}") from exc

    return date(year, month, day)


def normalize_date(raw_date: str) -> str:
    """Return the ISO form of a sheet date (``YYYY-MM-DD`` or ``DD/MM/YYYY``)."""
    value = (raw_date or "").strip()
    if "/" in value:
        parts = value.split("/")
        if len(parts) != 3:
            raise ValueError(f"invalid date value: {raw_date!r}")
        try:
            day, month, year = (int(p) for p in parts)
        except ValueError as exc:
            raise ValueError(f"invalid date value: {raw_date!r}") from exc
        return date(year, month, day).isoformat()

    return parse_iso_date(value).isoformat()


def add_months(d: date, months: int) -> date:
    """Shift ``d`` by whole months, clamping the day to the target month's end."""
    index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    if not MINYEAR <= year <= MAXYEAR:
        raise ValueError(f"{d.isoformat()} shifted by {months} months is outside years {MINYEAR}..{MAXYEAR}")
    last_day = monthrange(year, month)[1]
    return date(year, month, min(d.day, last_day))


def months_between(start: date, end: date) -> int:
    """Calendar months from ``start`` to ``end``, ignoring the day of month."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def month_label(key: str) -> str:
    # "2024-03" -> "mar/24"
    year, month = key.split("-")
    return f"{MONTH_ABBREVIATIONS[int(month) - 1]}/{year[-2:]}"


def year_month_keys(year: int) -> list:
    return [f"{year:04d}-{month:02d}" for month in range(1, 13)]
