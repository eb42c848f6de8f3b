"""Small formatting helpers shared by the message templates."""

from datetime import date, datetime


def accommodation_label(name: str | None) -> str:
    if name and name.strip():
        return f'accommodation "{name.strip()}"'
    return "your accommodation"


def person_name(*parts: str | None) -> str:
    return " ".join(p.strip() for p in parts if p and p.strip())


def day(value: date | datetime | None) -> str:
    if value is None:
        return "an unknown date"
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()
