from datetime import date
import calendar


def month_start(d: date) -> date:
    return d.replace(day=1)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_days(year: int, month: int) -> list[date]:
    """Every calendar day of the month, in order."""
    return [date(year, month, day) for day in range(1, days_in_month(year, month) + 1)]


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    return min(day, days_in_month(year, month))


def add_months(d: date, n: int) -> date:
    """Add n months to date d, clamping day to month end."""
    month = d.month - 1 + n
    year = d.year + month // 12
    month = month % 12 + 1
    day = clamp_day_to_month(year, month, d.day)
    return d.replace(year=year, month=month, day=day)


def same_month(d: date, year: int, month: int) -> bool:
    return d.year == year and d.month == month
