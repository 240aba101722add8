from datetime import date, datetime, timedelta
import calendar
from utils.constants import DATE_FORMAT, MONTH_FORMAT

# ── Display date format options ───────────────────────────────────────────────

DATE_FORMAT_OPTIONS = ["MM/DD/YYYY", "DD/MM/YYYY", "YYYY-MM-DD", "DD.MM.YYYY", "MM-DD-YYYY"]

_STRFTIME_MAP = {
    "MM/DD/YYYY": "%m/%d/%Y",
    "DD/MM/YYYY": "%d/%m/%Y",
    "YYYY-MM-DD": "%Y-%m-%d",
    "DD.MM.YYYY": "%d.%m.%Y",
    "MM-DD-YYYY": "%m-%d-%Y",
}


def today() -> date:
    return date.today()


def today_str() -> str:
    return date.today().strftime(DATE_FORMAT)


def now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


def parse_date(date_str: str) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    if not date_str:
        return None
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    return None


def to_date(value) -> date | None:
    """Coerce a date, datetime, YYYY-MM-DD string or ISO timestamp to a date.

    Returns None for anything that cannot be interpreted as a calendar day.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    d = parse_date(raw)
    if d is not None:
        return d
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def format_month(d: date) -> str:
    return d.strftime(MONTH_FORMAT)


def parse_month(month_str: str) -> date | None:
    """Return the first day of the given YYYY-MM month string."""
    if not month_str:
        return None
    try:
        return datetime.strptime(month_str, MONTH_FORMAT).date()
    except ValueError:
        return None


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    max_day = calendar.monthrange(year, month)[1]
    return min(day, max_day)


def shift_month(year: int, month: int, n: int) -> tuple[int, int]:
    """Return (year, month) moved by n calendar months."""
    index = year * 12 + (month - 1) + n
    return index // 12, index % 12 + 1


def add_months(d: date, n: int) -> date:
    """Add n months to date d, clamping day to month end."""
    year, month = shift_month(d.year, d.month, n)
    day = clamp_day_to_month(year, month, d.day)
    return d.replace(year=year, month=month, day=day)


def week_start(d: date) -> date:
    """Monday of the week containing d."""
    return d - timedelta(days=d.weekday())


def friendly_month(month_str: str) -> str:
    """Convert YYYY-MM to e.g. 'February 2026'."""
    d = parse_month(month_str)
    if d is None:
        return month_str
    return d.strftime("%B %Y")


def short_date(d: date) -> str:
    """e.g. 'Mar 15'."""
    return f"{d.strftime('%b')} {d.day}"


def date_range_for_period(period: str, ref: date | None = None) -> tuple[str, str]:
    """Return inclusive (from, to) YYYY-MM-DD strings for a named transaction period.

    Periods: 'today', 'current-week', 'current-month', 'last-month',
    'last-3-months'. Weeks run Monday to Sunday; 'last-3-months' covers the
    three whole months before the current one.
    """
    now = ref or today()
    if period == "today":
        start = end = now
    elif period == "current-week":
        start = week_start(now)
        end = start + timedelta(days=6)
    elif period == "current-month":
        start = now.replace(day=1)
        end = now.replace(day=calendar.monthrange(now.year, now.month)[1])
    elif period == "last-month":
        end = now.replace(day=1) - timedelta(days=1)
        start = end.replace(day=1)
    elif period == "last-3-months":
        end = now.replace(day=1) - timedelta(days=1)
        start = add_months(now.replace(day=1), -3)
    else:
        raise ValueError(f"Invalid period: {period}")
    return format_date(start), format_date(end)


def time_filter_range(time_filter: str, ref: date | None = None) -> tuple[date | None, date | None]:
    """Return (from, to) for the 'all' / 'week' / 'month' / 'year' filters.

    'all' returns (None, None); the others run from the start of the current
    week, month or year up to and including ref.
    """
    now = ref or today()
    if time_filter == "all":
        return None, None
    if time_filter == "week":
        return week_start(now), now
    if time_filter == "month":
        return now.replace(day=1), now
    if time_filter == "year":
        return now.replace(month=1, day=1), now
    raise ValueError(f"Invalid time filter: {time_filter}")


def format_display_date(date_str: str, fmt_key: str = "MM/DD/YYYY") -> str:
    """Convert a stored date (or ISO timestamp) to the user-facing display format."""
    if not date_str:
        return date_str
    d = to_date(date_str)
    if d is None:
        return date_str
    return d.strftime(_STRFTIME_MAP.get(fmt_key, "%m/%d/%Y"))


def parse_display_date(display_str: str, fmt_key: str) -> date | None:
    """Parse a date in the given display format. Returns None on failure.

    Falls back to ISO 8601 parse if the display format doesn't match.
    """
    if not display_str:
        return None
    fmt = _STRFTIME_MAP.get(fmt_key, "%m/%d/%Y")
    try:
        return datetime.strptime(display_str.strip(), fmt).date()
    except ValueError:
        return parse_date(display_str)
