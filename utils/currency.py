from utils.constants import CURRENCY_SYMBOLS, ZERO_DECIMAL_CURRENCIES


def format_currency(amount: float, currency: str = "VND") -> str:
    """Format an amount in the given currency, e.g. '1,250,000 ₫' or '$12.50'."""
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    sign = "-" if amount < 0 else ""
    if currency in ZERO_DECIMAL_CURRENCIES:
        body = f"{abs(amount):,.0f}"
        return f"{sign}{body} {symbol}"
    return f"{sign}{symbol}{abs(amount):,.2f}"


def short_amount(value: float) -> str:
    """Format a number compactly for chart axis labels, handling negatives."""
    sign = "-" if value < 0 else ""
    abs_val = abs(value)
    if abs_val >= 1_000_000_000:
        return f"{sign}{abs_val / 1_000_000_000:.1f}B"
    if abs_val >= 1_000_000:
        return f"{sign}{abs_val / 1_000_000:.1f}M"
    if abs_val >= 1_000:
        return f"{sign}{abs_val / 1_000:.0f}k"
    return f"{sign}{abs_val:.0f}"
