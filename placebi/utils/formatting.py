"""
Formatting helpers for amounts shown in the UI.
"""


def format_currency(value: float, currency: str) -> str:
    """Format an amount with no decimals and space-grouped thousands (1 500 000 XOF)."""
    grouped = f"{abs(value):,.0f}".replace(",", " ")
    sign = "-" if round(value) < 0 else ""
    return f"{sign}{grouped} {currency}"


def format_percent(value: float, decimals: int = 1) -> str:
    """Format a number as a percentage (e.g. 23.5%)."""
    return f"{value:.{decimals}f}%"
