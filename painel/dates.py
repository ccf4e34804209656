"""Date and money display helpers for painel.

Pure functions for pt-BR labels and formatting.
"""

from datetime import date

# Short month names as shown on the dashboard (pt-BR)
MONTH_LABELS = ("jan", "fev", "mar", "abr", "mai", "jun", "jul", "ago", "set", "out", "nov", "dez")


def month_label(month: int) -> str:
    """Get the pt-BR short label for a month.

    Args:
        month: Month number (1-12).

    Returns:
        Short month name (e.g., "fev").

    Raises:
        ValueError: If month is outside 1-12.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    return MONTH_LABELS[month - 1]


def format_brl(value: float) -> str:
    """Format an amount in Brazilian reais.

    Args:
        value: Amount in reais.

    Returns:
        Formatted string (e.g., "R$ 1.234,56" or "-R$ 10,00").
    """
    formatted = f"{abs(value):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    sign = "-" if value < 0 else ""
    return f"{sign}R$ {formatted}"


def format_br_date(value: date | None) -> str:
    """Format a date as DD/MM/YYYY, or "-" when missing."""
    if not isinstance(value, date):
        return "-"
    return value.strftime("%d/%m/%Y")
