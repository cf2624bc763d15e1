from decimal import ROUND_HALF_UP, Decimal
from typing import Union

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "THB": "฿",
}

HIDDEN_AMOUNT = "••••••"


def currency_symbol(currency: str) -> str:
    """Symbol for a currency code, or the code itself when unknown."""
    return CURRENCY_SYMBOLS.get(currency, currency)


def format_currency(
    amount: Union[Decimal, float, int],
    currency: str = "THB",
    hide_amount: bool = False,
    show_symbol: bool = True,
    sign_display: str = "auto",
) -> str:
    """
    Format an amount as a whole-unit currency string, e.g. '-฿1,235'.

    sign_display: 'auto' (minus only), 'always' (+/-) or 'never'.
    """
    if hide_amount:
        return HIDDEN_AMOUNT

    value = Decimal(str(amount))
    whole = abs(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    formatted = f"{whole:,}"

    if sign_display == "always":
        sign = "+" if value >= 0 else "-"
    elif sign_display == "auto":
        sign = "-" if value < 0 else ""
    else:
        sign = ""

    if not show_symbol:
        return f"{sign}{formatted}"
    return f"{sign}{currency_symbol(currency)}{formatted}"
