from enum import Enum


class Currency(str, Enum):
    """
    Currencies the storefront can price in.

    Amounts are kept unrounded inside the cart and only rounded to the
    currency's minor unit at display/checkout time.
    """

    INR = "INR"
    USD = "USD"
    EUR = "EUR"

    def get_minor_units(self) -> int:
        """Number of decimal places of the smallest unit (paise, cents)."""
        return 2

    def get_symbol(self) -> str:
        match self:
            case Currency.INR:
                return "₹"
            case Currency.USD:
                return "$"
            case Currency.EUR:
                return "€"
