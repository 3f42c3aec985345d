from enum import Enum


class PaymentMethod(str, Enum):
    CARD = "card"
    UPI = "upi"
    COD = "cod"  # Cash on delivery
