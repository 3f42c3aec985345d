from enum import Enum


class OrderStatus(str, Enum):
    PLACED = "placed"                 # Written by checkout
    IN_PROGRESS = "In Progress"       # Kitchen is preparing the order (admin)
    DELIVERED = "Delivered"           # Handed over to the customer (admin)
