"""
Root of the storefront exception hierarchy.
"""


class FoodHubException(Exception):
    """
    Base class for catalog, cart storage, order and user errors.

    `message` is what a customer or admin gets to see; `details` carries the
    ids and reasons that go into the logs.
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        if not self.details:
            return f"{self.__class__.__name__}('{self.message}')"
        details_str = ', '.join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.__class__.__name__}('{self.message}', {details_str})"
