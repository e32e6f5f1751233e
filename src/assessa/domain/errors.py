# src/assessa/domain/errors.py


class InvalidDealInputError(ValueError):
    """Deal inputs that would make the financial model meaningless (price <= 0, term <= 0, ...)."""


class PropertyNotFoundError(LookupError):
    """Raised by history repositories when a property id is unknown."""

    def __init__(self, property_id: str):
        super().__init__(f"property not found: {property_id}")
        self.property_id = property_id
