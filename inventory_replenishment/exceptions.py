def _merge_details(details, **values):
    """Add the non-empty keyword values to a copy of details."""
    merged = dict(details or {})
    merged.update({key: value for key, value in values.items() if value is not None})
    return merged or None


class ReplenishmentError(Exception):
    """Base exception for Inventory Replenishment errors."""

    def __init__(self, message=None, code=None, details=None):
        """Initialize the exception.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
        """
        self.message = message or "An error occurred in the Inventory Replenishment system"
        self.code = code
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def to_dict(self):
        """Convert the exception to a dictionary."""
        error_dict = {
            'error': self.__class__.__name__,
            'message': self.message,
        }

        if self.code:
            error_dict['code'] = self.code

        if self.details:
            error_dict['details'] = self.details

        return error_dict


class ConfigError(ReplenishmentError):
    """Raised when a setting is missing or cannot be parsed."""

    def __init__(self, message=None, code=None, details=None, section=None, key=None):
        super().__init__(
            message or "Configuration error",
            code,
            _merge_details(details, section=section, key=key)
        )


class DatabaseError(ReplenishmentError):
    """Raised when the database engine cannot be set up."""

    def __init__(self, message=None, code=None, details=None):
        super().__init__(message or "Database error", code, details)


class ValidationError(ReplenishmentError):
    """Raised for invalid operation arguments such as negative safety stock."""

    def __init__(self, message=None, code=None, details=None, field=None, value=None):
        super().__init__(
            message or "Validation error",
            code,
            _merge_details(details, field=field, value=value)
        )


class ForecastError(ReplenishmentError):
    """Raised when a product forecast cannot be generated or stored."""

    def __init__(self, message=None, code=None, details=None, product_id=None):
        self.product_id = product_id
        super().__init__(
            message or "Forecasting error",
            code,
            _merge_details(details, product_id=product_id)
        )


class OrderError(ReplenishmentError):
    """Raised when a purchase order cannot be created."""

    def __init__(self, message=None, code=None, details=None, supplier_id=None):
        self.supplier_id = supplier_id
        super().__init__(
            message or "Order error",
            code,
            _merge_details(details, supplier_id=supplier_id)
        )


class NotFoundError(ReplenishmentError):
    """Raised when a product or forecast row does not exist."""

    def __init__(self, message=None, code=None, details=None, resource=None, resource_id=None):
        if message is None and resource is not None:
            message = f"{resource} with ID {resource_id} not found"

        super().__init__(
            message or "Resource not found",
            code,
            _merge_details(details, resource=resource, resource_id=resource_id)
        )
