"""Error taxonomy for the order service.

Database failures are not wrapped here: SQLAlchemy exceptions propagate
unchanged and are mapped to responses in ``order_service.api.error_handlers``.
"""


class OrderServiceError(Exception):
    """Base exception carrying the HTTP status it should be reported with."""

    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"error": self.message}


class OrderNotFoundError(OrderServiceError):
    """No order row matches the requested identifier."""

    http_status = 404

    def __init__(self, order_id: int):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class DatabaseUnavailableError(OrderServiceError):
    """The relational store could not be reached at startup."""

    http_status = 503
