"""Domain error kinds. All of them are per-operation and retriable."""


class OrderDeskError(Exception):
    """Base class for every error raised by the order desk core."""


class ValidationError(OrderDeskError):
    """A malformed external order or product payload."""


class NotFoundError(OrderDeskError):
    """An unknown order, status, agent or product id."""

    def __init__(self, kind: str, key: object):
        super().__init__(f"{kind} {key!r} not found")
        self.kind = kind
        self.key = key


class ConflictError(OrderDeskError):
    """Another process got there first (order already assigned / already inserted)."""


class DatastoreError(OrderDeskError):
    """Persistence failure, wrapped from the storage driver."""


class OrderSourceError(OrderDeskError):
    """The external order source (Shopify) could not be reached or answered badly."""
