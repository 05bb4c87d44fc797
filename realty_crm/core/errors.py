"""
Exception types shared by the services and the API layer.

The API maps each of these to an HTTP status in realty_crm.api.deps.
"""

from typing import Optional


class CRMError(Exception):
    """Base class for every error raised on purpose by this package."""


class DataServiceError(CRMError):
    """
    The backend failed or rejected an operation on a collection.

    Raised by the data service; command handlers turn it into
    WriteFailure, the view-state store logs it and keeps old data.
    """

    def __init__(self, collection: str, operation: str, cause: Optional[Exception] = None):
        self.collection = collection
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} on {collection} failed: {cause}")


class ValidationFailure(CRMError):
    """Input rejected locally, before any backend call."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class WriteFailure(CRMError):
    """A user-initiated write was rejected by the backend."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(message)


class RecordNotFound(CRMError):
    """An update/delete targeted an id that does not exist."""

    def __init__(self, collection: str, record_id):
        self.collection = collection
        self.record_id = record_id
        self.message = f"{collection} record {record_id} not found"
        super().__init__(self.message)
