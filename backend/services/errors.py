"""
Recipe store errors.

Each error maps to one HTTP status in the API layer:
ValidationError -> 400, NotFoundError -> 404, StoreError -> 500.
"""


class RecipeStoreError(Exception):
    """Base class for every error raised by the recipe store."""

    status_code = 500

    def __init__(self, message):
        self.message = message
        super().__init__(message)

    def to_dict(self):
        return {'error': self.message}


class ValidationError(RecipeStoreError, ValueError):
    """Request data is missing or malformed. Raised before storage is touched."""

    status_code = 400


class NotFoundError(RecipeStoreError):
    status_code = 404


class StoreError(RecipeStoreError):
    """
    Connectivity, constraint or transaction failure.

    The message is safe to show to clients; the underlying database error is
    kept as __cause__ and only ever logged.
    """

    status_code = 500
