"""
Domain errors raised by services and rendered by the API exception handlers.
"""
from fastapi import status


class GroupSplitError(Exception):
    """Base error carrying a user-facing message and an HTTP status."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthorized(GroupSplitError):
    """Missing or invalid caller credential."""
    status_code = status.HTTP_401_UNAUTHORIZED


class NotAMember(GroupSplitError):
    """Caller is authenticated but does not belong to the group."""
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Not a member of this group"):
        super().__init__(message)


class NotFound(GroupSplitError):
    status_code = status.HTTP_404_NOT_FOUND


class ValidationError(GroupSplitError):
    """Input the caller has to correct; nothing was written."""
    status_code = status.HTTP_400_BAD_REQUEST


class StorageError(GroupSplitError):
    """Underlying data store read or write failure."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class GroupDataUnavailable(StorageError):
    """Member or expense data for a group could not be retrieved."""

    def __init__(self, message: str = "Failed to fetch data"):
        super().__init__(message)
