"""Application errors. Each carries its HTTP status and JSON body."""

from typing import Any, Dict, Optional


class PostboardError(Exception):
    status_code = 400
    key = "error"
    message = "Request failed"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {self.key: self.message}


class ValidationError(PostboardError):
    """Field-level input errors. Raised before any storage call."""

    message = "Validation failed"

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.errors)


class PostNotFoundError(PostboardError):
    status_code = 404
    key = "nopost"
    message = "Post was not found with that ID"


class CommentNotFoundError(PostboardError):
    status_code = 404
    key = "nocomment"
    message = "Comment does not exist"


class NotAuthorizedError(PostboardError):
    status_code = 401
    key = "notauthorized"
    message = "User not authorized"


class AlreadyLikedError(PostboardError):
    key = "alreadyLiked"
    message = "User already liked this post"


class NotLikedError(PostboardError):
    key = "notLiked"
    message = "User has not yet liked this post"


class NoPostsError(PostboardError):
    key = "noposts"
    message = "No posts were found"

    def __init__(self, internal_error: Optional[str] = None):
        self.internal_error = internal_error
        super().__init__()

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        if self.internal_error:
            body["internalError"] = self.internal_error
        return body


class StorageError(PostboardError):
    """The database rejected or failed an operation."""

    status_code = 500
    key = "internalError"
    message = "Database operation failed"
    retryable = False

    def to_dict(self) -> Dict[str, Any]:
        return {self.key: self.message, "retryable": self.retryable}


class StorageUnavailableError(StorageError):
    """The database could not be reached. Safe to retry later."""

    status_code = 503
    message = "Database is unavailable"
    retryable = True
