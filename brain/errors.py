"""Error taxonomy for request decoding and task storage.

Each error carries the HTTP status it is reported with and a plain-text message.
"""


class BrainError(Exception):
    """Base class for every error the API reports to clients."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MalformedRequest(BrainError):
    """The client sent a request body or path the API cannot accept."""

    status_code = 400


class MalformedSyntax(MalformedRequest):
    def __init__(self, offset: int) -> None:
        super().__init__(f"Request body contains badly-formed JSON (at position {offset})")
        self.offset = offset


class TypeMismatch(MalformedRequest):
    def __init__(self, field: str, offset: int) -> None:
        super().__init__(
            f'Request body contains an invalid value for the "{field}" field (at position {offset})'
        )
        self.field = field
        self.offset = offset


class UnknownField(MalformedRequest):
    def __init__(self, field: str) -> None:
        super().__init__(f'Request body contains unknown field "{field}"')
        self.field = field


class EmptyBody(MalformedRequest):
    def __init__(self) -> None:
        super().__init__("Request body must not be empty")


class TrailingContent(MalformedRequest):
    def __init__(self) -> None:
        super().__init__("Request body must only contain a single JSON object")


class InvalidTaskId(MalformedRequest):
    def __init__(self, raw_id: str) -> None:
        super().__init__(f"Invalid task ID: {raw_id}")


class NotFound(BrainError):
    status_code = 404

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class UnsupportedMethod(BrainError):
    status_code = 501

    def __init__(self, method: str, route: str) -> None:
        super().__init__(f"Unsupported request method {method} to {route}")


class StorageError(BrainError):
    """Reading or writing the task directory failed."""


class CorruptFilename(StorageError):
    def __init__(self, filename: str) -> None:
        super().__init__(f"Task directory contains a file with a non-numeric name: {filename}")
        self.filename = filename


class CorruptRecord(StorageError):
    def __init__(self, filename: str) -> None:
        super().__init__(f"Task file {filename} does not contain a valid task")
        self.filename = filename
