"""Exception hierarchy for objstore-tools."""


class ObjstoreToolsError(Exception):
    """Base exception for all objstore-tools errors."""

    pass


class ValidationError(ObjstoreToolsError):
    """Raised when validation fails."""

    pass


class NotConnectedError(ObjstoreToolsError):
    """Raised when an operation is invoked before a successful connect."""

    pass


class ConnectionFailureError(ObjstoreToolsError):
    """Raised when the connection probe fails."""

    pass


class NotFoundError(ObjstoreToolsError):
    """Raised when a local file or a remote object is missing."""

    pass


class UnsupportedMethodError(ObjstoreToolsError):
    """Raised when a presigned URL is requested for an unsupported method."""

    pass


class RemoteFetchError(ObjstoreToolsError):
    """Raised when downloading a remote URL fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class BackendError(ObjstoreToolsError):
    """Raised when the storage backend reports any other failure."""

    pass
