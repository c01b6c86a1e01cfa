from enum import Enum


class ErrorKind(Enum):
    """Every way a curl run can fail"""
    UNRECOGNISABLE_PROTOCOL = "unrecognisable protocol"
    BAD_HTTP_METHOD = "bad http method"
    BODY_NOT_ALLOWED_METHOD = "body not allowed for method"
    NO_CONTENT_TYPE_HEADER = "no Content-Type header"
    NO_BODY = "no body"
    SOCKET_CONNECTION = "socket connection error"


class CurlError(Exception):
    """Raised for any failure, discriminated by `kind`"""

    def __init__(self, kind, message=None):
        super().__init__(message or kind.value)
        self.kind = kind

    def __repr__(self):
        return f"CurlError({self.kind.name}, {str(self)!r})"
