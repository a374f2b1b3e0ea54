from typing import Any, Optional


class ExplorerError(Exception):
    """Base class for every error the explorer surfaces to the UI layer."""

    def __init__(self, message: str, code: Optional[Any] = None):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
        }


class ConfigError(ExplorerError):
    pass


class TransportError(ExplorerError):
    """Network failure or a response body that is not JSON-RPC JSON"""
    pass


class RpcError(ExplorerError):
    """The node answered with an `error` object"""
    pass


class MalformedResponseError(ExplorerError):
    """A result is missing fields or has the wrong shape"""
    pass


class NotFoundError(ExplorerError):
    pass


class ValidationError(ExplorerError):
    """Search input that is not a block number, hash or address"""
    pass
