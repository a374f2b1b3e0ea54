from .client import RpcClient
from .exceptions import (
    ConfigError,
    ExplorerError,
    MalformedResponseError,
    NotFoundError,
    RpcError,
    TransportError,
    ValidationError,
)
from .search import QueryKind, SearchDispatcher, classify
from .session import ExplorerSession

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "ExplorerError",
    "ExplorerSession",
    "MalformedResponseError",
    "NotFoundError",
    "QueryKind",
    "RpcClient",
    "RpcError",
    "SearchDispatcher",
    "TransportError",
    "ValidationError",
    "classify",
]
