import asyncio
import time
from typing import Any, Optional, Sequence

from aiohttp import ClientError, ClientSession, ClientTimeout
from loguru import logger

from .exceptions import RpcError, TransportError
from .metrics import RPC_ERRORS, RPC_LATENCY, RPC_REQUESTS


class RpcClient:
    """JSON-RPC 2.0 client for a single HTTP endpoint.

    Every call is one POST (no batching). Request ids start at 1 and grow by
    one per call across all methods for the lifetime of the client.
    """

    def __init__(
        self,
        rpc_url: str,
        chain_name: str = "ethereum",
        session: Optional[ClientSession] = None,
        timeout: Optional[float] = None,
    ) -> None:
        logger.info(f"Initializing RpcClient for chain {chain_name} with RPC URL: {rpc_url}")
        self.rpc_url = rpc_url
        self.chain_name = chain_name
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None
        self._request_id = 0

    @property
    def last_request_id(self) -> int:
        return self._request_id

    def _next_request_id(self) -> int:
        self._request_id += 1
        return self._request_id

    def _get_session(self) -> ClientSession:
        if self._session is None or self._session.closed:
            self._session = ClientSession(timeout=ClientTimeout(total=self.timeout))
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> "RpcClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _record_error(self, method: str) -> None:
        RPC_ERRORS.labels(chain=self.chain_name, method=method).inc()

    async def call(self, method: str, params: Optional[Sequence[Any]] = None) -> Any:
        """Send a single JSON-RPC request and return its `result` verbatim

        Args:
            method (str): JSON-RPC method name, e.g. eth_blockNumber
            params (Sequence): Positional parameters

        Returns:
            Any: The `result` field, which may be None

        Raises:
            TransportError: Network failure or a body that is not a JSON object
            RpcError: The node returned an `error` object
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": list(params) if params is not None else [],
            "id": self._next_request_id(),
        }
        status = None
        start_time = time.time()
        RPC_REQUESTS.labels(chain=self.chain_name, method=method).inc()

        try:
            session = self._get_session()
            async with session.post(
                self.rpc_url,
                json=payload,
                headers={"Content-Type": "application/json"},
            ) as response:
                status = response.status
                data = await response.json(content_type=None)
        except (ClientError, asyncio.TimeoutError) as e:
            self._record_error(method)
            logger.error(f"Transport failure calling {method}: {type(e).__name__}: {str(e)}")
            raise TransportError(f"Request to {method} failed: {e}") from e
        except ValueError as e:
            self._record_error(method)
            logger.error(f"Non-JSON response to {method} (HTTP {status}): {str(e)}")
            raise TransportError(f"Response to {method} is not valid JSON (HTTP {status})") from e
        finally:
            RPC_LATENCY.labels(chain=self.chain_name, method=method).observe(time.time() - start_time)

        if not isinstance(data, dict):
            self._record_error(method)
            logger.error(f"Unexpected response to {method}: {data!r}")
            raise TransportError(f"Response to {method} is not a JSON-RPC object (HTTP {status})")

        error = data.get("error")
        if error is not None:
            self._record_error(method)
            if isinstance(error, dict):
                message = error.get("message") or "Unknown RPC error"
                code = error.get("code")
            else:
                message, code = str(error), None
            logger.warning(f"RPC error from {method} (id {payload['id']}): {message}")
            raise RpcError(message, code=code)

        return data.get("result")

