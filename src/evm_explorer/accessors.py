from typing import Any, Optional, Protocol, Sequence

from loguru import logger

from .exceptions import MalformedResponseError
from .parsers import parse_result
from .rpc_types import Block, Receipt, Transaction
from .utils import hex_to_int


class RpcCaller(Protocol):
    async def call(self, method: str, params: Optional[Sequence[Any]] = None) -> Any: ...


def _quantity(value: Any, method: str) -> int:
    try:
        return hex_to_int(value)
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(f"{method} returned a non-hex quantity: {value!r}") from e


class ChainAccessors:
    """Typed wrappers mapping each chain query to its JSON-RPC method.

    Null results come back as None; client errors propagate unchanged.
    """

    def __init__(self, rpc: RpcCaller) -> None:
        self.rpc = rpc

    async def latest_block_number(self) -> int:
        return _quantity(await self.rpc.call("eth_blockNumber", []), "eth_blockNumber")

    async def block_by_number(self, number: int, full: bool) -> Optional[Block]:
        logger.debug(f"Fetching block with number: {number} (full={full})")
        raw_block = await self.rpc.call("eth_getBlockByNumber", [hex(number), full])
        if raw_block is None:
            return None
        return parse_result(Block, raw_block)

    async def block_by_hash(self, block_hash: str, full: bool) -> Optional[Block]:
        logger.debug(f"Fetching block with hash: {block_hash} (full={full})")
        raw_block = await self.rpc.call("eth_getBlockByHash", [block_hash, full])
        if raw_block is None:
            return None
        return parse_result(Block, raw_block)

    async def transaction(self, transaction_hash: str) -> Optional[Transaction]:
        raw_tx = await self.rpc.call("eth_getTransactionByHash", [transaction_hash])
        if raw_tx is None:
            return None
        return parse_result(Transaction, raw_tx)

    async def receipt(self, transaction_hash: str) -> Optional[Receipt]:
        raw_receipt = await self.rpc.call("eth_getTransactionReceipt", [transaction_hash])
        if raw_receipt is None:
            return None
        return parse_result(Receipt, raw_receipt)

    async def balance(self, address: str) -> int:
        return _quantity(await self.rpc.call("eth_getBalance", [address, "latest"]), "eth_getBalance")

    async def tx_count(self, address: str) -> int:
        return _quantity(
            await self.rpc.call("eth_getTransactionCount", [address, "latest"]),
            "eth_getTransactionCount",
        )
