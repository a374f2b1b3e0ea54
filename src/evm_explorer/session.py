import asyncio
from typing import AsyncIterator, List, Optional, Union

from dynaconf import Dynaconf
from loguru import logger

from .accessors import ChainAccessors, RpcCaller
from .client import RpcClient
from .exceptions import ExplorerError, NotFoundError
from .rpc_types import AddressSummary, Block, Transaction
from .theme import ThemePreference
from .utils import shorten
from .views import (
    AddressDetail,
    BlockDetail,
    BlockRow,
    ExplorerOverview,
    TransactionDetail,
    TransactionRow,
    render_address_detail,
    render_block_detail,
    render_block_list,
    render_error,
    render_transaction_detail,
    render_transaction_list,
)

# JSON-RPC block quantities are unsigned 64-bit
MAX_BLOCK_NUMBER = 2 ** 64 - 1


class ExplorerSession:
    """Fetch-then-render sequences behind every list and detail panel.

    Owns the RPC client (and with it the request id counter) and the list
    sizes. Each call fetches fresh data; nothing is cached between calls.
    """

    def __init__(
        self,
        rpc: RpcCaller,
        latest_blocks: int = 12,
        scan_blocks: int = 15,
        max_transactions: int = 20,
        transactions_per_block: int = 6,
        parallel_fetch: bool = False,
    ) -> None:
        self.rpc = rpc
        self.accessors = ChainAccessors(rpc)
        self.latest_blocks = latest_blocks
        self.scan_blocks = scan_blocks
        self.max_transactions = max_transactions
        self.transactions_per_block = transactions_per_block
        self.parallel_fetch = parallel_fetch

    @classmethod
    def from_settings(cls, settings: Dynaconf, rpc: Optional[RpcCaller] = None) -> "ExplorerSession":
        if rpc is None:
            rpc = RpcClient(
                settings.chain.rpc_url,
                chain_name=settings.chain.name,
                timeout=settings.chain.request_timeout,
            )
        return cls(
            rpc,
            latest_blocks=settings.explorer.latest_blocks,
            scan_blocks=settings.explorer.scan_blocks,
            max_transactions=settings.explorer.max_transactions,
            transactions_per_block=settings.explorer.transactions_per_block,
            parallel_fetch=settings.explorer.parallel_fetch,
        )

    async def close(self) -> None:
        close = getattr(self.rpc, "close", None)
        if close is not None:
            await close()

    async def _iter_blocks(self, numbers: List[int], full: bool) -> AsyncIterator[Block]:
        """Yield blocks in the order of `numbers`, stopping at the first failure

        Blocks the node reports as null are skipped. Sequential mode fetches
        lazily, so a consumer that stops early saves the remaining calls.
        """
        if self.parallel_fetch:
            results = await asyncio.gather(
                *(self.accessors.block_by_number(number, full) for number in numbers),
                return_exceptions=True,
            )
        else:
            results = None

        for index, number in enumerate(numbers):
            if results is not None:
                result = results[index]
                if isinstance(result, BaseException) and not isinstance(result, ExplorerError):
                    raise result
            else:
                try:
                    result = await self.accessors.block_by_number(number, full)
                except ExplorerError as e:
                    result = e

            if isinstance(result, ExplorerError):
                logger.warning(f"Stopping block scan at block {number}: {result.message}")
                return
            if result is None:
                logger.warning(f"Block {number} not found, skipping")
                continue
            yield result

    async def _recent_numbers(self, count: int) -> List[int]:
        latest = await self.accessors.latest_block_number()
        return [latest - i for i in range(count) if latest - i >= 0]

    async def load_latest_blocks(self, count: Optional[int] = None) -> List[BlockRow]:
        count = self.latest_blocks if count is None else count
        numbers = await self._recent_numbers(count)
        blocks = [block async for block in self._iter_blocks(numbers, full=False)]
        logger.info(f"Loaded {len(blocks)} latest blocks")
        return render_block_list(blocks)

    async def scan_recent_transactions(
        self,
        blocks_to_scan: Optional[int] = None,
        max_transactions: Optional[int] = None,
        per_block: Optional[int] = None,
    ) -> List[TransactionRow]:
        """Collect the trailing transactions of the most recent blocks

        Walks down from the chain tip taking the last `per_block` transactions
        of each block, until `max_transactions` are found or `blocks_to_scan`
        blocks have been read. Rows keep descending block order, then the
        original order within each block.
        """
        blocks_to_scan = self.scan_blocks if blocks_to_scan is None else blocks_to_scan
        max_transactions = self.max_transactions if max_transactions is None else max_transactions
        per_block = self.transactions_per_block if per_block is None else per_block

        numbers = await self._recent_numbers(blocks_to_scan)
        found: List[Transaction] = []
        async for block in self._iter_blocks(numbers, full=True):
            for tx in block.full_transactions[-per_block:]:
                found.append(tx)
                if len(found) >= max_transactions:
                    break
            if len(found) >= max_transactions:
                break

        logger.info(f"Collected {len(found)} recent transactions")
        return render_transaction_list(found)

    async def initialize(self, theme: ThemePreference) -> ExplorerOverview:
        overview = ExplorerOverview(theme=theme.apply(theme.current))

        try:
            overview.blocks = await self.load_latest_blocks()
        except ExplorerError as e:
            logger.error(f"Failed to load latest blocks: {e.message}")
            overview.blocks_error = render_error(e)

        try:
            overview.transactions = await self.scan_recent_transactions()
        except ExplorerError as e:
            logger.error(f"Failed to scan recent transactions: {e.message}")
            overview.transactions_error = render_error(e)

        return overview

    async def show_block(self, identifier: Union[int, str]) -> BlockDetail:
        """Block detail by number or by hash, with full transactions"""
        if isinstance(identifier, int):
            if not 0 <= identifier <= MAX_BLOCK_NUMBER:
                raise NotFoundError(f"Block #{identifier} not found")
            block = await self.accessors.block_by_number(identifier, True)
            label = f"#{identifier}"
        else:
            block = await self.accessors.block_by_hash(identifier, True)
            label = identifier

        if block is None:
            raise NotFoundError(f"Block {label} not found")
        return render_block_detail(block)

    async def show_block_number(self, digits: str) -> BlockDetail:
        """Block detail for a decimal number of any length"""
        significant = digits.lstrip("0") or "0"
        # int() refuses strings past the interpreter's digit limit
        if len(significant) > len(str(MAX_BLOCK_NUMBER)):
            raise NotFoundError(f"Block #{shorten(significant)} not found")
        return await self.show_block(int(significant))

    async def show_transaction(self, transaction_hash: str) -> TransactionDetail:
        tx = await self.accessors.transaction(transaction_hash)
        if tx is None:
            raise NotFoundError(f"Transaction {transaction_hash} not found")
        receipt = await self.accessors.receipt(transaction_hash)
        return render_transaction_detail(tx, receipt)

    async def show_address(self, address: str) -> AddressDetail:
        balance = await self.accessors.balance(address)
        transaction_count = await self.accessors.tx_count(address)
        summary = AddressSummary(address=address, balance=balance, transaction_count=transaction_count)
        return render_address_detail(summary)
