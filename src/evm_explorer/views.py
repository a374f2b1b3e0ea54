"""View-models for the list and detail panels.

Renderers are pure: they take already-fetched models and return pydantic
objects that templates (or the JSON API) display as-is. Nothing here performs
I/O.
"""
from typing import List, Literal, Optional, Union

from pydantic import BaseModel
from web3 import Web3

from .exceptions import ExplorerError
from .rpc_types import AddressSummary, Block, Receipt, Transaction
from .utils import shorten, time_ago, wei_to_eth

SHORT_LEN = 12
CONTRACT_CREATION_LABEL = "contract"


class BlockRow(BaseModel):
    number: int
    short_hash: str
    transaction_count: int
    age: str
    link: str

class TransactionRow(BaseModel):
    hash: str
    short_hash: str
    short_from: str
    short_to: str
    value_eth: int
    link: str

class BlockDetail(BaseModel):
    kind: Literal["block"] = "block"
    title: str
    number: int
    hash: str
    transaction_count: int
    gas_used: int
    age: str
    transactions: List[TransactionRow]

class TransactionDetail(BaseModel):
    kind: Literal["transaction"] = "transaction"
    title: str
    hash: str
    block_number: Optional[int]
    block_link: Optional[str]
    from_address: str
    to_address: str
    value_eth: int
    status: Literal["Success", "Fail", "Pending"]

class AddressDetail(BaseModel):
    kind: Literal["address"] = "address"
    title: str
    address: str
    checksum_address: str
    balance_eth: int
    transaction_count: int

class ErrorView(BaseModel):
    kind: Literal["error"] = "error"
    error: str
    message: str

class ExplorerOverview(BaseModel):
    """Everything the landing page shows before any search"""
    theme: str
    blocks: List[BlockRow] = []
    transactions: List[TransactionRow] = []
    blocks_error: Optional[ErrorView] = None
    transactions_error: Optional[ErrorView] = None

DetailView = Union[BlockDetail, TransactionDetail, AddressDetail, ErrorView]


def block_link(number: int) -> str:
    return f"/block/{number}"

def transaction_link(transaction_hash: str) -> str:
    return f"/tx/{transaction_hash}"

def render_block_row(block: Block, now: Optional[float] = None) -> BlockRow:
    return BlockRow(
        number=block.number,
        short_hash=shorten(block.hash, SHORT_LEN),
        transaction_count=block.transaction_count,
        age=time_ago(block.timestamp, now),
        link=block_link(block.number),
    )

def render_block_list(blocks: List[Block], now: Optional[float] = None) -> List[BlockRow]:
    return [render_block_row(block, now) for block in blocks]

def render_transaction_row(tx: Transaction) -> TransactionRow:
    return TransactionRow(
        hash=tx.hash,
        short_hash=shorten(tx.hash, SHORT_LEN),
        short_from=shorten(tx.from_address, SHORT_LEN),
        short_to=shorten(tx.to_address, SHORT_LEN) if tx.to_address else CONTRACT_CREATION_LABEL,
        value_eth=wei_to_eth(tx.value),
        link=transaction_link(tx.hash),
    )

def render_transaction_list(transactions: List[Transaction]) -> List[TransactionRow]:
    return [render_transaction_row(tx) for tx in transactions]

def render_block_detail(block: Block, now: Optional[float] = None) -> BlockDetail:
    return BlockDetail(
        title=f"Block #{block.number}",
        number=block.number,
        hash=block.hash,
        transaction_count=block.transaction_count,
        gas_used=block.gas_used,
        age=time_ago(block.timestamp, now),
        transactions=render_transaction_list(block.full_transactions),
    )

def receipt_status(receipt: Optional[Receipt]) -> str:
    if receipt is None:
        return "Pending"
    return "Success" if receipt.succeeded else "Fail"

def render_transaction_detail(tx: Transaction, receipt: Optional[Receipt]) -> TransactionDetail:
    return TransactionDetail(
        title=f"Tx {shorten(tx.hash, SHORT_LEN)}",
        hash=tx.hash,
        block_number=tx.block_number,
        block_link=block_link(tx.block_number) if tx.block_number is not None else None,
        from_address=tx.from_address,
        to_address=tx.to_address or CONTRACT_CREATION_LABEL,
        value_eth=wei_to_eth(tx.value),
        status=receipt_status(receipt),
    )

def render_address_detail(summary: AddressSummary) -> AddressDetail:
    return AddressDetail(
        title=f"Address {shorten(summary.address, SHORT_LEN)}",
        address=summary.address,
        checksum_address=Web3.to_checksum_address(summary.address),
        balance_eth=wei_to_eth(summary.balance),
        transaction_count=summary.transaction_count,
    )

def render_error(error: Union[ExplorerError, str]) -> ErrorView:
    if isinstance(error, ExplorerError):
        return ErrorView(error=type(error).__name__, message=error.message)
    return ErrorView(error="ExplorerError", message=error)
