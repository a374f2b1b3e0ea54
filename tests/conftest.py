"""
Shared fixtures: an in-memory chain answering JSON-RPC calls, so nothing
touches the network.
"""

import copy
import time

import pytest

from evm_explorer.exceptions import RpcError, TransportError
from evm_explorer.session import ExplorerSession

WEI = 10 ** 18
SENDER = "0x" + "a1" * 20
RECIPIENT = "0x" + "b2" * 20


def block_hash(number: int) -> str:
    return "0x" + "b1" + f"{number:062x}"

def tx_hash(number: int, index: int) -> str:
    return "0x" + "7e" + f"{number:054x}{index:08x}"

def make_tx(number: int, index: int, value: int = WEI, to: str | None = RECIPIENT, pending: bool = False) -> dict:
    return {
        "hash": tx_hash(number, index),
        "blockHash": None if pending else block_hash(number),
        "blockNumber": None if pending else hex(number),
        "from": SENDER,
        "to": to,
        "value": hex(value),
        "nonce": hex(index),
        "gas": hex(21000),
        "gasPrice": hex(30 * 10 ** 9),
        "input": "0x",
        "transactionIndex": None if pending else hex(index),
    }

def make_block(number: int, tx_count: int = 3, timestamp: int | None = None) -> dict:
    if timestamp is None:
        timestamp = int(time.time()) - 30
    return {
        "number": hex(number),
        "hash": block_hash(number),
        "parentHash": block_hash(number - 1) if number > 0 else "0x" + "0" * 64,
        "timestamp": hex(timestamp),
        "gasUsed": hex(21000 * tx_count),
        "gasLimit": hex(30_000_000),
        "miner": "0x" + "c3" * 20,
        "baseFeePerGas": hex(10 ** 9),
        "transactions": [make_tx(number, i) for i in range(tx_count)],
    }

def make_receipt(number: int, index: int, status: str = "0x1") -> dict:
    return {
        "transactionHash": tx_hash(number, index),
        "blockNumber": hex(number),
        "status": status,
        "gasUsed": hex(21000),
        "contractAddress": None,
    }


class FakeChain:
    """Answers the eth_* methods the explorer uses from in-memory data"""

    def __init__(self, latest: int = 100, tx_per_block: int = 3):
        self.latest = latest
        self.blocks = {n: make_block(n, tx_per_block) for n in range(max(0, latest - 30), latest + 1)}
        self.receipts = {}
        self.balances = {}
        self.nonces = {}
        self.failing_blocks = set()
        self.rpc_errors = {}
        self.extra_transactions = {}

    def add_block(self, raw_block: dict) -> None:
        self.blocks[int(raw_block["number"], 16)] = raw_block

    def transactions(self) -> dict:
        found = {tx["hash"]: tx for block in self.blocks.values() for tx in block["transactions"]}
        found.update(self.extra_transactions)
        return found

    @staticmethod
    def _shape(raw_block: dict, full: bool) -> dict:
        raw_block = copy.deepcopy(raw_block)
        if not full:
            raw_block["transactions"] = [tx["hash"] for tx in raw_block["transactions"]]
        return raw_block

    def handle(self, method: str, params: list):
        if method in self.rpc_errors:
            raise RpcError(self.rpc_errors[method], code=-32000)

        if method == "eth_blockNumber":
            return hex(self.latest)
        if method == "eth_getBlockByNumber":
            number = int(params[0], 16)
            if number in self.failing_blocks:
                raise TransportError(f"connection reset fetching block {number}")
            raw_block = self.blocks.get(number)
            return self._shape(raw_block, params[1]) if raw_block else None
        if method == "eth_getBlockByHash":
            for raw_block in self.blocks.values():
                if raw_block["hash"] == params[0]:
                    return self._shape(raw_block, params[1])
            return None
        if method == "eth_getTransactionByHash":
            return copy.deepcopy(self.transactions().get(params[0]))
        if method == "eth_getTransactionReceipt":
            return copy.deepcopy(self.receipts.get(params[0]))
        if method == "eth_getBalance":
            return hex(self.balances.get(params[0], 0))
        if method == "eth_getTransactionCount":
            return hex(self.nonces.get(params[0], 0))
        raise RpcError(f"the method {method} does not exist/is not available", code=-32601)


class FakeRpc:
    """Stands in for RpcClient; records every (method, params) pair"""

    def __init__(self, chain: FakeChain):
        self.chain = chain
        self.calls = []

    async def call(self, method, params=None):
        params = list(params) if params is not None else []
        self.calls.append((method, params))
        return self.chain.handle(method, params)

    def methods(self) -> list:
        return [method for method, _ in self.calls]


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def chain():
    return FakeChain()

@pytest.fixture
def rpc(chain):
    return FakeRpc(chain)

@pytest.fixture
def session(rpc):
    return ExplorerSession(rpc)

@pytest.fixture
def parallel_session(rpc):
    return ExplorerSession(rpc, parallel_fetch=True)
