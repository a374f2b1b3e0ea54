from typing import List, Optional, Union
from pydantic import BaseModel

from .transactions import AddressStr, HashStr, Transaction

class Block(BaseModel):
    model_config = {
        "arbitrary_types_allowed": False,
    }

    number: int
    hash: HashStr
    parent_hash: HashStr
    timestamp: int
    gas_used: int
    gas_limit: int
    miner: Optional[AddressStr] = None
    base_fee_per_gas: Optional[int] = None
    # Hash strings for hash-only fetches, full objects otherwise
    transactions: List[Union[Transaction, HashStr]] = []

    @property
    def transaction_count(self) -> int:
        return len(self.transactions)

    @property
    def full_transactions(self) -> List[Transaction]:
        return [tx for tx in self.transactions if isinstance(tx, Transaction)]
