from .blocks import Block
from .transactions import (
    ADDRESS_PATTERN,
    HASH_PATTERN,
    AddressSummary,
    Receipt,
    Transaction,
)

__all__ = [
    "ADDRESS_PATTERN",
    "HASH_PATTERN",
    "AddressSummary",
    "Block",
    "Receipt",
    "Transaction",
]
