from pydantic import BaseModel, Field
from typing import Annotated, Optional

HASH_PATTERN = r"^0x[0-9a-fA-F]{64}$"
ADDRESS_PATTERN = r"^0x[0-9a-fA-F]{40}$"

HashStr = Annotated[str, Field(pattern=HASH_PATTERN)]
AddressStr = Annotated[str, Field(pattern=ADDRESS_PATTERN)]


class Transaction(BaseModel):
    model_config = {
        "arbitrary_types_allowed": False,
    }

    hash: HashStr
    block_hash: Optional[HashStr] = None
    block_number: Optional[int] = None  # None while pending
    from_address: AddressStr
    to_address: Optional[AddressStr] = None  # None for contract creation
    value: int = Field(ge=0)
    nonce: int
    gas: int
    gas_price: Optional[int] = None
    input: str = "0x"
    transaction_index: Optional[int] = None

    @property
    def is_contract_creation(self) -> bool:
        return self.to_address is None

    @property
    def is_pending(self) -> bool:
        return self.block_number is None

class Receipt(BaseModel):
    model_config = {
        "arbitrary_types_allowed": False,
    }

    transaction_hash: HashStr
    block_number: int
    status: int  # 1 success, 0 reverted
    gas_used: int
    contract_address: Optional[AddressStr] = None

    @property
    def succeeded(self) -> bool:
        return self.status == 1

class AddressSummary(BaseModel):
    address: AddressStr
    balance: int = Field(ge=0)  # wei
    transaction_count: int = Field(ge=0)
