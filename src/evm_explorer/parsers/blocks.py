from ..rpc_types import Transaction
from ..utils import hex_to_int
from .transactions import TransactionParser

class BlockParser:
    @staticmethod
    def parse_raw(raw_block: dict) -> dict:
        transactions = []
        for tx in raw_block['transactions']:
            if isinstance(tx, str):
                transactions.append(tx)
            else:
                transactions.append(Transaction(**TransactionParser.parse_raw(tx)))

        return {
            'number': hex_to_int(raw_block['number']),
            'hash': raw_block['hash'],
            'parent_hash': raw_block['parentHash'],
            'timestamp': hex_to_int(raw_block['timestamp']),
            'gas_used': hex_to_int(raw_block['gasUsed']),
            'gas_limit': hex_to_int(raw_block['gasLimit']),
            'miner': raw_block.get('miner'),
            'base_fee_per_gas': hex_to_int(raw_block['baseFeePerGas']) if raw_block.get('baseFeePerGas') else None,
            'transactions': transactions,
        }
