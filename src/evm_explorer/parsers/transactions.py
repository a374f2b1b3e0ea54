from ..utils import hex_to_int

def _optional_int(value):
    return hex_to_int(value) if value is not None else None

class TransactionParser:
    @staticmethod
    def parse_raw(raw_tx: dict) -> dict:
        return {
            'hash': raw_tx['hash'],
            'block_hash': raw_tx.get('blockHash'),
            'block_number': _optional_int(raw_tx.get('blockNumber')),
            'from_address': raw_tx['from'],
            'to_address': raw_tx.get('to'),
            'value': hex_to_int(raw_tx['value']),
            'nonce': hex_to_int(raw_tx['nonce']),
            'gas': hex_to_int(raw_tx['gas']),
            'gas_price': _optional_int(raw_tx.get('gasPrice')),
            'input': raw_tx.get('input', '0x'),
            'transaction_index': _optional_int(raw_tx.get('transactionIndex')),
        }

class ReceiptParser:
    @staticmethod
    def parse_raw(raw_receipt: dict) -> dict:
        return {
            'transaction_hash': raw_receipt['transactionHash'],
            'block_number': hex_to_int(raw_receipt['blockNumber']),
            # Pre-Byzantium receipts carry a state root instead of a status
            'status': hex_to_int(raw_receipt.get('status') or '0x0'),
            'gas_used': hex_to_int(raw_receipt['gasUsed']),
            'contract_address': raw_receipt.get('contractAddress'),
        }
