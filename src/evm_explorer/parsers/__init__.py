from typing import Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as ModelValidationError

from ..exceptions import MalformedResponseError
from ..rpc_types import Block, Receipt, Transaction
from .blocks import BlockParser
from .transactions import ReceiptParser, TransactionParser

# Mapping to connect types with their parsers
PARSERS = {
    Block: BlockParser,
    Receipt: ReceiptParser,
    Transaction: TransactionParser,
}

ModelT = TypeVar("ModelT", bound=BaseModel)

def parse_result(model_class: Type[ModelT], raw: object) -> ModelT:
    """Build a model from a raw RPC result, failing fast on a malformed shape

    Args:
        model_class: One of the keys of PARSERS
        raw: The `result` field of the RPC response

    Returns:
        An instance of model_class

    Raises:
        MalformedResponseError: If a field is missing, not hex, or fails validation
    """
    if not isinstance(raw, dict):
        raise MalformedResponseError(f"Expected an object for {model_class.__name__}, got {type(raw).__name__}")

    parser = PARSERS[model_class]
    try:
        return model_class(**parser.parse_raw(raw))
    except KeyError as e:
        raise MalformedResponseError(f"{model_class.__name__} is missing field {e}") from e
    except (ModelValidationError, TypeError, ValueError) as e:
        raise MalformedResponseError(f"Malformed {model_class.__name__}: {e}") from e
