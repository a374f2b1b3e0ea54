import re
from enum import Enum
from typing import Optional

from loguru import logger

from .exceptions import ExplorerError, ValidationError
from .rpc_types import ADDRESS_PATTERN, HASH_PATTERN
from .session import ExplorerSession
from .views import DetailView, render_error

NUMBER_RE = re.compile(r"^[0-9]+$")
HASH_RE = re.compile(HASH_PATTERN)
ADDRESS_RE = re.compile(ADDRESS_PATTERN)

UNRECOGNIZED_MESSAGE = "Unrecognized search input"


class QueryKind(Enum):
    EMPTY = "empty"
    BLOCK_NUMBER = "block_number"
    HASH = "hash"
    ADDRESS = "address"
    UNRECOGNIZED = "unrecognized"

def classify(raw: str) -> QueryKind:
    """Decide what a search box entry names, checked in priority order"""
    query = raw.strip()
    if not query:
        return QueryKind.EMPTY
    if NUMBER_RE.fullmatch(query):
        return QueryKind.BLOCK_NUMBER
    if HASH_RE.fullmatch(query):
        return QueryKind.HASH
    if ADDRESS_RE.fullmatch(query):
        return QueryKind.ADDRESS
    return QueryKind.UNRECOGNIZED


class SearchDispatcher:
    """Route search input to the matching detail view.

    A 32-byte hash may name a block or a transaction; the input alone cannot
    tell them apart, so the block lookup is tried first and the transaction
    lookup is used when no block has that hash.
    """

    def __init__(self, session: ExplorerSession) -> None:
        self.session = session

    async def dispatch(self, raw: str) -> Optional[DetailView]:
        query = raw.strip()
        kind = classify(query)
        if kind is QueryKind.EMPTY:
            return None

        logger.info(f"Search {query!r} classified as {kind.value}")
        try:
            return await self.resolve(kind, query)
        except ExplorerError as e:
            logger.warning(f"Search {query!r} failed: {type(e).__name__}: {e.message}")
            return render_error(e)

    async def resolve(self, kind: QueryKind, query: str) -> DetailView:
        if kind is QueryKind.BLOCK_NUMBER:
            return await self.session.show_block_number(query)

        if kind is QueryKind.HASH:
            block = await self.session.accessors.block_by_hash(query, False)
            if block is not None:
                return await self.session.show_block(query)
            return await self.session.show_transaction(query)

        if kind is QueryKind.ADDRESS:
            return await self.session.show_address(query)

        raise ValidationError(UNRECOGNIZED_MESSAGE)
