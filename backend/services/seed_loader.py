"""
Seed Loader - replaces the transaction collection from the seed source

Pipeline:
1. Fetch the JSON array (TransactionSourceClient, bounded + retried)
2. Validate every item as a TransactionRecord (all-or-nothing)
3. Replace the table contents in one database transaction

A failure at any step leaves the existing data untouched. Seeding twice with
the same payload produces the same final contents.
"""

import logging
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from db.store import TransactionStore, get_store
from schemas.transaction_record import TransactionRecord
from services.transaction_source_client import SeedFetchError, TransactionSourceClient

logger = logging.getLogger('seed')


class SeedPayloadError(Exception):
    """An item of the seed payload failed validation."""

    def __init__(self, message: str, index: int, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.index = index
        self.errors = errors or []


@dataclass
class SeedResult:
    inserted: int
    deleted: int
    source_url: str
    elapsed_ms: int

    def to_dict(self):
        return asdict(self)


def parse_payload(items: List[Any]) -> List[TransactionRecord]:
    """
    Validate every payload item; the first invalid item aborts the seed.

    Raises:
        SeedPayloadError: with the index of the offending item
    """
    records = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise SeedPayloadError(
                f"Item {index} is {type(item).__name__}, expected an object",
                index=index,
            )
        try:
            records.append(TransactionRecord.model_validate(item))
        except PydanticValidationError as e:
            errors = [
                {'field': '.'.join(str(p) for p in err['loc']), 'message': err['msg']}
                for err in e.errors()
            ]
            raise SeedPayloadError(f"Item {index} failed validation", index=index, errors=errors)
    return records


def seed_transactions(
    client: Optional[TransactionSourceClient] = None,
    store: Optional[TransactionStore] = None,
) -> SeedResult:
    """
    Fetch the seed payload and atomically replace all transactions.

    Raises:
        SeedFetchError: upstream unreachable or returned a non-array body
        SeedPayloadError: an item failed validation
        sqlalchemy.exc.SQLAlchemyError: the replacement failed (rolled back)
    """
    start = time.perf_counter()
    client = client or TransactionSourceClient()
    store = store or get_store()

    logger.info(f"Seeding transactions from {client.url}")
    response = client.fetch()
    records = parse_payload(response.data)

    counts = store.replace_all(records)
    elapsed_ms = int((time.perf_counter() - start) * 1000)

    logger.info(
        f"Seed complete: deleted={counts['deleted']} inserted={counts['inserted']} "
        f"elapsed_ms={elapsed_ms}"
    )
    return SeedResult(
        inserted=counts['inserted'],
        deleted=counts['deleted'],
        source_url=client.url,
        elapsed_ms=elapsed_ms,
    )


__all__ = [
    'SeedFetchError',
    'SeedPayloadError',
    'SeedResult',
    'parse_payload',
    'seed_transactions',
]
