"""
Pydantic model for inbound transaction payloads (seed source items).

Key features:
- frozen=True: immutable after validation
- populate_by_name=True: accepts both `dateOfSale` and `date_of_sale`
- extra='ignore': undeclared payload fields (e.g. `image`) are dropped
- dateOfSale normalized to naive UTC at the boundary
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TransactionRecord(BaseModel):
    """
    One transaction as delivered by the seed source.

    Invariant: after validation, date_of_sale is a naive datetime in UTC,
    matching how the transactions table stores it.
    """
    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        populate_by_name=True,
        extra='ignore',
    )

    id: Optional[int] = None
    title: str = Field(min_length=1)
    description: str = ''
    price: float
    category: Optional[str] = None
    date_of_sale: datetime = Field(alias='dateOfSale')
    sold: bool = False

    @field_validator('description', mode='before')
    @classmethod
    def none_description_to_empty(cls, v):
        return '' if v is None else v

    @field_validator('sold', mode='before')
    @classmethod
    def none_sold_to_false(cls, v):
        return False if v is None else v

    @field_validator('date_of_sale', mode='after')
    @classmethod
    def to_naive_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v
        return v.astimezone(timezone.utc).replace(tzinfo=None)
