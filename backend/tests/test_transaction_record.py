from datetime import datetime

import pytest
from pydantic import ValidationError

from schemas.transaction_record import TransactionRecord


def test_payload_item_validates():
    record = TransactionRecord.model_validate({
        "id": 1,
        "title": "  Mens Casual Shirt ",
        "description": "Slim fit",
        "price": "250",
        "category": "men's clothing",
        "image": "https://example.com/1.jpg",
        "sold": True,
        "dateOfSale": "2022-03-05T10:00:00.000Z",
    })

    assert record.title == "Mens Casual Shirt"
    assert record.price == 250.0
    assert record.date_of_sale == datetime(2022, 3, 5, 10, 0, 0)
    assert record.date_of_sale.tzinfo is None
    assert not hasattr(record, "image")


def test_offset_dates_converted_to_utc():
    record = TransactionRecord.model_validate({
        "title": "Jacket",
        "price": 10,
        "dateOfSale": "2022-04-01T02:00:00+05:00",
    })

    assert record.date_of_sale == datetime(2022, 3, 31, 21, 0, 0)


def test_optional_fields_default():
    record = TransactionRecord.model_validate({
        "title": "Ring",
        "price": 5,
        "description": None,
        "sold": None,
        "date_of_sale": "2022-01-01T00:00:00Z",
    })

    assert record.description == ""
    assert record.sold is False
    assert record.id is None


@pytest.mark.parametrize("item", [
    {"price": 5, "dateOfSale": "2022-01-01T00:00:00Z"},
    {"title": "   ", "price": 5, "dateOfSale": "2022-01-01T00:00:00Z"},
    {"title": "Ring", "price": "cheap", "dateOfSale": "2022-01-01T00:00:00Z"},
    {"title": "Ring", "price": 5, "dateOfSale": "yesterday"},
    {"title": "Ring", "price": 5},
])
def test_invalid_items_rejected(item):
    with pytest.raises(ValidationError):
        TransactionRecord.model_validate(item)


def test_record_is_frozen():
    record = TransactionRecord.model_validate({
        "title": "Ring", "price": 5, "dateOfSale": "2022-01-01T00:00:00Z",
    })

    with pytest.raises(ValidationError):
        record.price = 6


def test_insert_mapping_covers_every_payload_column():
    from models.transaction import Transaction

    record = TransactionRecord.model_validate({
        "id": 9,
        "title": "Desk",
        "price": 120,
        "category": "home",
        "dateOfSale": "2022-03-01T00:00:00Z",
    })

    mapping = Transaction.insert_mapping(record)

    payload_columns = {c.name for c in Transaction.__table__.columns} - {"row_id"}
    assert set(mapping) == payload_columns
    assert mapping["date_of_sale"] == datetime(2022, 3, 1)
    assert mapping["sold"] is False
