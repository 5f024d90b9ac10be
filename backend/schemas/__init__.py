# API Schema Package
from .transaction_record import TransactionRecord

__all__ = [
    'TransactionRecord',
]
