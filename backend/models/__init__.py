"""
Models package - SQLAlchemy models
"""
from models.database import db
from models.transaction import Transaction

__all__ = [
    'db',
    'Transaction',
]
