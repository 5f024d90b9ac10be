# Database utilities package
from .store import SqlTransactionStore, TransactionStore, get_store
