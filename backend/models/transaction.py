"""
Transaction Model - One sales transaction row

Payload Field Mapping (seed source JSON):
  JSON Field     → DB Column       Notes
  ─────────────────────────────────────────────────────────────
  id             → id              Unique index (not the primary key)
  title          → title           Required, non-empty
  description    → description     Optional free text
  price          → price           Required
  category       → category        Indexed for grouping
  dateOfSale     → date_of_sale    Required, stored as naive UTC
  sold           → sold            Defaults to False
  (computed)     → row_id          Surrogate key, insertion order
"""
from models.database import db


class Transaction(db.Model):
    __tablename__ = 'transactions'

    # === Surrogate Key (insertion order) ===
    row_id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    # === Payload Fields ===
    id = db.Column(db.Integer, unique=True, index=True)
    title = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text)
    price = db.Column(db.Float, nullable=False)
    category = db.Column(db.String(100), index=True)
    date_of_sale = db.Column(db.DateTime, index=True, nullable=False)
    sold = db.Column(db.Boolean, nullable=False, default=False)

    @staticmethod
    def insert_mapping(record):
        """Column values for a bulk insert of one validated TransactionRecord."""
        return {
            'id': record.id,
            'title': record.title,
            'description': record.description,
            'price': record.price,
            'category': record.category,
            'date_of_sale': record.date_of_sale,
            'sold': record.sold,
        }

    def to_dict(self):
        """Convert to dictionary for JSON serialization (payload field names)."""
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'price': self.price,
            'category': self.category,
            'dateOfSale': self.date_of_sale.isoformat() + 'Z' if self.date_of_sale else None,
            'sold': bool(self.sold),
        }

    def __repr__(self):
        return f"<Transaction id={self.id} title={self.title!r} price={self.price}>"
