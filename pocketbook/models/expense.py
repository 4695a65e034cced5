from ..extensions import db
from ._base import money, new_id, utcnow


class Expense(db.Model):
    __tablename__ = "expenses"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = db.Column(
        db.String(36), db.ForeignKey("expense_categories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    subcategory_id = db.Column(
        db.String(36), db.ForeignKey("expense_subcategories.id", ondelete="SET NULL"), nullable=True
    )
    amount = db.Column(db.Numeric(12, 2), nullable=False)     # in the home currency
    date = db.Column(db.Date, nullable=False, index=True)
    note = db.Column(db.Text)

    # Set when the amount was converted from a foreign currency
    original_currency = db.Column(db.String(3))
    original_amount = db.Column(db.Numeric(12, 2))
    exchange_rate = db.Column(db.Numeric(14, 6))

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    category = db.relationship("ExpenseCategory", lazy="joined")
    subcategory = db.relationship("ExpenseSubcategory", lazy="joined")

    def serialize(self):
        return {
            "id": self.id,
            "category_id": self.category_id,
            "category_name": self.category.name if self.category else None,
            "subcategory_id": self.subcategory_id,
            "subcategory_name": self.subcategory.name if self.subcategory else None,
            "amount": money(self.amount),
            "date": self.date.isoformat(),
            "note": self.note,
            "original_currency": self.original_currency,
            "original_amount": money(self.original_amount),
            "exchange_rate": float(self.exchange_rate) if self.exchange_rate is not None else None,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
