from ..extensions import db
from ._base import money, new_id, utcnow


class BudgetShift(db.Model):
    """Budget moved from one category to another for a single month."""

    __tablename__ = "budget_shifts"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    year = db.Column(db.Integer, nullable=False)
    month = db.Column(db.Integer, nullable=False)              # 1-12
    from_category_id = db.Column(
        db.String(36), db.ForeignKey("expense_categories.id", ondelete="CASCADE"), nullable=False
    )
    to_category_id = db.Column(
        db.String(36), db.ForeignKey("expense_categories.id", ondelete="CASCADE"), nullable=False
    )
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    note = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    from_category = db.relationship("ExpenseCategory", foreign_keys=[from_category_id], lazy="joined")
    to_category = db.relationship("ExpenseCategory", foreign_keys=[to_category_id], lazy="joined")

    __table_args__ = (db.Index("ix_budget_shifts_user_period", "user_id", "year", "month"),)

    def serialize(self):
        return {
            "id": self.id,
            "year": self.year,
            "month": self.month,
            "from_category_id": self.from_category_id,
            "from_category_name": self.from_category.name if self.from_category else None,
            "to_category_id": self.to_category_id,
            "to_category_name": self.to_category.name if self.to_category else None,
            "amount": money(self.amount),
            "note": self.note,
            "created_at": self.created_at.isoformat(),
        }
