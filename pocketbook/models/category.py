from ..extensions import db
from ._base import money, new_id, utcnow


class ExpenseCategory(db.Model):
    __tablename__ = "expense_categories"
    __table_args__ = (db.UniqueConstraint("user_id", "name", name="uq_category_user_name"),)

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    icon = db.Column(db.String(64))                          # lucide icon name
    is_default = db.Column(db.Boolean, default=False, nullable=False)
    tracked_in_budget = db.Column(db.Boolean, default=True, nullable=False)
    monthly_budget = db.Column(db.Numeric(12, 2), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    subcategories = db.relationship(
        "ExpenseSubcategory", backref="category", cascade="all, delete-orphan", passive_deletes=True
    )

    def serialize(self):
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "is_default": bool(self.is_default),
            "tracked_in_budget": bool(self.tracked_in_budget),
            "monthly_budget": money(self.monthly_budget),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


class ExpenseSubcategory(db.Model):
    __tablename__ = "expense_subcategories"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = db.Column(
        db.String(36), db.ForeignKey("expense_categories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def serialize(self):
        return {
            "id": self.id,
            "category_id": self.category_id,
            "name": self.name,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
