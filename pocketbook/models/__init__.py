from ..extensions import db

# Core Models
from .user import User
from .category import ExpenseCategory, ExpenseSubcategory
from .expense import Expense
from .budget_shift import BudgetShift

# Knowledge base
from .chunk import KbChunk, UserChunk

__all__ = [
    "db",
    "User",
    "ExpenseCategory",
    "ExpenseSubcategory",
    "Expense",
    "BudgetShift",
    "KbChunk",
    "UserChunk",
]
