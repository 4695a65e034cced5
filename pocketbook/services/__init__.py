"""Per-user data access. Every function takes the caller's ``user_id``
explicitly; route handlers pass the JWT identity in."""
from . import budget, budget_shifts, categories, expenses, subcategories  # noqa: F401
