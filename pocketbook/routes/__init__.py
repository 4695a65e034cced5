from .auth import bp as auth_bp
from .budget import bp as budget_bp
from .categories import bp as categories_bp
from .expenses import bp as expenses_bp
from .pages import bp as pages_bp
from .vectors import bp as vectors_bp

blueprints = [auth_bp, categories_bp, expenses_bp, budget_bp, pages_bp, vectors_bp]

__all__ = ["blueprints", "auth_bp", "categories_bp", "expenses_bp", "budget_bp", "pages_bp", "vectors_bp"]
