"""Shared fixtures: an app on a throwaway SQLite file, two users, auth headers.

A file (not ``:memory:``) database is used so the page composer's worker
threads, which open their own connections, see the same data.
"""
from __future__ import annotations

from datetime import date

import pytest
from flask_jwt_extended import create_access_token

from pocketbook import create_app
from pocketbook.config import TestingConfig
from pocketbook.extensions import db as _db
from pocketbook.models import Expense, ExpenseCategory, User
from pocketbook.vectors import reset_embeddings_client


@pytest.fixture
def app(tmp_path):
    class _Config(TestingConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'pocketbook-test.db'}"

    reset_embeddings_client()
    app = create_app(_Config)
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()
    reset_embeddings_client()


@pytest.fixture
def client(app):
    return app.test_client()


def _make_user(email):
    user = User(email=email, name=email.split("@")[0])
    user.set_password("correct horse battery")
    _db.session.add(user)
    _db.session.commit()
    return user


@pytest.fixture
def user(app):
    return _make_user("alice@example.com")


@pytest.fixture
def other_user(app):
    return _make_user("bob@example.com")


def bearer(user):
    return {"Authorization": f"Bearer {create_access_token(identity=user.id)}"}


@pytest.fixture
def auth_headers(user):
    return bearer(user)


def make_category(user, name, monthly_budget=None, tracked=True):
    category = ExpenseCategory(
        user_id=user.id, name=name, monthly_budget=monthly_budget, tracked_in_budget=tracked
    )
    _db.session.add(category)
    _db.session.commit()
    return category


def make_expense(user, category, amount, on=date(2024, 3, 10), **extra):
    expense = Expense(user_id=user.id, category_id=category.id, amount=amount, date=on, **extra)
    _db.session.add(expense)
    _db.session.commit()
    return expense
