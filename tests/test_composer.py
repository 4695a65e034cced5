import threading
import time

import pytest

from pocketbook.composer import fan_out
from pocketbook.errors import NotFound
from pocketbook.revalidation import degraded_read, mark_degraded_read, reset_degraded_read
from pocketbook.services import categories

from .conftest import make_category


def test_results_keyed_by_fetcher_name(app):
    assert fan_out({"a": lambda: 1, "b": lambda: "two"}) == {"a": 1, "b": "two"}
    assert fan_out({}) == {}


def test_fetches_run_concurrently(app):
    barrier = threading.Barrier(3, timeout=5)

    def wait():
        # deadlocks (then times out) unless all three run at once
        barrier.wait()
        return True

    assert fan_out({"x": wait, "y": wait, "z": wait}) == {"x": True, "y": True, "z": True}


def test_first_failure_propagates_after_all_complete(app):
    finished = []

    def slow_ok():
        time.sleep(0.05)
        finished.append("slow")
        return "done"

    def fails_first():
        raise NotFound("Category not found")

    def fails_second():
        raise ValueError("later")

    with pytest.raises(NotFound) as info:
        fan_out({"slow": slow_ok, "broken": fails_first, "also_broken": fails_second})
    assert str(info.value.message) == "Category not found"
    assert finished == ["slow"]


def test_workers_read_committed_data(user):
    make_category(user, "Food")
    make_category(user, "Housing")
    user_id = user.id
    result = fan_out({
        "names": lambda: [c.name for c in categories.list_categories(user_id)],
        "count": lambda: len(categories.list_categories(user_id)),
    })
    assert result == {"names": ["Food", "Housing"], "count": 2}


def test_fallback_in_a_worker_marks_the_caller(app):
    reset_degraded_read()
    fan_out({"clean": lambda: 1})
    assert not degraded_read()

    def fallback():
        mark_degraded_read()
        return []

    assert fan_out({"clean": lambda: 1, "fallback": fallback}) == {"clean": 1, "fallback": []}
    assert degraded_read()
    reset_degraded_read()
