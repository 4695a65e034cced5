"""Concurrent fan-out of independent per-user fetches for one page load."""
import logging
from concurrent.futures import ThreadPoolExecutor

from flask import current_app

from .revalidation import degraded_read, mark_degraded_read

logger = logging.getLogger(__name__)


def _run_in_context(app, fn):
    # each worker gets its own app context, hence its own db session
    with app.app_context():
        return fn(), degraded_read()


def fan_out(fetchers, max_workers=None):
    """Run every callable in ``fetchers`` (a name -> callable mapping)
    concurrently and return a dict of their results keyed the same way.

    All fetches run to completion. If any raised, the first failure in
    declaration order is re-raised unchanged once the others are done; the
    remaining failures are logged.
    """
    if not fetchers:
        return {}
    app = current_app._get_current_object()
    workers = max_workers or app.config.get("COMPOSER_MAX_WORKERS", 6)

    with ThreadPoolExecutor(max_workers=min(workers, len(fetchers))) as pool:
        futures = {name: pool.submit(_run_in_context, app, fn) for name, fn in fetchers.items()}

    results, failures = {}, []
    for name, future in futures.items():
        exc = future.exception()
        if exc is not None:
            failures.append((name, exc))
        else:
            results[name], degraded = future.result()
            if degraded:
                mark_degraded_read()

    if failures:
        for name, exc in failures[1:]:
            logger.error("Page fetch %s failed: %r", name, exc)
        name, exc = failures[0]
        logger.error("Page fetch %s failed: %r", name, exc)
        raise exc
    return results
