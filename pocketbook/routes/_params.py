from flask import request

from ..errors import InvalidArgument
from ..utils.months import local_today, validate_month


def month_args():
    """``year``/``month`` from the query string, defaulting to this month."""
    today = local_today()
    year = request.args.get("year", today.year)
    month = request.args.get("month", today.month)
    return validate_month(year, month)


def json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidArgument("request body must be a JSON object")
    return data
