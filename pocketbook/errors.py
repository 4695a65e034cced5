# pocketbook/errors.py
from flask import jsonify
from werkzeug.exceptions import HTTPException


class PocketbookError(Exception):
    """Base class for errors raised by the service layer."""

    status_code = 500
    kind = "server_error"

    def __init__(self, message=None):
        super().__init__(message or self.kind)
        self.message = message or self.kind


class InvalidArgument(PocketbookError):
    status_code = 400
    kind = "invalid_argument"


class Unauthorized(PocketbookError):
    status_code = 401
    kind = "unauthorized"


class NotFound(PocketbookError):
    """Target row is missing or owned by someone else."""

    status_code = 404
    kind = "not_found"


def register_error_handlers(app):
    @app.errorhandler(PocketbookError)
    def domain_error(e):
        return jsonify(error=e.kind, message=e.message), e.status_code

    @app.errorhandler(400)
    def bad_request(e):
        return jsonify(error="bad_request", message=getattr(e, "description", "Bad Request")), 400

    @app.errorhandler(401)
    def unauthorized(e): return jsonify(error="unauthorized"), 401

    @app.errorhandler(403)
    def forbidden(e): return jsonify(error="forbidden"), 403

    @app.errorhandler(404)
    def not_found(e): return jsonify(error="not_found"), 404

    @app.errorhandler(405)
    def method_not_allowed(e): return jsonify(error="method_not_allowed"), 405

    @app.errorhandler(422)
    def unprocessable(e): return jsonify(error="unprocessable"), 422

    @app.errorhandler(Exception)
    def server_error(e):
        if isinstance(e, HTTPException):
            return jsonify(error=e.name), e.code
        app.logger.exception("Unhandled exception: %s", e)
        return jsonify(error="Internal Server Error"), 500
