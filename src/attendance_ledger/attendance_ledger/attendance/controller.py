from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_datetime
from ..container import Container
from ..core.exceptions import (
    FutureTimestamp,
    InvalidInput,
    InvalidTransition,
    LedgerError,
    StaleEvent,
    StorageUnavailable,
)

_HTTP_STATUS = {
    InvalidInput: 400,
    InvalidTransition: 409,
    StaleEvent: 409,
    FutureTimestamp: 422,
    StorageUnavailable: 503,
}


def _error_response(e: LedgerError):
    status = next((code for kind, code in _HTTP_STATUS.items() if isinstance(e, kind)), 400)
    return jsonify({"success": False, "error": e.code, "message": str(e)}), status


def register(app: Flask, container: Container) -> None:
    ledger = container.ledger

    @app.errorhandler(LedgerError)
    def handle_ledger_error(e: LedgerError):
        return _error_response(e)

    @app.route("/api/users/<user_id>/events", methods=["POST"], endpoint="record_event")
    def record_event(user_id: str):
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise InvalidInput("request body must be a JSON object")

        timestamp = data.get("timestamp")
        if timestamp is not None and not isinstance(timestamp, str):
            raise InvalidInput("timestamp must be an ISO-8601 string")

        event = ledger.record_event(
            user_id,
            data.get("status", ""),
            parse_iso_datetime(timestamp),
        )
        return jsonify({"success": True, "event": event.as_dict()}), 201

    @app.route("/api/users/<user_id>/status", methods=["GET"], endpoint="current_status")
    def current_status(user_id: str):
        status = ledger.current_status(user_id)
        return jsonify({"user_id": user_id, "status": status.value})

    @app.route("/api/users/<user_id>/history", methods=["GET"], endpoint="history")
    def history(user_id: str):
        from_time = parse_iso_datetime(request.args.get("from"), "from")
        to_time = parse_iso_datetime(request.args.get("to"), "to")
        events = [e.as_dict() for e in ledger.history(user_id, from_time, to_time)]
        return jsonify({"user_id": user_id, "events": events})
