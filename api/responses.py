"""
Success envelope and request helpers shared by the blueprints.

Success bodies are {"message": ...} or {"message": ..., "data": ...};
failures are produced by api.errors.
"""
from __future__ import annotations

import math

from flask import abort, jsonify, request

from api.errors import RequestValidationError
from models.schemas.common import MAX_ID, parse_request


def success(message: str, data=None, status: int = 200):
    body = {"message": message}
    if data is not None:
        body["data"] = data
    return jsonify(body), status


def created(message: str, data=None):
    return success(message, data, 201)


def retrieved(data):
    return success("Resource retrieved successfully", data)


def deleted(message: str = "Resource deleted successfully"):
    return success(message)


def listed(items: list, total: int, page: int, limit: int):
    return success("Resources retrieved successfully", {
        "items": items,
        "pagination": {
            "total": total,
            "page": page,
            "limit": limit,
            "pages": math.ceil(total / limit) if limit else 0,
        },
    })


def load_json(schema, message: str):
    """Validate the JSON body; raises RequestValidationError with field details."""
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    data, errors = parse_request(schema, payload)
    if errors:
        raise RequestValidationError(message, errors)
    return data


def load_args(schema, message: str):
    data, errors = parse_request(schema, request.args.to_dict())
    if errors:
        raise RequestValidationError(message, errors)
    return data


def parse_id(raw: str, resource: str) -> int:
    """Path ids are positive integers that fit a BIGINT; anything else is a 400."""
    if not (raw.isascii() and raw.isdigit()) or not 1 <= int(raw) <= MAX_ID:
        abort(400, description=f"Invalid {resource} ID")
    return int(raw)
