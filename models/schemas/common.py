from dataclasses import dataclass

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, validate, validates_schema

MAX_LIMIT = 50
# Largest value a BIGINT column accepts
MAX_ID = 2**63 - 1
MAX_PAGE = MAX_ID // MAX_LIMIT


def id_field(**kwargs):
    """Integer id from a body or query string, bounded to what the database stores."""
    return fields.Integer(validate=validate.Range(min=1, max=MAX_ID), **kwargs)


def strip_string(value):
    return value.strip() if isinstance(value, str) else value


def parse_request(schema: Schema, payload) -> tuple:
    """
    Run a request schema over a decoded JSON payload.
    Returns (request, None) on success or (None, field_errors) where
    field_errors maps field names (or "_schema") to lists of messages.
    """
    try:
        return schema.load(payload), None
    except ValidationError as err:
        return None, err.messages


class RequestSchema(Schema):
    """Base for request bodies: unknown keys are dropped, not rejected."""

    class Meta:
        unknown = EXCLUDE


class UpdateSchema(RequestSchema):
    """Partial update: at least one known field must be present."""

    @validates_schema
    def _require_one_field(self, data, **kwargs):
        if not data:
            raise ValidationError("At least one field must be provided for update")


def strip_name(data):
    """pre_load helper: trim surrounding whitespace from a "name" key."""
    if isinstance(data, dict) and "name" in data:
        data = dict(data)
        data["name"] = strip_string(data["name"])
    return data


def clamp_paging(data):
    """Out-of-range paging is clamped rather than rejected."""
    data["page"] = max(1, min(data["page"], MAX_PAGE))
    data["limit"] = max(1, min(data["limit"], MAX_LIMIT))
    return data


@dataclass
class PageQuery:
    page: int = 1
    limit: int = 10


class PageQuerySchema(RequestSchema):
    page = fields.Integer(load_default=1)
    limit = fields.Integer(load_default=10)

    @post_load
    def make_query(self, data, **kwargs):
        return PageQuery(**clamp_paging(data))
