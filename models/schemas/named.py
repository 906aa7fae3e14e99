"""
Schemas for the user-owned named resources (categories and tags).
Both carry a name unique per user and an optional description.
"""
from dataclasses import dataclass
from typing import Optional

from marshmallow import Schema, fields, post_load, pre_load, validate

from models.schemas.common import RequestSchema, UpdateSchema, strip_name


@dataclass
class NamedCreate:
    name: str
    description: Optional[str] = None


class NamedCreateSchema(RequestSchema):
    name = fields.String(required=True, validate=validate.Length(min=1, max=50))
    description = fields.String(allow_none=True, validate=validate.Length(max=500))

    @pre_load
    def strip(self, data, **kwargs):
        return strip_name(data)

    @post_load
    def make_request(self, data, **kwargs):
        return NamedCreate(**data)


class NamedUpdateSchema(UpdateSchema):
    name = fields.String(validate=validate.Length(min=1, max=50))
    description = fields.String(allow_none=True, validate=validate.Length(max=500))

    @pre_load
    def strip(self, data, **kwargs):
        return strip_name(data)


class NamedOutSchema(Schema):
    id = fields.Integer()
    user_id = fields.Integer()
    name = fields.String()
    description = fields.String(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
