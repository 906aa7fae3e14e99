from dataclasses import dataclass
from typing import List, Optional

from marshmallow import Schema, fields, post_load, pre_load, validate

from models.schemas.common import RequestSchema, UpdateSchema, clamp_paging, id_field

SORT_FIELDS = ("title", "created_at", "updated_at")


@dataclass
class BookmarkCreate:
    title: str
    url: str
    category_id: Optional[int] = None
    description: Optional[str] = None
    favorite: bool = False
    tags: Optional[List[str]] = None


@dataclass
class BookmarkQuery:
    category_id: Optional[int] = None
    tag_id: Optional[int] = None
    favorite: Optional[bool] = None
    search: Optional[str] = None
    page: int = 1
    limit: int = 10
    sort_by: str = "created_at"
    sort_order: str = "desc"


def _strip_tags(data):
    if isinstance(data, dict) and isinstance(data.get("tags"), list):
        data = dict(data)
        data["tags"] = [t.strip() if isinstance(t, str) else t for t in data["tags"]]
    return data


class _BookmarkFields(RequestSchema):
    category_id = id_field(allow_none=True, data_key="categoryId", strict=True)
    title = fields.String(validate=validate.Length(min=1, max=100))
    url = fields.Url(validate=validate.Length(min=1))
    description = fields.String(allow_none=True, validate=validate.Length(max=500))
    favorite = fields.Boolean()
    tags = fields.List(fields.String(validate=validate.Length(min=1, max=50)))

    @pre_load
    def strip(self, data, **kwargs):
        return _strip_tags(data)


class BookmarkCreateSchema(_BookmarkFields):
    title = fields.String(required=True, validate=validate.Length(min=1, max=100))
    url = fields.Url(required=True)
    favorite = fields.Boolean(load_default=False)

    @post_load
    def make_request(self, data, **kwargs):
        return BookmarkCreate(**data)


class BookmarkUpdateSchema(UpdateSchema, _BookmarkFields):
    pass


class BookmarkQuerySchema(RequestSchema):
    category_id = id_field(data_key="categoryId")
    tag_id = id_field()
    favorite = fields.Boolean()
    search = fields.String()
    page = fields.Integer(load_default=1)
    limit = fields.Integer(load_default=10)
    sort_by = fields.String(load_default="created_at", validate=validate.OneOf(SORT_FIELDS))
    sort_order = fields.String(load_default="desc", validate=validate.OneOf(("asc", "desc")))

    @post_load
    def make_query(self, data, **kwargs):
        clamp_paging(data)
        if data.get("search") is not None:
            data["search"] = data["search"].strip() or None
        return BookmarkQuery(**data)


class BookmarkOutSchema(Schema):
    id = fields.Integer()
    user_id = fields.Integer()
    category = fields.Method("get_category")
    title = fields.String()
    url = fields.String()
    description = fields.String(allow_none=True)
    favorite = fields.Boolean()
    tags = fields.Method("get_tags")
    created_at = fields.DateTime()
    updated_at = fields.DateTime()

    def get_category(self, obj):
        category = obj.active_category
        if category is None:
            return None
        return {"id": category.id, "name": category.name}

    def get_tags(self, obj):
        return [{"id": tag.id, "name": tag.name} for tag in obj.active_tags]
