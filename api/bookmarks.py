"""
Bookmarks blueprint (mounted at /api/bookmarks).

Bookmarks optionally point at one of the caller's categories and carry any
number of the caller's tags. Tags are sent by name and created on demand;
an update that sends `tags` replaces the whole set.
"""
from __future__ import annotations

from typing import Iterable, List, Optional

from flask import Blueprint, abort, g
from sqlalchemy import or_, select

from api import get_storage
from api.ownership import find_by_name, get_owned_or_404
from api.responses import created, deleted, listed, load_args, load_json, retrieved, success
from models.bookmark import Bookmark, bookmark_tags
from models.category import Category
from models.schemas.bookmark import (
    BookmarkCreate,
    BookmarkCreateSchema,
    BookmarkOutSchema,
    BookmarkQuery,
    BookmarkQuerySchema,
    BookmarkUpdateSchema,
)
from models.tag import Tag
from utils.decorators import jwt_required

bp = Blueprint("bookmarks", __name__)

create_schema = BookmarkCreateSchema()
update_schema = BookmarkUpdateSchema()
query_schema = BookmarkQuerySchema()
out_schema = BookmarkOutSchema()
out_list_schema = BookmarkOutSchema(many=True)

SORT_COLUMNS = {
    "title": Bookmark.title,
    "created_at": Bookmark.created_at,
    "updated_at": Bookmark.updated_at,
}


def check_category(category_id: Optional[int]) -> Optional[Category]:
    """The category must be one of the caller's active categories."""
    if category_id is None:
        return None
    category = get_storage().get(Category, category_id)
    if category is None or category.user_id != g.user_id or not category.is_active:
        abort(400, description="Invalid category")
    return category


def resolve_tags(names: Iterable[str]) -> List[Tag]:
    """Get-or-create the caller's tags by name; duplicates collapse."""
    storage = get_storage()
    tags = []
    seen = set()
    for name in names:
        if name in seen:
            continue
        seen.add(name)
        tag = find_by_name(Tag, g.user_id, name)
        if tag is None:
            tag = Tag(user_id=g.user_id, name=name)
            storage.new(tag)
        elif not tag.is_active:
            tag.restore()
        tags.append(tag)
    return tags


@bp.get("")
@jwt_required()
def list_bookmarks():
    """
    List the caller's bookmarks (filtering, search, sorting, pagination)
    ---
    tags: [Bookmarks]
    security:
      - Bearer: []
    parameters:
      - { in: query, name: categoryId, type: integer }
      - { in: query, name: tag_id, type: integer }
      - { in: query, name: favorite, type: boolean }
      - { in: query, name: search, type: string, description: "Matches title or description" }
      - { in: query, name: page, type: integer, default: 1 }
      - { in: query, name: limit, type: integer, default: 10, maximum: 50 }
      - { in: query, name: sort_by, type: string, enum: [title, created_at, updated_at], default: created_at }
      - { in: query, name: sort_order, type: string, enum: [asc, desc], default: desc }
    responses:
      200: { description: OK }
      400: { description: Invalid query parameters }
    """
    params: BookmarkQuery = load_args(query_schema, "Invalid query parameters")

    query = (
        get_storage().get_session().query(Bookmark)
        .filter(Bookmark.user_id == g.user_id, Bookmark.is_active.is_(True))
    )
    if params.category_id is not None:
        query = query.filter(Bookmark.category_id == params.category_id)
    if params.tag_id is not None:
        tagged = select(bookmark_tags.c.bookmark_id).where(bookmark_tags.c.tag_id == params.tag_id)
        query = query.filter(Bookmark.id.in_(tagged))
    if params.favorite is not None:
        query = query.filter(Bookmark.favorite.is_(params.favorite))
    if params.search:
        pattern = f"%{params.search}%"
        query = query.filter(or_(Bookmark.title.ilike(pattern), Bookmark.description.ilike(pattern)))

    total = query.count()
    column = SORT_COLUMNS[params.sort_by]
    if params.sort_order == "asc":
        order_by = (column.asc(), Bookmark.id.asc())
    else:
        order_by = (column.desc(), Bookmark.id.desc())
    rows = (
        query.order_by(*order_by)
        .offset((params.page - 1) * params.limit)
        .limit(params.limit)
        .all()
    )
    return listed(out_list_schema.dump(rows), total, params.page, params.limit)


@bp.post("")
@jwt_required()
def create_bookmark():
    """
    Create a bookmark
    ---
    tags: [Bookmarks]
    security:
      - Bearer: []
    consumes: [application/json]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title, url]
          properties:
            title: { type: string, maxLength: 100 }
            url: { type: string, format: uri }
            categoryId: { type: integer }
            description: { type: string }
            favorite: { type: boolean }
            tags:
              type: array
              items: { type: string }
    responses:
      201: { description: Created }
      400: { description: Validation error or unknown category }
    """
    data: BookmarkCreate = load_json(create_schema, "Invalid bookmark data")
    storage = get_storage()

    bookmark = Bookmark(
        user_id=g.user_id,
        category=check_category(data.category_id),
        title=data.title,
        url=data.url,
        description=data.description,
        favorite=data.favorite,
    )
    bookmark.tags = resolve_tags(data.tags or [])
    storage.new(bookmark)
    storage.save()
    return created("Bookmark created successfully", out_schema.dump(bookmark))


@bp.get("/<bookmark_id>")
@jwt_required()
def get_bookmark(bookmark_id: str):
    """
    Get a bookmark by id
    ---
    tags: [Bookmarks]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: bookmark_id
        type: integer
        required: true
    responses:
      200: { description: OK }
      400: { description: Invalid id }
      404: { description: Not found }
    """
    return retrieved(out_schema.dump(get_owned_or_404(Bookmark, bookmark_id, "Bookmark")))


@bp.put("/<bookmark_id>")
@jwt_required()
def update_bookmark(bookmark_id: str):
    """
    Update a bookmark (at least one field; `tags` replaces the set)
    ---
    tags: [Bookmarks]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: bookmark_id
        type: integer
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            title: { type: string }
            url: { type: string }
            categoryId: { type: integer }
            description: { type: string }
            favorite: { type: boolean }
            tags:
              type: array
              items: { type: string }
    responses:
      200: { description: OK }
      400: { description: Validation error or unknown category }
      404: { description: Not found }
    """
    bookmark = get_owned_or_404(Bookmark, bookmark_id, "Bookmark")
    data = load_json(update_schema, "Invalid bookmark data")

    if "category_id" in data:
        bookmark.category = check_category(data.pop("category_id"))
    if "tags" in data:
        bookmark.tags = resolve_tags(data.pop("tags"))
    for key, value in data.items():
        setattr(bookmark, key, value)
    get_storage().save()
    return success("Bookmark updated successfully", out_schema.dump(bookmark))


@bp.delete("/<bookmark_id>")
@jwt_required()
def delete_bookmark(bookmark_id: str):
    """
    Soft delete a bookmark
    ---
    tags: [Bookmarks]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: bookmark_id
        type: integer
        required: true
    responses:
      200: { description: Deleted }
      404: { description: Not found }
    """
    bookmark = get_owned_or_404(Bookmark, bookmark_id, "Bookmark")
    bookmark.deactivate()
    get_storage().save()
    return deleted("Bookmark deleted successfully")
