from __future__ import annotations

from flask import Blueprint
from sqlalchemy import update

from api import get_storage
from api.ownership import create_named, get_named, get_owned_or_404, list_named, update_named
from api.responses import deleted
from models.bookmark import Bookmark
from models.category import Category
from utils.decorators import jwt_required

bp = Blueprint("categories", __name__)


@bp.get("")
@jwt_required()
def list_categories():
    """
    List the caller's categories (name ascending)
    ---
    tags: [Categories]
    security:
      - Bearer: []
    parameters:
      - in: query
        name: page
        type: integer
        default: 1
      - in: query
        name: limit
        type: integer
        default: 10
    responses:
      200: { description: OK }
    """
    return list_named(Category)


@bp.post("")
@jwt_required()
def create_category():
    """
    Create a category
    ---
    tags: [Categories]
    security:
      - Bearer: []
    consumes: [application/json]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [name]
          properties:
            name: { type: string, maxLength: 50 }
            description: { type: string }
    responses:
      201: { description: Created }
      400: { description: Validation error }
      409: { description: Name already exists }
    """
    return create_named(Category, "Category")


@bp.get("/<category_id>")
@jwt_required()
def get_category(category_id: str):
    """
    Get a category by id
    ---
    tags: [Categories]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: category_id
        type: integer
        required: true
    responses:
      200: { description: OK }
      400: { description: Invalid id }
      404: { description: Not found }
    """
    return get_named(Category, category_id, "Category")


@bp.put("/<category_id>")
@jwt_required()
def update_category(category_id: str):
    """
    Update a category (at least one field)
    ---
    tags: [Categories]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: category_id
        type: integer
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string, maxLength: 50 }
            description: { type: string }
    responses:
      200: { description: OK }
      404: { description: Not found }
      409: { description: Name already exists }
    """
    return update_named(Category, category_id, "Category")


@bp.delete("/<category_id>")
@jwt_required()
def delete_category(category_id: str):
    """
    Soft delete a category; its bookmarks are kept and become uncategorized
    ---
    tags: [Categories]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: category_id
        type: integer
        required: true
    responses:
      200: { description: Deleted }
      404: { description: Not found }
    """
    category = get_owned_or_404(Category, category_id, "Category")
    storage = get_storage()
    category.deactivate()
    # Detach now so reusing the name later starts with an empty category
    storage.get_session().execute(
        update(Bookmark).where(Bookmark.category_id == category.id).values(category_id=None)
    )
    storage.save()
    return deleted("Category deleted successfully")
