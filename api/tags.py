from __future__ import annotations

from flask import Blueprint

from api import get_storage
from api.ownership import create_named, get_named, get_owned_or_404, list_named, update_named
from api.responses import deleted
from models.tag import Tag
from utils.decorators import jwt_required

bp = Blueprint("tags", __name__)


@bp.get("")
@jwt_required()
def list_tags():
    """
    List the caller's tags (name ascending)
    ---
    tags: [Tags]
    security:
      - Bearer: []
    parameters:
      - { in: query, name: page, type: integer, default: 1 }
      - { in: query, name: limit, type: integer, default: 10 }
    responses:
      200: { description: OK }
    """
    return list_named(Tag)


@bp.post("")
@jwt_required()
def create_tag():
    """
    Create a tag (bookmarks can also create tags by name)
    ---
    tags: [Tags]
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
      409: { description: Name already exists }
    """
    return create_named(Tag, "Tag")


@bp.get("/<tag_id>")
@jwt_required()
def get_tag(tag_id: str):
    """
    Get a tag by id
    ---
    tags: [Tags]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: tag_id, type: integer, required: true }
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    return get_named(Tag, tag_id, "Tag")


@bp.put("/<tag_id>")
@jwt_required()
def update_tag(tag_id: str):
    """
    Update a tag (at least one field)
    ---
    tags: [Tags]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: tag_id, type: integer, required: true }
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
    return update_named(Tag, tag_id, "Tag")


@bp.delete("/<tag_id>")
@jwt_required()
def delete_tag(tag_id: str):
    """
    Soft delete a tag; it disappears from every bookmark that carries it
    ---
    tags: [Tags]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: tag_id, type: integer, required: true }
    responses:
      200: { description: Deleted }
      404: { description: Not found }
    """
    tag = get_owned_or_404(Tag, tag_id, "Tag")
    tag.deactivate()
    get_storage().save()
    return deleted("Tag deleted successfully")
