"""
Lookups and handlers shared by the per-user resource blueprints.

Every category, tag and bookmark belongs to one user; rows of other users
and soft-deleted rows are reported as missing. Categories and tags are
"named" resources: the name is unique per user, and a soft-deleted row
still holds its name until it is reused.
"""
from __future__ import annotations

from flask import abort, g

from api import get_storage
from api.responses import created, listed, load_args, load_json, parse_id, retrieved, success
from models.schemas.common import PageQuery, PageQuerySchema
from models.schemas.named import NamedCreate, NamedCreateSchema, NamedOutSchema, NamedUpdateSchema

page_schema = PageQuerySchema()
named_create_schema = NamedCreateSchema()
named_update_schema = NamedUpdateSchema()
named_out_schema = NamedOutSchema()
named_out_list_schema = NamedOutSchema(many=True)


def get_owned_or_404(model, raw_id: str, resource: str):
    """Active row of `model` owned by the caller, else 400 (bad id) / 404."""
    obj_id = parse_id(raw_id, resource.lower())
    obj = (
        get_storage().get_session().query(model)
        .filter(model.id == obj_id, model.user_id == g.user_id, model.is_active.is_(True))
        .first()
    )
    if obj is None:
        abort(404, description=f"{resource} not found")
    return obj


def find_by_name(model, user_id: int, name: str):
    """Row with this name for the user, active or not."""
    return get_storage().get_session().query(model).filter_by(user_id=user_id, name=name).first()


def claim_name(model, name: str, resource: str, exclude_id: int | None = None):
    """
    Make `name` available to a rename of the caller's row `exclude_id`.
    An active holder is a 409; a soft-deleted holder is purged, since the
    unique (user_id, name) constraint would otherwise block the rename.
    """
    holder = find_by_name(model, g.user_id, name)
    if holder is None or holder.id == exclude_id:
        return
    if holder.is_active:
        abort(409, description=f"{resource} with this name already exists")
    storage = get_storage()
    storage.delete(holder)
    storage.get_session().flush()


def list_named(model):
    """Caller's active rows, name ascending, paginated."""
    paging: PageQuery = load_args(page_schema, "Invalid query parameters")
    query = (
        get_storage().get_session().query(model)
        .filter(model.user_id == g.user_id, model.is_active.is_(True))
    )
    total = query.count()
    rows = (
        query.order_by(model.name.asc())
        .offset((paging.page - 1) * paging.limit)
        .limit(paging.limit)
        .all()
    )
    return listed(named_out_list_schema.dump(rows), total, paging.page, paging.limit)


def create_named(model, resource: str):
    data: NamedCreate = load_json(named_create_schema, f"Invalid {resource.lower()} data")
    storage = get_storage()

    obj = find_by_name(model, g.user_id, data.name)
    if obj is not None and obj.is_active:
        abort(409, description=f"{resource} with this name already exists")
    if obj is not None:
        # Same name as a deleted one: bring it back instead of duplicating
        obj.restore()
        obj.description = data.description
    else:
        obj = model(user_id=g.user_id, name=data.name, description=data.description)
        storage.new(obj)
    storage.save()
    return created(f"{resource} created successfully", named_out_schema.dump(obj))


def get_named(model, raw_id: str, resource: str):
    return retrieved(named_out_schema.dump(get_owned_or_404(model, raw_id, resource)))


def update_named(model, raw_id: str, resource: str):
    obj = get_owned_or_404(model, raw_id, resource)
    data = load_json(named_update_schema, f"Invalid {resource.lower()} data")
    if "name" in data:
        claim_name(model, data["name"], resource, exclude_id=obj.id)
    for key, value in data.items():
        setattr(obj, key, value)
    get_storage().save()
    return success(f"{resource} updated successfully", named_out_schema.dump(obj))
