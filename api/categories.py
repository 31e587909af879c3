from __future__ import annotations

from flask import Blueprint, request, g, abort
from sqlalchemy import func

from api.errors import success_response
from api.utils.pagination import parse_pagination, paginate
from api.utils.search import LIKE_ESCAPE, contains_pattern
from models import storage
from models.category import Category
from models.schemas.category import (
    CategoryCreateSchema,
    CategoryUpdateSchema,
    CategoryOutSchema,
)
from utils.decorators import authenticate, optional_auth

bp = Blueprint("categories", __name__)

create_schema = CategoryCreateSchema()
update_schema = CategoryUpdateSchema()
out_schema = CategoryOutSchema()


def parse_sort(default="name"):
    sort = request.args.get("sort", default)
    desc = sort.startswith("-")
    key = sort[1:] if desc else sort
    if key != "name":
        abort(400, description="Unsupported sort field. Allowed: name")
    return (Category.name.desc() if desc else Category.name.asc(),)


def exists_name_case_insensitive(session, name: str, exclude_id: str | None = None) -> bool:
    q = session.query(Category).filter(func.lower(Category.name) == name.lower())
    if exclude_id:
        q = q.filter(Category.id != exclude_id)
    return session.query(q.exists()).scalar()


def dump_category(category: Category) -> dict:
    """
    Serialize a category. Games are private: anonymous callers get no game
    ids, authenticated callers only the ids of their own games.
    """
    data = out_schema.dump(category)
    identity = g.get("current_user")
    data["gameIds"] = [game.id for game in category.games if identity and game.user_id == identity.id]
    return data


@bp.post("/categories")
@authenticate
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
          properties:
            name: { type: string, maxLength: 64 }
    responses:
      201: { description: Created }
      409: { description: Name already exists }
      422: { description: Validation error }
    """
    session = storage.get_session()
    data = create_schema.load(request.get_json(silent=True) or {})
    name = data["name"].strip()
    if exists_name_case_insensitive(session, name):
        abort(409, description="Category name already exists.")
    c = Category(name=name)
    storage.new(c)
    storage.save()
    return success_response(dump_category(c), "Category created successfully", 201)


@bp.get("/categories")
@optional_auth
def list_categories():
    """
    List categories (pagination, sorting, q search)
    ---
    tags: [Categories]
    parameters:
      - in: query
        name: page
        type: integer
        default: 1
      - in: query
        name: limit
        type: integer
        default: 20
      - in: query
        name: sort
        type: string
        default: name
        description: "Allowed: name or -name"
      - in: query
        name: q
        type: string
    responses:
      200: { description: OK }
    """
    session = storage.get_session()
    page, limit = parse_pagination()
    order_by = parse_sort()

    query = session.query(Category)
    q = request.args.get("q")
    if q:
        query = query.filter(func.lower(Category.name).like(contains_pattern(q), escape=LIKE_ESCAPE))

    rows, meta = paginate(query.order_by(*order_by), page, limit)
    return success_response({"items": [dump_category(c) for c in rows], "meta": meta})


@bp.get("/categories/<category_id>")
@optional_auth
def get_category(category_id: str):
    """
    Get a category by id
    ---
    tags: [Categories]
    parameters:
      - in: path
        name: category_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    c = storage.get(Category, category_id)
    if not c:
        abort(404, description="Category not found")
    return success_response(dump_category(c))


@bp.route("/categories/<category_id>", methods=["PUT", "PATCH"])
@authenticate
def update_category(category_id: str):
    """
    Update a category
    ---
    tags: [Categories]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: category_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string, maxLength: 64 }
    responses:
      200: { description: OK }
      404: { description: Not found }
      409: { description: Name already exists }
      422: { description: Validation error }
    """
    session = storage.get_session()
    c = storage.get(Category, category_id)
    if not c:
        abort(404, description="Category not found")
    data = update_schema.load(request.get_json(silent=True) or {})
    if "name" in data:
        name = data["name"].strip()
        if exists_name_case_insensitive(session, name, exclude_id=c.id):
            abort(409, description="Category name already exists.")
        c.name = name
    storage.new(c)
    storage.save()
    return success_response(dump_category(c), "Category updated successfully")


@bp.delete("/categories/<category_id>")
@authenticate
def delete_category(category_id: str):
    """
    Delete a category (links to games are removed, games are kept)
    ---
    tags: [Categories]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: category_id
        type: string
        required: true
    responses:
      204: { description: Deleted }
      404: { description: Not found }
    """
    c = storage.get(Category, category_id)
    if not c:
        abort(404, description="Category not found")
    storage.delete(c)
    storage.save()
    return ("", 204)
