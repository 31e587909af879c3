from __future__ import annotations

from typing import List

from flask import Blueprint, request, g, abort
from sqlalchemy import func

from api.errors import success_response
from api.utils.pagination import parse_pagination, paginate
from api.utils.search import LIKE_ESCAPE, contains_pattern
from models import storage
from models.game import Game, game_categories
from models.category import Category
from models.schemas.game import (
    GameCreateSchema,
    GameUpdateSchema,
    GameCategoriesSchema,
    GameOutSchema,
)
from utils.decorators import authenticate

bp = Blueprint("games", __name__)

# Schemas
game_create_schema = GameCreateSchema()
game_update_schema = GameUpdateSchema()
game_categories_schema = GameCategoriesSchema()
game_out_schema = GameOutSchema()
games_out_schema = GameOutSchema(many=True)


def load_categories(session, category_ids: List[str]) -> List[Category]:
    wanted = set(category_ids or [])
    if not wanted:
        return []
    categories = session.query(Category).filter(Category.id.in_(wanted)).all()
    if len(categories) != len(wanted):
        abort(400, description="One or more categoryIds not found")
    return categories


def get_owned_game(session, game_id: str) -> Game:
    """Games belonging to another user are reported as missing."""
    game = session.query(Game).filter(Game.id == game_id, Game.user_id == g.current_user.id).first()
    if not game:
        abort(404, description="Game not found")
    return game


@bp.post("/games")
@authenticate
def create_game():
    """
    Create a new game owned by the caller
    ---
    tags:
      - Games
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [name]
          properties:
            name: { type: string, maxLength: 255 }
            additionalInfo: { type: object }
            categoryIds:
              type: array
              items: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Unknown category id
      422:
        description: Validation error
    """
    session = storage.get_session()
    data = game_create_schema.load(request.get_json(silent=True) or {})

    game = Game(
        name=data["name"].strip(),
        additional_info=data.get("additional_info"),
        user_id=g.current_user.id,
    )
    game.categories = load_categories(session, data["category_ids"])

    storage.new(game)
    storage.save()
    return success_response(game_out_schema.dump(game), "Game created successfully", 201)


@bp.get("/games")
@authenticate
def list_games():
    """
    List the caller's games, newest first
    ---
    tags:
      - Games
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
        default: 20
      - in: query
        name: category_id
        type: string
      - in: query
        name: q
        type: string
        description: "Case-insensitive substring search on name"
    responses:
      200:
        description: List of games
    """
    session = storage.get_session()
    page, limit = parse_pagination()

    query = session.query(Game).filter(Game.user_id == g.current_user.id)

    category_id = request.args.get("category_id")
    if category_id:
        query = (
            query.join(game_categories, game_categories.c.game_id == Game.id)
                 .filter(game_categories.c.category_id == category_id)
        )
    q = request.args.get("q")
    if q:
        query = query.filter(func.lower(Game.name).like(contains_pattern(q), escape=LIKE_ESCAPE))

    rows, meta = paginate(query.order_by(Game.created_at.desc(), Game.id), page, limit)
    return success_response({"items": games_out_schema.dump(rows), "meta": meta})


@bp.get("/games/<game_id>")
@authenticate
def get_game(game_id: str):
    """
    Get one of the caller's games
    ---
    tags:
      - Games
    security:
      - Bearer: []
    parameters:
      - in: path
        name: game_id
        type: string
        required: true
    responses:
      200:
        description: Game found
      404:
        description: Not found
    """
    game = get_owned_game(storage.get_session(), game_id)
    return success_response(game_out_schema.dump(game))


@bp.route("/games/<game_id>", methods=["PUT", "PATCH"])
@authenticate
def update_game(game_id: str):
    """
    Update a game (partial); categoryIds replaces the category set
    ---
    tags:
      - Games
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: path
        name: game_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string }
            additionalInfo: { type: object }
            categoryIds:
              type: array
              items: { type: string }
    responses:
      200:
        description: Updated
      404:
        description: Not found
      422:
        description: Validation error
    """
    session = storage.get_session()
    game = get_owned_game(session, game_id)
    data = game_update_schema.load(request.get_json(silent=True) or {})

    if "name" in data:
        game.name = data["name"].strip()
    if "additional_info" in data:
        game.additional_info = data["additional_info"]
    if "category_ids" in data:
        game.categories = load_categories(session, data["category_ids"])

    storage.new(game)
    storage.save()
    return success_response(game_out_schema.dump(game), "Game updated successfully")


@bp.delete("/games/<game_id>")
@authenticate
def delete_game(game_id: str):
    """
    Delete a game
    ---
    tags:
      - Games
    security:
      - Bearer: []
    parameters:
      - in: path
        name: game_id
        type: string
        required: true
    responses:
      200:
        description: Game removed
      404:
        description: Not found
    """
    game = get_owned_game(storage.get_session(), game_id)
    storage.delete(game)
    storage.save()
    return success_response(None, "Game removed")


@bp.post("/games/<game_id>/categories")
@authenticate
def add_categories(game_id: str):
    """
    Add categories to a game
    ---
    tags:
      - Games
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: path
        name: game_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [categoryIds]
          properties:
            categoryIds:
              type: array
              items: { type: string }
    responses:
      200:
        description: Categories added
      400:
        description: Unknown category id
      404:
        description: Not found
    """
    session = storage.get_session()
    game = get_owned_game(session, game_id)
    data = game_categories_schema.load(request.get_json(silent=True) or {})

    for category in load_categories(session, data["category_ids"]):
        if category not in game.categories:
            game.categories.append(category)

    storage.new(game)
    storage.save()
    return success_response(game_out_schema.dump(game), "Categories added successfully")


@bp.delete("/games/<game_id>/categories/<category_id>")
@authenticate
def remove_category(game_id: str, category_id: str):
    """
    Remove a category from a game
    ---
    tags:
      - Games
    security:
      - Bearer: []
    parameters:
      - in: path
        name: game_id
        type: string
        required: true
      - in: path
        name: category_id
        type: string
        required: true
    responses:
      200:
        description: Category removed
      404:
        description: Game not found or category not linked
    """
    game = get_owned_game(storage.get_session(), game_id)
    linked = [c for c in game.categories if c.id == category_id]
    if not linked:
        abort(404, description="Category not linked to this game")
    game.categories.remove(linked[0])

    storage.new(game)
    storage.save()
    return success_response(game_out_schema.dump(game), "Category removed successfully")
