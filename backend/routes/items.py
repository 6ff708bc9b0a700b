from flask import Blueprint, jsonify, request
from models import db
from services.errors import ValidationError
from services.recipe_store import MAX_INTEGER, RecipeStore
import logging

logger = logging.getLogger(__name__)

items_bp = Blueprint('items', __name__)


def get_store():
    return RecipeStore(db.session)


def parse_item_id(raw_id):
    """Path ids must be plain ASCII base-10 integers; anything else is a 400, never a lookup."""
    digits = raw_id[1:] if raw_id.startswith('-') else raw_id
    if not (raw_id.isascii() and digits.isdigit()):
        raise ValidationError('Invalid item ID.')
    item_id = int(raw_id, 10)
    if abs(item_id) > MAX_INTEGER:
        raise ValidationError('Invalid item ID.')
    return item_id


def recipe_fields_from_request():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object.')
    return {
        'name': data.get('name'),
        'quantity_produced': data.get('quantity_produced'),
        'npc_sell_price': data.get('npc_sell_price'),
        'materials': data.get('materials'),
    }


@items_bp.route('', methods=['GET'])
def list_items():
    """List every craftable item (id, name, npc price), sorted by name."""
    return jsonify(get_store().list_recipes()), 200


@items_bp.route('/<item_id>/recipe', methods=['GET'])
def get_item_recipe(item_id):
    """Get one item's recipe with its materials."""
    recipe_id = parse_item_id(item_id)
    return jsonify(get_store().get_recipe(recipe_id)), 200


@items_bp.route('/name/<path:name>', methods=['GET'])
def get_item_price_by_name(name):
    price = get_store().get_price_by_name(name)
    return jsonify({'npc_sell_price': price}), 200


@items_bp.route('', methods=['POST'])
def create_item():
    """Create a recipe together with its full material list."""
    fields = recipe_fields_from_request()
    recipe_id = get_store().create_recipe(**fields)
    return jsonify({'message': 'Recipe created successfully!', 'id': recipe_id}), 201


@items_bp.route('/<item_id>', methods=['PUT'])
def update_item(item_id):
    """Replace a recipe's fields and swap its whole material list."""
    recipe_id = parse_item_id(item_id)
    fields = recipe_fields_from_request()
    get_store().update_recipe(recipe_id, **fields)
    return jsonify({'message': 'Recipe updated successfully!', 'id': recipe_id}), 200


@items_bp.route('/<item_id>', methods=['DELETE'])
def delete_item(item_id):
    recipe_id = parse_item_id(item_id)
    get_store().delete_recipe(recipe_id)
    return jsonify({'message': 'Recipe deleted successfully!'}), 200
