import logging
import math

from sqlalchemy.exc import SQLAlchemyError

from models import price_value
from models.recipe import Recipe
from models.recipe_material import RecipeMaterial
from services.errors import NotFoundError, StoreError, ValidationError

logger = logging.getLogger(__name__)

MATERIAL_REQUIRED_FIELDS = ('material_name', 'quantity', 'material_type')

# Largest value a 64-bit INTEGER column can hold
MAX_INTEGER = 2**63 - 1


def _as_price(value):
    """Float value of a JSON number, or None when it is not a finite number."""
    # bool is an int subclass, but True is never a price
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        price = float(value)
    except OverflowError:
        return None
    return price if math.isfinite(price) else None


def _clean_name(value, field):
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'{field} is required')
    return value.strip()


def _positive_int(value, field):
    if value is None:
        raise ValidationError(f'{field} is required')
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f'{field} must be a positive integer')
    if value > MAX_INTEGER:
        raise ValidationError(f"{field} must not exceed {MAX_INTEGER}")
    return value


def _price(value, field):
    """Absent price means 0. Negative prices are rejected, not coerced."""
    if value is None:
        return 0
    price = _as_price(value)
    if price is None or price < 0:
        raise ValidationError(f'{field} must be a non-negative number')
    return price


def validate_materials(materials):
    if not isinstance(materials, list):
        raise ValidationError('materials must be a list')
    if not materials:
        raise ValidationError('materials must contain at least one entry')

    cleaned = []
    for index, material in enumerate(materials):
        if not isinstance(material, dict):
            raise ValidationError(f'materials[{index}] must be an object')
        missing = [key for key in MATERIAL_REQUIRED_FIELDS if material.get(key) is None]
        if missing:
            raise ValidationError(f"materials[{index}] is missing {', '.join(missing)}")
        cleaned.append({
            'material_name': _clean_name(material['material_name'], f'materials[{index}].material_name'),
            'quantity': _positive_int(material['quantity'], f'materials[{index}].quantity'),
            'material_type': _clean_name(material['material_type'], f'materials[{index}].material_type'),
            'default_npc_price': _price(material.get('default_npc_price'), f'materials[{index}].default_npc_price'),
        })
    return cleaned


def validate_recipe_payload(name, quantity_produced, npc_sell_price, materials):
    """
    Check and normalize the fields of a recipe write.

    Returns a dict ready for the store, or raises ValidationError naming the
    first bad field.
    """
    return {
        'name': _clean_name(name, 'name'),
        'quantity_produced': _positive_int(quantity_produced, 'quantity_produced'),
        'npc_sell_price': _price(npc_sell_price, 'npc_sell_price'),
        'materials': validate_materials(materials),
    }


class RecipeStore:
    """
    CRUD access to recipes and their materials.

    Bound to a SQLAlchemy session. Every write that touches a recipe and its
    materials commits once at the end or rolls back as a whole.
    """

    def __init__(self, session):
        self.session = session

    def _fail(self, action, error):
        self.session.rollback()
        logger.error(f"Recipe store failed to {action}: {str(error)}")
        return StoreError(f'Internal server error while trying to {action}.')

    def list_recipes(self):
        try:
            recipes = self.session.query(Recipe).order_by(Recipe.name.asc()).all()
            return [recipe.to_summary_dict() for recipe in recipes]
        except SQLAlchemyError as e:
            raise self._fail('list recipes', e) from e

    def get_recipe(self, recipe_id):
        try:
            recipe = self.session.query(Recipe).filter_by(id=recipe_id).first()
            if recipe is None:
                raise NotFoundError('Item not found.')
            return recipe.to_dict()
        except SQLAlchemyError as e:
            raise self._fail(f'fetch recipe {recipe_id}', e) from e

    def get_price_by_name(self, name):
        try:
            recipe = (
                self.session.query(Recipe)
                .filter_by(name=name)
                .order_by(Recipe.id.asc())
                .first()
            )
        except SQLAlchemyError as e:
            raise self._fail('fetch item by name', e) from e
        if recipe is None:
            raise NotFoundError('Item not found.')
        return price_value(recipe.npc_sell_price)

    def _insert_material(self, recipe_id, material):
        self.session.add(RecipeMaterial(recipe_id=recipe_id, **material))
        self.session.flush()

    def _insert_materials(self, recipe_id, materials):
        for material in materials:
            self._insert_material(recipe_id, material)

    def create_recipe(self, name, quantity_produced, npc_sell_price, materials):
        data = validate_recipe_payload(name, quantity_produced, npc_sell_price, materials)

        try:
            recipe = Recipe(
                name=data['name'],
                quantity_produced=data['quantity_produced'],
                npc_sell_price=data['npc_sell_price']
            )
            self.session.add(recipe)
            self.session.flush()
            recipe_id = recipe.id

            self._insert_materials(recipe_id, data['materials'])
            self.session.commit()
        except SQLAlchemyError as e:
            raise self._fail('save recipe', e) from e

        logger.info(f"Created recipe {recipe_id} '{data['name']}' with {len(data['materials'])} materials")
        return recipe_id

    def update_recipe(self, recipe_id, name, quantity_produced, npc_sell_price, materials):
        """Replace the recipe's fields and its whole material set in one transaction."""
        data = validate_recipe_payload(name, quantity_produced, npc_sell_price, materials)

        try:
            updated = (
                self.session.query(Recipe)
                .filter_by(id=recipe_id)
                .update({
                    'name': data['name'],
                    'quantity_produced': data['quantity_produced'],
                    'npc_sell_price': data['npc_sell_price']
                }, synchronize_session='fetch')
            )
            if updated == 0:
                self.session.rollback()
                raise NotFoundError('Item not found for update.')

            self.session.query(RecipeMaterial).filter_by(recipe_id=recipe_id).delete(synchronize_session='fetch')
            self._insert_materials(recipe_id, data['materials'])
            self.session.commit()
        except SQLAlchemyError as e:
            raise self._fail(f'update recipe {recipe_id}', e) from e

        logger.info(f"Updated recipe {recipe_id} with {len(data['materials'])} materials")
        return recipe_id

    def delete_recipe(self, recipe_id):
        try:
            # Materials go with it through ON DELETE CASCADE
            deleted = (
                self.session.query(Recipe)
                .filter_by(id=recipe_id)
                .delete(synchronize_session='fetch')
            )
            if deleted == 0:
                self.session.rollback()
                raise NotFoundError('Item not found for deletion.')
            self.session.commit()
        except SQLAlchemyError as e:
            raise self._fail(f'delete recipe {recipe_id}', e) from e

        logger.info(f"Deleted recipe {recipe_id}")
        return recipe_id
