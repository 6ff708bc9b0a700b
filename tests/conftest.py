import pytest

from app import create_app
from config import TestConfig
from models import db
from services.recipe_store import RecipeStore


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.drop_all()
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return RecipeStore(db.session)


@pytest.fixture
def sword_payload():
    return {
        'name': 'Sword',
        'quantity_produced': 1,
        'npc_sell_price': 50,
        'materials': [
            {'material_name': 'Iron', 'quantity': 3, 'material_type': 'ore', 'default_npc_price': 5},
        ],
    }
