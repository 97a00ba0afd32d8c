"""
Shared pytest fixtures.

Every test gets a fresh in-memory database with the achievement
catalogue seeded. Tests talk to the API through Flask test clients;
each signed-in client has its own cookie jar.
"""

import itertools
import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app  # noqa: E402
from config import TestingConfig  # noqa: E402
from models import db, User  # noqa: E402
from services.achievements import seed_achievements  # noqa: E402

PASSWORD = 'password123'


@pytest.fixture
def app(monkeypatch):
    for name in ('FEATURE_ENABLE_PAYMENTS', 'FEATURE_ENABLE_BETA_FEATURES'):
        monkeypatch.delenv(name, raising=False)

    app = create_app(TestingConfig)
    app.config['FEATURE_FLAGS'] = dict(TestingConfig.FEATURE_FLAGS)
    with app.app_context():
        db.create_all()
        seed_achievements()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Create a user directly in the database and return its id."""
    counter = itertools.count(1)

    def _make_user(name=None, email=None, password=PASSWORD, **fields):
        n = next(counter)
        with app.app_context():
            user = User(name=name or f'User {n}', email=email or f'user{n}@example.com', **fields)
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
            return user.id

    return _make_user


@pytest.fixture
def client_for(app):
    """Return a new test client signed in as the given user id."""
    def _client_for(user_id, password=PASSWORD):
        with app.app_context():
            email = db.session.get(User, user_id).email
        signed_in = app.test_client()
        response = signed_in.post('/api/auth/login', json={'email': email, 'password': password})
        assert response.status_code == 200, response.get_json()
        return signed_in

    return _client_for


@pytest.fixture
def recipe_payload():
    def _recipe_payload(**overrides):
        payload = {
            'title': 'Weeknight Pasta',
            'description': 'Quick tomato pasta',
            'ingredients': [
                {'amount': 200, 'unit': 'g', 'name': 'Spaghetti'},
                {'amount': 0.5, 'unit': 'cup', 'name': 'Tomato sauce'},
                {'name': 'Salt'},
            ],
            'instructions': 'Boil pasta.\nAdd sauce.',
            'cookTime': '20 minutes',
            'servings': 2,
            'difficulty': 'easy',
            'tags': ['Dinner', 'Quick'],
        }
        payload.update(overrides)
        return payload

    return _recipe_payload


@pytest.fixture
def create_recipe(recipe_payload):
    """Create a recipe through the API and return its JSON."""
    def _create_recipe(as_client, **overrides):
        response = as_client.post('/api/recipes', json=recipe_payload(**overrides))
        assert response.status_code == 201, response.get_json()
        return response.get_json()['data']

    return _create_recipe


@pytest.fixture
def enable_payments(app):
    app.config['FEATURE_FLAGS']['enable_payments'] = True
    return app
