"""
Routes Package

Each module defines one Flask blueprint for a slice of the JSON API.
"""

from .auth import auth_bp
from .users import users_bp
from .recipes import recipes_bp
from .comments import comments_bp
from .compliments import compliments_bp
from .notifications import notifications_bp
from .meals import meals_bp
from .recipe_book import recipe_book_bp
from .achievements import achievements_bp
from .payments import payments_bp
from .uploads import uploads_bp
from .health import health_bp

BLUEPRINTS = (
    auth_bp,
    users_bp,
    recipes_bp,
    comments_bp,
    compliments_bp,
    notifications_bp,
    meals_bp,
    recipe_book_bp,
    achievements_bp,
    payments_bp,
    uploads_bp,
    health_bp,
)


def register_blueprints(app):
    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint)
