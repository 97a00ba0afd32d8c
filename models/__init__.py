"""
Models Package

Exports all database models and the db instance for use throughout the application.
"""

from .base import db, utcnow, isoformat

from .user import User, Follow
from .recipe import Recipe, IngredientEntry, RecipeTag, RecipeImage, Rating, Comment, Favorite
from .meal import Meal, MealImage, MealTag
from .recipe_book import RecipeBookCategory, RecipeBookEntry
from .social import Notification, Compliment
from .payment import PaymentAccount
from .achievement import Achievement, UserAchievement

__all__ = [
    'db',
    'utcnow',
    'isoformat',
    'User',
    'Follow',
    'Recipe',
    'IngredientEntry',
    'RecipeTag',
    'RecipeImage',
    'Rating',
    'Comment',
    'Favorite',
    'Meal',
    'MealImage',
    'MealTag',
    'RecipeBookCategory',
    'RecipeBookEntry',
    'Notification',
    'Compliment',
    'PaymentAccount',
    'Achievement',
    'UserAchievement',
]
