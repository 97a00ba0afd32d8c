"""
Recipe Book Routes

A user's personal recipe book: categories and the recipes filed in them.
"""

import logging

from flask import Blueprint, request
from flask_login import login_required, current_user
from sqlalchemy import func

from constants import MAX_LENGTHS
from constants.achievements import FAVORITES_CATEGORY_NAME
from models import db, Recipe, RecipeBookCategory, RecipeBookEntry
from services.achievements import evaluate_favorite_achievements
from utils.errors import ValidationError, NotFoundError, ConflictError
from utils.request_helpers import (
    get_json_body, get_pagination, build_pagination, require_text, safe_int, success,
)
from utils.sanitizer import sanitize_text, sanitize_multiline

logger = logging.getLogger(__name__)

recipe_book_bp = Blueprint('recipe_book', __name__, url_prefix='/api/recipe-book')


# ============================================
# HELPERS
# ============================================

def _get_recipe(recipe_id):
    recipe = db.session.get(Recipe, recipe_id)
    if recipe is None or (not recipe.is_public and recipe.author_id != current_user.id):
        raise NotFoundError('Recipe not found')
    return recipe


def _get_own_category(category_id):
    category = RecipeBookCategory.query.filter_by(id=category_id, user_id=current_user.id).first()
    if category is None:
        raise NotFoundError('Category not found')
    return category


def _load_categories(raw_ids):
    """
    Resolve a categoryIds list to the caller's categories.

    Raises:
        ValidationError: If the value is not a list of ids
        NotFoundError: If any id is not one of the caller's categories
    """
    if not isinstance(raw_ids, list):
        raise ValidationError('categoryIds must be a list')
    ids = []
    for value in raw_ids:
        category_id = safe_int(value, default=None)
        if category_id is None:
            raise ValidationError(f'Invalid category id: {value}')
        if category_id not in ids:
            ids.append(category_id)
    if not ids:
        return []
    categories = RecipeBookCategory.query.filter(
        RecipeBookCategory.id.in_(ids), RecipeBookCategory.user_id == current_user.id
    ).all()
    if len(categories) != len(ids):
        raise NotFoundError('Category not found')
    return categories


def _clean_notes(data):
    notes = sanitize_multiline(data.get('notes'), max_length=2000)
    return notes or None


def _category_values(data, partial=False):
    values = {}
    if not partial or 'name' in data:
        name = sanitize_text(require_text(data, 'name', 'Category name', MAX_LENGTHS['category_name']))
        values['name'] = name
    if not partial or 'description' in data:
        description = sanitize_text(data.get('description'), max_length=MAX_LENGTHS['category_description'] + 1)
        if len(description) > MAX_LENGTHS['category_description']:
            raise ValidationError(
                f"Description must be at most {MAX_LENGTHS['category_description']} characters"
            )
        values['description'] = description or None
    if not partial or 'color' in data:
        values['color'] = sanitize_text(data.get('color'), max_length=20) or None
    return values


def _name_taken(name, exclude_id=None):
    query = RecipeBookCategory.query.filter(
        RecipeBookCategory.user_id == current_user.id,
        func.lower(RecipeBookCategory.name) == name.lower(),
    )
    if exclude_id is not None:
        query = query.filter(RecipeBookCategory.id != exclude_id)
    return query.first() is not None


def _refresh_author_favorites(recipe, categories):
    """Entries filed under "Favorites" count toward the author's favorites achievements."""
    if any(category.name.lower() == FAVORITES_CATEGORY_NAME.lower() for category in categories):
        evaluate_favorite_achievements(recipe.author_id)


def _recipe_counts(category_ids):
    if not category_ids:
        return {}
    rows = (
        db.session.query(RecipeBookEntry.category_id, func.count(RecipeBookEntry.id))
        .filter(RecipeBookEntry.category_id.in_(category_ids))
        .group_by(RecipeBookEntry.category_id)
        .all()
    )
    return dict(rows)


# ============================================
# ROUTES - ENTRIES
# ============================================

@recipe_book_bp.route('', methods=['GET'])
@login_required
def list_entries():
    page, limit = get_pagination()
    query = RecipeBookEntry.query.filter_by(user_id=current_user.id)

    category_id = safe_int(request.args.get('categoryId'), default=None)
    if category_id is not None:
        _get_own_category(category_id)
        query = query.filter_by(category_id=category_id)

    total = query.count()
    entries = (
        query.order_by(RecipeBookEntry.added_at.desc(), RecipeBookEntry.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return success([entry.to_dict() for entry in entries], pagination=build_pagination(page, limit, total))


@recipe_book_bp.route('', methods=['POST'])
@login_required
def add_to_book():
    data = get_json_body()
    recipe_id = safe_int(data.get('recipeId'), default=None)
    if recipe_id is None:
        raise ValidationError('recipeId is required')
    recipe = _get_recipe(recipe_id)
    notes = _clean_notes(data)
    categories = _load_categories(data.get('categoryIds') or [])

    existing = RecipeBookEntry.query.filter_by(user_id=current_user.id, recipe_id=recipe.id)

    if not categories:
        if existing.filter(RecipeBookEntry.category_id.is_(None)).first():
            raise ConflictError('Recipe is already in your recipe book')
        created = [RecipeBookEntry(user_id=current_user.id, recipe_id=recipe.id, notes=notes)]
    else:
        filed = {entry.category_id for entry in existing.all()}
        created = [
            RecipeBookEntry(user_id=current_user.id, recipe_id=recipe.id, category_id=category.id, notes=notes)
            for category in categories if category.id not in filed
        ]
        if not created:
            raise ConflictError('Recipe is already in all selected categories')

    db.session.add_all(created)
    db.session.commit()
    logger.info('User %s filed recipe %s (%d entries)', current_user.id, recipe.id, len(created))
    _refresh_author_favorites(recipe, categories)
    return success([entry.to_dict() for entry in created], status=201, message='Added to recipe book')


@recipe_book_bp.route('/recipes/<int:recipe_id>', methods=['GET'])
@login_required
def recipe_status(recipe_id):
    entries = RecipeBookEntry.query.filter_by(user_id=current_user.id, recipe_id=recipe_id).all()
    notes = next((entry.notes for entry in entries if entry.notes), None)
    return success({
        'inBook': bool(entries),
        'categories': [entry.category.to_dict() for entry in entries if entry.category],
        'notes': notes,
    })


@recipe_book_bp.route('/recipes/<int:recipe_id>', methods=['PUT'])
@login_required
def replace_recipe_entries(recipe_id):
    data = get_json_body()
    recipe = _get_recipe(recipe_id)
    notes = _clean_notes(data)
    categories = _load_categories(data.get('categoryIds') or [])

    RecipeBookEntry.query.filter_by(user_id=current_user.id, recipe_id=recipe.id).delete()
    if categories:
        entries = [
            RecipeBookEntry(user_id=current_user.id, recipe_id=recipe.id, category_id=category.id, notes=notes)
            for category in categories
        ]
    else:
        entries = [RecipeBookEntry(user_id=current_user.id, recipe_id=recipe.id, notes=notes)]
    db.session.add_all(entries)
    db.session.commit()
    _refresh_author_favorites(recipe, categories)
    return success([entry.to_dict(include_recipe=False) for entry in entries], message='Recipe book updated')


@recipe_book_bp.route('/recipes/<int:recipe_id>', methods=['DELETE'])
@login_required
def remove_from_book(recipe_id):
    deleted = RecipeBookEntry.query.filter_by(user_id=current_user.id, recipe_id=recipe_id).delete()
    if not deleted:
        db.session.rollback()
        raise NotFoundError('Recipe is not in your recipe book')
    db.session.commit()
    return success({'removedCount': deleted}, message='Removed from recipe book')


@recipe_book_bp.route('/stats', methods=['GET'])
@login_required
def book_stats():
    entries = RecipeBookEntry.query.filter_by(user_id=current_user.id)
    unique_recipes = (
        db.session.query(func.count(func.distinct(RecipeBookEntry.recipe_id)))
        .filter(RecipeBookEntry.user_id == current_user.id)
        .scalar()
    )
    return success({
        'totalUniqueRecipes': unique_recipes or 0,
        'totalEntries': entries.count(),
        'categoryCount': RecipeBookCategory.query.filter_by(user_id=current_user.id).count(),
    })


# ============================================
# ROUTES - CATEGORIES
# ============================================

@recipe_book_bp.route('/categories', methods=['GET'])
@login_required
def list_categories():
    categories = (
        RecipeBookCategory.query.filter_by(user_id=current_user.id)
        .order_by(RecipeBookCategory.created_at.asc(), RecipeBookCategory.id.asc())
        .all()
    )
    counts = _recipe_counts([category.id for category in categories])
    return success([category.to_dict(recipe_count=counts.get(category.id, 0)) for category in categories])


@recipe_book_bp.route('/categories', methods=['POST'])
@login_required
def create_category():
    values = _category_values(get_json_body())
    if _name_taken(values['name']):
        raise ConflictError('A category with this name already exists')

    category = RecipeBookCategory(user_id=current_user.id, **values)
    db.session.add(category)
    db.session.commit()
    return success(category.to_dict(recipe_count=0), status=201, message='Category created')


@recipe_book_bp.route('/categories/<int:category_id>', methods=['GET'])
@login_required
def get_category(category_id):
    category = _get_own_category(category_id)
    return success(category.to_dict(recipe_count=category.entries.count()))


@recipe_book_bp.route('/categories/<int:category_id>', methods=['PUT'])
@login_required
def update_category(category_id):
    category = _get_own_category(category_id)
    values = _category_values(get_json_body(), partial=True)
    if 'name' in values and _name_taken(values['name'], exclude_id=category.id):
        raise ConflictError('A category with this name already exists')

    for field, value in values.items():
        setattr(category, field, value)
    db.session.commit()
    return success(category.to_dict(recipe_count=category.entries.count()), message='Category updated')


@recipe_book_bp.route('/categories/<int:category_id>', methods=['DELETE'])
@login_required
def delete_category(category_id):
    category = _get_own_category(category_id)
    if category.entries.count():
        raise ConflictError('Remove all recipes from this category before deleting it')
    db.session.delete(category)
    db.session.commit()
    return success(message='Category deleted')
