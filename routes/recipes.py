"""
Recipe Routes

CRUD for recipes plus ratings, favorites, scaling, search and the
discovery endpoints.
"""

import logging

from flask import Blueprint, request
from flask_login import login_required, current_user
from sqlalchemy import or_

from constants import MAX_SCALE, VALID_DIFFICULTIES, VALID_FAVORITE_ACTIONS
from models import db, Recipe, Rating, Favorite
from services.achievements import (
    evaluate_recipe_achievements, evaluate_rating_achievements, evaluate_favorite_achievements,
)
from services.notifications import notify_followers_of_new_recipe
from services.recipes import validate_recipe_payload, apply_recipe_values
from services.scaling import scale_ingredients, get_scale_label
from services.search import (
    parse_search_params, search_recipes, get_recipe_stats, serialize_recipes,
    get_filter_options, get_popular_ingredients, get_platform_stats,
)
from services.storage import delete_image
from utils.errors import ValidationError, NotFoundError, PermissionDeniedError
from utils.request_helpers import (
    get_json_body, get_pagination, build_pagination, safe_int, safe_float,
    parse_bool, success, viewer_id,
)

logger = logging.getLogger(__name__)

recipes_bp = Blueprint('recipes', __name__, url_prefix='/api/recipes')


def get_visible_recipe(recipe_id):
    """Load a recipe the caller may see. Private recipes 404 for everyone but the author."""
    recipe = db.session.get(Recipe, recipe_id)
    if recipe is None or (not recipe.is_public and recipe.author_id != viewer_id()):
        raise NotFoundError('Recipe not found')
    return recipe


def get_own_recipe(recipe_id):
    recipe = db.session.get(Recipe, recipe_id)
    if recipe is None:
        raise NotFoundError('Recipe not found')
    if recipe.author_id != current_user.id:
        raise PermissionDeniedError('You can only modify your own recipes')
    return recipe


def rating_summary(recipe_id):
    avg, count = (
        db.session.query(db.func.avg(Rating.rating), db.func.count(Rating.id))
        .filter(Rating.recipe_id == recipe_id)
        .one()
    )
    return {
        'averageRating': round(float(avg), 1) if avg else 0,
        'ratingCount': count or 0,
    }


# ============================================
# ROUTES - RECIPES
# ============================================

@recipes_bp.route('', methods=['GET'])
def list_recipes():
    page, limit = get_pagination()
    query = Recipe.query.filter(Recipe.is_public.is_(True))

    search = (request.args.get('search') or '').strip()
    if search:
        like = f'%{search}%'
        query = query.filter(or_(
            Recipe.title.ilike(like),
            Recipe.description.ilike(like),
            Recipe.instructions.ilike(like),
        ))

    difficulty = (request.args.get('difficulty') or '').lower()
    if difficulty in VALID_DIFFICULTIES:
        query = query.filter(Recipe.difficulty == difficulty)

    if parse_bool(request.args.get('featured')):
        query = query.filter(Recipe.image.isnot(None), Recipe.image != '')

    total = query.count()
    recipes = (
        query.order_by(Recipe.created_at.desc(), Recipe.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return success(serialize_recipes(recipes), pagination=build_pagination(page, limit, total))


@recipes_bp.route('', methods=['POST'])
@login_required
def create_recipe():
    values = validate_recipe_payload(get_json_body())

    recipe = Recipe(author_id=current_user.id)
    apply_recipe_values(recipe, values)
    db.session.add(recipe)
    db.session.commit()
    logger.info('User %s created recipe %s', current_user.id, recipe.id)

    notify_followers_of_new_recipe(current_user, recipe)
    new_achievements = evaluate_recipe_achievements(current_user.id)

    stats = get_recipe_stats([recipe.id])[recipe.id]
    return success(recipe.to_dict(stats=stats), status=201,
                   message='Recipe created', newAchievements=new_achievements)


@recipes_bp.route('/<int:recipe_id>', methods=['GET'])
def get_recipe(recipe_id):
    recipe = get_visible_recipe(recipe_id)
    stats = get_recipe_stats([recipe.id])[recipe.id]
    return success(recipe.to_dict(stats=stats))


@recipes_bp.route('/<int:recipe_id>', methods=['PUT'])
@login_required
def update_recipe(recipe_id):
    recipe = get_own_recipe(recipe_id)
    values = validate_recipe_payload(get_json_body(), partial=True)

    removed_urls = []
    if 'images' in values:
        kept = {image['url'] for image in values['images']}
        removed_urls = [image.url for image in recipe.images if image.url not in kept]

    apply_recipe_values(recipe, values)
    db.session.commit()

    for url in removed_urls:
        delete_image(url)

    new_achievements = evaluate_recipe_achievements(current_user.id)
    stats = get_recipe_stats([recipe.id])[recipe.id]
    return success(recipe.to_dict(stats=stats), message='Recipe updated', newAchievements=new_achievements)


@recipes_bp.route('/<int:recipe_id>', methods=['DELETE'])
@login_required
def delete_recipe(recipe_id):
    recipe = get_own_recipe(recipe_id)
    urls = {image.url for image in recipe.images}
    if recipe.image:
        urls.add(recipe.image)

    db.session.delete(recipe)
    db.session.commit()
    logger.info('User %s deleted recipe %s', current_user.id, recipe_id)

    # Stored images are cleaned up best effort
    for url in urls:
        delete_image(url)

    return success(message='Recipe deleted')


@recipes_bp.route('/<int:recipe_id>/scaled', methods=['GET'])
def scaled_recipe(recipe_id):
    recipe = get_visible_recipe(recipe_id)
    scale = safe_float(request.args.get('scale'), default=1.0)
    if scale <= 0 or scale > MAX_SCALE:
        raise ValidationError(f'Scale must be greater than 0 and at most {MAX_SCALE}')

    ingredients = [entry.to_dict() for entry in recipe.ingredients]
    return success({
        'recipeId': recipe.id,
        'title': recipe.title,
        'scale': scale,
        'scaleLabel': get_scale_label(scale),
        'originalServings': recipe.servings,
        'servings': max(1, round(recipe.servings * scale)),
        'ingredients': scale_ingredients(ingredients, scale),
    })


# ============================================
# ROUTES - RATINGS
# ============================================

@recipes_bp.route('/<int:recipe_id>/rating', methods=['POST'])
@login_required
def rate_recipe(recipe_id):
    recipe = get_visible_recipe(recipe_id)
    data = get_json_body()

    value = data.get('rating')
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value != int(value) or not 1 <= value <= 5:
        raise ValidationError('Rating must be a whole number from 1 to 5')

    rating = Rating.query.filter_by(user_id=current_user.id, recipe_id=recipe.id).first()
    is_update = rating is not None
    if rating is None:
        rating = Rating(user_id=current_user.id, recipe_id=recipe.id, rating=int(value))
        db.session.add(rating)
    else:
        rating.rating = int(value)
    db.session.commit()

    evaluate_rating_achievements(recipe.author_id)

    return success({
        'rating': rating.rating,
        'isUpdate': is_update,
        'recipeStats': rating_summary(recipe.id),
    }, message='Rating updated' if is_update else 'Rating saved')


@recipes_bp.route('/<int:recipe_id>/rating', methods=['GET'])
def get_rating(recipe_id):
    recipe = get_visible_recipe(recipe_id)
    user_rating = None
    if viewer_id() is not None:
        rating = Rating.query.filter_by(user_id=viewer_id(), recipe_id=recipe.id).first()
        user_rating = rating.rating if rating else None
    return success({'userRating': user_rating, 'recipeStats': rating_summary(recipe.id)})


# ============================================
# ROUTES - FAVORITES
# ============================================

@recipes_bp.route('/favorites', methods=['POST'])
@login_required
def update_favorite():
    data = get_json_body()
    recipe_id = safe_int(data.get('recipeId'), default=None)
    if recipe_id is None:
        raise ValidationError('recipeId is required')
    action = data.get('action', 'toggle')
    if action not in VALID_FAVORITE_ACTIONS:
        raise ValidationError(f"Action must be one of: {', '.join(sorted(VALID_FAVORITE_ACTIONS))}")

    recipe = get_visible_recipe(recipe_id)
    favorite = Favorite.query.filter_by(user_id=current_user.id, recipe_id=recipe.id).first()

    if action == 'toggle':
        action = 'remove' if favorite else 'add'

    if action == 'add' and favorite is None:
        db.session.add(Favorite(user_id=current_user.id, recipe_id=recipe.id))
        db.session.commit()
    elif action == 'remove' and favorite is not None:
        db.session.delete(favorite)
        db.session.commit()

    evaluate_favorite_achievements(recipe.author_id)

    is_favorited = action == 'add'
    return success({
        'isFavorited': is_favorited,
        'favoriteCount': recipe.favorites.count(),
    }, message='Added to favorites' if is_favorited else 'Removed from favorites')


@recipes_bp.route('/favorites', methods=['GET'])
def favorite_status():
    recipe_id = safe_int(request.args.get('recipeId'), default=None)
    if recipe_id is None:
        raise ValidationError('recipeId is required')
    recipe = get_visible_recipe(recipe_id)

    is_favorited = False
    if viewer_id() is not None:
        is_favorited = Favorite.query.filter_by(user_id=viewer_id(), recipe_id=recipe.id).first() is not None
    return success({'isFavorited': is_favorited, 'favoriteCount': recipe.favorites.count()})


# ============================================
# ROUTES - SEARCH & DISCOVERY
# ============================================

@recipes_bp.route('/search', methods=['GET'])
def search():
    params = parse_search_params(request.args)
    recipes, total = search_recipes(params, viewer_id())
    return success(recipes, pagination=build_pagination(params['page'], params['limit'], total))


@recipes_bp.route('/filter-options', methods=['GET'])
def filter_options():
    ingredient_limit = safe_int(request.args.get('ingredientLimit'), default=20, min_val=1, max_val=100)
    tag_limit = safe_int(request.args.get('tagLimit'), default=15, min_val=1, max_val=100)
    return success(get_filter_options(ingredient_limit, tag_limit))


@recipes_bp.route('/popular-ingredients', methods=['GET'])
def popular_ingredients():
    limit = safe_int(request.args.get('limit'), default=20, min_val=1, max_val=100)
    return success(get_popular_ingredients(limit))


@recipes_bp.route('/stats', methods=['GET'])
def platform_stats():
    return success(get_platform_stats())
