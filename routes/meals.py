"""
Meal Routes

Meal memories: the owner's list, public browsing and CRUD.
"""

import logging

from flask import Blueprint, request
from flask_login import login_required, current_user

from models import db, Meal, Follow
from services.achievements import evaluate_meal_achievements
from services.meals import validate_meal_payload, apply_meal_values
from services.notifications import notify_meal_tags
from services.storage import delete_image
from utils.errors import NotFoundError, PermissionDeniedError, AuthenticationError
from utils.request_helpers import (
    get_json_body, get_pagination, build_pagination, parse_bool, safe_int, success, viewer_id,
)

logger = logging.getLogger(__name__)

meals_bp = Blueprint('meals', __name__, url_prefix='/api/meals')


def _apply_search(query):
    search = (request.args.get('search') or '').strip()
    if search:
        like = f'%{search}%'
        query = query.filter(db.or_(Meal.name.ilike(like), Meal.description.ilike(like)))
    return query


def _paginated_meals(query):
    page, limit = get_pagination()
    total = query.count()
    meals = (
        query.order_by(Meal.date.desc(), Meal.created_at.desc(), Meal.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return success([meal.to_dict() for meal in meals], pagination=build_pagination(page, limit, total))


def _get_own_meal(meal_id):
    meal = db.session.get(Meal, meal_id)
    if meal is None:
        raise NotFoundError('Meal not found')
    if meal.author_id != current_user.id:
        raise PermissionDeniedError('You can only modify your own meals')
    return meal


@meals_bp.route('', methods=['GET'])
@login_required
def my_meals():
    return _paginated_meals(_apply_search(Meal.query.filter_by(author_id=current_user.id)))


@meals_bp.route('', methods=['POST'])
@login_required
def create_meal():
    values = validate_meal_payload(get_json_body(), current_user.id)

    meal = Meal(author_id=current_user.id)
    tagged = apply_meal_values(meal, values)
    db.session.add(meal)
    db.session.commit()
    logger.info('User %s created meal %s', current_user.id, meal.id)

    if tagged:
        notify_meal_tags(current_user, meal, tagged)
    new_achievements = evaluate_meal_achievements(current_user.id)

    return success(meal.to_dict(), status=201, message='Meal created', newAchievements=new_achievements)


@meals_bp.route('/public', methods=['GET'])
def public_meals():
    query = _apply_search(Meal.query.filter(Meal.is_public.is_(True)))

    if parse_bool(request.args.get('tastebuddiesOnly')):
        viewer = viewer_id()
        if viewer is None:
            raise AuthenticationError('Sign in to filter by TasteBuddies')
        followed = db.session.query(Follow.following_id).filter(Follow.follower_id == viewer)
        query = query.filter(Meal.author_id.in_(followed.scalar_subquery()))

    return _paginated_meals(query)


@meals_bp.route('/recent', methods=['GET'])
def recent_meals():
    limit = safe_int(request.args.get('limit'), default=6, min_val=1, max_val=50)
    meals = (
        Meal.query.filter(Meal.is_public.is_(True))
        .order_by(Meal.created_at.desc(), Meal.id.desc())
        .limit(limit)
        .all()
    )
    return success([meal.to_dict() for meal in meals])


@meals_bp.route('/<int:meal_id>', methods=['GET'])
def get_meal(meal_id):
    meal = db.session.get(Meal, meal_id)
    if meal is None or (not meal.is_public and meal.author_id != viewer_id()):
        raise NotFoundError('Meal not found')
    return success(meal.to_dict())


@meals_bp.route('/<int:meal_id>', methods=['PUT'])
@login_required
def update_meal(meal_id):
    meal = _get_own_meal(meal_id)
    values = validate_meal_payload(get_json_body(), current_user.id, partial=True)

    removed_urls = []
    if 'images' in values:
        kept = {image['url'] for image in values['images']}
        removed_urls = [image.url for image in meal.images if image.url not in kept]

    tagged = apply_meal_values(meal, values)
    db.session.commit()

    for url in removed_urls:
        delete_image(url)
    if tagged:
        notify_meal_tags(current_user, meal, tagged)
    new_achievements = evaluate_meal_achievements(current_user.id)

    return success(meal.to_dict(), message='Meal updated', newAchievements=new_achievements)


@meals_bp.route('/<int:meal_id>', methods=['DELETE'])
@login_required
def delete_meal(meal_id):
    meal = _get_own_meal(meal_id)
    urls = [image.url for image in meal.images]

    db.session.delete(meal)
    db.session.commit()
    logger.info('User %s deleted meal %s', current_user.id, meal_id)

    for url in urls:
        delete_image(url)
    return success(message='Meal deleted')
