"""
User Routes

Profiles, privacy and notification settings, the follow graph and
per-user listings (recipes, meals, achievements, favorites).
"""

import logging
import re

from flask import Blueprint
from flask_login import login_required, current_user

from constants import (
    MAX_LENGTHS, PROFILE_URL_PATTERN, VALID_EMAIL_VISIBILITIES, VALID_FOLLOW_ACTIONS,
    VALID_EMAIL_DIGESTS, PREFERENCE_API_FIELDS,
)
from models import db, User, Follow, Recipe, Meal, Favorite, UserAchievement
from services.achievements import evaluate_follow_achievements, evaluate_all_achievements
from services.follows import (
    is_following, follow_counts, get_tastebuddies, follow_user, unfollow_user,
)
from services.notifications import notify_new_follower
from services.privacy import get_user_with_privacy
from services.search import serialize_recipes
from utils.errors import ValidationError, PermissionDeniedError
from utils.request_helpers import (
    get_json_body, get_pagination, build_pagination, get_or_404, safe_int, success, viewer_id,
)
from utils.sanitizer import sanitize_text, sanitize_url

logger = logging.getLogger(__name__)

users_bp = Blueprint('users', __name__, url_prefix='/api/users')


def _profile_url(data, key, label):
    """Profile links must be http(s) URLs; an empty value clears the link."""
    value = data.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if not isinstance(value, str) or not re.match(PROFILE_URL_PATTERN, value.strip()):
        raise ValidationError(f'{label} must start with http:// or https://')
    url = sanitize_url(value)
    if not url or len(url) > MAX_LENGTHS['url']:
        raise ValidationError(f'{label} is not a valid URL')
    return url


def _paginated_users(query):
    page, limit = get_pagination(default_limit=20)
    total = query.count()
    users = query.offset((page - 1) * limit).limit(limit).all()
    return success([user.to_summary() for user in users], pagination=build_pagination(page, limit, total))


# ============================================
# ROUTES - SETTINGS
# ============================================

@users_bp.route('/privacy', methods=['GET'])
@login_required
def get_privacy():
    return success({'emailVisibility': current_user.email_visibility})


@users_bp.route('/privacy', methods=['PUT'])
@login_required
def update_privacy():
    data = get_json_body()
    visibility = data.get('emailVisibility')
    if visibility not in VALID_EMAIL_VISIBILITIES:
        raise ValidationError(f"emailVisibility must be one of: {', '.join(sorted(VALID_EMAIL_VISIBILITIES))}")
    current_user.email_visibility = visibility
    db.session.commit()
    return success({'emailVisibility': visibility}, message='Privacy settings updated')


def _preferences(user):
    prefs = {api_name: getattr(user, column) for api_name, column in PREFERENCE_API_FIELDS.items()}
    prefs['emailDigest'] = user.email_digest
    return prefs


@users_bp.route('/notification-preferences', methods=['GET'])
@login_required
def get_notification_preferences():
    return success(_preferences(current_user))


@users_bp.route('/notification-preferences', methods=['PUT'])
@login_required
def update_notification_preferences():
    data = get_json_body()
    updates = {}

    for api_name, column in PREFERENCE_API_FIELDS.items():
        if api_name in data:
            if not isinstance(data[api_name], bool):
                raise ValidationError(f'{api_name} must be true or false')
            updates[column] = data[api_name]

    if 'emailDigest' in data:
        if data['emailDigest'] not in VALID_EMAIL_DIGESTS:
            raise ValidationError(f"emailDigest must be one of: {', '.join(sorted(VALID_EMAIL_DIGESTS))}")
        updates['email_digest'] = data['emailDigest']

    if not updates:
        raise ValidationError('No valid preference fields provided')

    for column, value in updates.items():
        setattr(current_user, column, value)
    db.session.commit()
    return success(_preferences(current_user), message='Notification preferences updated')


@users_bp.route('/favorites', methods=['GET'])
@login_required
def my_favorites():
    page, limit = get_pagination()
    query = (
        Recipe.query.join(Favorite, Favorite.recipe_id == Recipe.id)
        .filter(Favorite.user_id == current_user.id)
        .filter(db.or_(Recipe.is_public.is_(True), Recipe.author_id == current_user.id))
    )
    total = query.count()
    recipes = (
        query.order_by(Recipe.created_at.desc(), Recipe.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return success(serialize_recipes(recipes), pagination=build_pagination(page, limit, total))


# ============================================
# ROUTES - FOLLOWS
# ============================================

@users_bp.route('/follow', methods=['POST'])
@login_required
def follow():
    data = get_json_body()
    target_id = safe_int(data.get('userId'), default=None)
    if target_id is None:
        raise ValidationError('userId is required')
    action = data.get('action', 'follow')
    if action not in VALID_FOLLOW_ACTIONS:
        raise ValidationError(f"Action must be one of: {', '.join(sorted(VALID_FOLLOW_ACTIONS))}")
    if target_id == current_user.id:
        raise ValidationError('You cannot follow yourself')

    target = get_or_404(User, target_id, 'User not found')

    if action == 'follow':
        created = follow_user(current_user.id, target.id)
        if created:
            notify_new_follower(current_user, target.id)
        message = f'You are now following {target.name}'
    else:
        unfollow_user(current_user.id, target.id)
        message = f'You unfollowed {target.name}'

    new_achievements = evaluate_follow_achievements(current_user.id, target.id)

    following_count, followers_count = follow_counts(target.id)
    return success({
        'isFollowing': action == 'follow',
        'followersCount': followers_count,
        'followingCount': following_count,
    }, message=message, newAchievements=new_achievements)


@users_bp.route('/tastebuddies', methods=['GET'])
@login_required
def tastebuddies():
    return success([user.to_summary() for user in get_tastebuddies(current_user.id)])


@users_bp.route('/<int:user_id>/follow-status', methods=['GET'])
def follow_status(user_id):
    user = get_or_404(User, user_id, 'User not found')
    following_count, followers_count = follow_counts(user.id)
    viewer = viewer_id()
    return success({
        'followingCount': following_count,
        'followersCount': followers_count,
        'isFollowing': is_following(viewer, user.id),
        'canFollow': viewer is not None and viewer != user.id,
    })


@users_bp.route('/<int:user_id>/followers', methods=['GET'])
def followers(user_id):
    get_or_404(User, user_id, 'User not found')
    query = (
        User.query.join(Follow, Follow.follower_id == User.id)
        .filter(Follow.following_id == user_id)
        .order_by(Follow.created_at.desc(), Follow.id.desc())
    )
    return _paginated_users(query)


@users_bp.route('/<int:user_id>/following', methods=['GET'])
def following(user_id):
    get_or_404(User, user_id, 'User not found')
    query = (
        User.query.join(Follow, Follow.following_id == User.id)
        .filter(Follow.follower_id == user_id)
        .order_by(Follow.created_at.desc(), Follow.id.desc())
    )
    return _paginated_users(query)


# ============================================
# ROUTES - PROFILES
# ============================================

@users_bp.route('/<int:user_id>', methods=['GET'])
def get_profile(user_id):
    user = get_or_404(User, user_id, 'User not found')
    viewer = viewer_id()

    recipes = Recipe.query.filter_by(author_id=user.id)
    if viewer != user.id:
        recipes = recipes.filter(Recipe.is_public.is_(True))
    following_count, followers_count = follow_counts(user.id)

    data = get_user_with_privacy(user, viewer)
    data['counts'] = {
        'recipes': recipes.count(),
        'followers': followers_count,
        'following': following_count,
    }
    data['isFollowing'] = is_following(viewer, user.id)
    data['paymentAccount'] = user.payment_account.to_summary() if user.payment_account else None
    return success(data)


@users_bp.route('/<int:user_id>', methods=['PUT'])
@login_required
def update_profile(user_id):
    if user_id != current_user.id:
        raise PermissionDeniedError('You can only edit your own profile')
    data = get_json_body()

    if 'name' in data:
        name = sanitize_text(data.get('name'))
        if not name:
            raise ValidationError('Name is required')
        if len(name) > MAX_LENGTHS['user_name']:
            raise ValidationError(f"Name must be at most {MAX_LENGTHS['user_name']} characters")
        current_user.name = name

    if 'bio' in data:
        bio = sanitize_text(data.get('bio'), max_length=MAX_LENGTHS['bio'] + 1)
        if len(bio) > MAX_LENGTHS['bio']:
            raise ValidationError(f"Bio must be at most {MAX_LENGTHS['bio']} characters")
        current_user.bio = bio or None

    if 'image' in data:
        current_user.image = sanitize_url(data.get('image')) or None

    if 'instagramUrl' in data:
        current_user.instagram_url = _profile_url(data, 'instagramUrl', 'Instagram URL')
    if 'websiteUrl' in data:
        current_user.website_url = _profile_url(data, 'websiteUrl', 'Website URL')

    db.session.commit()
    logger.info('User %s updated their profile', current_user.id)
    return success(get_user_with_privacy(current_user, current_user.id), message='Profile updated')


@users_bp.route('/<int:user_id>/recipes', methods=['GET'])
def user_recipes(user_id):
    get_or_404(User, user_id, 'User not found')
    page, limit = get_pagination()
    query = Recipe.query.filter_by(author_id=user_id)
    if viewer_id() != user_id:
        query = query.filter(Recipe.is_public.is_(True))
    total = query.count()
    recipes = (
        query.order_by(Recipe.created_at.desc(), Recipe.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return success(serialize_recipes(recipes), pagination=build_pagination(page, limit, total))


@users_bp.route('/<int:user_id>/meals', methods=['GET'])
def user_meals(user_id):
    get_or_404(User, user_id, 'User not found')
    page, limit = get_pagination()
    query = Meal.query.filter_by(author_id=user_id)
    if viewer_id() != user_id:
        query = query.filter(Meal.is_public.is_(True))
    total = query.count()
    meals = (
        query.order_by(Meal.date.desc(), Meal.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return success([meal.to_dict() for meal in meals], pagination=build_pagination(page, limit, total))


# ============================================
# ROUTES - ACHIEVEMENTS
# ============================================

@users_bp.route('/<int:user_id>/achievements', methods=['GET'])
def user_achievements(user_id):
    get_or_404(User, user_id, 'User not found')
    earned = (
        UserAchievement.query.filter_by(user_id=user_id)
        .order_by(UserAchievement.earned_at.desc(), UserAchievement.id.desc())
        .all()
    )
    return success([user_achievement.to_dict() for user_achievement in earned])


@users_bp.route('/<int:user_id>/achievements', methods=['POST'])
@login_required
def check_achievements(user_id):
    if user_id != current_user.id:
        raise PermissionDeniedError('You can only check your own achievements')

    new_achievements = evaluate_all_achievements(user_id)
    if new_achievements:
        count = len(new_achievements)
        message = f"Congratulations! You earned {count} new achievement{'s' if count != 1 else ''}!"
    else:
        message = 'No new achievements yet. Keep cooking!'
    return success({'newAchievements': new_achievements}, message=message)
