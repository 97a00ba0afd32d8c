"""
Achievement Service

Evaluates achievement criteria for a user and awards any achievement
whose threshold has been reached. Every criterion is a count or
rating aggregate compared against the achievement's threshold.

The trigger helpers (evaluate_recipe_achievements etc.) are called after
writes in the routes. They swallow and log failures so a broken
criterion never fails the user's request.
"""

import logging

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from models import (
    db, User, Recipe, RecipeImage, IngredientEntry, Rating, Comment, Favorite,
    Follow, Meal, MealImage, RecipeBookEntry, RecipeBookCategory,
    Achievement, UserAchievement,
)
from constants.achievements import (
    ACHIEVEMENT_DEFINITIONS, RECIPE_COUNT, FAVORITES_COUNT, FOLLOWERS_COUNT,
    RATINGS_COUNT, COMMENTS_COUNT, INGREDIENTS_COUNT, SPECIAL, MEAL_COUNT,
    PHOTO_COUNT, FIVE_STAR_CHEF, CONSISTENT_QUALITY, BFF, SUPREME_LEADER,
    FAVORITES_CATEGORY_NAME,
)
from services.follows import has_mutual_follow

logger = logging.getLogger(__name__)


# ============================================
# CRITERIA
# ============================================

def count_recipes(user):
    return Recipe.query.filter_by(author_id=user.id).count()


def count_meals(user):
    return Meal.query.filter_by(author_id=user.id).count()


def count_photos(user):
    """Recipe gallery images plus meal images."""
    recipe_photos = (
        db.session.query(func.count(RecipeImage.id))
        .join(Recipe, RecipeImage.recipe_id == Recipe.id)
        .filter(Recipe.author_id == user.id)
        .scalar()
    )
    meal_photos = (
        db.session.query(func.count(MealImage.id))
        .join(Meal, MealImage.meal_id == Meal.id)
        .filter(Meal.author_id == user.id)
        .scalar()
    )
    return (recipe_photos or 0) + (meal_photos or 0)


def count_favorites_received(user):
    """Quick favorites plus "Favorites" recipe book entries on the user's recipes."""
    favorites = (
        db.session.query(func.count(Favorite.id))
        .join(Recipe, Favorite.recipe_id == Recipe.id)
        .filter(Recipe.author_id == user.id)
        .scalar()
    )
    book_favorites = (
        db.session.query(func.count(RecipeBookEntry.id))
        .join(Recipe, RecipeBookEntry.recipe_id == Recipe.id)
        .join(RecipeBookCategory, RecipeBookEntry.category_id == RecipeBookCategory.id)
        .filter(Recipe.author_id == user.id)
        .filter(func.lower(RecipeBookCategory.name) == FAVORITES_CATEGORY_NAME.lower())
        .scalar()
    )
    return (favorites or 0) + (book_favorites or 0)


def count_followers(user):
    return Follow.query.filter_by(following_id=user.id).count()


def _rating_aggregates(user):
    """(recipe_id, avg, count) for each of the user's rated recipes."""
    return (
        db.session.query(Rating.recipe_id, func.avg(Rating.rating), func.count(Rating.id))
        .join(Recipe, Rating.recipe_id == Recipe.id)
        .filter(Recipe.author_id == user.id)
        .group_by(Rating.recipe_id)
        .all()
    )


def has_five_star_recipe(user):
    """1 if any recipe has at least 3 ratings averaging 4.5 or more."""
    for _, avg, count in _rating_aggregates(user):
        if count >= 3 and avg >= 4.5:
            return 1
    return 0


def count_quality_recipes(user):
    """Recipes with at least 2 ratings averaging 4.0 or more."""
    return sum(1 for _, avg, count in _rating_aggregates(user) if count >= 2 and avg >= 4.0)


def count_ratings_received(user):
    return sum(count for _, _, count in _rating_aggregates(user))


def max_comments_on_recipe(user):
    """Largest number of comments on any single recipe by the user."""
    counts = (
        db.session.query(func.count(Comment.id))
        .join(Recipe, Comment.recipe_id == Recipe.id)
        .filter(Recipe.author_id == user.id)
        .group_by(Comment.recipe_id)
        .all()
    )
    return max((row[0] for row in counts), default=0)


def count_unique_ingredients(user):
    """Distinct ingredient names (case and whitespace insensitive)."""
    names = (
        db.session.query(IngredientEntry.name)
        .join(Recipe, IngredientEntry.recipe_id == Recipe.id)
        .filter(Recipe.author_id == user.id)
        .all()
    )
    return len({name.strip().lower() for (name,) in names if name and name.strip()})


def special_progress(user, achievement):
    if achievement.name == BFF:
        return 1 if has_mutual_follow(user.id) else 0
    if achievement.name == SUPREME_LEADER:
        owner_email = (current_app.config.get('SITE_OWNER_EMAIL') or '').lower()
        return 1 if owner_email and user.email.lower() == owner_email else 0
    return 0


def ratings_progress(user, achievement):
    if achievement.name == FIVE_STAR_CHEF:
        return has_five_star_recipe(user)
    if achievement.name == CONSISTENT_QUALITY:
        return count_quality_recipes(user)
    return count_ratings_received(user)


CRITERIA = {
    RECIPE_COUNT: lambda user, achievement: count_recipes(user),
    FAVORITES_COUNT: lambda user, achievement: count_favorites_received(user),
    FOLLOWERS_COUNT: lambda user, achievement: count_followers(user),
    RATINGS_COUNT: ratings_progress,
    COMMENTS_COUNT: lambda user, achievement: max_comments_on_recipe(user),
    INGREDIENTS_COUNT: lambda user, achievement: count_unique_ingredients(user),
    SPECIAL: special_progress,
    MEAL_COUNT: lambda user, achievement: count_meals(user),
    PHOTO_COUNT: lambda user, achievement: count_photos(user),
}


def calculate_progress(user, achievement):
    """Current progress value of a user toward an achievement."""
    criterion = CRITERIA.get(achievement.type)
    if criterion is None:
        logger.warning('No criterion for achievement type %s', achievement.type)
        return 0
    return int(criterion(user, achievement) or 0)


# ============================================
# EVALUATION
# ============================================

def evaluate_achievements(user_id, types=None):
    """
    Evaluate achievements for a user and award the ones now reached.

    Args:
        user_id: User to evaluate
        types: Optional iterable of achievement types to restrict evaluation

    Returns:
        dict with new_achievements (list of UserAchievement), evaluated
        (number of criteria checked) and already_earned (number skipped)
    """
    result = {'new_achievements': [], 'evaluated': 0, 'already_earned': 0}

    user = db.session.get(User, user_id)
    if user is None:
        logger.warning('Skipping achievement evaluation for unknown user %s', user_id)
        return result

    query = Achievement.query.filter_by(is_active=True)
    if types:
        query = query.filter(Achievement.type.in_(list(types)))
    achievements = query.order_by(Achievement.id).all()

    earned_ids = {
        row[0] for row in
        db.session.query(UserAchievement.achievement_id).filter_by(user_id=user_id).all()
    }

    awards = []
    for achievement in achievements:
        if achievement.id in earned_ids:
            result['already_earned'] += 1
            continue

        result['evaluated'] += 1
        try:
            progress = calculate_progress(user, achievement)
        except Exception:
            db.session.rollback()
            logger.exception('Failed to evaluate achievement "%s" for user %s', achievement.name, user_id)
            continue

        if achievement.threshold is not None and progress >= achievement.threshold:
            awards.append((achievement, progress))

    # One commit per award so a raced duplicate only loses itself
    for achievement, progress in awards:
        user_achievement = UserAchievement(
            user_id=user_id,
            achievement_id=achievement.id,
            progress=progress,
        )
        db.session.add(user_achievement)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            logger.warning('Achievement "%s" for user %s was already awarded by another request',
                           achievement.name, user_id)
            continue
        result['new_achievements'].append(user_achievement)
        logger.info('User %s earned "%s"', user_id, achievement.name)

    return result


def _safe_evaluate(user_id, types):
    """Evaluate and serialize new awards, logging instead of raising."""
    try:
        result = evaluate_achievements(user_id, types)
        return [ua.to_dict() for ua in result['new_achievements']]
    except Exception:
        db.session.rollback()
        logger.exception('Achievement evaluation failed for user %s', user_id)
        return []


def evaluate_recipe_achievements(user_id):
    return _safe_evaluate(user_id, [RECIPE_COUNT, INGREDIENTS_COUNT, PHOTO_COUNT])


def evaluate_meal_achievements(user_id):
    return _safe_evaluate(user_id, [MEAL_COUNT, PHOTO_COUNT])


def evaluate_follow_achievements(follower_id, followed_id):
    """The followed user may reach a follower milestone; both may become BFFs."""
    awarded = _safe_evaluate(followed_id, [FOLLOWERS_COUNT, SPECIAL])
    _safe_evaluate(follower_id, [SPECIAL])
    return awarded


def evaluate_favorite_achievements(recipe_author_id):
    return _safe_evaluate(recipe_author_id, [FAVORITES_COUNT])


def evaluate_rating_achievements(recipe_author_id):
    return _safe_evaluate(recipe_author_id, [RATINGS_COUNT])


def evaluate_comment_achievements(recipe_author_id):
    return _safe_evaluate(recipe_author_id, [COMMENTS_COUNT])


def evaluate_all_achievements(user_id):
    return _safe_evaluate(user_id, None)


# ============================================
# SEEDING
# ============================================

def seed_achievements():
    """
    Insert or update the built-in achievement definitions, keyed by name.

    Returns:
        Tuple of (created, updated) counts
    """
    created = 0
    updated = 0
    for definition in ACHIEVEMENT_DEFINITIONS:
        achievement = Achievement.query.filter_by(name=definition['name']).first()
        if achievement is None:
            db.session.add(Achievement(**definition))
            created += 1
            continue
        changed = False
        for key, value in definition.items():
            if getattr(achievement, key) != value:
                setattr(achievement, key, value)
                changed = True
        if changed:
            updated += 1
    db.session.commit()
    logger.info('Seeded achievements: %d created, %d updated', created, updated)
    return created, updated
