"""
Notification Service

Creates in-app notifications. Each notification type is gated by a
preference flag on the recipient, and nobody is notified about their
own actions.

Notification helpers never raise: a failure is logged and the
triggering request carries on.
"""

import logging

from models import db, User, Notification
from constants.notifications import (
    NOTIFICATION_PREFERENCE_FIELDS, NEW_FOLLOWER, RECIPE_COMMENT,
    COMPLIMENT_RECEIVED, NEW_RECIPE_FROM_FOLLOWING, MEAL_TAG,
)
from services.follows import follower_ids

logger = logging.getLogger(__name__)


def should_notify(user, notification_type):
    """Check the recipient's preference flag for this notification type."""
    field = NOTIFICATION_PREFERENCE_FIELDS.get(notification_type)
    if field is None:
        return True
    return bool(getattr(user, field, True))


def create_notification(user_id, notification_type, title, message, from_user_id=None,
                        related_id=None, related_type=None, commit=True):
    """
    Create a notification if the recipient wants it.

    Args:
        user_id: Recipient user id
        notification_type: One of the NOTIFICATION_PREFERENCE_FIELDS keys
        title: Short heading
        message: Body text
        from_user_id: User who triggered it (skipped if same as recipient)
        related_id: Id of the recipe/meal/compliment involved
        related_type: 'recipe', 'meal' or 'compliment'
        commit: Commit the session after adding

    Returns:
        The Notification, or None when skipped
    """
    if from_user_id is not None and from_user_id == user_id:
        return None

    recipient = db.session.get(User, user_id)
    if recipient is None:
        logger.warning('Notification recipient %s does not exist', user_id)
        return None
    if not should_notify(recipient, notification_type):
        logger.debug('User %s opted out of %s notifications', user_id, notification_type)
        return None

    notification = Notification(
        user_id=user_id,
        from_user_id=from_user_id,
        type=notification_type,
        title=title,
        message=message[:500],
        related_id=related_id,
        related_type=related_type,
    )
    db.session.add(notification)
    if commit:
        db.session.commit()
    return notification


def notify_new_follower(follower, followed_user_id):
    try:
        return create_notification(
            followed_user_id, NEW_FOLLOWER, 'New Follower!',
            f'{follower.name} started following you',
            from_user_id=follower.id, related_id=follower.id, related_type='user',
        )
    except Exception:
        db.session.rollback()
        logger.exception('Failed to create follower notification for user %s', followed_user_id)
        return None


def notify_recipe_comment(commenter, recipe):
    try:
        return create_notification(
            recipe.author_id, RECIPE_COMMENT, 'New Comment',
            f'{commenter.name} commented on your recipe "{recipe.title}"',
            from_user_id=commenter.id, related_id=recipe.id, related_type='recipe',
        )
    except Exception:
        db.session.rollback()
        logger.exception('Failed to create comment notification for recipe %s', recipe.id)
        return None


def notify_compliment(compliment, sender, recipe=None):
    """Notify the recipient of a compliment or tip."""
    is_tip = compliment.type == 'tip' and compliment.tip_amount
    sender_name = 'Someone' if compliment.is_anonymous else sender.name

    if is_tip:
        title = 'New Tip Received!'
        amount = f'${compliment.tip_amount:.2f}'
        if recipe:
            message = f'{sender_name} sent you a {amount} tip for "{recipe.title}"'
        else:
            message = f'{sender_name} sent you a {amount} tip'
    else:
        title = 'New Compliment!'
        if recipe:
            message = f'{sender_name} sent you a compliment about "{recipe.title}"'
        else:
            message = f'{sender_name} sent you a compliment'

    try:
        return create_notification(
            compliment.to_user_id, COMPLIMENT_RECEIVED, title, message,
            from_user_id=None if compliment.is_anonymous else sender.id,
            related_id=compliment.id, related_type='compliment',
        )
    except Exception:
        db.session.rollback()
        logger.exception('Failed to create compliment notification %s', compliment.id)
        return None


def notify_followers_of_new_recipe(author, recipe):
    """Fan a NEW_RECIPE_FROM_FOLLOWING notification out to every follower."""
    if not recipe.is_public:
        return 0
    created = 0
    try:
        for follower_id in follower_ids(author.id):
            notification = create_notification(
                follower_id, NEW_RECIPE_FROM_FOLLOWING, 'New Recipe!',
                f'{author.name} posted a new recipe: "{recipe.title}"',
                from_user_id=author.id, related_id=recipe.id, related_type='recipe',
                commit=False,
            )
            if notification is not None:
                created += 1
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception('Failed to notify followers of recipe %s', recipe.id)
        return 0
    logger.info('Notified %d followers of new recipe %s', created, recipe.id)
    return created


def notify_meal_tags(author, meal, user_ids):
    """Tell newly tagged users they appear in a meal."""
    created = 0
    try:
        for user_id in user_ids:
            notification = create_notification(
                user_id, MEAL_TAG, 'You were tagged!',
                f'{author.name} tagged you in "{meal.name}"',
                from_user_id=author.id, related_id=meal.id, related_type='meal',
                commit=False,
            )
            if notification is not None:
                created += 1
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception('Failed to create meal tag notifications for meal %s', meal.id)
        return 0
    return created
