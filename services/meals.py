"""
Meal Service

Validates meal payloads and applies them to Meal rows, including the
photo gallery and tagged users.
"""

from datetime import datetime, timedelta

from constants import MAX_LENGTHS, MAX_MEAL_IMAGES
from models import db, User, MealImage, MealTag, utcnow
from services.recipes import clean_images
from utils.errors import ValidationError
from utils.sanitizer import sanitize_text, sanitize_multiline


def parse_meal_date(raw):
    """Parse an ISO 8601 date or datetime into naive UTC. None/'' gives None."""
    if raw in (None, ''):
        return None
    if not isinstance(raw, str):
        raise ValidationError('Meal date must be an ISO 8601 string')
    try:
        value = datetime.fromisoformat(raw.strip().replace('Z', '+00:00'))
    except ValueError:
        raise ValidationError('Meal date must be an ISO 8601 string')
    if value.tzinfo is not None:
        value = value.replace(tzinfo=None) - (value.utcoffset() or timedelta(0))
    return value


def clean_tagged_user_ids(raw, author_id):
    """
    Validate taggedUserIds: existing users other than the author, deduplicated.

    Raises:
        ValidationError: If the value is not a list of ids or a user is unknown
    """
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValidationError('taggedUserIds must be a list')

    ids = []
    for value in raw:
        try:
            user_id = int(value)
        except (TypeError, ValueError):
            raise ValidationError(f'Invalid user id: {value}')
        if user_id != author_id and user_id not in ids:
            ids.append(user_id)

    if ids:
        found = {row[0] for row in db.session.query(User.id).filter(User.id.in_(ids)).all()}
        missing = [user_id for user_id in ids if user_id not in found]
        if missing:
            raise ValidationError('Tagged user not found', details={'userIds': missing})
    return ids


def validate_meal_payload(data, author_id, partial=False):
    """
    Validate a create (partial=False) or update (partial=True) body.

    Returns:
        dict of model-ready values for the keys present in the body
    """
    values = {}

    if not partial or 'name' in data:
        name = sanitize_text(data.get('name'), max_length=MAX_LENGTHS['meal_name'])
        if not name:
            raise ValidationError('Meal name is required')
        values['name'] = name

    if not partial or 'description' in data:
        values['description'] = sanitize_multiline(data.get('description'),
                                                   max_length=MAX_LENGTHS['meal_description'])

    if not partial or 'date' in data:
        values['date'] = parse_meal_date(data.get('date')) or (None if partial else utcnow())

    if not partial or 'isPublic' in data:
        values['is_public'] = data.get('isPublic', True) is not False

    if not partial or 'images' in data:
        values['images'] = clean_images(data.get('images'), limit=MAX_MEAL_IMAGES)

    if not partial or 'taggedUserIds' in data:
        values['tagged_user_ids'] = clean_tagged_user_ids(data.get('taggedUserIds'), author_id)

    return values


def apply_meal_values(meal, values):
    """
    Copy validated values onto a Meal.

    Returns:
        Ids of users tagged by this change that were not tagged before
    """
    for field in ('name', 'description', 'date', 'is_public'):
        if field in values:
            setattr(meal, field, values[field])

    if 'images' in values:
        meal.images = [MealImage(**image) for image in values['images']]

    newly_tagged = []
    if 'tagged_user_ids' in values:
        previous = {tag.user_id for tag in meal.tagged_users}
        wanted = values['tagged_user_ids']
        if meal.id is not None and previous:
            # Flush removals first so re-tagged users do not hit the unique constraint
            meal.tagged_users = [tag for tag in meal.tagged_users if tag.user_id in wanted]
            db.session.flush()
        kept = {tag.user_id for tag in meal.tagged_users}
        for user_id in wanted:
            if user_id not in kept:
                meal.tagged_users.append(MealTag(user_id=user_id))
        newly_tagged = [user_id for user_id in wanted if user_id not in previous]

    return newly_tagged
