"""
Recipe Service

Validates recipe payloads and applies them to Recipe rows.
"""

from constants import VALID_DIFFICULTIES, MAX_LENGTHS
from models import db, IngredientEntry, RecipeTag, RecipeImage
from services.scaling import parse_ingredient, parse_number
from utils.errors import ValidationError
from utils.request_helpers import safe_int
from utils.sanitizer import sanitize_text, sanitize_multiline, sanitize_url, normalize_tag


def _parse_amount(value):
    """Accept numbers or fraction strings ('1 1/2', '¾'); None when absent."""
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        raise ValidationError('Ingredient amount must be a number')
    if isinstance(value, (int, float)):
        amount = float(value)
    else:
        amount = parse_number(str(value))
        if amount == 0 and str(value).strip() not in ('0', '0.0'):
            raise ValidationError(f'Invalid ingredient amount: {value}')
    if amount < 0:
        raise ValidationError('Ingredient amount cannot be negative')
    return amount


def clean_ingredients(raw):
    """
    Normalize the ingredients list of a recipe payload.

    Each item is either a dict {amount?, unit?, name} or a free-text line
    such as '2 cups flour', which is parsed into the same shape.

    Returns:
        List of {amount, unit, name} dicts

    Raises:
        ValidationError: If the list is empty or an item has no name
    """
    if not isinstance(raw, list) or not raw:
        raise ValidationError('At least one ingredient is required')

    cleaned = []
    for index, item in enumerate(raw, start=1):
        if isinstance(item, str):
            parsed = parse_ingredient(item)
            if parsed['parseable']:
                item = {'amount': parsed['amounts'][0], 'unit': parsed['unit'], 'name': parsed['ingredient']}
            else:
                item = {'name': item}
        if not isinstance(item, dict):
            raise ValidationError(f'Ingredient {index} is invalid')

        name = sanitize_text(item.get('name'), max_length=MAX_LENGTHS['ingredient_name'])
        if not name:
            raise ValidationError(f'Ingredient {index} needs a name')
        unit = sanitize_text(item.get('unit'), max_length=MAX_LENGTHS['ingredient_unit']) or None
        cleaned.append({'amount': _parse_amount(item.get('amount')), 'unit': unit, 'name': name})

    return cleaned


def clean_tags(raw):
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValidationError('Tags must be a list')
    tags = []
    for tag in raw:
        normalized = normalize_tag(tag, MAX_LENGTHS['tag'])
        if normalized and normalized not in tags:
            tags.append(normalized)
    return tags


def clean_images(raw, limit=None):
    """
    Validate an image list ({url, filename?, caption?, alt?, width?, height?,
    fileSize?, displayOrder?, isPrimary?}).

    Images without a usable URL are dropped. When none is marked primary
    the first becomes primary.

    Raises:
        ValidationError: If more than one image is primary or over the limit
    """
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValidationError('Images must be a list')

    images = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValidationError(f'Image {index + 1} is invalid')
        url = sanitize_url(item.get('url'))
        if not url:
            continue
        images.append({
            'url': url[:MAX_LENGTHS['url']],
            'filename': sanitize_text(item.get('filename'), 255) or None,
            'caption': sanitize_text(item.get('caption'), MAX_LENGTHS['image_caption']) or None,
            'alt': sanitize_text(item.get('alt'), 255) or None,
            'width': safe_int(item.get('width'), default=None, min_val=0),
            'height': safe_int(item.get('height'), default=None, min_val=0),
            'file_size': safe_int(item.get('fileSize'), default=None, min_val=0),
            'display_order': safe_int(item.get('displayOrder'), default=index, min_val=0),
            'is_primary': item.get('isPrimary') is True,
        })

    if limit is not None and len(images) > limit:
        raise ValidationError(f'A maximum of {limit} images is allowed')

    primary_count = sum(1 for image in images if image['is_primary'])
    if primary_count > 1:
        raise ValidationError('Only one image can be marked as primary')
    if images and primary_count == 0:
        images[0]['is_primary'] = True

    return images


def validate_recipe_payload(data, partial=False):
    """
    Validate a create (partial=False) or update (partial=True) body.

    Returns:
        dict of model-ready values for the keys present in the body
    """
    values = {}

    if not partial or 'title' in data:
        title = sanitize_text(data.get('title'), max_length=MAX_LENGTHS['recipe_title'])
        if not title:
            raise ValidationError('Title is required')
        values['title'] = title

    if not partial or 'ingredients' in data:
        values['ingredients'] = clean_ingredients(data.get('ingredients'))

    if not partial or 'instructions' in data:
        instructions = sanitize_multiline(data.get('instructions'), max_length=MAX_LENGTHS['instructions'])
        if not instructions:
            raise ValidationError('Instructions are required')
        values['instructions'] = instructions

    if not partial or 'description' in data:
        values['description'] = sanitize_multiline(data.get('description'),
                                                   max_length=MAX_LENGTHS['recipe_description'])

    if not partial or 'cookTime' in data:
        values['cook_time'] = sanitize_text(data.get('cookTime'), max_length=MAX_LENGTHS['cook_time'])

    if not partial or 'servings' in data:
        values['servings'] = safe_int(data.get('servings'), default=1, min_val=1, max_val=1000)

    if not partial or 'difficulty' in data:
        difficulty = str(data.get('difficulty') or '').lower()
        values['difficulty'] = difficulty if difficulty in VALID_DIFFICULTIES else 'easy'

    if not partial or 'tags' in data:
        values['tags'] = clean_tags(data.get('tags'))

    if not partial or 'isPublic' in data:
        values['is_public'] = data.get('isPublic', True) is not False

    if partial and 'images' not in data and 'image' in data:
        # Only the primary image changes; the gallery is kept
        values['image'] = sanitize_url(data.get('image')) or None
    elif not partial or 'images' in data:
        images = clean_images(data.get('images'))
        image = sanitize_url(data.get('image')) or None
        if not images and image:
            images = [{'url': image, 'filename': None, 'caption': None, 'alt': None, 'width': None,
                       'height': None, 'file_size': None, 'display_order': 0, 'is_primary': True}]
        values['images'] = images
        values['image'] = next((img['url'] for img in images if img['is_primary']), image)

    return values


def apply_recipe_values(recipe, values):
    """Copy validated values onto a Recipe, replacing child collections."""
    for field in ('title', 'description', 'instructions', 'cook_time', 'servings',
                  'difficulty', 'is_public', 'image'):
        if field in values:
            setattr(recipe, field, values[field])

    if 'ingredients' in values:
        recipe.ingredients = [
            IngredientEntry(position=position, amount=item['amount'], unit=item['unit'], name=item['name'])
            for position, item in enumerate(values['ingredients'])
        ]

    if 'tags' in values:
        if recipe.id is not None and recipe.tags:
            # Flush removals first so re-added tags do not hit the unique constraint
            recipe.tags = []
            db.session.flush()
        recipe.tags = [RecipeTag(name=tag) for tag in values['tags']]

    if 'images' in values:
        recipe.images = [RecipeImage(**image) for image in values['images']]
    elif values.get('image'):
        set_primary_image(recipe, values['image'])

    return recipe


def set_primary_image(recipe, url):
    """Mark the gallery image with this url as primary, appending it when new."""
    primary = next((image for image in recipe.images if image.url == url), None)
    if primary is None:
        primary = RecipeImage(url=url, display_order=len(recipe.images))
        recipe.images.append(primary)
    for image in recipe.images:
        image.is_primary = image is primary
    return primary
