"""
Validation Constants

Contains whitelist values and limits for validating user input
to ensure data integrity.
"""

# Valid difficulty levels, in display order
VALID_DIFFICULTIES = ('easy', 'medium', 'hard')

DIFFICULTY_LABELS = {
    'easy': 'Easy',
    'medium': 'Medium',
    'hard': 'Hard',
}

# Who may read a comment
VALID_COMMENT_VISIBILITIES = {'public', 'author_only', 'private'}

# Who may see a user's email address
VALID_EMAIL_VISIBILITIES = {'HIDDEN', 'FOLLOWING_ONLY', 'PUBLIC'}

VALID_COMPLIMENT_TYPES = {'message', 'tip'}

VALID_FAVORITE_ACTIONS = {'add', 'remove', 'toggle'}

VALID_FOLLOW_ACTIONS = {'follow', 'unfollow'}

VALID_EMAIL_DIGESTS = {'daily', 'weekly', 'never'}

# Search sort keys
VALID_SORT_OPTIONS = {'newest', 'oldest', 'popular', 'rating', 'title', 'cookTime', 'difficulty'}

# Profile link fields must look like web URLs
PROFILE_URL_PATTERN = r'^https?://.+'

# Email format check used at registration
EMAIL_PATTERN = r'^[^@\s]+@[^@\s]+\.[^@\s]+$'

# Maximum field lengths
MAX_LENGTHS = {
    'user_name': 100,
    'bio': 500,
    'recipe_title': 200,
    'recipe_description': 2000,
    'instructions': 50000,
    'cook_time': 50,
    'ingredient_name': 200,
    'ingredient_unit': 50,
    'tag': 50,
    'comment': 1000,
    'compliment': 500,
    'meal_name': 200,
    'meal_description': 2000,
    'category_name': 50,
    'category_description': 200,
    'image_caption': 255,
    'url': 500,
}

MIN_PASSWORD_LENGTH = 6

# Meals carry at most this many photos
MAX_MEAL_IMAGES = 5

# Tip bounds for compliments, in dollars
MIN_COMPLIMENT_TIP = 0.50
MAX_COMPLIMENT_TIP = 100.0

# Tip bounds for the payment endpoint, in dollars
MIN_TIP_DOLLARS = 1
MAX_TIP_DOLLARS = 100

# Pagination
DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 50
DEFAULT_NOTIFICATION_PAGE_SIZE = 20

# Search post-filtering works on at most this many rows
SEARCH_FETCH_LIMIT = 1000

# Largest allowed recipe scale factor
MAX_SCALE = 20
