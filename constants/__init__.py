"""
Constants Package

Whitelists, limits and static definitions shared across the application.
"""

from .validation import (
    VALID_DIFFICULTIES, DIFFICULTY_LABELS, VALID_COMMENT_VISIBILITIES,
    VALID_EMAIL_VISIBILITIES, VALID_COMPLIMENT_TYPES, VALID_FAVORITE_ACTIONS,
    VALID_FOLLOW_ACTIONS, VALID_EMAIL_DIGESTS, VALID_SORT_OPTIONS, PROFILE_URL_PATTERN,
    EMAIL_PATTERN, MAX_LENGTHS, MIN_PASSWORD_LENGTH, MAX_MEAL_IMAGES,
    MIN_COMPLIMENT_TIP, MAX_COMPLIMENT_TIP, MIN_TIP_DOLLARS, MAX_TIP_DOLLARS,
    DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, DEFAULT_NOTIFICATION_PAGE_SIZE,
    SEARCH_FETCH_LIMIT, MAX_SCALE,
)
from .units import FRACTION_VALUES, UNICODE_FRACTION_CHARS, DISPLAY_FRACTIONS, UNIT_WORDS
from .achievements import ACHIEVEMENT_TYPES, ACHIEVEMENT_DEFINITIONS
from .payments import (
    STRIPE_CONNECT_CONFIG, PLATFORM_FEE_CONFIG, TIP_CONFIG, MOCK_ACCOUNT_PREFIX,
    STRIPE_ERROR_MESSAGES,
)
from .notifications import NOTIFICATION_PREFERENCE_FIELDS, PREFERENCE_API_FIELDS
