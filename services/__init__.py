"""
Services Package

Business logic modules for TasteBuddy.
"""

from .scaling import (
    parse_fraction,
    parse_number,
    parse_ingredient,
    format_as_fraction,
    scale_ingredient,
    scale_ingredients,
    get_scale_label,
)

from .follows import (
    is_following,
    follow_counts,
    get_tastebuddies,
    follow_user,
    unfollow_user,
)

from .achievements import (
    evaluate_achievements,
    evaluate_all_achievements,
    seed_achievements,
)

from .search import (
    parse_cook_time_to_minutes,
    parse_search_params,
    search_recipes,
    get_filter_options,
    get_platform_stats,
)

from .payments import (
    calculate_platform_fee,
    format_currency,
    create_connect_account,
    sync_account,
    process_tip,
)

__all__ = [
    # Scaling
    'parse_fraction',
    'parse_number',
    'parse_ingredient',
    'format_as_fraction',
    'scale_ingredient',
    'scale_ingredients',
    'get_scale_label',
    # Follows
    'is_following',
    'follow_counts',
    'get_tastebuddies',
    'follow_user',
    'unfollow_user',
    # Achievements
    'evaluate_achievements',
    'evaluate_all_achievements',
    'seed_achievements',
    # Search
    'parse_cook_time_to_minutes',
    'parse_search_params',
    'search_recipes',
    'get_filter_options',
    'get_platform_stats',
    # Payments
    'calculate_platform_fee',
    'format_currency',
    'create_connect_account',
    'sync_account',
    'process_tip',
]
