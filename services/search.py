"""
Recipe Search Service

Builds recipe search queries from request parameters, computes per-recipe
stats in bulk and produces the discovery data (filter options, popular
ingredients, platform stats).

Filters the database can express are applied in SQL. Average rating and
parsed cook time cannot be, so when a request filters or sorts on them
up to SEARCH_FETCH_LIMIT rows are fetched and handled in memory.
"""

import logging
import re
from datetime import datetime, timedelta

from sqlalchemy import case, func, or_

from models import (
    db, User, Recipe, IngredientEntry, RecipeTag, Rating, Comment, Favorite,
    Follow, RecipeBookEntry, utcnow,
)
from constants import (
    VALID_DIFFICULTIES, DIFFICULTY_LABELS, VALID_SORT_OPTIONS, DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE, SEARCH_FETCH_LIMIT,
)
from utils.errors import ValidationError, AuthenticationError

logger = logging.getLogger(__name__)

COOK_TIME_DEFAULTS = {'min': 5, 'max': 300, 'avg': 45}
SERVINGS_DEFAULTS = {'min': 1, 'max': 12, 'avg': 4}

_HOURS = re.compile(r'(\d+)\s*h(?:ours?)?', re.IGNORECASE)
_MINUTES = re.compile(r'(\d+)\s*m(?:inutes?)?', re.IGNORECASE)
_FIRST_NUMBER = re.compile(r'(\d+)')


def parse_cook_time_to_minutes(cook_time):
    """
    Convert free-text cook time to minutes.

    '1 hour 30 minutes' -> 90, '45 min' -> 45, '2h' -> 120, '25' -> 25.
    Falls back to the first number found. Returns None for empty or
    non-positive values.
    """
    if not cook_time:
        return None

    text = str(cook_time)
    hours = _HOURS.search(text)
    minutes = _MINUTES.search(text)

    total = 0
    if hours:
        total += int(hours.group(1)) * 60
    if minutes:
        total += int(minutes.group(1))

    if not hours and not minutes:
        number = _FIRST_NUMBER.search(text)
        if number:
            total = int(number.group(1))

    return total if total > 0 else None


# ============================================
# PARAMETER PARSING
# ============================================

def _get_list(args, name):
    """Collect a list param given as repeated keys, 'name[]' keys or a comma list."""
    values = args.getlist(name) + args.getlist(f'{name}[]')
    items = []
    for value in values:
        items.extend(part.strip() for part in value.split(','))
    return [item for item in items if item]


def _parse_int_param(args, name, errors, min_val=None, max_val=None):
    raw = args.get(name)
    if raw in (None, ''):
        return None
    try:
        value = int(raw)
    except (TypeError, ValueError):
        errors.append({'field': name, 'message': 'Must be an integer'})
        return None
    if min_val is not None and value < min_val:
        errors.append({'field': name, 'message': f'Must be at least {min_val}'})
        return None
    if max_val is not None and value > max_val:
        errors.append({'field': name, 'message': f'Must be at most {max_val}'})
        return None
    return value


def _parse_date_param(args, name, errors):
    raw = args.get(name)
    if not raw:
        return None
    try:
        value = datetime.fromisoformat(raw.replace('Z', '+00:00'))
    except ValueError:
        errors.append({'field': name, 'message': 'Must be an ISO 8601 date'})
        return None
    if value.tzinfo is not None:
        value = value.replace(tzinfo=None) - (value.utcoffset() or timedelta(0))
    return value


def parse_search_params(args):
    """
    Validate search query parameters.

    Args:
        args: request.args (a MultiDict)

    Returns:
        dict of normalized parameters

    Raises:
        ValidationError: With a list of field errors as details
    """
    errors = []

    query = (args.get('query') or args.get('search') or '').strip()

    difficulties = [d.lower() for d in _get_list(args, 'difficulty')]
    for difficulty in difficulties:
        if difficulty not in VALID_DIFFICULTIES:
            errors.append({'field': 'difficulty', 'message': f'Invalid difficulty: {difficulty}'})

    min_rating = None
    raw_rating = args.get('minRating')
    if raw_rating not in (None, ''):
        try:
            min_rating = float(raw_rating)
            if not 0 <= min_rating <= 5:
                raise ValueError
        except ValueError:
            errors.append({'field': 'minRating', 'message': 'Must be a number between 0 and 5'})
            min_rating = None

    sort_by = args.get('sortBy') or 'newest'
    if sort_by not in VALID_SORT_OPTIONS:
        errors.append({'field': 'sortBy', 'message': f"Must be one of: {', '.join(sorted(VALID_SORT_OPTIONS))}"})

    params = {
        'query': query,
        'difficulty': difficulties,
        'ingredients': _get_list(args, 'ingredients'),
        'excluded_ingredients': _get_list(args, 'excludedIngredients'),
        'tags': [tag.lower() for tag in _get_list(args, 'tags')],
        'cook_time_min': _parse_int_param(args, 'cookTimeMin', errors, 0, 100000),
        'cook_time_max': _parse_int_param(args, 'cookTimeMax', errors, 0, 100000),
        'servings_min': _parse_int_param(args, 'servingsMin', errors, 1, 1000),
        'servings_max': _parse_int_param(args, 'servingsMax', errors, 1, 1000),
        'min_rating': min_rating,
        'author_id': _parse_int_param(args, 'authorId', errors, 1, None),
        'tastebuddies_only': (args.get('tastebuddiesOnly') or '').lower() == 'true',
        'created_after': _parse_date_param(args, 'createdAfter', errors),
        'created_before': _parse_date_param(args, 'createdBefore', errors),
        'sort_by': sort_by,
        'page': _parse_int_param(args, 'page', errors, 1, None) or 1,
        'limit': _parse_int_param(args, 'limit', errors, 1, MAX_PAGE_SIZE) or DEFAULT_PAGE_SIZE,
    }

    if errors:
        raise ValidationError('Invalid search parameters', details=errors)
    return params


# ============================================
# STATS
# ============================================

def get_recipe_stats(recipe_ids):
    """
    Compute rating, favorite, comment and recipe book counts in bulk.

    Returns:
        dict of recipe_id -> {avgRating, ratingCount, favoriteCount,
        commentCount, bookCount}
    """
    stats = {
        recipe_id: {'avgRating': 0, 'ratingCount': 0, 'favoriteCount': 0, 'commentCount': 0, 'bookCount': 0}
        for recipe_id in recipe_ids
    }
    if not stats:
        return stats

    ids = list(stats)
    rating_rows = (
        db.session.query(Rating.recipe_id, func.avg(Rating.rating), func.count(Rating.id))
        .filter(Rating.recipe_id.in_(ids))
        .group_by(Rating.recipe_id)
        .all()
    )
    for recipe_id, avg, count in rating_rows:
        stats[recipe_id]['avgRating'] = round(float(avg), 1) if avg else 0
        stats[recipe_id]['ratingCount'] = count

    for model, key in ((Favorite, 'favoriteCount'), (Comment, 'commentCount'), (RecipeBookEntry, 'bookCount')):
        rows = (
            db.session.query(model.recipe_id, func.count(model.id))
            .filter(model.recipe_id.in_(ids))
            .group_by(model.recipe_id)
            .all()
        )
        for recipe_id, count in rows:
            stats[recipe_id][key] = count

    return stats


def serialize_recipes(recipes):
    """to_dict() each recipe with bulk-computed stats attached."""
    stats = get_recipe_stats([recipe.id for recipe in recipes])
    return [recipe.to_dict(stats=stats[recipe.id]) for recipe in recipes]


# ============================================
# SEARCH
# ============================================

def _ingredient_matches(term):
    return Recipe.ingredients.any(IngredientEntry.name.ilike(f'%{term}%'))


def _difficulty_order():
    return case({name: index for index, name in enumerate(VALID_DIFFICULTIES)}, value=Recipe.difficulty, else_=99)


def build_search_query(params, viewer_id=None):
    """Apply every SQL-expressible filter to a public recipe query."""
    query = Recipe.query.filter(Recipe.is_public.is_(True))

    if params['query']:
        like = f"%{params['query']}%"
        query = query.filter(or_(
            Recipe.title.ilike(like),
            Recipe.description.ilike(like),
            Recipe.instructions.ilike(like),
            _ingredient_matches(params['query']),
            Recipe.tags.any(RecipeTag.name == params['query'].lower()),
        ))

    if params['difficulty']:
        query = query.filter(Recipe.difficulty.in_(params['difficulty']))

    if params['ingredients']:
        query = query.filter(or_(*[_ingredient_matches(term) for term in params['ingredients']]))

    for term in params['excluded_ingredients']:
        query = query.filter(~_ingredient_matches(term))

    if params['tags']:
        query = query.filter(Recipe.tags.any(RecipeTag.name.in_(params['tags'])))

    if params['servings_min'] is not None:
        query = query.filter(Recipe.servings >= params['servings_min'])
    if params['servings_max'] is not None:
        query = query.filter(Recipe.servings <= params['servings_max'])

    if params['author_id'] is not None:
        query = query.filter(Recipe.author_id == params['author_id'])

    if params['tastebuddies_only']:
        if viewer_id is None:
            raise AuthenticationError('Sign in to filter by TasteBuddies')
        followed = db.session.query(Follow.following_id).filter(Follow.follower_id == viewer_id)
        query = query.filter(Recipe.author_id.in_(followed.scalar_subquery()))

    if params['created_after'] is not None:
        query = query.filter(Recipe.created_at >= params['created_after'])
    if params['created_before'] is not None:
        query = query.filter(Recipe.created_at <= params['created_before'])

    return query


def _apply_sql_sort(query, sort_by):
    if sort_by == 'oldest':
        return query.order_by(Recipe.created_at.asc(), Recipe.id.asc())
    if sort_by == 'title':
        return query.order_by(func.lower(Recipe.title).asc(), Recipe.id.asc())
    if sort_by == 'difficulty':
        return query.order_by(_difficulty_order(), Recipe.created_at.desc())
    if sort_by == 'popular':
        popularity = (
            db.session.query(RecipeBookEntry.recipe_id, func.count(RecipeBookEntry.id).label('entries'))
            .group_by(RecipeBookEntry.recipe_id)
            .subquery()
        )
        return (
            query.outerjoin(popularity, popularity.c.recipe_id == Recipe.id)
            .order_by(func.coalesce(popularity.c.entries, 0).desc(), Recipe.created_at.desc())
        )
    return query.order_by(Recipe.created_at.desc(), Recipe.id.desc())


def _needs_memory_pass(params):
    return (
        params['min_rating'] is not None
        or params['cook_time_min'] is not None
        or params['cook_time_max'] is not None
        or params['sort_by'] in ('rating', 'cookTime')
    )


def search_recipes(params, viewer_id=None):
    """
    Run a recipe search.

    Args:
        params: Output of parse_search_params
        viewer_id: Signed-in user id, needed for tastebuddiesOnly

    Returns:
        Tuple of (serialized recipes, total count)
    """
    query = build_search_query(params, viewer_id)
    page, limit = params['page'], params['limit']

    if not _needs_memory_pass(params):
        sql_sort = params['sort_by']
        total = query.order_by(None).count()
        recipes = _apply_sql_sort(query, sql_sort).offset((page - 1) * limit).limit(limit).all()
        return serialize_recipes(recipes), total

    sql_sort = params['sort_by'] if params['sort_by'] not in ('rating', 'cookTime') else 'newest'
    recipes = _apply_sql_sort(query, sql_sort).limit(SEARCH_FETCH_LIMIT).all()
    stats = get_recipe_stats([recipe.id for recipe in recipes])
    rows = [(recipe, stats[recipe.id], parse_cook_time_to_minutes(recipe.cook_time)) for recipe in recipes]

    if params['min_rating'] is not None:
        rows = [row for row in rows if row[1]['avgRating'] > 0 and row[1]['avgRating'] >= params['min_rating']]

    if params['cook_time_min'] is not None:
        rows = [row for row in rows if row[2] is not None and row[2] >= params['cook_time_min']]
    if params['cook_time_max'] is not None:
        rows = [row for row in rows if row[2] is not None and row[2] <= params['cook_time_max']]

    if params['sort_by'] == 'rating':
        rows.sort(key=lambda row: (row[1]['avgRating'], row[1]['ratingCount']), reverse=True)
    elif params['sort_by'] == 'cookTime':
        # Recipes without a parseable cook time go last
        rows.sort(key=lambda row: (row[2] is None, row[2] or 0))

    total = len(rows)
    start = (page - 1) * limit
    page_rows = rows[start:start + limit]
    return [recipe.to_dict(stats=recipe_stats) for recipe, recipe_stats, _ in page_rows], total


# ============================================
# DISCOVERY
# ============================================

def get_popular_ingredients(limit=20):
    """Most used ingredient names across public recipes."""
    name = func.lower(func.trim(IngredientEntry.name))
    rows = (
        db.session.query(name.label('name'), func.count(IngredientEntry.id).label('count'))
        .join(Recipe, IngredientEntry.recipe_id == Recipe.id)
        .filter(Recipe.is_public.is_(True))
        .group_by(name)
        .order_by(func.count(IngredientEntry.id).desc(), name.asc())
        .limit(limit)
        .all()
    )
    return [{'name': row.name, 'count': row.count} for row in rows]


def get_popular_tags(limit=15, since=None):
    query = (
        db.session.query(RecipeTag.name, func.count(RecipeTag.id).label('count'))
        .join(Recipe, RecipeTag.recipe_id == Recipe.id)
        .filter(Recipe.is_public.is_(True))
    )
    if since is not None:
        query = query.filter(Recipe.created_at >= since)
    rows = (
        query.group_by(RecipeTag.name)
        .order_by(func.count(RecipeTag.id).desc(), RecipeTag.name.asc())
        .limit(limit)
        .all()
    )
    return [{'name': row.name, 'count': row.count} for row in rows]


def get_filter_options(ingredient_limit=20, tag_limit=15):
    """Everything the search UI needs to render its filter controls."""
    difficulty_counts = dict(
        db.session.query(Recipe.difficulty, func.count(Recipe.id))
        .filter(Recipe.is_public.is_(True))
        .group_by(Recipe.difficulty)
        .all()
    )
    difficulties = [
        {'value': value, 'label': DIFFICULTY_LABELS[value], 'count': difficulty_counts.get(value, 0)}
        for value in VALID_DIFFICULTIES
    ]

    cook_times = [
        minutes for minutes in (
            parse_cook_time_to_minutes(row[0])
            for row in db.session.query(Recipe.cook_time).filter(Recipe.is_public.is_(True)).all()
        ) if minutes is not None
    ]
    if cook_times:
        cook_time_stats = {
            'min': min(cook_times),
            'max': max(cook_times),
            'avg': round(sum(cook_times) / len(cook_times)),
        }
    else:
        cook_time_stats = dict(COOK_TIME_DEFAULTS)

    servings_min, servings_max, servings_avg = (
        db.session.query(func.min(Recipe.servings), func.max(Recipe.servings), func.avg(Recipe.servings))
        .filter(Recipe.is_public.is_(True))
        .one()
    )
    if servings_min is None:
        servings_stats = dict(SERVINGS_DEFAULTS)
    else:
        servings_stats = {'min': servings_min, 'max': servings_max, 'avg': round(float(servings_avg))}

    return {
        'ingredients': get_popular_ingredients(ingredient_limit),
        'tags': get_popular_tags(tag_limit),
        'difficulties': difficulties,
        'cookTimeStats': cook_time_stats,
        'servingsStats': servings_stats,
    }


def get_platform_stats():
    """Homepage discovery data: popular, newest, top rated and trending."""
    public = Recipe.query.filter(Recipe.is_public.is_(True))

    favorite_counts = (
        db.session.query(Favorite.recipe_id, func.count(Favorite.id).label('favorites'))
        .group_by(Favorite.recipe_id)
        .subquery()
    )
    most_popular = (
        public.join(favorite_counts, favorite_counts.c.recipe_id == Recipe.id)
        .order_by(favorite_counts.c.favorites.desc(), Recipe.created_at.desc())
        .limit(5)
        .all()
    )

    newest = public.order_by(Recipe.created_at.desc(), Recipe.id.desc()).limit(5).all()

    rating_summary = (
        db.session.query(
            Rating.recipe_id,
            func.avg(Rating.rating).label('avg'),
            func.count(Rating.id).label('count'),
        )
        .group_by(Rating.recipe_id)
        .having(func.count(Rating.id) >= 3)
        .subquery()
    )
    highest_rated = (
        public.join(rating_summary, rating_summary.c.recipe_id == Recipe.id)
        .order_by(rating_summary.c.avg.desc(), rating_summary.c.count.desc())
        .limit(5)
        .all()
    )

    average_rating = db.session.query(func.avg(Rating.rating)).scalar()
    platform_stats = {
        'totalRecipes': public.count(),
        'totalUsers': User.query.count(),
        'totalRatings': Rating.query.count(),
        'totalFavorites': Favorite.query.count(),
        'totalComments': Comment.query.filter_by(visibility='public').count(),
        'averageRating': round(float(average_rating), 1) if average_rating else 0,
    }

    return {
        'mostPopular': serialize_recipes(most_popular),
        'newest': serialize_recipes(newest),
        'highestRated': serialize_recipes(highest_rated),
        'platformStats': platform_stats,
        'trendingTags': get_popular_tags(10, since=utcnow() - timedelta(days=30)),
    }
