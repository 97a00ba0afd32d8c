"""
Achievement Constants

Achievement types and the seeded achievement definitions.
"""

RECIPE_COUNT = 'RECIPE_COUNT'
FAVORITES_COUNT = 'FAVORITES_COUNT'
FOLLOWERS_COUNT = 'FOLLOWERS_COUNT'
RATINGS_COUNT = 'RATINGS_COUNT'
COMMENTS_COUNT = 'COMMENTS_COUNT'
INGREDIENTS_COUNT = 'INGREDIENTS_COUNT'
SPECIAL = 'SPECIAL'
MEAL_COUNT = 'MEAL_COUNT'
PHOTO_COUNT = 'PHOTO_COUNT'

ACHIEVEMENT_TYPES = (
    RECIPE_COUNT,
    FAVORITES_COUNT,
    FOLLOWERS_COUNT,
    RATINGS_COUNT,
    COMMENTS_COUNT,
    INGREDIENTS_COUNT,
    SPECIAL,
    MEAL_COUNT,
    PHOTO_COUNT,
)

# Names with criteria that differ from the plain count for their type
FIVE_STAR_CHEF = '5-Star Chef'
CONSISTENT_QUALITY = 'Consistent Quality'
HOT_TOPIC = 'Hot Topic'
BFF = 'BFF'
SUPREME_LEADER = 'Supreme Leader'

# Recipe book category whose entries count as favorites
FAVORITES_CATEGORY_NAME = 'Favorites'

ACHIEVEMENT_DEFINITIONS = [
    # Recipe count
    {'type': RECIPE_COUNT, 'name': 'First Recipe', 'threshold': 1, 'icon': '🍳', 'color': '#10B981',
     'description': 'Share your very first recipe with the community'},
    {'type': RECIPE_COUNT, 'name': 'Home Cook', 'threshold': 5, 'icon': '👨‍🍳', 'color': '#10B981',
     'description': 'Share 5 delicious recipes'},
    {'type': RECIPE_COUNT, 'name': 'Recipe Master', 'threshold': 25, 'icon': '🏆', 'color': '#F59E0B',
     'description': 'Share 25 amazing recipes with the community'},
    {'type': RECIPE_COUNT, 'name': 'Culinary Legend', 'threshold': 100, 'icon': '👑', 'color': '#8B5CF6',
     'description': "Share 100 incredible recipes - you're a true legend!"},

    # Favorites received
    {'type': FAVORITES_COUNT, 'name': 'Community Favorite', 'threshold': 50, 'icon': '❤️', 'color': '#EF4444',
     'description': 'Receive 50 total favorites on your recipes'},
    {'type': FAVORITES_COUNT, 'name': 'Beloved Chef', 'threshold': 200, 'icon': '💖', 'color': '#EC4899',
     'description': "Receive 200 total favorites - you're beloved by the community!"},
    {'type': FAVORITES_COUNT, 'name': 'Recipe Superstar', 'threshold': 1000, 'icon': '🌟', 'color': '#F59E0B',
     'description': "Receive 1000 total favorites - you're a true superstar!"},

    # Followers
    {'type': FOLLOWERS_COUNT, 'name': 'Social Butterfly', 'threshold': 10, 'icon': '🦋', 'color': '#06B6D4',
     'description': 'Gain 10 followers who love your recipes'},
    {'type': FOLLOWERS_COUNT, 'name': 'Influencer', 'threshold': 100, 'icon': '📢', 'color': '#8B5CF6',
     'description': "Gain 100 followers - you're becoming an influencer!"},
    {'type': FOLLOWERS_COUNT, 'name': 'Celebrity Chef', 'threshold': 500, 'icon': '⭐', 'color': '#F59E0B',
     'description': "Gain 500 followers - you're a celebrity in the kitchen!"},

    # Special
    {'type': SPECIAL, 'name': BFF, 'threshold': 1, 'icon': '👯', 'color': '#EC4899',
     'description': 'Become TasteBuddies with someone (mutual following)'},
    {'type': SPECIAL, 'name': SUPREME_LEADER, 'threshold': 1, 'icon': '🦄🌈', 'color': '#EC4899',
     'description': 'The legendary founder and supreme leader of TasteBuddy'},

    # Ratings
    {'type': RATINGS_COUNT, 'name': FIVE_STAR_CHEF, 'threshold': 1, 'icon': '⭐', 'color': '#F59E0B',
     'description': 'Have a recipe with 4.5+ average rating'},
    {'type': RATINGS_COUNT, 'name': CONSISTENT_QUALITY, 'threshold': 10, 'icon': '🎯', 'color': '#10B981',
     'description': 'Have 10 recipes with 4+ average rating'},

    # Comments
    {'type': COMMENTS_COUNT, 'name': HOT_TOPIC, 'threshold': 11, 'icon': '🌶️', 'color': '#EF4444',
     'description': 'Have a recipe with more than 10 comments'},

    # Ingredients
    {'type': INGREDIENTS_COUNT, 'name': 'Resourceful', 'threshold': 50, 'icon': '🧑‍🍳', 'color': '#8B5CF6',
     'description': 'Use more than 50 unique ingredients across all your recipes'},

    # Meals
    {'type': MEAL_COUNT, 'name': 'First Meal', 'threshold': 1, 'icon': '🍽️', 'color': '#3B82F6',
     'description': 'Post your first meal memory'},
    {'type': MEAL_COUNT, 'name': 'Meal Explorer', 'threshold': 5, 'icon': '🗺️', 'color': '#3B82F6',
     'description': 'Share 5 meal memories'},
    {'type': MEAL_COUNT, 'name': 'Meal Curator', 'threshold': 10, 'icon': '📚', 'color': '#3B82F6',
     'description': 'Document 10 delicious meals'},
    {'type': MEAL_COUNT, 'name': 'Meal Master', 'threshold': 25, 'icon': '🏆', 'color': '#3B82F6',
     'description': 'Share 25 amazing meal experiences'},
    {'type': MEAL_COUNT, 'name': 'Meal Legend', 'threshold': 50, 'icon': '👑', 'color': '#3B82F6',
     'description': 'Document 50 incredible meals'},

    # Photos
    {'type': PHOTO_COUNT, 'name': 'First Shot', 'threshold': 1, 'icon': '📸', 'color': '#10B981',
     'description': 'Upload your first photo'},
    {'type': PHOTO_COUNT, 'name': 'Photographer', 'threshold': 10, 'icon': '📷', 'color': '#10B981',
     'description': 'Share 10 beautiful food photos'},
    {'type': PHOTO_COUNT, 'name': 'Visual Storyteller', 'threshold': 50, 'icon': '🎨', 'color': '#10B981',
     'description': 'Capture 50 stunning food moments'},
]
