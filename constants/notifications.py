"""
Notification Constants

Notification types and the user preference flag that gates each one.
"""

NEW_FOLLOWER = 'NEW_FOLLOWER'
RECIPE_COMMENT = 'RECIPE_COMMENT'
COMPLIMENT_RECEIVED = 'COMPLIMENT_RECEIVED'
NEW_RECIPE_FROM_FOLLOWING = 'NEW_RECIPE_FROM_FOLLOWING'
MEAL_TAG = 'MEAL_TAG'

# Notification type -> User column that must be True for delivery
NOTIFICATION_PREFERENCE_FIELDS = {
    NEW_FOLLOWER: 'notify_on_new_follower',
    RECIPE_COMMENT: 'notify_on_recipe_comment',
    COMPLIMENT_RECEIVED: 'notify_on_compliment',
    NEW_RECIPE_FROM_FOLLOWING: 'notify_on_new_recipe_from_following',
    MEAL_TAG: 'notify_on_meal_tag',
}

# API field name -> User column for the preferences endpoint
PREFERENCE_API_FIELDS = {
    'notifyOnNewFollower': 'notify_on_new_follower',
    'notifyOnRecipeComment': 'notify_on_recipe_comment',
    'notifyOnCompliment': 'notify_on_compliment',
    'notifyOnNewRecipeFromFollowing': 'notify_on_new_recipe_from_following',
    'notifyOnMealTag': 'notify_on_meal_tag',
    'emailNotifications': 'email_notifications',
}
