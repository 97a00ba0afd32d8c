"""
Tests for recipe ratings and quick favorites.
"""

from models import Favorite


def test_rate_recipe_and_update(make_user, client_for, create_recipe):
    recipe = create_recipe(client_for(make_user()))
    rater = client_for(make_user())

    first = rater.post(f"/api/recipes/{recipe['id']}/rating", json={'rating': 4})
    assert first.status_code == 200
    data = first.get_json()['data']
    assert data['isUpdate'] is False
    assert data['recipeStats'] == {'averageRating': 4.0, 'ratingCount': 1}

    second = rater.post(f"/api/recipes/{recipe['id']}/rating", json={'rating': 2})
    data = second.get_json()['data']
    assert data['isUpdate'] is True
    assert data['rating'] == 2
    assert data['recipeStats'] == {'averageRating': 2.0, 'ratingCount': 1}

    client_for(make_user()).post(f"/api/recipes/{recipe['id']}/rating", json={'rating': 5})
    status = rater.get(f"/api/recipes/{recipe['id']}/rating").get_json()['data']
    assert status['userRating'] == 2
    assert status['recipeStats'] == {'averageRating': 3.5, 'ratingCount': 2}


def test_rating_must_be_whole_star(make_user, client_for, create_recipe):
    recipe = create_recipe(client_for(make_user()))
    rater = client_for(make_user())
    for bad in (0, 6, 3.5, '4', True, None):
        response = rater.post(f"/api/recipes/{recipe['id']}/rating", json={'rating': bad})
        assert response.status_code == 400, bad


def test_anonymous_rating_status(client, make_user, client_for, create_recipe):
    recipe = create_recipe(client_for(make_user()))
    data = client.get(f"/api/recipes/{recipe['id']}/rating").get_json()['data']
    assert data == {'userRating': None, 'recipeStats': {'averageRating': 0, 'ratingCount': 0}}
    assert client.post(f"/api/recipes/{recipe['id']}/rating", json={'rating': 5}).status_code == 401


def test_five_star_chef_awarded_to_author(app, make_user, client_for, create_recipe):
    author_id = make_user()
    author = client_for(author_id)
    recipe = create_recipe(author)
    for rating in (5, 5):
        client_for(make_user()).post(f"/api/recipes/{recipe['id']}/rating", json={'rating': rating})
    earned = author.get(f'/api/users/{author_id}/achievements').get_json()['data']
    assert '5-Star Chef' not in [item['achievement']['name'] for item in earned]

    # Three ratings averaging 4.67
    client_for(make_user()).post(f"/api/recipes/{recipe['id']}/rating", json={'rating': 4})
    earned = author.get(f'/api/users/{author_id}/achievements').get_json()['data']
    assert '5-Star Chef' in [item['achievement']['name'] for item in earned]


def test_favorite_toggle(app, make_user, client_for, create_recipe):
    recipe = create_recipe(client_for(make_user()))
    fan_id = make_user()
    fan = client_for(fan_id)

    added = fan.post('/api/recipes/favorites', json={'recipeId': recipe['id'], 'action': 'toggle'})
    assert added.get_json()['data'] == {'isFavorited': True, 'favoriteCount': 1}

    # Adding twice keeps a single row
    again = fan.post('/api/recipes/favorites', json={'recipeId': recipe['id'], 'action': 'add'})
    assert again.get_json()['data'] == {'isFavorited': True, 'favoriteCount': 1}

    status = fan.get(f"/api/recipes/favorites?recipeId={recipe['id']}").get_json()['data']
    assert status['isFavorited'] is True

    favorites = fan.get('/api/users/favorites').get_json()['data']
    assert [item['id'] for item in favorites] == [recipe['id']]

    removed = fan.post('/api/recipes/favorites', json={'recipeId': recipe['id'], 'action': 'toggle'})
    assert removed.get_json()['data'] == {'isFavorited': False, 'favoriteCount': 0}
    with app.app_context():
        assert Favorite.query.filter_by(user_id=fan_id).count() == 0


def test_favorite_validation(client, make_user, client_for, create_recipe):
    recipe = create_recipe(client_for(make_user()), isPublic=False)
    fan = client_for(make_user())

    assert fan.post('/api/recipes/favorites', json={'action': 'add'}).status_code == 400
    assert fan.post('/api/recipes/favorites', json={'recipeId': recipe['id'], 'action': 'love'}).status_code == 400
    assert fan.post('/api/recipes/favorites', json={'recipeId': recipe['id'], 'action': 'add'}).status_code == 404

    status = client.get(f"/api/recipes/favorites?recipeId={recipe['id']}")
    assert status.status_code == 404
