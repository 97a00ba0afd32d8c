"""
Tests for meal memories: photos, tagging and visibility.
"""

from models import Notification

PHOTO = 'https://photos.example.com/meals/{}.jpg'


def _photos(count, primary=None):
    return [
        {'url': PHOTO.format(index), 'isPrimary': index == primary}
        for index in range(count)
    ]


def test_create_meal(make_user, client_for):
    user_id = make_user()
    response = client_for(user_id).post('/api/meals', json={
        'name': 'Birthday dinner',
        'description': 'Pasta at home',
        'date': '2024-05-01T19:30:00Z',
        'images': _photos(2),
    })
    assert response.status_code == 201
    body = response.get_json()
    data = body['data']
    assert data['name'] == 'Birthday dinner'
    assert data['date'] == '2024-05-01T19:30:00Z'
    assert [image['isPrimary'] for image in data['images']] == [True, False]
    assert data['authorId'] == user_id
    earned = {item['achievement']['name'] for item in body['newAchievements']}
    assert {'First Meal', 'First Shot'} <= earned


def test_meal_date_defaults_to_now(make_user, client_for):
    data = client_for(make_user()).post('/api/meals', json={'name': 'Lunch'}).get_json()['data']
    assert data['date'] is not None


def test_meal_validation(make_user, client_for):
    signed_in = client_for(make_user())

    assert signed_in.post('/api/meals', json={'name': ''}).status_code == 400
    assert signed_in.post('/api/meals', json={'name': 'Lunch', 'date': 'yesterday'}).status_code == 400
    assert signed_in.post('/api/meals', json={'name': 'Lunch', 'images': _photos(6)}).status_code == 400

    two_primary = [{'url': PHOTO.format(1), 'isPrimary': True}, {'url': PHOTO.format(2), 'isPrimary': True}]
    assert signed_in.post('/api/meals', json={'name': 'Lunch', 'images': two_primary}).status_code == 400

    response = signed_in.post('/api/meals', json={'name': 'Lunch', 'taggedUserIds': [9999]})
    assert response.status_code == 400
    assert response.get_json()['details'] == {'userIds': [9999]}


def test_explicit_primary_is_kept(make_user, client_for):
    data = client_for(make_user()).post('/api/meals', json={
        'name': 'Brunch', 'images': _photos(3, primary=2),
    }).get_json()['data']
    assert [image['isPrimary'] for image in data['images']] == [False, False, True]


def test_tagging_notifies_new_tags_only(app, make_user, client_for):
    author_id = make_user(name='Host')
    friend_id = make_user()
    other_id = make_user()
    author = client_for(author_id)

    meal = author.post('/api/meals', json={
        'name': 'Picnic', 'taggedUserIds': [friend_id, friend_id, author_id],
    }).get_json()['data']
    assert [user['id'] for user in meal['taggedUsers']] == [friend_id]

    response = author.put(f"/api/meals/{meal['id']}", json={'taggedUserIds': [friend_id, other_id]})
    assert response.status_code == 200
    assert {user['id'] for user in response.get_json()['data']['taggedUsers']} == {friend_id, other_id}

    with app.app_context():
        assert Notification.query.filter_by(user_id=friend_id, type='MEAL_TAG').count() == 1
        assert Notification.query.filter_by(user_id=other_id, type='MEAL_TAG').count() == 1
        assert Notification.query.filter_by(user_id=author_id, type='MEAL_TAG').count() == 0

    untagged = author.put(f"/api/meals/{meal['id']}", json={'taggedUserIds': [other_id]})
    assert [user['id'] for user in untagged.get_json()['data']['taggedUsers']] == [other_id]


def test_private_meals(client, make_user, client_for):
    author = client_for(make_user())
    private = author.post('/api/meals', json={'name': 'Secret snack', 'isPublic': False}).get_json()['data']
    author.post('/api/meals', json={'name': 'Open feast'})

    assert author.get(f"/api/meals/{private['id']}").status_code == 200
    assert client.get(f"/api/meals/{private['id']}").status_code == 404

    public_names = [meal['name'] for meal in client.get('/api/meals/public').get_json()['data']]
    assert public_names == ['Open feast']

    own_names = {meal['name'] for meal in author.get('/api/meals').get_json()['data']}
    assert own_names == {'Secret snack', 'Open feast'}


def test_public_meals_tastebuddies_filter(client, make_user, client_for):
    followed_id = make_user()
    stranger_id = make_user()
    viewer = client_for(make_user())
    client_for(followed_id).post('/api/meals', json={'name': 'Followed meal'})
    client_for(stranger_id).post('/api/meals', json={'name': 'Stranger meal'})
    viewer.post('/api/users/follow', json={'userId': followed_id, 'action': 'follow'})

    names = [meal['name'] for meal in viewer.get('/api/meals/public?tastebuddiesOnly=true').get_json()['data']]
    assert names == ['Followed meal']
    assert client.get('/api/meals/public?tastebuddiesOnly=true').status_code == 401


def test_meal_search_and_recent(client, make_user, client_for):
    author = client_for(make_user())
    for name in ('Taco night', 'Sushi lunch', 'Taco Tuesday'):
        author.post('/api/meals', json={'name': name})

    names = {meal['name'] for meal in author.get('/api/meals?search=taco').get_json()['data']}
    assert names == {'Taco night', 'Taco Tuesday'}

    recent = client.get('/api/meals/recent?limit=2').get_json()['data']
    assert [meal['name'] for meal in recent] == ['Taco Tuesday', 'Sushi lunch']


def test_update_and_delete_permissions(client, make_user, client_for):
    author = client_for(make_user())
    meal = author.post('/api/meals', json={'name': 'Dinner', 'images': _photos(2)}).get_json()['data']
    other = client_for(make_user())

    assert other.put(f"/api/meals/{meal['id']}", json={'name': 'Mine now'}).status_code == 403
    assert other.delete(f"/api/meals/{meal['id']}").status_code == 403
    assert client.delete(f"/api/meals/{meal['id']}").status_code == 401

    updated = author.put(f"/api/meals/{meal['id']}", json={'images': _photos(1)}).get_json()['data']
    assert len(updated['images']) == 1
    assert updated['name'] == 'Dinner'

    assert author.delete(f"/api/meals/{meal['id']}").status_code == 200
    assert author.get(f"/api/meals/{meal['id']}").status_code == 404
