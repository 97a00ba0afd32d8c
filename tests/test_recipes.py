"""
Tests for recipe CRUD, visibility and scaling.
"""

from models import db, Notification, Recipe, RecipeTag


def test_create_recipe(make_user, client_for):
    signed_in = client_for(make_user(name='Chef'))
    response = signed_in.post('/api/recipes', json={
        'title': '  Weeknight   Pasta ',
        'ingredients': [
            {'amount': 200, 'unit': 'g', 'name': 'Spaghetti'},
            '1 1/2 cups tomato sauce',
            {'name': 'Salt'},
        ],
        'instructions': 'Boil pasta.\r\nAdd sauce.',
        'servings': 2,
        'tags': ['Dinner', 'dinner', ' Quick '],
    })
    assert response.status_code == 201
    body = response.get_json()
    data = body['data']

    assert data['title'] == 'Weeknight Pasta'
    assert data['instructions'] == 'Boil pasta.\nAdd sauce.'
    assert data['ingredients'] == [
        {'amount': 200.0, 'unit': 'g', 'name': 'Spaghetti'},
        {'amount': 1.5, 'unit': 'cups', 'name': 'tomato sauce'},
        {'amount': None, 'unit': None, 'name': 'Salt'},
    ]
    assert data['tags'] == ['dinner', 'quick']
    assert data['difficulty'] == 'easy'
    assert data['isPublic'] is True
    assert data['author']['name'] == 'Chef'
    assert data['avgRating'] == 0
    assert 'First Recipe' in [a['achievement']['name'] for a in body['newAchievements']]


def test_create_recipe_validation(make_user, client_for, recipe_payload):
    signed_in = client_for(make_user())

    assert signed_in.post('/api/recipes', json=recipe_payload(title='')).status_code == 400
    assert signed_in.post('/api/recipes', json=recipe_payload(ingredients=[])).status_code == 400
    assert signed_in.post('/api/recipes', json=recipe_payload(ingredients=[{'amount': 1}])).status_code == 400
    assert signed_in.post('/api/recipes', json=recipe_payload(instructions='  ')).status_code == 400
    assert signed_in.post('/api/recipes', json=recipe_payload(tags='dinner')).status_code == 400
    images = [{'url': 'https://cdn.example.com/a.jpg', 'isPrimary': True},
              {'url': 'https://cdn.example.com/b.jpg', 'isPrimary': True}]
    assert signed_in.post('/api/recipes', json=recipe_payload(images=images)).status_code == 400


def test_create_recipe_requires_login(client, recipe_payload):
    assert client.post('/api/recipes', json=recipe_payload()).status_code == 401


def test_unknown_difficulty_falls_back_to_easy(make_user, client_for, create_recipe):
    data = create_recipe(client_for(make_user()), difficulty='impossible')
    assert data['difficulty'] == 'easy'


def test_first_image_becomes_primary(make_user, client_for, create_recipe):
    data = create_recipe(client_for(make_user()), images=[
        {'url': 'https://cdn.example.com/a.jpg'},
        {'url': 'javascript:alert(1)'},
        {'url': 'https://cdn.example.com/b.jpg'},
    ])
    assert [image['url'] for image in data['images']] == [
        'https://cdn.example.com/a.jpg', 'https://cdn.example.com/b.jpg',
    ]
    assert data['images'][0]['isPrimary'] is True
    assert data['image'] == 'https://cdn.example.com/a.jpg'


def test_private_recipe_is_hidden_from_others(client, make_user, client_for, create_recipe):
    author_id = make_user()
    author = client_for(author_id)
    recipe = create_recipe(author, isPublic=False)

    assert author.get(f"/api/recipes/{recipe['id']}").status_code == 200
    assert client.get(f"/api/recipes/{recipe['id']}").status_code == 404
    assert client_for(make_user()).get(f"/api/recipes/{recipe['id']}").status_code == 404

    listing = client.get('/api/recipes').get_json()
    assert listing['data'] == []
    assert listing['pagination']['total'] == 0


def test_list_recipes_filters(client, make_user, client_for, create_recipe):
    author = client_for(make_user())
    create_recipe(author, title='Lemon Tart', difficulty='hard')
    create_recipe(author, title='Toast', image='https://cdn.example.com/toast.jpg')

    titles = [r['title'] for r in client.get('/api/recipes?difficulty=hard').get_json()['data']]
    assert titles == ['Lemon Tart']

    titles = [r['title'] for r in client.get('/api/recipes?search=lemon').get_json()['data']]
    assert titles == ['Lemon Tart']

    titles = [r['title'] for r in client.get('/api/recipes?featured=true').get_json()['data']]
    assert titles == ['Toast']


def test_update_recipe(app, make_user, client_for, create_recipe):
    author = client_for(make_user())
    recipe = create_recipe(author)

    response = author.put(f"/api/recipes/{recipe['id']}", json={
        'title': 'Better Pasta',
        'tags': ['dinner', 'family'],
    })
    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['title'] == 'Better Pasta'
    assert data['tags'] == ['dinner', 'family']
    # Fields not in the body are untouched
    assert len(data['ingredients']) == 3

    with app.app_context():
        assert RecipeTag.query.filter_by(recipe_id=recipe['id']).count() == 2


def test_update_recipe_permissions(client, make_user, client_for, create_recipe):
    recipe = create_recipe(client_for(make_user()))

    assert client.put(f"/api/recipes/{recipe['id']}", json={'title': 'Nope'}).status_code == 401
    other = client_for(make_user())
    assert other.put(f"/api/recipes/{recipe['id']}", json={'title': 'Nope'}).status_code == 403
    assert other.delete(f"/api/recipes/{recipe['id']}").status_code == 403
    assert other.put('/api/recipes/9999', json={'title': 'Nope'}).status_code == 404


def test_delete_recipe(app, make_user, client_for, create_recipe):
    author = client_for(make_user())
    recipe = create_recipe(author)
    client_for(make_user()).post(f"/api/recipes/{recipe['id']}/rating", json={'rating': 4})

    assert author.delete(f"/api/recipes/{recipe['id']}").status_code == 200
    assert author.get(f"/api/recipes/{recipe['id']}").status_code == 404
    with app.app_context():
        assert db.session.get(Recipe, recipe['id']) is None


def test_new_recipe_notifies_followers(app, make_user, client_for, create_recipe):
    author_id = make_user(name='Chef')
    follower_id = make_user()
    client_for(follower_id).post('/api/users/follow', json={'userId': author_id, 'action': 'follow'})

    author = client_for(author_id)
    recipe = create_recipe(author)
    create_recipe(author, title='Secret', isPublic=False)

    with app.app_context():
        notifications = Notification.query.filter_by(user_id=follower_id, type='NEW_RECIPE_FROM_FOLLOWING').all()
        assert len(notifications) == 1
        assert notifications[0].related_id == recipe['id']


def test_scaled_recipe(client, make_user, client_for, create_recipe):
    recipe = create_recipe(client_for(make_user()))

    response = client.get(f"/api/recipes/{recipe['id']}/scaled?scale=1.5")
    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['scaleLabel'] == '1.5x'
    assert data['originalServings'] == 2
    assert data['servings'] == 3
    spaghetti, sauce, salt = data['ingredients']
    assert spaghetti['amount'] == 300
    assert spaghetti['displayAmount'] == '300'
    assert sauce['displayAmount'] == '¾'
    assert salt['amount'] is None
    assert 'displayAmount' not in salt

    half = client.get(f"/api/recipes/{recipe['id']}/scaled?scale=0.5").get_json()['data']
    assert half['scaleLabel'] == '½x'
    assert half['servings'] == 1


def test_scaled_recipe_rejects_bad_scale(client, make_user, client_for, create_recipe):
    recipe = create_recipe(client_for(make_user()))
    assert client.get(f"/api/recipes/{recipe['id']}/scaled?scale=0").status_code == 400
    assert client.get(f"/api/recipes/{recipe['id']}/scaled?scale=21").status_code == 400
    assert client.get(f"/api/recipes/{recipe['id']}/scaled?scale=20").status_code == 200
