"""
Tests for compliments: messages, tips and anonymous senders.
"""

from models import db, Compliment, Notification


def test_send_message_compliment(app, make_user, client_for, create_recipe):
    chef_id = make_user(name='Chef')
    recipe = create_recipe(client_for(chef_id))
    fan = client_for(make_user(name='Fan'))

    response = fan.post('/api/compliments', json={
        'toUserId': chef_id, 'message': 'Loved it!', 'recipeId': recipe['id'],
    })
    assert response.status_code == 201
    data = response.get_json()['data']
    assert data['type'] == 'message'
    assert data['paymentStatus'] == 'completed'
    assert data['recipe']['id'] == recipe['id']

    with app.app_context():
        notification = Notification.query.filter_by(user_id=chef_id, type='COMPLIMENT_RECEIVED').one()
        assert notification.message == 'Fan sent you a compliment about "Weeknight Pasta"'


def test_compliment_validation(make_user, client_for, create_recipe):
    chef_id = make_user()
    sender_id = make_user()
    sender = client_for(sender_id)
    other_recipe = create_recipe(client_for(make_user()))

    def send(**body):
        body.setdefault('message', 'Nice')
        return sender.post('/api/compliments', json=body).status_code

    assert send(toUserId=chef_id, type='gift') == 400
    assert send(toUserId=chef_id, message='') == 400
    assert send(toUserId=sender_id) == 400
    assert send(toUserId=9999) == 404
    assert send(toUserId=chef_id, recipeId=other_recipe['id']) == 400
    assert send(toUserId=chef_id, recipeId=9999) == 404


def test_tips_require_payments_feature(make_user, client_for):
    chef_id = make_user()
    sender = client_for(make_user())
    response = sender.post('/api/compliments', json={
        'toUserId': chef_id, 'type': 'tip', 'message': 'Thanks', 'tipAmount': 5,
    })
    assert response.status_code == 403


def test_tip_amount_bounds(enable_payments, make_user, client_for):
    chef_id = make_user()
    sender = client_for(make_user())

    def tip(amount):
        return sender.post('/api/compliments', json={
            'toUserId': chef_id, 'type': 'tip', 'message': 'Thanks', 'tipAmount': amount,
        })

    assert tip(0.25).status_code == 400
    assert tip(100.01).status_code == 400
    assert tip(None).status_code == 400
    response = tip(0.5)
    assert response.status_code == 201
    assert response.get_json()['data']['paymentStatus'] == 'pending'


def test_anonymous_sender_is_masked_for_recipient(make_user, client_for):
    chef_id = make_user()
    chef = client_for(chef_id)
    client_for(make_user(name='Secret Admirer')).post('/api/compliments', json={
        'toUserId': chef_id, 'message': 'You rock', 'isAnonymous': True,
    })

    data = chef.get('/api/compliments').get_json()['data']
    assert len(data) == 1
    assert data[0]['fromUser'] == {'id': 'anonymous', 'name': 'Anonymous', 'image': None}


def test_listing_someone_elses_compliments_is_forbidden(make_user, client_for):
    chef_id = make_user()
    assert client_for(make_user()).get(f'/api/compliments?userId={chef_id}').status_code == 403


def test_sender_can_edit_until_tip_is_processed(app, enable_payments, make_user, client_for):
    chef_id = make_user()
    chef = client_for(chef_id)
    sender = client_for(make_user())

    message = sender.post('/api/compliments', json={'toUserId': chef_id, 'message': 'Hi'}).get_json()['data']
    # A completed message is not a processed tip, so it stays editable
    assert sender.put(f"/api/compliments/{message['id']}", json={'message': 'Hello'}).status_code == 200
    assert chef.put(f"/api/compliments/{message['id']}", json={'message': 'Nope'}).status_code == 403

    tip = sender.post('/api/compliments', json={
        'toUserId': chef_id, 'type': 'tip', 'message': 'Tip', 'tipAmount': 3,
    }).get_json()['data']
    with app.app_context():
        db.session.get(Compliment, tip['id']).payment_status = 'succeeded'
        db.session.commit()

    assert sender.put(f"/api/compliments/{tip['id']}", json={'message': 'Changed'}).status_code == 400
    assert sender.delete(f"/api/compliments/{tip['id']}").status_code == 400
    assert sender.delete(f"/api/compliments/{message['id']}").status_code == 200
