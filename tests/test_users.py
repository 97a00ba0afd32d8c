"""
Tests for profiles, privacy, notification preferences and follows.
"""

from models import db, Follow, Notification, User


def test_profile_hides_email_by_default(client, make_user, client_for):
    owner_id = make_user(email='owner@example.com')

    anonymous = client.get(f'/api/users/{owner_id}').get_json()['data']
    assert anonymous['email'] is None
    assert 'emailVisibility' not in anonymous
    assert anonymous['counts'] == {'recipes': 0, 'followers': 0, 'following': 0}
    assert anonymous['paymentAccount'] is None

    own = client_for(owner_id).get(f'/api/users/{owner_id}').get_json()['data']
    assert own['email'] == 'owner@example.com'
    assert own['emailVisibility'] == 'HIDDEN'


def test_public_email_is_visible_to_everyone(client, make_user):
    owner_id = make_user(email='open@example.com', email_visibility='PUBLIC')
    data = client.get(f'/api/users/{owner_id}').get_json()['data']
    assert data['email'] == 'open@example.com'


def test_following_only_email_requires_owner_to_follow_viewer(client, make_user, client_for):
    owner_id = make_user(email='friends@example.com', email_visibility='FOLLOWING_ONLY')
    viewer_id = make_user()
    viewer = client_for(viewer_id)

    assert viewer.get(f'/api/users/{owner_id}').get_json()['data']['email'] is None
    assert client.get(f'/api/users/{owner_id}').get_json()['data']['email'] is None

    # The viewer following the owner is not enough
    viewer.post('/api/users/follow', json={'userId': owner_id, 'action': 'follow'})
    assert viewer.get(f'/api/users/{owner_id}').get_json()['data']['email'] is None

    client_for(owner_id).post('/api/users/follow', json={'userId': viewer_id, 'action': 'follow'})
    assert viewer.get(f'/api/users/{owner_id}').get_json()['data']['email'] == 'friends@example.com'


def test_update_profile(make_user, client_for):
    user_id = make_user()
    signed_in = client_for(user_id)

    response = signed_in.put(f'/api/users/{user_id}', json={
        'name': 'Chef Ada',
        'bio': 'I cook things',
        'instagramUrl': 'https://instagram.com/ada',
        'websiteUrl': '',
    })
    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['name'] == 'Chef Ada'
    assert data['instagramUrl'] == 'https://instagram.com/ada'
    assert data['websiteUrl'] is None


def test_update_profile_validation(make_user, client_for):
    user_id = make_user()
    signed_in = client_for(user_id)

    assert signed_in.put(f'/api/users/{user_id}', json={'bio': 'x' * 501}).status_code == 400
    assert signed_in.put(f'/api/users/{user_id}', json={'websiteUrl': 'ftp://example.com'}).status_code == 400
    assert signed_in.put(f'/api/users/{user_id}', json={'name': '   '}).status_code == 400


def test_cannot_edit_someone_elses_profile(make_user, client_for):
    user_id = make_user()
    other_id = make_user()
    response = client_for(user_id).put(f'/api/users/{other_id}', json={'name': 'Hacked'})
    assert response.status_code == 403


def test_privacy_settings(make_user, client_for):
    signed_in = client_for(make_user())
    assert signed_in.get('/api/users/privacy').get_json()['data'] == {'emailVisibility': 'HIDDEN'}

    assert signed_in.put('/api/users/privacy', json={'emailVisibility': 'EVERYONE'}).status_code == 400
    response = signed_in.put('/api/users/privacy', json={'emailVisibility': 'PUBLIC'})
    assert response.status_code == 200
    assert signed_in.get('/api/users/privacy').get_json()['data']['emailVisibility'] == 'PUBLIC'


def test_notification_preferences(make_user, client_for):
    signed_in = client_for(make_user())
    prefs = signed_in.get('/api/users/notification-preferences').get_json()['data']
    assert prefs['notifyOnNewFollower'] is True
    assert prefs['emailNotifications'] is False

    response = signed_in.put('/api/users/notification-preferences', json={'notifyOnNewFollower': False})
    assert response.status_code == 200
    assert response.get_json()['data']['notifyOnNewFollower'] is False

    assert signed_in.put('/api/users/notification-preferences',
                         json={'notifyOnNewFollower': 'no'}).status_code == 400
    assert signed_in.put('/api/users/notification-preferences', json={'unknown': True}).status_code == 400


def test_follow_and_unfollow(app, make_user, client_for):
    follower_id = make_user(name='Follower')
    target_id = make_user(name='Target')
    follower = client_for(follower_id)

    response = follower.post('/api/users/follow', json={'userId': target_id, 'action': 'follow'})
    assert response.status_code == 200
    assert response.get_json()['data']['isFollowing'] is True
    assert response.get_json()['data']['followersCount'] == 1

    # Following again is a no-op and does not notify twice
    follower.post('/api/users/follow', json={'userId': target_id, 'action': 'follow'})
    with app.app_context():
        notifications = Notification.query.filter_by(user_id=target_id, type='NEW_FOLLOWER').all()
        assert len(notifications) == 1
        assert notifications[0].from_user_id == follower_id

    status = follower.get(f'/api/users/{target_id}/follow-status').get_json()['data']
    assert status == {'followingCount': 0, 'followersCount': 1, 'isFollowing': True, 'canFollow': True}

    response = follower.post('/api/users/follow', json={'userId': target_id, 'action': 'unfollow'})
    assert response.get_json()['data']['isFollowing'] is False
    assert response.get_json()['data']['followersCount'] == 0


def test_follow_validation(make_user, client_for):
    user_id = make_user()
    signed_in = client_for(user_id)

    assert signed_in.post('/api/users/follow', json={'userId': user_id, 'action': 'follow'}).status_code == 400
    assert signed_in.post('/api/users/follow', json={'userId': 9999, 'action': 'follow'}).status_code == 404
    assert signed_in.post('/api/users/follow', json={'userId': 9999, 'action': 'poke'}).status_code == 400


def test_follow_respects_notification_preference(app, make_user, client_for):
    target_id = make_user(notify_on_new_follower=False)
    client_for(make_user()).post('/api/users/follow', json={'userId': target_id, 'action': 'follow'})
    with app.app_context():
        assert Notification.query.filter_by(user_id=target_id).count() == 0


def test_followers_and_following_lists(client, make_user, client_for):
    target_id = make_user(name='Popular')
    for _ in range(3):
        client_for(make_user()).post('/api/users/follow', json={'userId': target_id, 'action': 'follow'})

    response = client.get(f'/api/users/{target_id}/followers?limit=2')
    body = response.get_json()
    assert len(body['data']) == 2
    assert body['pagination']['total'] == 3
    assert body['pagination']['hasNextPage'] is True

    following = client.get(f'/api/users/{target_id}/following').get_json()
    assert following['data'] == []


def test_tastebuddies_are_mutual_follows_sorted_by_name(make_user, client_for):
    me_id = make_user(name='Me')
    zoe_id = make_user(name='Zoe')
    amy_id = make_user(name='Amy')
    one_way_id = make_user(name='OneWay')
    me = client_for(me_id)

    for other_id in (zoe_id, amy_id, one_way_id):
        me.post('/api/users/follow', json={'userId': other_id, 'action': 'follow'})
    for other_id in (zoe_id, amy_id):
        client_for(other_id).post('/api/users/follow', json={'userId': me_id, 'action': 'follow'})

    names = [user['name'] for user in me.get('/api/users/tastebuddies').get_json()['data']]
    assert names == ['Amy', 'Zoe']


def test_deleting_user_cascades_follows(app, make_user, client_for):
    user_id = make_user()
    other_id = make_user()
    client_for(user_id).post('/api/users/follow', json={'userId': other_id, 'action': 'follow'})

    with app.app_context():
        db.session.delete(db.session.get(User, user_id))
        db.session.commit()
        assert db.session.get(User, other_id) is not None
        assert Follow.query.count() == 0
