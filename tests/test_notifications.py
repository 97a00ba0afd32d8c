"""
Tests for the notification inbox.
"""


def _gain_followers(make_user, client_for, user_id, count):
    for _ in range(count):
        client_for(make_user()).post('/api/users/follow', json={'userId': user_id, 'action': 'follow'})


def test_inbox_lists_newest_first_with_unread_count(make_user, client_for):
    user_id = make_user()
    _gain_followers(make_user, client_for, user_id, 3)
    inbox = client_for(user_id)

    data = inbox.get('/api/notifications?limit=2').get_json()['data']
    assert len(data['notifications']) == 2
    assert data['unreadCount'] == 3
    assert data['pagination']['total'] == 3
    assert data['pagination']['hasMore'] is True
    first, second = data['notifications']
    assert first['id'] > second['id']
    assert first['type'] == 'NEW_FOLLOWER'
    assert first['fromUser'] is not None


def test_mark_read_and_read_all(make_user, client_for):
    user_id = make_user()
    _gain_followers(make_user, client_for, user_id, 3)
    inbox = client_for(user_id)
    notifications = inbox.get('/api/notifications').get_json()['data']['notifications']

    response = inbox.put(f"/api/notifications/{notifications[0]['id']}")
    assert response.get_json()['data']['read'] is True

    unread = inbox.get('/api/notifications?unreadOnly=true').get_json()['data']
    assert len(unread['notifications']) == 2
    assert unread['unreadCount'] == 2

    assert inbox.post('/api/notifications/read-all').get_json()['data'] == {'updatedCount': 2}
    assert inbox.get('/api/notifications').get_json()['data']['unreadCount'] == 0


def test_other_users_notifications_are_not_found(make_user, client_for):
    user_id = make_user()
    _gain_followers(make_user, client_for, user_id, 1)
    notification_id = client_for(user_id).get('/api/notifications').get_json()['data']['notifications'][0]['id']

    stranger = client_for(make_user())
    assert stranger.put(f'/api/notifications/{notification_id}').status_code == 404
    assert stranger.delete(f'/api/notifications/{notification_id}').status_code == 404


def test_delete_notification(make_user, client_for):
    user_id = make_user()
    _gain_followers(make_user, client_for, user_id, 1)
    inbox = client_for(user_id)
    notification_id = inbox.get('/api/notifications').get_json()['data']['notifications'][0]['id']

    assert inbox.delete(f'/api/notifications/{notification_id}').status_code == 200
    assert inbox.get('/api/notifications').get_json()['data']['notifications'] == []


def test_inbox_requires_login(client):
    assert client.get('/api/notifications').status_code == 401
