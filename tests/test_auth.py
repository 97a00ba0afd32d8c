"""
Tests for registration, login and session handling.
"""


def test_register_creates_user_and_signs_in(client):
    response = client.post('/api/auth/register', json={
        'name': 'Ada', 'email': 'Ada@Example.com', 'password': 'secret1',
    })
    assert response.status_code == 201
    body = response.get_json()
    assert body['success'] is True
    assert body['data']['email'] == 'ada@example.com'

    me = client.get('/api/auth/me')
    assert me.status_code == 200
    assert me.get_json()['data']['name'] == 'Ada'


def test_register_rejects_duplicate_email(client, make_user):
    make_user(email='taken@example.com')
    response = client.post('/api/auth/register', json={
        'name': 'Other', 'email': 'TAKEN@example.com', 'password': 'secret1',
    })
    assert response.status_code == 400
    assert response.get_json()['success'] is False


def test_register_validates_fields(client):
    short_password = client.post('/api/auth/register', json={
        'name': 'Ada', 'email': 'ada@example.com', 'password': '123',
    })
    assert short_password.status_code == 400

    missing_name = client.post('/api/auth/register', json={
        'email': 'ada@example.com', 'password': 'secret1',
    })
    assert missing_name.status_code == 400

    long_name = client.post('/api/auth/register', json={
        'name': 'x' * 101, 'email': 'ada@example.com', 'password': 'secret1',
    })
    assert long_name.status_code == 400


def test_login_checks_password(client, make_user):
    make_user(email='cook@example.com', password='right-password')

    wrong = client.post('/api/auth/login', json={'email': 'cook@example.com', 'password': 'wrong'})
    assert wrong.status_code == 401
    assert wrong.get_json() == {'success': False, 'error': 'Invalid email or password'}

    right = client.post('/api/auth/login', json={'email': 'COOK@example.com', 'password': 'right-password'})
    assert right.status_code == 200


def test_me_requires_login(client):
    response = client.get('/api/auth/me')
    assert response.status_code == 401
    assert response.get_json()['success'] is False


def test_logout_ends_session(make_user, client_for):
    user_id = make_user()
    signed_in = client_for(user_id)
    assert signed_in.post('/api/auth/logout').status_code == 200
    assert signed_in.get('/api/auth/me').status_code == 401


def test_non_json_body_is_rejected(client):
    response = client.post('/api/auth/login', data='not json', content_type='text/plain')
    assert response.status_code == 400


def test_unknown_route_returns_json_404(client):
    response = client.get('/api/does-not-exist')
    assert response.status_code == 404
    assert response.get_json()['success'] is False


def test_health_check(client):
    response = client.get('/api/health')
    assert response.status_code == 200
    data = response.get_json()
    assert data['status'] == 'ok'
    assert data['database'] == 'connected'
    assert data['storageConfigured'] is True
