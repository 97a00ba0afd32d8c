"""
Tests for image uploads. The B2 client is replaced with an in-memory fake.
"""

from io import BytesIO

import pytest
from botocore.exceptions import ClientError
from PIL import Image

from models import db, User
from services.storage import image_exists, check_connection


class FakeS3Client:
    def __init__(self, bucket='tastebuddy-test'):
        self.bucket = bucket
        self.uploads = {}
        self.deleted = []

    def upload_fileobj(self, fileobj, bucket, key, ExtraArgs=None):
        self.uploads[key] = {'bucket': bucket, 'data': fileobj.read(), 'extra': ExtraArgs}

    def delete_object(self, Bucket, Key):
        self.deleted.append(Key)

    def head_object(self, Bucket, Key):
        if Key not in self.uploads:
            raise ClientError({'Error': {'Code': '404', 'Message': 'Not Found'}}, 'HeadObject')
        return {'ContentLength': len(self.uploads[Key]['data'])}

    def head_bucket(self, Bucket):
        if Bucket != self.bucket:
            raise ClientError({'Error': {'Code': '403', 'Message': 'Forbidden'}}, 'HeadBucket')
        return {}


@pytest.fixture
def s3(monkeypatch):
    fake = FakeS3Client()
    monkeypatch.setattr('services.storage.boto3.client', lambda **kwargs: fake)
    return fake


def _png(width=64, height=48):
    buffer = BytesIO()
    Image.new('RGB', (width, height), (200, 80, 40)).save(buffer, 'PNG')
    buffer.seek(0)
    return buffer


def test_recipe_image_upload(s3, make_user, client_for):
    user_id = make_user()
    response = client_for(user_id).post('/api/upload/recipe-image', data={
        'image': (_png(), 'dinner.png', 'image/png'),
    }, content_type='multipart/form-data')

    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['type'] == 'image/png'
    assert (data['width'], data['height']) == (64, 48)
    assert data['url'] == f"https://cdn.tastebuddy.test/recipes/{data['filename']}"

    key = f"recipes/{data['filename']}"
    stored = s3.uploads[key]
    assert stored['bucket'] == 'tastebuddy-test'
    assert stored['extra']['ContentType'] == 'image/png'
    assert stored['extra']['Metadata'] == {'user-id': str(user_id), 'original-name': 'dinner.png'}


def test_large_images_are_resized(s3, make_user, client_for):
    response = client_for(make_user()).post('/api/upload/profile-photo', data={
        'image': (_png(2000, 1000), 'me.png', 'image/png'),
    }, content_type='multipart/form-data')
    data = response.get_json()['data']
    assert (data['width'], data['height']) == (1024, 512)


def test_profile_photo_replaces_previous(app, s3, make_user, client_for):
    user_id = make_user(image='https://cdn.tastebuddy.test/profiles/old.png')
    response = client_for(user_id).post('/api/upload/profile-photo', data={
        'image': (_png(), 'me.png', 'image/png'),
    }, content_type='multipart/form-data')
    assert response.status_code == 200

    assert s3.deleted == ['profiles/old.png']
    with app.app_context():
        assert db.session.get(User, user_id).image == response.get_json()['data']['url']


def test_invalid_uploads(s3, make_user, client_for):
    signed_in = client_for(make_user())

    missing = signed_in.post('/api/upload/recipe-image', data={}, content_type='multipart/form-data')
    assert missing.status_code == 400

    fake_png = signed_in.post('/api/upload/recipe-image', data={
        'image': (BytesIO(b'not an image at all'), 'fake.png', 'image/png'),
    }, content_type='multipart/form-data')
    assert fake_png.status_code == 400

    wrong_type = signed_in.post('/api/upload/recipe-image', data={
        'image': (_png(), 'dinner.gif', 'image/gif'),
    }, content_type='multipart/form-data')
    assert wrong_type.status_code == 400
    assert s3.uploads == {}


def test_upload_requires_login(client, s3):
    response = client.post('/api/upload/recipe-image', data={
        'image': (_png(), 'dinner.png', 'image/png'),
    }, content_type='multipart/form-data')
    assert response.status_code == 401


def test_deleting_recipe_removes_stored_images(s3, make_user, client_for, create_recipe):
    author = client_for(make_user())
    recipe = create_recipe(author, images=[
        {'url': 'https://cdn.tastebuddy.test/recipes/a.jpg'},
        {'url': 'https://elsewhere.example.com/b.jpg'},
    ])
    assert author.delete(f"/api/recipes/{recipe['id']}").status_code == 200
    assert s3.deleted == ['recipes/a.jpg']


def test_changing_primary_image_keeps_gallery(s3, make_user, client_for, create_recipe):
    author = client_for(make_user())
    urls = [f'https://cdn.tastebuddy.test/recipes/{name}.jpg' for name in ('a', 'b', 'c')]
    recipe = create_recipe(author, images=[{'url': url} for url in urls])

    response = author.put(f"/api/recipes/{recipe['id']}", json={'image': urls[1]})
    assert response.status_code == 200
    data = response.get_json()['data']
    assert [image['url'] for image in data['images']] == urls
    assert [image['isPrimary'] for image in data['images']] == [False, True, False]
    assert data['image'] == urls[1]
    assert s3.deleted == []


def test_replacing_gallery_removes_dropped_images(s3, make_user, client_for, create_recipe):
    author = client_for(make_user())
    urls = [f'https://cdn.tastebuddy.test/recipes/{name}.jpg' for name in ('a', 'b')]
    recipe = create_recipe(author, images=[{'url': url} for url in urls])

    response = author.put(f"/api/recipes/{recipe['id']}", json={'images': [{'url': urls[1]}]})
    assert [image['url'] for image in response.get_json()['data']['images']] == [urls[1]]
    assert s3.deleted == ['recipes/a.jpg']


def test_image_exists(app, s3, make_user, client_for):
    response = client_for(make_user()).post('/api/upload/recipe-image', data={
        'image': (_png(), 'dinner.png', 'image/png'),
    }, content_type='multipart/form-data')
    url = response.get_json()['data']['url']

    with app.app_context():
        assert image_exists(url) is True
        assert image_exists('https://cdn.tastebuddy.test/recipes/missing.png') is False
        assert image_exists('https://elsewhere.example.com/recipes/a.png') is False


def test_check_connection(app, s3):
    with app.app_context():
        assert check_connection() is True
        s3.bucket = 'another-bucket'
        assert check_connection() is False


def test_check_connection_when_unconfigured(app):
    app.config['B2_ENDPOINT'] = ''
    with app.app_context():
        assert check_connection() is False


def test_deep_health_check_reports_storage(client, s3):
    assert client.get('/api/health?deep=true').get_json()['storage'] == 'connected'
    s3.bucket = 'another-bucket'
    assert client.get('/api/health?deep=true').get_json()['storage'] == 'disconnected'
    assert 'storage' not in client.get('/api/health').get_json()
