"""
Tests for the achievement catalogue and awarding rules.
"""

from constants import ACHIEVEMENT_DEFINITIONS
from models import db, Achievement, UserAchievement
from services import achievements as achievement_service
from services.achievements import evaluate_achievements, seed_achievements


def _earned_names(client, user_id):
    response = client.get(f'/api/users/{user_id}/achievements')
    assert response.status_code == 200
    return {item['achievement']['name'] for item in response.get_json()['data']}


def test_catalogue_is_seeded(client):
    data = client.get('/api/achievements').get_json()['data']
    assert len(data) == len(ACHIEVEMENT_DEFINITIONS)
    first_recipe = next(item for item in data if item['name'] == 'First Recipe')
    assert first_recipe['type'] == 'RECIPE_COUNT'
    assert first_recipe['threshold'] == 1


def test_seeding_is_idempotent(app):
    with app.app_context():
        seed_achievements()
        assert Achievement.query.count() == len(ACHIEVEMENT_DEFINITIONS)


def test_site_owner_is_supreme_leader(client):
    response = client.post('/api/auth/register', json={
        'name': 'Owner', 'email': 'Owner@TasteBuddy.test', 'password': 'password123',
    })
    assert response.status_code == 201
    owner_id = response.get_json()['data']['id']
    assert 'Supreme Leader' in _earned_names(client, owner_id)

    other = client.post('/api/auth/register', json={
        'name': 'Guest', 'email': 'guest@example.com', 'password': 'password123',
    })
    assert 'Supreme Leader' not in _earned_names(client, other.get_json()['data']['id'])


def test_mutual_follow_earns_bff(client, make_user, client_for):
    alice_id, bob_id = make_user(), make_user()
    alice, bob = client_for(alice_id), client_for(bob_id)

    alice.post('/api/users/follow', json={'userId': bob_id, 'action': 'follow'})
    assert 'BFF' not in _earned_names(client, alice_id)

    response = bob.post('/api/users/follow', json={'userId': alice_id, 'action': 'follow'})
    names = {item['achievement']['name'] for item in response.get_json()['newAchievements']}
    assert names == {'BFF'}
    assert 'BFF' in _earned_names(client, alice_id)
    assert 'BFF' in _earned_names(client, bob_id)


def test_achievements_are_awarded_once(app, make_user, client_for, create_recipe):
    user_id = make_user()
    create_recipe(client_for(user_id))

    with app.app_context():
        result = evaluate_achievements(user_id)
        assert result['new_achievements'] == []
        assert result['already_earned'] == 1
        assert UserAchievement.query.filter_by(user_id=user_id).count() == 1


def test_check_own_achievements(make_user, client_for):
    user_id = make_user()
    signed_in = client_for(user_id)

    response = signed_in.post(f'/api/users/{user_id}/achievements')
    assert response.status_code == 200
    assert response.get_json()['data']['newAchievements'] == []
    assert response.get_json()['message'] == 'No new achievements yet. Keep cooking!'

    assert signed_in.post(f'/api/users/{make_user()}/achievements').status_code == 403


def test_check_achievements_reports_new_awards(app, client, make_user, client_for):
    owner_id = make_user(email='owner@tastebuddy.test')
    response = client_for(owner_id).post(f'/api/users/{owner_id}/achievements')
    assert response.get_json()['message'] == 'Congratulations! You earned 1 new achievement!'
    assert 'Supreme Leader' in _earned_names(client, owner_id)


def test_raced_award_does_not_drop_other_awards(app, monkeypatch, make_user, client_for, create_recipe):
    owner_id = make_user(email='owner@tastebuddy.test')
    create_recipe(client_for(owner_id))

    with app.app_context():
        UserAchievement.query.filter_by(user_id=owner_id).delete()
        db.session.commit()

        real_progress = achievement_service.calculate_progress

        def progress_with_concurrent_award(user, achievement):
            progress = real_progress(user, achievement)
            if achievement.name == 'First Recipe':
                # Another request awards it between evaluation and commit
                db.session.add(UserAchievement(user_id=user.id, achievement_id=achievement.id, progress=progress))
                db.session.commit()
            return progress

        monkeypatch.setattr(achievement_service, 'calculate_progress', progress_with_concurrent_award)

        result = evaluate_achievements(owner_id)
        assert [award.achievement.name for award in result['new_achievements']] == ['Supreme Leader']
        assert UserAchievement.query.filter_by(user_id=owner_id).count() == 2
