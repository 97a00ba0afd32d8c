"""
Smoke tests for the TasteBuddy API.
Run with: python tests/smoke.py
"""

import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

def test_app_imports():
    """Verify app can be imported without errors."""
    from app import app, db
    assert app is not None
    assert db is not None
    print("OK: App imports successfully")

def test_models_import():
    """Verify models can be imported."""
    from models import User, Recipe, Meal, Compliment, PaymentAccount, Achievement
    assert User is not None
    assert Recipe is not None
    assert Meal is not None
    print("OK: Models import successfully")

def test_security_utils_import():
    """Verify security utilities can be imported."""
    from utils import validate_and_process_image, sanitize_text, sanitize_url
    assert callable(validate_and_process_image)
    assert callable(sanitize_text)
    assert callable(sanitize_url)
    print("OK: Security utils import successfully")

def test_constants_import():
    """Verify constants can be imported."""
    from constants import ACHIEVEMENT_DEFINITIONS, VALID_DIFFICULTIES, PLATFORM_FEE_CONFIG
    assert 'easy' in VALID_DIFFICULTIES
    assert any(a['name'] == 'First Recipe' for a in ACHIEVEMENT_DEFINITIONS)
    assert PLATFORM_FEE_CONFIG['default_percent'] == 5.0
    print("OK: Constants import successfully")

def test_fee_limits_unchanged():
    """Verify platform fee and tip limits have expected values."""
    from constants import PLATFORM_FEE_CONFIG, TIP_CONFIG

    # These values must not change
    assert PLATFORM_FEE_CONFIG['minimum_fee'] == 50
    assert PLATFORM_FEE_CONFIG['maximum_fee'] == 500
    assert TIP_CONFIG['minimum_amount'] == 100
    assert TIP_CONFIG['maximum_amount'] == 10000
    print("OK: Fee limits unchanged")

def test_app_runs():
    """Verify app can create test client."""
    from app import create_app
    from config import TestingConfig
    app = create_app(TestingConfig)
    with app.test_client() as client:
        response = client.get('/api/health')
        assert response.status_code == 200
        assert response.get_json()['status'] == 'ok'
        print("OK: App serves health check")

if __name__ == '__main__':
    print("Running smoke tests...\n")

    tests = [
        test_app_imports,
        test_models_import,
        test_security_utils_import,
        test_constants_import,
        test_fee_limits_unchanged,
        test_app_runs,
    ]

    failed = 0
    for test in tests:
        try:
            test()
        except Exception as e:
            print(f"FAIL: {test.__name__} - {e}")
            failed += 1

    print(f"\n{'='*40}")
    if failed:
        print(f"FAILED: {failed}/{len(tests)} tests")
        sys.exit(1)
    else:
        print(f"PASSED: {len(tests)}/{len(tests)} tests")
        sys.exit(0)
