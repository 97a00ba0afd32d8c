"""
Auth Routes

Registration and session login/logout.
"""

import logging
import re

from flask import Blueprint
from flask_login import login_user, logout_user, login_required, current_user

from constants import EMAIL_PATTERN, MAX_LENGTHS, MIN_PASSWORD_LENGTH
from models import db, User
from services.achievements import evaluate_all_achievements
from utils.errors import ValidationError, AuthenticationError
from utils.request_helpers import get_json_body, require_text, success

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')


@auth_bp.route('/register', methods=['POST'])
def register():
    data = get_json_body()
    name = require_text(data, 'name', 'Name', MAX_LENGTHS['user_name'])
    email = require_text(data, 'email', 'Email', 255).lower()
    if not re.match(EMAIL_PATTERN, email):
        raise ValidationError('Invalid email address')

    password = data.get('password')
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')

    if User.query.filter_by(email=email).first():
        raise ValidationError('An account with this email already exists')

    user = User(name=name, email=email)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    logger.info('Registered user %s', user.id)

    login_user(user)
    # The site owner earns Supreme Leader on sign-up
    evaluate_all_achievements(user.id)
    return success(user.to_dict(), status=201, message='Account created')


@auth_bp.route('/login', methods=['POST'])
def login():
    data = get_json_body()
    email = str(data.get('email') or '').strip().lower()
    password = data.get('password')
    if not email or not isinstance(password, str) or not password:
        raise ValidationError('Email and password are required')

    user = User.query.filter_by(email=email).first()
    if user is None or not user.check_password(password):
        raise AuthenticationError('Invalid email or password')

    login_user(user, remember=data.get('remember') is True)
    logger.info('User %s logged in', user.id)
    return success(user.to_dict())


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return success(message='Logged out')


@auth_bp.route('/me')
@login_required
def me():
    return success(current_user.to_dict())
