from flask import Blueprint, request, jsonify, current_app
from flask_login import login_user, logout_user, login_required, current_user
from fantanome import db
from fantanome.models import User, USER_TYPES
from fantanome.services.games.errors import Conflict

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Fantanome game server!'})


@main.route('/register', methods=['POST'])
def register():
    data = request.get_json(silent=True) or {}
    email = (data.get('email') or '').strip().lower()
    password = data.get('password')
    user_type = data.get('userType') or 'participant'
    if not email or not password:
        return jsonify({'error': 'Missing email or password'}), 400
    if user_type not in USER_TYPES:
        return jsonify({'error': 'userType must be "parent" or "participant"'}), 400

    if User.query.filter_by(email=email).first():
        raise Conflict('Email already registered')

    user = User(
        email=email,
        first_name=(data.get('firstName') or '').strip() or None,
        last_name=(data.get('lastName') or '').strip() or None,
        user_type=user_type,
    )
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    login_user(user)
    current_app.logger.info(f"[register] user={user.id} type={user.user_type}")
    return jsonify({'user': user.to_dict()}), 201


@main.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get('email') or '').strip().lower()
    user = User.query.filter_by(email=email).first()
    if user and user.check_password(data.get('password') or ''):
        login_user(user, remember=True)
        return jsonify({'user': user.to_dict()})
    return jsonify({'error': 'Invalid email or password'}), 401


@main.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({'message': 'Logged out successfully.'})


@main.route('/me')
@login_required
def me():
    return jsonify({'user': current_user.to_dict()})
