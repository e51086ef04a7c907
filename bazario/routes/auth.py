import logging
from flask import Blueprint, request, jsonify
from flask_jwt_extended import (
    create_access_token, jwt_required, get_jwt_identity,
    create_refresh_token
)
from sqlalchemy.exc import SQLAlchemyError
from bazario import db, bcrypt, sign_in_required
from bazario.models import Profile
from bazario.schemas import register_schema, login_schema, profile_schema, profile_update_schema
from bazario.utils.auth import login_required, current_identity

auth_bp = Blueprint('auth', __name__)
logger = logging.getLogger(__name__)


def identity_claims(profile):
    return {
        "user_type": profile.user_type,
        "email": profile.email,
        "name": profile.full_name
    }


def issue_tokens(profile):
    return {
        'access_token': create_access_token(identity=profile.id, additional_claims=identity_claims(profile)),
        'refresh_token': create_refresh_token(identity=profile.id, additional_claims=identity_claims(profile))
    }


# ------------------ REGISTER ------------------
@auth_bp.route('/register', methods=['POST'])
def register():
    data = register_schema.load(request.get_json(silent=True) or {})

    if Profile.query.filter_by(email=data['email']).first():
        return jsonify({'message': 'An account with this email already exists'}), 400

    password = data.pop('password')
    profile = Profile(
        password_hash=bcrypt.generate_password_hash(password).decode('utf-8'),
        **data
    )

    try:
        db.session.add(profile)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Error registering %s", data['email'])
        return jsonify({'message': 'Failed to create account', 'error': str(e)}), 500

    logger.info("Registered %s profile %s", profile.user_type, profile.id)
    return jsonify({
        'message': f'{profile.user_type} registered successfully',
        'user': profile_schema.dump(profile),
        **issue_tokens(profile)
    }), 201


# ------------------ LOGIN ------------------
@auth_bp.route('/login', methods=['POST'])
def login():
    data = login_schema.load(request.get_json(silent=True) or {})

    profile = Profile.query.filter_by(email=data['email'].strip().lower()).first()
    if not profile or not bcrypt.check_password_hash(profile.password_hash, data['password']):
        return jsonify({'message': 'Invalid email or password'}), 401

    return jsonify({
        'message': 'Login successful',
        'user': profile_schema.dump(profile),
        'redirect': '/dashboard',
        **issue_tokens(profile)
    }), 200


# ------------------ PROFILE ------------------
@auth_bp.route('/profile', methods=['GET'])
@login_required
def get_profile():
    return jsonify(profile_schema.dump(current_identity())), 200


@auth_bp.route('/profile', methods=['PUT', 'PATCH'])
@login_required
def update_profile():
    profile = current_identity()
    data = profile_update_schema.load(request.get_json(silent=True) or {}, partial=True)

    for field, value in data.items():
        setattr(profile, field, value)

    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Error updating profile %s", profile.id)
        return jsonify({'message': 'Failed to update profile', 'error': str(e)}), 500

    return jsonify({'message': 'Profile updated successfully', 'user': profile_schema.dump(profile)}), 200


# ------------------ REFRESH TOKEN ------------------
@auth_bp.route('/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh_token():
    profile = db.session.get(Profile, get_jwt_identity())
    if not profile:
        return sign_in_required('Profile not found')
    new_access = create_access_token(identity=profile.id, additional_claims=identity_claims(profile))
    return jsonify({'access_token': new_access}), 200


# ------------------ LOGOUT ------------------
@auth_bp.route('/logout', methods=['POST'])
@jwt_required()
def logout():
    return jsonify({'message': 'Logout successful', 'redirect': '/'}), 200
