"""Admin routes for role management."""
from flask import Blueprint, jsonify, request
from pitchside import db
from pitchside.models import UserRole, VALID_ROLES
from pitchside.utils.auth import admin_required
import logging

logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__)


@admin_bp.route('/roles', methods=['GET'])
@admin_required
def list_roles(current_user_id):
    """List role grants, optionally filtered by ?role=."""
    query = UserRole.query
    role = request.args.get('role')
    if role:
        query = query.filter_by(role=role)
    grants = query.order_by(UserRole.created_at.desc()).all()
    return jsonify({'roles': [grant.to_dict() for grant in grants]}), 200


@admin_bp.route('/roles/<user_id>', methods=['PUT'])
@admin_required
def set_role(current_user_id, user_id):
    """Replace a user's role.

    Body: {"role": "admin" | "editor" | null}. null removes every role.
    Admins cannot change their own role.
    """
    data = request.get_json() or {}
    role = data.get('role')

    if role is not None and role not in VALID_ROLES:
        return jsonify({'error': f"Invalid role. Must be one of: {', '.join(VALID_ROLES)}"}), 400

    if user_id == current_user_id:
        return jsonify({'error': 'Cannot change your own role'}), 400

    try:
        UserRole.query.filter_by(user_id=user_id).delete()
        if role:
            db.session.add(UserRole(user_id=user_id, role=role, granted_by=current_user_id))
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error setting role for {user_id}: {e}")
        return jsonify({'error': str(e)}), 500

    logger.info(f"Admin {current_user_id} set role of {user_id} to {role}")
    return jsonify({'success': True, 'user_id': user_id, 'role': role}), 200
