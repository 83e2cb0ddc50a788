"""Role grants for users of the hosted auth provider."""
from datetime import datetime
from pitchside import db

ROLE_ADMIN = 'admin'
ROLE_EDITOR = 'editor'
VALID_ROLES = (ROLE_ADMIN, ROLE_EDITOR)


class UserRole(db.Model):
    """A role granted to an auth-provider user id (the JWT 'sub' claim)."""
    __tablename__ = 'user_roles'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    role = db.Column(db.String(20), nullable=False)
    granted_by = db.Column(db.String(64), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('user_id', 'role', name='unique_user_role'),
    )

    @classmethod
    def roles_for(cls, user_id):
        """Set of role names held by a user."""
        rows = cls.query.filter_by(user_id=user_id).all()
        return {row.role for row in rows}

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'role': self.role,
            'granted_by': self.granted_by,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<UserRole {self.user_id}: {self.role}>'
