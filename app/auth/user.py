"""User model and authentication logic"""
from flask_login import UserMixin, AnonymousUserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from app import db
from app.auth.permission import Permission
from app.core.db import BaseModel, JSONType
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

# Association table for user-role relationship
user_roles = db.Table('user_roles',
    db.Column('user_id', db.Integer, db.ForeignKey('users.id'), primary_key=True),
    db.Column('role_id', db.Integer, db.ForeignKey('roles.id'), primary_key=True)
)

class User(UserMixin, BaseModel):
    """User model for authentication and authorization"""
    __tablename__ = 'users'

    # User identification
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256))

    # User profile
    display_name = db.Column(db.String(128))
    is_active = db.Column(db.Boolean, default=True)
    is_admin = db.Column(db.Boolean, default=False)

    # User metadata
    last_login = db.Column(db.DateTime)

    # Relationships
    roles = db.relationship('Role', secondary=user_roles, lazy='subquery',
                           backref=db.backref('users', lazy=True))

    def __repr__(self):
        return f'<User {self.username}>'

    @property
    def password(self):
        """Prevent password from being accessed"""
        raise AttributeError('password is not a readable attribute')

    @password.setter
    def password(self, password):
        """Set password hash"""
        self.password_hash = generate_password_hash(password)

    def verify_password(self, password):
        """Check if password matches"""
        return check_password_hash(self.password_hash, password)

    def has_permission(self, permission):
        """Check if user has a specific permission"""
        # Administrators have all permissions
        if self.is_admin:
            return True

        # Check if any of the user's roles have the permission
        for role in self.roles:
            if role.has_permission(permission):
                return True

        return False

    @staticmethod
    def create_user(email, username, password, display_name=None,
                    roles=None, is_admin=False):
        """Create a new user"""
        user = User(
            email=email,
            username=username,
            display_name=display_name,
            is_admin=is_admin
        )
        user.password = password

        for role_name in roles or []:
            role = Role.query.filter_by(name=role_name).first()
            if role is None:
                raise ValueError(f"Unknown role: {role_name}")
            user.roles.append(role)

        try:
            db.session.add(user)
            db.session.commit()
            logger.info(f"User created: {username}")
            return user
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error creating user: {str(e)}")
            raise

    def update_last_login(self):
        """Update last login timestamp"""
        self.last_login = datetime.utcnow()
        db.session.commit()

class Role(BaseModel):
    """Role model for role-based access control"""
    __tablename__ = 'roles'

    name = db.Column(db.String(64), unique=True, nullable=False)
    description = db.Column(db.String(255))
    permissions = db.Column(JSONType, default=list)
    is_system_role = db.Column(db.Boolean, default=False)

    def __repr__(self):
        return f'<Role {self.name}>'

    def has_permission(self, permission):
        """Check if role has a specific permission"""
        return permission in (self.permissions or [])

    @staticmethod
    def insert_default_roles():
        """Insert default roles"""
        default_roles = {
            'Administrator': {
                'description': 'Full access to content, settings and plugins',
                'permissions': Permission.all_permissions()
            },
            'Editor': {
                'description': 'Can edit and delete any content',
                'permissions': [Permission.READ, Permission.EDIT_POSTS, Permission.DELETE_POSTS]
            },
            'Subscriber': {
                'description': 'Can only read content',
                'permissions': [Permission.READ]
            }
        }

        for role_name, role_data in default_roles.items():
            role = Role.query.filter_by(name=role_name).first()
            if role is None:
                role = Role(
                    name=role_name,
                    description=role_data['description'],
                    permissions=role_data['permissions'],
                    is_system_role=True
                )
                db.session.add(role)
                logger.info(f"Default role created: {role_name}")

        db.session.commit()

class AnonymousUser(AnonymousUserMixin):
    """Anonymous user class with default permission methods"""

    def has_permission(self, permission):
        """Anonymous users have no permissions"""
        return False

    @property
    def is_admin(self):
        """Anonymous users are not administrators"""
        return False
