from app import db, login_manager
from flask_login import UserMixin
from datetime import datetime
from app.buisness.core.data_insertion_mixin import DataInsertionMixin


class Role:
    """Role identities supplied by the identity provider"""
    REQUESTER = 'Requester'
    APPROVER = 'Approver'
    ADMINISTRATOR = 'Administrator'

    ALL = (REQUESTER, APPROVER, ADMINISTRATOR)


class User(UserMixin, DataInsertionMixin, db.Model):
    """
    Projection of an identity-provider account.

    Credentials are never stored here: the identity provider authenticates and
    the core only consumes (id, role).
    """
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    full_name = db.Column(db.String(200), nullable=True)
    role = db.Column(db.String(20), nullable=False, default=Role.REQUESTER)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def is_admin(self):
        return self.role == Role.ADMINISTRATOR

    @property
    def is_approver(self):
        return self.role in (Role.APPROVER, Role.ADMINISTRATOR)

    @property
    def display_name(self):
        return self.full_name or self.username

    def __repr__(self):
        return f'<User {self.username} ({self.role})>'


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


@login_manager.request_loader
def load_user_from_request(request):
    """Resolve the actor forwarded by the identity provider."""
    actor_id = request.headers.get('X-Actor-Id')
    if not actor_id or not actor_id.isdigit():
        return None
    user = db.session.get(User, int(actor_id))
    if user is None or not user.is_active:
        return None
    return user
