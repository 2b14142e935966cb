from app import db
from datetime import datetime
from sqlalchemy.ext.declarative import declared_attr
from app.buisness.core.data_insertion_mixin import DataInsertionMixin


class UserCreatedBase(db.Model, DataInsertionMixin):
    """
    Abstract base for procurement and catalog records with an audit trail

    ``created_by``/``updated_by`` point at the acting user of the operation
    that wrote the row, not at whoever owns the business record.
    """

    __abstract__ = True

    @declared_attr
    def __tablename__(cls):
        return cls.__name__.lower() + 's'

    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    updated_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    @declared_attr
    def created_by(cls):
        return db.relationship('User', foreign_keys=[cls.created_by_id])

    @declared_attr
    def updated_by(cls):
        return db.relationship('User', foreign_keys=[cls.updated_by_id])

    def touch(self, actor_id):
        """Record ``actor_id`` as the last writer; always dirties the row."""
        self.updated_by_id = actor_id
        self.updated_at = datetime.utcnow()
