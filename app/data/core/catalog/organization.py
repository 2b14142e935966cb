from app import db
from app.data.core.user_created_base import UserCreatedBase


class Division(UserCreatedBase):
    """Organizational division raising need expressions"""
    __tablename__ = 'divisions'

    name = db.Column(db.String(200), nullable=False)
    code = db.Column(db.String(50), unique=True, nullable=False)

    services = db.relationship('Service', back_populates='division', lazy='dynamic')

    def __repr__(self):
        return f'<Division {self.code}: {self.name}>'


class Service(UserCreatedBase):
    """Service within a division"""
    __tablename__ = 'services'

    name = db.Column(db.String(200), nullable=False)
    code = db.Column(db.String(50), unique=True, nullable=False)
    division_id = db.Column(db.Integer, db.ForeignKey('divisions.id'), nullable=False)

    division = db.relationship('Division', back_populates='services')

    def __repr__(self):
        return f'<Service {self.code}: {self.name}>'
