from app import db
from app.data.core.user_created_base import UserCreatedBase


class Supplier(UserCreatedBase):
    __tablename__ = 'suppliers'

    name = db.Column(db.String(200), unique=True, nullable=False)
    contact = db.Column(db.String(200), nullable=True)
    address = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(20), default='Active')  # Active/Inactive

    def __repr__(self):
        return f'<Supplier {self.name}>'

    @property
    def is_active(self):
        return self.status == 'Active'
