from app import db
from app.data.core.user_created_base import UserCreatedBase

# Defines what a material is (code, designation, unit).
# Purchase orders copy code/designation/unit at emission time, so edits here
# never change an issued order.

class Material(UserCreatedBase):
    __tablename__ = 'materials'

    code = db.Column(db.String(100), unique=True, nullable=False)
    designation = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(100), nullable=True)
    unit = db.Column(db.String(50), nullable=False, default='unit')
    unit_value = db.Column(db.Numeric(12, 2), nullable=True)
    status = db.Column(db.String(20), default='Active')  # Active/Inactive

    def __repr__(self):
        return f'<Material {self.code}: {self.designation}>'

    @property
    def is_active(self):
        return self.status == 'Active'
