from busstation.data.core.user_created_base import UserCreatedBase
from busstation import db


class Location(UserCreatedBase):
    """A bus station or stop referenced by routes"""
    __tablename__ = 'locations'

    name = db.Column(db.String(150), nullable=False)
    code = db.Column(db.String(50), unique=True, nullable=False)
    station_type = db.Column(db.String(50), nullable=True)
    phone = db.Column(db.String(30), nullable=True)
    email = db.Column(db.String(120), nullable=True)
    address = db.Column(db.Text, nullable=True)
    latitude = db.Column(db.Float, nullable=True)
    longitude = db.Column(db.Float, nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    def __repr__(self):
        return f'<Location {self.code} {self.name}>'
