from busstation.data.core.user_created_base import UserCreatedBase
from busstation import db


class Driver(UserCreatedBase):
    __tablename__ = 'drivers'

    full_name = db.Column(db.String(150), nullable=False)
    phone = db.Column(db.String(30), nullable=True)
    id_number = db.Column(db.String(30), unique=True, nullable=False)
    license_number = db.Column(db.String(30), nullable=True)
    license_class = db.Column(db.String(10), nullable=True)
    license_expiry_date = db.Column(db.Date, nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    def __repr__(self):
        return f'<Driver {self.full_name}>'
