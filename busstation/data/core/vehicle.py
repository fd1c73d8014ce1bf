from busstation.data.core.user_created_base import UserCreatedBase
from busstation import db


class Vehicle(UserCreatedBase):
    __tablename__ = 'vehicles'

    plate_number = db.Column(db.String(20), unique=True, nullable=False)
    seat_capacity = db.Column(db.Integer, nullable=False, default=0)
    bed_capacity = db.Column(db.Integer, nullable=True)
    operator_name = db.Column(db.String(200), nullable=True)
    vehicle_type = db.Column(db.String(100), nullable=True)
    manufacture_year = db.Column(db.Integer, nullable=True)
    color = db.Column(db.String(50), nullable=True)
    insurance_expiry_date = db.Column(db.Date, nullable=True)
    inspection_expiry_date = db.Column(db.Date, nullable=True)
    notes = db.Column(db.Text, nullable=True)
    # Vehicles are soft-deactivated, never deleted
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    def __repr__(self):
        return f'<Vehicle {self.plate_number}>'
