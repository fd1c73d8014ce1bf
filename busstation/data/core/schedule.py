from busstation.data.core.user_created_base import UserCreatedBase
from busstation import db


class Schedule(UserCreatedBase):
    """A planned departure slot ("biểu đồ giờ") on a route"""
    __tablename__ = 'schedules'

    schedule_code = db.Column(db.String(50), unique=True, nullable=False)
    route_id = db.Column(db.Integer, db.ForeignKey('routes.id'), nullable=False)
    departure_time = db.Column(db.String(8), nullable=False)  # "HH:MM"
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    route = db.relationship('Route')

    def __repr__(self):
        return f'<Schedule {self.schedule_code} {self.departure_time}>'
