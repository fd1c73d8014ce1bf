from busstation.data.core.user_created_base import UserCreatedBase
from busstation import db


class Route(UserCreatedBase):
    __tablename__ = 'routes'

    route_code = db.Column(db.String(50), unique=True, nullable=False)
    departure_station_id = db.Column(db.Integer, db.ForeignKey('locations.id'), nullable=True)
    arrival_station_id = db.Column(db.Integer, db.ForeignKey('locations.id'), nullable=True)
    distance_km = db.Column(db.Integer, nullable=True)
    itinerary = db.Column(db.Text, nullable=True)
    route_type = db.Column(db.String(50), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    # Relationships
    departure_station = db.relationship('Location', foreign_keys=[departure_station_id])
    arrival_station = db.relationship('Location', foreign_keys=[arrival_station_id])

    @property
    def route_name(self):
        """Human readable name, "<departure> - <arrival>" when both ends are known"""
        if self.departure_station and self.arrival_station:
            return f"{self.departure_station.name} - {self.arrival_station.name}"
        return self.route_code

    def __repr__(self):
        return f'<Route {self.route_code}>'
