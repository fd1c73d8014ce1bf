from busstation import db
from busstation.data.core.user_created_base import UserCreatedBase


class DispatchRecord(UserCreatedBase):
    """
    One vehicle visit to the station.

    Status and timestamps are only written through DispatchContext; records
    are never deleted.
    """
    __tablename__ = 'dispatch_records'

    # References
    vehicle_id = db.Column(db.Integer, db.ForeignKey('vehicles.id'), nullable=False)
    driver_id = db.Column(db.Integer, db.ForeignKey('drivers.id'), nullable=True)
    route_id = db.Column(db.Integer, db.ForeignKey('routes.id'), nullable=True)
    schedule_id = db.Column(db.Integer, db.ForeignKey('schedules.id'), nullable=True)

    # Entry
    entry_time = db.Column(db.DateTime, nullable=False)
    entry_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    entry_image_url = db.Column(db.String(1000), nullable=True)

    # Passenger drop
    passenger_drop_time = db.Column(db.DateTime, nullable=True)
    passengers_arrived = db.Column(db.Integer, nullable=True)
    passenger_drop_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    # Boarding permit
    boarding_permit_time = db.Column(db.DateTime, nullable=True)
    planned_departure_time = db.Column(db.DateTime, nullable=True)
    transport_order_code = db.Column(db.String(100), unique=True, nullable=True)
    seat_count = db.Column(db.Integer, nullable=True)
    permit_status = db.Column(db.String(20), nullable=True)
    rejection_reason = db.Column(db.Text, nullable=True)
    boarding_permit_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    # Payment
    payment_time = db.Column(db.DateTime, nullable=True)
    payment_amount = db.Column(db.Numeric(12, 2), nullable=True)
    payment_method = db.Column(db.String(20), nullable=True)
    invoice_number = db.Column(db.String(100), nullable=True)
    payment_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    # Departure order and exit
    departure_order_time = db.Column(db.DateTime, nullable=True)
    passengers_departing = db.Column(db.Integer, nullable=True)
    departure_order_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    exit_time = db.Column(db.DateTime, nullable=True)
    exit_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    # Status
    status = db.Column(db.String(30), nullable=False, default='entered', index=True)
    notes = db.Column(db.Text, nullable=True)
    # "metadata" is reserved on declarative models
    extra_data = db.Column('metadata', db.JSON, nullable=True)

    # Relationships
    vehicle = db.relationship('Vehicle')
    driver = db.relationship('Driver')
    route = db.relationship('Route')
    schedule = db.relationship('Schedule')
    charges = db.relationship('ServiceCharge', back_populates='dispatch_record',
                              order_by='ServiceCharge.created_at.desc()')

    def __repr__(self):
        return f'<DispatchRecord {self.id} {self.status}>'
