from busstation import db
from busstation.data.core.user_created_base import UserCreatedBase


class ServiceCharge(UserCreatedBase):
    """
    Billable line item on a dispatch record.

    total_amount is always quantity * unit_price. Charges are never edited;
    a wrong charge is deleted and re-added.
    """
    __tablename__ = 'service_charges'

    dispatch_record_id = db.Column(db.Integer, db.ForeignKey('dispatch_records.id'), nullable=False, index=True)
    service_id = db.Column(db.Integer, db.ForeignKey('services.id'), nullable=False)
    quantity = db.Column(db.Numeric(10, 2), nullable=False, default=1)
    unit_price = db.Column(db.Numeric(12, 2), nullable=False)
    total_amount = db.Column(db.Numeric(14, 2), nullable=False)

    dispatch_record = db.relationship('DispatchRecord', back_populates='charges')
    service = db.relationship('Service')

    def __repr__(self):
        return f'<ServiceCharge {self.id} record={self.dispatch_record_id} total={self.total_amount}>'
