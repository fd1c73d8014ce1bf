from busstation.data.core.user_created_base import UserCreatedBase
from busstation import db


class Service(UserCreatedBase):
    """Catalog entry for a billable station service"""
    __tablename__ = 'services'

    code = db.Column(db.String(50), unique=True, nullable=False)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    base_price = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    unit = db.Column(db.String(50), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    def __repr__(self):
        return f'<Service {self.code}>'
