"""
Transport Order Uniqueness Policy

A transport order code identifies a single permit across all records.
The unique index on dispatch_records.transport_order_code is the final
guard; this check gives the friendly error before the flush.
"""

from typing import Optional

from busstation import db
from busstation.business.dispatching.errors import DuplicateTransportOrderError
from busstation.data.dispatching.dispatch_record import DispatchRecord


class TransportOrderUniquenessPolicy:

    @classmethod
    def is_taken(cls, code: str, exclude_record_id: Optional[int] = None) -> bool:
        query = db.session.query(DispatchRecord.id).filter(DispatchRecord.transport_order_code == code)
        if exclude_record_id is not None:
            query = query.filter(DispatchRecord.id != exclude_record_id)
        return db.session.query(query.exists()).scalar()

    @classmethod
    def validate(cls, code: str, exclude_record_id: Optional[int] = None) -> None:
        """
        Raises:
            DuplicateTransportOrderError: If another record already uses the code
        """
        if cls.is_taken(code, exclude_record_id):
            raise DuplicateTransportOrderError(code)
