"""
Dispatch status values and display names
"""


class DispatchStatus:
    """Fine-grained workflow status stored on DispatchRecord.status"""

    ENTERED = 'entered'
    PASSENGERS_DROPPED = 'passengers_dropped'
    PERMIT_ISSUED = 'permit_issued'
    PERMIT_REJECTED = 'permit_rejected'
    PAID = 'paid'
    DEPARTURE_ORDERED = 'departure_ordered'
    DEPARTED = 'departed'

    # Workflow order
    ALL = (
        ENTERED,
        PASSENGERS_DROPPED,
        PERMIT_ISSUED,
        PERMIT_REJECTED,
        PAID,
        DEPARTURE_ORDERED,
        DEPARTED,
    )

    # Entry details may still be edited in these states
    EDITABLE = frozenset({ENTERED, PASSENGERS_DROPPED})

    DISPLAY_NAMES = {
        ENTERED: 'Đã vào bến',
        PASSENGERS_DROPPED: 'Đã trả khách',
        PERMIT_ISSUED: 'Đã cấp phép',
        PERMIT_REJECTED: 'Từ chối cấp phép',
        PAID: 'Đã thanh toán',
        DEPARTURE_ORDERED: 'Đã điều lệnh',
        DEPARTED: 'Đã xuất bến',
    }

    @classmethod
    def is_valid(cls, status) -> bool:
        return status in cls.ALL

    @classmethod
    def display_name(cls, status: str) -> str:
        return cls.DISPLAY_NAMES.get(status, status)

    @classmethod
    def options(cls):
        """Status choices for select inputs"""
        return [{'value': s, 'label': cls.display_name(s)} for s in cls.ALL]


class PermitStatus:
    APPROVED = 'approved'
    REJECTED = 'rejected'


class PaymentMethod:
    CASH = 'cash'
    TRANSFER = 'transfer'
    CARD = 'card'

    ALL = (CASH, TRANSFER, CARD)
