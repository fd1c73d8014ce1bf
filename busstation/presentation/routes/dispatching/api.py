"""
Dispatch workflow API

Each workflow step is one POST on the record; every response carries the
updated record in API form.
"""

from flask import current_app, jsonify, request
from flask_login import login_required

from busstation.business.billing.service_charge_manager import ServiceChargeManager
from busstation.business.core.validation import parse_payload
from busstation.business.dispatching.context import DispatchContext
from busstation.business.dispatching.policies import PermitValidationPolicy
from busstation.business.dispatching.schemas import DispatchListQuery
from busstation.business.dispatching.statuses import DispatchStatus
from busstation.logger import get_logger
from busstation.presentation.routes.dispatching import dispatching_bp
from busstation.presentation.routes.helpers import current_user_id, json_body
from busstation.services.dispatching.dispatch_service import DispatchService

logger = get_logger("bus_station.routes.dispatching")


def _respond(ctx: DispatchContext, message: str, status: int = 200):
    return jsonify({'message': message, 'dispatch': ctx.to_api()}), status


def _load(record_id: int) -> DispatchContext:
    return DispatchContext.load(record_id, user_id=current_user_id())


@dispatching_bp.get('/dispatch')
@login_required
def list_dispatch():
    filters = parse_payload(DispatchListQuery, request.args.to_dict())
    return jsonify(DispatchService.list_records(filters))


@dispatching_bp.post('/dispatch')
@login_required
def create_dispatch():
    ctx = DispatchContext.record_entry(json_body(), user_id=current_user_id())
    return _respond(ctx, 'Vehicle entry recorded', 201)


@dispatching_bp.get('/dispatch/board')
@login_required
def dispatch_board():
    board = DispatchService.get_board(
        search=request.args.get('search'),
        poll_interval_seconds=current_app.config.get('BOARD_POLL_INTERVAL_SECONDS', 30),
    )
    return jsonify(board.to_dict())


@dispatching_bp.get('/dispatch/statuses')
@login_required
def dispatch_statuses():
    return jsonify(DispatchStatus.options())


@dispatching_bp.post('/dispatch/permit/validate')
@login_required
def validate_permit():
    """Run the permit checks without writing anything"""
    return jsonify(PermitValidationPolicy.check(json_body()).to_dict())


@dispatching_bp.get('/dispatch/<int:record_id>')
@login_required
def get_dispatch(record_id):
    ctx = _load(record_id)
    data = ctx.to_api()
    data['allowedTransitions'] = sorted(ctx.allowed_transitions)
    return jsonify(data)


@dispatching_bp.put('/dispatch/<int:record_id>')
@login_required
def update_dispatch(record_id):
    ctx = _load(record_id).update_entry(json_body())
    return _respond(ctx, 'Entry updated')


@dispatching_bp.patch('/dispatch/<int:record_id>/entry-image')
@login_required
def update_entry_image(record_id):
    ctx = _load(record_id).update_entry_image(json_body())
    message = 'Entry image updated' if ctx.record.entry_image_url else 'Entry image removed'
    return _respond(ctx, message)


@dispatching_bp.post('/dispatch/<int:record_id>/passenger-drop')
@login_required
def passenger_drop(record_id):
    ctx = _load(record_id).record_passenger_drop(json_body())
    return _respond(ctx, 'Passenger drop recorded')


@dispatching_bp.post('/dispatch/<int:record_id>/permit')
@login_required
def issue_permit(record_id):
    ctx = _load(record_id).issue_permit(json_body())
    return _respond(ctx, 'Permit processed')


@dispatching_bp.post('/dispatch/<int:record_id>/payment')
@login_required
def process_payment(record_id):
    ctx = _load(record_id).process_payment(json_body())
    return _respond(ctx, 'Payment processed')


@dispatching_bp.post('/dispatch/<int:record_id>/departure-order')
@login_required
def departure_order(record_id):
    ctx = _load(record_id).issue_departure_order(json_body())
    return _respond(ctx, 'Departure order issued')


@dispatching_bp.post('/dispatch/<int:record_id>/exit')
@login_required
def record_exit(record_id):
    ctx = _load(record_id).record_exit(json_body())
    return _respond(ctx, 'Exit recorded')


@dispatching_bp.get('/dispatch/<int:record_id>/charges-total')
@login_required
def charges_total(record_id):
    _load(record_id)
    total = ServiceChargeManager.total_for_record(record_id)
    return jsonify({'dispatchRecordId': record_id, 'total': float(total)})
