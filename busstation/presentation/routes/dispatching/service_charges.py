"""
Service charge routes
"""

from flask import jsonify, request
from flask_login import login_required

from busstation.business.billing.service_charge_manager import ServiceChargeManager
from busstation.presentation.routes.dispatching import dispatching_bp
from busstation.presentation.routes.helpers import current_user_id, json_body


def _charge_to_api(charge) -> dict:
    data = charge.to_api_dict()
    data['serviceName'] = charge.service.name if charge.service else None
    data['serviceCode'] = charge.service.code if charge.service else None
    return data


@dispatching_bp.get('/service-charges')
@login_required
def list_service_charges():
    record_id = request.args.get('dispatchRecordId', type=int)
    return jsonify([_charge_to_api(c) for c in ServiceChargeManager.list_for_record(record_id)])


@dispatching_bp.post('/service-charges')
@login_required
def create_service_charge():
    charge = ServiceChargeManager.create(json_body(), user_id=current_user_id())
    return jsonify(_charge_to_api(charge)), 201


@dispatching_bp.delete('/service-charges/<int:charge_id>')
@login_required
def delete_service_charge(charge_id):
    ServiceChargeManager.delete(charge_id)
    return jsonify({'message': 'Service charge deleted'})
