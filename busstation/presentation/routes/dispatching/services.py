"""
Service catalog routes
"""

from flask import jsonify, request
from flask_login import login_required

from busstation.business.billing.service_catalog import ServiceCatalog
from busstation.presentation.routes.dispatching import dispatching_bp
from busstation.presentation.routes.helpers import current_user_id, json_body, query_flag


@dispatching_bp.get('/services')
@login_required
def list_services():
    return jsonify(ServiceCatalog.list(
        include_inactive=query_flag('includeInactive'),
        search=request.args.get('search'),
    ))


@dispatching_bp.get('/services/<int:service_id>')
@login_required
def get_service(service_id):
    return jsonify(ServiceCatalog.get(service_id).to_api_dict())


@dispatching_bp.post('/services')
@login_required
def create_service():
    service = ServiceCatalog.create(json_body(), user_id=current_user_id())
    return jsonify(service.to_api_dict()), 201


@dispatching_bp.put('/services/<int:service_id>')
@login_required
def update_service(service_id):
    service = ServiceCatalog.update(service_id, json_body(), user_id=current_user_id())
    return jsonify(service.to_api_dict())


@dispatching_bp.delete('/services/<int:service_id>')
@login_required
def delete_service(service_id):
    service = ServiceCatalog.delete(service_id, user_id=current_user_id())
    return jsonify({'message': 'Service deactivated', 'service': service.to_api_dict()})
