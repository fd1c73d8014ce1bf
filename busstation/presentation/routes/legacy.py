"""
Legacy (Firebase) vehicle routes
"""

from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required

from busstation.presentation.routes.helpers import query_flag
from busstation.services.legacy.firebase_source import LegacyVehicleSource

bp = Blueprint('legacy', __name__)


@bp.get('/legacy/vehicles')
@login_required
def legacy_vehicles():
    source = LegacyVehicleSource.from_app(current_app)
    vehicles = source.list_vehicles(
        refresh=query_flag('refresh'),
        operator=request.args.get('operator'),
        search=request.args.get('search'),
    )
    return jsonify([v.to_api_dict() for v in vehicles])
