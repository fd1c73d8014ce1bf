"""
Reference data blueprints
"""

from flask import jsonify
from flask_login import login_required

from busstation.business.core.reference_data import (
    DriverManager,
    LocationManager,
    RouteManager,
    ScheduleManager,
    VehicleManager,
)
from busstation.presentation.routes.core.crud import make_crud_blueprint
from busstation.presentation.routes.helpers import query_flag

vehicles_bp = make_crud_blueprint('vehicles', VehicleManager)
drivers_bp = make_crud_blueprint('drivers', DriverManager)
locations_bp = make_crud_blueprint('locations', LocationManager)
routes_bp = make_crud_blueprint('routes', RouteManager)
schedules_bp = make_crud_blueprint('schedules', ScheduleManager)


@routes_bp.get('/routes/<int:item_id>/schedules')
@login_required
def route_schedules(item_id):
    RouteManager.get(item_id)
    return jsonify(ScheduleManager.list_for_route(item_id, include_inactive=query_flag('includeInactive')))


BLUEPRINTS = (vehicles_bp, drivers_bp, locations_bp, routes_bp, schedules_bp)
