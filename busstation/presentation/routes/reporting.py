"""
Dashboard and report routes
"""

from flask import Blueprint, current_app, jsonify
from flask_login import login_required

from busstation.presentation.routes.helpers import query_date
from busstation.services.reporting.dashboard_service import DashboardService
from busstation.utils.timeutils import utcnow

bp = Blueprint('reporting', __name__)


@bp.get('/dashboard/stats')
@login_required
def dashboard_stats():
    day = query_date('date', default=utcnow().date())
    return jsonify(DashboardService.get_stats(
        day, poll_interval_seconds=current_app.config.get('BOARD_POLL_INTERVAL_SECONDS', 30)
    ))


@bp.get('/reports/dispatch')
@login_required
def dispatch_report():
    date_from = query_date('from', required=True)
    date_to = query_date('to', default=date_from)
    return jsonify(DashboardService.get_dispatch_report(date_from, date_to))
