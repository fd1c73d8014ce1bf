"""
Dispatching routes: the dispatch workflow, service charges and the service catalog
"""

from flask import Blueprint

dispatching_bp = Blueprint('dispatching', __name__)

# Import route modules so their handlers attach to the blueprint
from . import api, service_charges, services  # noqa: E402,F401
