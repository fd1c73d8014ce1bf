"""
Blueprint factory for reference data CRUD

Every reference entity exposes the same five endpoints:

    GET    /<name>            list (?includeInactive=true, ?search=)
    GET    /<name>/<id>       detail
    POST   /<name>            create
    PUT    /<name>/<id>       partial update
    DELETE /<name>/<id>       deactivate (or delete, see the manager)
"""

from flask import Blueprint, jsonify, request
from flask_login import login_required

from busstation.presentation.routes.helpers import current_user_id, json_body, query_flag


def make_crud_blueprint(name: str, manager) -> Blueprint:
    bp = Blueprint(name, __name__)
    url = f'/{name}'

    @bp.get(url)
    @login_required
    def list_items():
        return jsonify(manager.list(
            include_inactive=query_flag('includeInactive'),
            search=request.args.get('search'),
        ))

    @bp.get(f'{url}/<int:item_id>')
    @login_required
    def get_item(item_id):
        return jsonify(manager.serialize(manager.get(item_id)))

    @bp.post(url)
    @login_required
    def create_item():
        item = manager.create(json_body(), user_id=current_user_id())
        return jsonify(manager.serialize(item)), 201

    @bp.put(f'{url}/<int:item_id>')
    @login_required
    def update_item(item_id):
        item = manager.update(item_id, json_body(), user_id=current_user_id())
        return jsonify(manager.serialize(item))

    @bp.delete(f'{url}/<int:item_id>')
    @login_required
    def delete_item(item_id):
        item = manager.delete(item_id, user_id=current_user_id())
        if item is None:
            return jsonify({'message': f'{manager.label} deleted'})
        return jsonify({'message': f'{manager.label} deactivated', 'item': manager.serialize(item)})

    return bp
