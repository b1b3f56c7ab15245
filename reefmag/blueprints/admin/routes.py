"""Administrator CRUD API for every collection."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from reefmag.auth import require_admin_api
from reefmag.errors import NotFound
from reefmag.forms.content import COLLECTION_FORMS, form_data, form_files

admin_bp = Blueprint('admin', __name__)


@admin_bp.before_request
def _require_admin():
    require_admin_api()


def _service(collection: str):
    service = current_app.extensions['reefmag']['collections'].get(collection)
    if service is None:
        raise NotFound(f"Unknown collection {collection}")
    return service


@admin_bp.route('/<collection>', methods=['GET'])
def list_records(collection):
    service = _service(collection)
    return jsonify([service.serialize(r) for r in service.list_all()])


@admin_bp.route('/<collection>/<record_id>', methods=['GET'])
def get_record(collection, record_id):
    service = _service(collection)
    return jsonify(service.serialize(service.get(record_id)))


@admin_bp.route('/<collection>', methods=['POST'])
def create_record(collection):
    service = _service(collection)
    if not service.admin_create:
        return jsonify({'error': f"{service.label} records cannot be created here"}), 405

    form = COLLECTION_FORMS[collection]()
    record = service.create(form_data(form), form_files(form))
    return jsonify({'success': True, 'record': service.serialize(record)}), 201


@admin_bp.route('/<collection>/<record_id>', methods=['PATCH'])
def update_record(collection, record_id):
    service = _service(collection)
    form = COLLECTION_FORMS[collection]()
    record = service.update(record_id, form_data(form, partial=True), form_files(form))
    return jsonify({'success': True, 'record': service.serialize(record)})


@admin_bp.route('/<collection>/<record_id>', methods=['DELETE'])
def delete_record(collection, record_id):
    _service(collection).delete(record_id)
    return jsonify({'success': True})
