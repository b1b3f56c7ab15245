"""Public JSON API and file serving."""

from __future__ import annotations

import hmac

from flask import Blueprint, abort, current_app, jsonify, request, send_from_directory

from reefmag.services.collections import get_service
from reefmag.services.uploads import PUBLIC_FOLDERS, folder_path

api_bp = Blueprint('api', __name__)
files_bp = Blueprint('files', __name__)


def _public_service(collection: str):
    services = current_app.extensions['reefmag']['collections']
    service = services.get(collection)
    if service is None or not service.public:
        abort(404)
    return service


@api_bp.route('/<collection>', methods=['GET'])
def list_published(collection):
    """Active records of a public collection."""
    service = _public_service(collection)
    return jsonify([service.serialize(r) for r in service.list_all(active_only=True)])


@api_bp.route('/flipbook/<magazine_id>', methods=['GET'])
def flipbook_detail(magazine_id):
    service = get_service('magazines')
    return jsonify(service.serialize(service.get(magazine_id)))


@files_bp.route('/uploads/<filename>')
def protected_upload(filename):
    """Uploaded PDFs, readable only with the shared access token."""
    token = request.args.get('token') or ''
    expected = current_app.config.get('PROTECTION_TOKEN') or ''
    if not expected or not hmac.compare_digest(token.encode('utf-8'), expected.encode('utf-8')):
        return "Unauthorized", 403
    return send_from_directory(folder_path('pdfs'), filename)


@files_bp.route('/media/<folder>/<filename>')
def media(folder, filename):
    if folder not in PUBLIC_FOLDERS:
        abort(404)
    return send_from_directory(folder_path(folder), filename)
