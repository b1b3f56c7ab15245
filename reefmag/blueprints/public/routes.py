"""HTML pages."""

from __future__ import annotations

from flask import Blueprint, abort, render_template, request
from flask_login import current_user

from reefmag.auth import admin_page_required, login_page_required
from reefmag.errors import NotFound
from reefmag.services.collections import get_service

public_bp = Blueprint('public', __name__)


@public_bp.route('/')
def home():
    magazines = get_service('magazines').list_all(active_only=True)
    return render_template('index.html', magazines=magazines)


@public_bp.route('/login')
def login():
    return render_template('login.html', next_url=request.args.get('next') or '/')


@public_bp.route('/register')
def register():
    return render_template('register.html')


@public_bp.route('/archive')
@login_page_required
def archive():
    magazines = get_service('magazines').list_all(active_only=True)
    return render_template('archive.html', magazines=magazines, user=current_user)


@public_bp.route('/admin')
@admin_page_required
def admin():
    return render_template('admin.html', user=current_user)


@public_bp.route('/flipbook/<magazine_id>')
def flipbook(magazine_id):
    try:
        magazine = get_service('magazines').get(magazine_id)
    except NotFound:
        abort(404)
    return render_template('flipbook.html', magazine=magazine)
