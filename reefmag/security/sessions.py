"""Server-side session storage keyed by an opaque cookie id."""

from __future__ import annotations

import secrets
import threading
from datetime import datetime, timezone

from flask.sessions import SessionInterface, SessionMixin
from werkzeug.datastructures import CallbackDict


class ServerSideSession(CallbackDict, SessionMixin):
    """Session whose data lives on the server; the cookie only holds ``sid``."""

    def __init__(self, initial=None, sid: str | None = None, expires_at: datetime | None = None):
        def on_update(self):
            self.modified = True

        super().__init__(initial, on_update)
        self.sid = sid
        self.expires_at = expires_at
        self.modified = False
        self.rotate = False

    def regenerate(self) -> None:
        """Issue a fresh id and expiry on the next save (used at login)."""
        self.rotate = True
        self.modified = True


class MemorySessionStore:
    """In-process store; restarting the process drops every session."""

    def __init__(self):
        self._data: dict[str, tuple[dict, datetime]] = {}
        self._lock = threading.Lock()

    def get(self, sid: str) -> tuple[dict, datetime] | None:
        with self._lock:
            entry = self._data.get(sid)
            if entry is None:
                return None
            if entry[1] <= datetime.now(timezone.utc):
                del self._data[sid]
                return None
            return dict(entry[0]), entry[1]

    def set(self, sid: str, data: dict, expires_at: datetime) -> None:
        with self._lock:
            self._data[sid] = (dict(data), expires_at)

    def delete(self, sid: str) -> None:
        with self._lock:
            self._data.pop(sid, None)

    def __len__(self) -> int:
        return len(self._data)


class ServerSideSessionInterface(SessionInterface):
    """Absolute-expiry sessions: the lifetime starts at creation and is never extended."""

    session_class = ServerSideSession

    def __init__(self, store: MemorySessionStore | None = None):
        self.store = store or MemorySessionStore()

    def open_session(self, app, request):
        sid = request.cookies.get(self.get_cookie_name(app))
        if sid:
            entry = self.store.get(sid)
            if entry is not None:
                data, expires_at = entry
                return self.session_class(data, sid=sid, expires_at=expires_at)
        return self.session_class()

    def save_session(self, app, session, response):
        name = self.get_cookie_name(app)
        domain = self.get_cookie_domain(app)
        path = self.get_cookie_path(app)

        if not session:
            if session.sid is not None:
                self.store.delete(session.sid)
            if session.modified or session.sid is not None:
                response.delete_cookie(name, domain=domain, path=path)
            return

        if not session.modified and session.sid is not None:
            return

        if session.rotate and session.sid is not None:
            self.store.delete(session.sid)
            session.sid = None
        session.rotate = False

        if session.sid is None:
            session.sid = secrets.token_urlsafe(32)
            session.expires_at = datetime.now(timezone.utc) + app.permanent_session_lifetime

        self.store.set(session.sid, dict(session), session.expires_at)
        response.set_cookie(
            name,
            session.sid,
            expires=session.expires_at,
            httponly=self.get_cookie_httponly(app),
            domain=domain,
            path=path,
            secure=self.get_cookie_secure(app),
            samesite=self.get_cookie_samesite(app),
        )


__all__ = ['ServerSideSession', 'ServerSideSessionInterface', 'MemorySessionStore']
