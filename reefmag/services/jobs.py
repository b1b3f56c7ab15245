"""Best-effort job functions, runnable in-process or by the RQ worker."""

from __future__ import annotations

from flask import current_app


def sync_contact_job(email: str, first_name: str | None = None) -> None:
    """Forward a newly registered address to the mailing list."""
    client = current_app.extensions['reefmag']['contacts']
    if not client.enabled:
        current_app.logger.info(f"Contact list not configured; skipping sync for {email}")
        return
    client.add_contact(email, first_name)
    current_app.logger.info(f"Synced {email} to the contact list")


def delete_flipbook_job(flipbook_id: str) -> None:
    """Remove a flip-book from the rendering service."""
    current_app.extensions['reefmag']['flipbook'].delete(flipbook_id)
    current_app.logger.info(f"Deleted upstream flip-book {flipbook_id}")


JOBS = {
    'sync_contact': sync_contact_job,
    'delete_flipbook': delete_flipbook_job,
}


def run_job(name: str, *args) -> None:
    """Entry point for the RQ worker; builds an app context per job."""
    from reefmag import create_app

    app = create_app()

    with app.app_context():
        try:
            JOBS[name](*args)
        except Exception as e:
            app.logger.error(f"Job {name} failed: {e}")
            raise
