"""Client for the mailing-list contact API."""

from __future__ import annotations

import requests


class ContactListClient:
    """Adds newly registered users to the mailing list."""

    def __init__(self, api_url: str, api_key: str | None, list_id: str | None = None, timeout: float = 5):
        self.api_url = api_url
        self.api_key = api_key
        self.list_id = list_id
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self.api_url and self.api_key)

    def build_payload(self, email: str, first_name: str | None = None) -> dict:
        payload = {
            'email': email,
            'attributes': {'FIRSTNAME': first_name or email.split('@', 1)[0]},
            'updateEnabled': True,
        }
        if self.list_id:
            payload['listIds'] = [int(self.list_id) if str(self.list_id).isdigit() else self.list_id]
        return payload

    def add_contact(self, email: str, first_name: str | None = None) -> None:
        response = requests.post(
            self.api_url,
            json=self.build_payload(email, first_name),
            headers={
                'api-key': self.api_key,
                'accept': 'application/json',
                'content-type': 'application/json',
            },
            timeout=self.timeout,
        )
        response.raise_for_status()


__all__ = ['ContactListClient']
