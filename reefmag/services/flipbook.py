"""Client for the flip-book rendering service (PDF to embeddable viewer)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests

from reefmag.errors import UpstreamFailure


@dataclass
class Flipbook:
    id: str | None
    embed_url: str


def extract_embed_url(payload: dict[str, Any]) -> str | None:
    """The viewer URL appears under ``links.embed``, ``embed`` or ``url``."""
    links = payload.get('links')
    if isinstance(links, dict) and links.get('embed'):
        return links['embed']
    return payload.get('embed') or payload.get('url') or None


class FlipbookClient:
    """Thin wrapper over the rendering service's REST endpoints."""

    def __init__(self, api_url: str, api_key: str | None, client_id: str | None, timeout: float | None = None):
        self.api_url = api_url.rstrip('/')
        self.api_key = api_key
        self.client_id = client_id
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        return {
            'Authorization': f"Bearer {self.api_key}",
            'Content-Type': 'application/json',
        }

    def create(self, pdf_url: str) -> Flipbook:
        """
        Submit a PDF for rendering.

        Args:
            pdf_url: Publicly fetchable (token-protected) URL of the PDF

        Returns:
            Flipbook with the upstream id and the embeddable viewer URL

        Raises:
            UpstreamFailure: transport error, non-2xx answer, or no viewer URL
        """
        body = {
            'pdf': pdf_url,
            'client_id': self.client_id,
            'download': 0,
            'print': 0,
            'share': 0,
        }
        try:
            response = requests.post(
                f"{self.api_url}/rest",
                json=body,
                headers=self._headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise UpstreamFailure(f"Flip-book request failed: {e}") from e
        except ValueError as e:
            raise UpstreamFailure(f"Flip-book answered with invalid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise UpstreamFailure('Flip-book answered with an unexpected body')

        embed_url = extract_embed_url(payload)
        if not embed_url:
            raise UpstreamFailure('Flip-book embed missing')

        flipbook_id = payload.get('id')
        return Flipbook(id=str(flipbook_id) if flipbook_id is not None else None, embed_url=embed_url)

    def delete(self, flipbook_id: str) -> None:
        response = requests.post(
            f"{self.api_url}/flipbook-delete",
            json={'id': flipbook_id},
            headers=self._headers(),
            timeout=self.timeout,
        )
        response.raise_for_status()


__all__ = ['Flipbook', 'FlipbookClient', 'extract_embed_url']
