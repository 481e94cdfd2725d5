"""
Card catalog providers.
"""

import logging
import re
from typing import Any, List, Optional, Sequence

import httpx

from ..core import Card
from ..exceptions import AuthError, CatalogUnavailable, RateLimited

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_URL = "https://proxy.royaleapi.dev/v1"

IP_NOT_ALLOWED_MESSAGE = (
    "IP not allowed. The API key does not accept requests from this IP address. "
    "Add it to the key's allowed IPs at https://developer.clashroyale.com/"
)
INVALID_KEY_MESSAGE = (
    "Invalid API key or missing permissions. Check that the key is correct and "
    "active at https://developer.clashroyale.com/"
)

_IP_PATTERN = re.compile(r"\bip\b|address")


class StaticCatalog:
    """Catalog backed by a fixed list of cards (offline play, tests)."""

    def __init__(self, cards: Sequence[Card]):
        self.cards = list(cards)

    def fetch_cards(self) -> List[Card]:
        return list(self.cards)


class ClashRoyaleCatalog:
    """
    Fetches the card list from the Clash Royale API (or a compatible proxy).

    Any failure is raised as a CatalogError subclass; nothing is retried.
    """

    def __init__(self, api_key: Optional[str], base_url: str = DEFAULT_CATALOG_URL,
                 timeout: float = 10.0, client: Optional[httpx.Client] = None):
        self.api_key = api_key.strip() if api_key else None
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    def fetch_cards(self) -> List[Card]:
        """
        Returns:
            The catalog cards

        Raises:
            AuthError: If no API key is configured or the catalog rejects it
            RateLimited: If the catalog throttles the request
            CatalogUnavailable: On transport errors, other HTTP errors or a malformed body
        """
        if not self.api_key:
            raise AuthError("Card catalog API key is not configured")

        url = f"{self.base_url}/cards"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }
        try:
            if self._client is not None:
                response = self._client.get(url, headers=headers, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.get(url, headers=headers)
        except httpx.HTTPError as e:
            logger.error("Could not reach card catalog at %s: %s", url, e)
            raise CatalogUnavailable(f"Could not connect to the card catalog: {e}") from e

        if response.status_code >= 400:
            raise self._error_for(response)

        try:
            data = response.json()
        except ValueError as e:
            raise CatalogUnavailable("Card catalog returned invalid JSON",
                                     status_code=response.status_code) from e

        items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(items, list) or not items:
            raise CatalogUnavailable("No cards found in the catalog response",
                                     status_code=response.status_code)

        try:
            cards = [Card.from_catalog_item(item) for item in items]
        except (KeyError, TypeError, ValueError) as e:
            raise CatalogUnavailable(f"Unexpected card format in catalog response: {e}",
                                     status_code=response.status_code) from e

        logger.info("Fetched %d cards from the catalog", len(cards))
        return cards

    def _error_for(self, response: httpx.Response) -> Exception:
        """Translate an HTTP error response into a catalog exception."""
        status = response.status_code
        details = _error_details(response)
        message = f"Failed to fetch cards: {status} {response.reason_phrase}"
        if isinstance(details, dict):
            reason = details.get("reason") or details.get("message")
            if reason:
                message = f"Catalog error: {reason}"
        elif details:
            message = str(details)

        logger.error("Card catalog answered %d: %s", status, message)

        if status in (401, 403):
            text = f"{details} {message}".lower()
            if _IP_PATTERN.search(text):
                return AuthError(IP_NOT_ALLOWED_MESSAGE, status_code=status)
            return AuthError(INVALID_KEY_MESSAGE, status_code=status)
        if status == 429:
            return RateLimited(message, status_code=status)
        return CatalogUnavailable(message, status_code=status)


def _error_details(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text.strip()
