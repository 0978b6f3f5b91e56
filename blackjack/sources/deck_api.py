"""Card source backed by a deckofcardsapi.com compatible HTTP service."""

import asyncio
import logging

import httpx
from pydantic import BaseModel, ValidationError

from blackjack.exceptions import CardSourceError
from blackjack.sources.base import CardSource, RawCard
from config import DeckApiConfig, config as app_config

logger = logging.getLogger(__name__)


class DeckCreateResponse(BaseModel):
    """Response to a new-shuffled-deck request."""

    success: bool = False
    deck_id: str | None = None
    remaining: int = 0
    shuffled: bool = False


class DeckDrawResponse(BaseModel):
    """Response to a draw request."""

    success: bool = False
    deck_id: str | None = None
    remaining: int = 0
    cards: list[RawCard] | None = None


class DeckApiSource(CardSource):
    """
    HTTP card source.

    Transport errors and 5xx responses are retried with a linear backoff;
    anything still failing is raised as CardSourceError. Card order from the
    API is trusted as already shuffled.
    """

    def __init__(
        self,
        settings: DeckApiConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the source.

        Args:
            settings: Connection settings (uses global config if not provided)
            client: Pre-built client, e.g. one with a mock transport
        """
        self._settings = settings or app_config.deck_api
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self._settings.base_url,
            timeout=self._settings.timeout,
        )

    async def __aenter__(self) -> "DeckApiSource":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def create_shoe(self, deck_count: int) -> str:
        payload = await self._get_json(
            "/api/deck/new/shuffle/", params={"deck_count": deck_count}
        )
        try:
            response = DeckCreateResponse.model_validate(payload)
        except ValidationError as e:
            raise CardSourceError(f"Malformed deck create response: {e}") from e
        if not response.deck_id:
            raise CardSourceError("Deck create response is missing deck_id")
        logger.info("Created remote shoe %s (%d decks)", response.deck_id, deck_count)
        return response.deck_id

    async def draw(self, handle: str, count: int) -> list[RawCard]:
        payload = await self._get_json(
            f"/api/deck/{handle}/draw/", params={"count": count}
        )
        try:
            response = DeckDrawResponse.model_validate(payload)
        except ValidationError as e:
            raise CardSourceError(f"Malformed draw response: {e}") from e
        return list(response.cards or [])

    async def _get_json(self, url: str, params: dict[str, int]) -> dict:
        """GET `url` with bounded retries and return the decoded JSON body."""
        max_attempts = max(1, self._settings.max_attempts)
        for attempt in range(1, max_attempts + 1):
            try:
                response = await self._client.get(url, params=params)
            except httpx.TransportError as e:
                if attempt == max_attempts:
                    raise CardSourceError(
                        f"Deck API request failed after {attempt} attempts: {e}"
                    ) from e
                logger.warning("Deck API transport error (attempt %d): %s", attempt, e)
            else:
                if response.status_code < 500:
                    break
                if attempt == max_attempts:
                    break
                logger.warning(
                    "Deck API returned %d (attempt %d)", response.status_code, attempt
                )
            await asyncio.sleep(self._settings.backoff * attempt)

        try:
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise CardSourceError(f"Deck API error: {e}") from e
        except ValueError as e:
            raise CardSourceError(f"Deck API returned invalid JSON: {e}") from e
