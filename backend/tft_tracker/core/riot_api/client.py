"""Riot API HTTP client with retry, error classification, and authentication."""

import asyncio
from typing import Any, Callable, List, Optional, Type, TypeVar, Union

import httpx
import structlog
from pydantic import BaseModel, ValidationError as PydanticValidationError

from tft_tracker.core.config import get_global_settings
from .constants import Platform, Region
from .endpoints import RiotAPIEndpoints
from .errors import (
    InvalidResponseError,
    NotFoundError,
    RiotAPIError,
    UnknownAPIError,
    error_class_for_status,
    is_retryable_status,
)
from .models import AccountDTO, LeagueEntryDTO, MatchDTO

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class RiotAPIClient:
    """TFT Riot API client with retrying GET primitive and classified errors."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        region: Optional[Union[Region, str]] = None,
        platform: Optional[Union[Platform, str]] = None,
        max_retries: Optional[int] = None,
        base_delay: Optional[float] = None,
        timeout: Optional[float] = None,
        max_delay: Optional[float] = None,
        request_callback: Optional[Callable[[str, int], None]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Riot API client.

        Args:
            api_key: Riot API key (uses config if None)
            region: Default region for regional endpoints
            platform: Default platform for platform endpoints
            max_retries: Retries after the first attempt (uses config if None)
            base_delay: First backoff delay in seconds, doubled per attempt
            timeout: Per-request timeout in seconds
            max_delay: Upper bound for any single retry wait (uses config if None)
            request_callback: Optional callback for tracking API requests (metric_name, count)
            transport: Optional httpx transport, used by tests
        """
        settings = get_global_settings()
        self.api_key = api_key if api_key is not None else settings.riot_api_key
        self.region = Region(region) if region else Region.EUROPE
        self.platform = Platform(platform or settings.default_platform)
        self.max_retries = (
            max_retries if max_retries is not None else settings.api_max_retries
        )
        self.base_delay = (
            base_delay if base_delay is not None else settings.api_retry_base_delay
        )
        self.timeout = timeout if timeout is not None else settings.api_request_timeout
        self.max_delay = (
            max_delay if max_delay is not None else settings.max_backoff_seconds
        )
        self.request_callback = request_callback
        self._transport = transport

        self.endpoints = RiotAPIEndpoints(self.region, self.platform)

        # HTTP session
        self.session: Optional[httpx.AsyncClient] = None
        self._session_lock = asyncio.Lock()

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start_session()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    async def start_session(self) -> None:
        """Start the httpx session."""
        if self.session is None or self.session.is_closed:
            async with self._session_lock:
                if self.session is None or self.session.is_closed:
                    headers = {
                        "X-Riot-Token": self.api_key,
                        "Accept": "application/json",
                        "User-Agent": "TFT-Match-Tracker/1.0",
                    }

                    self.session = httpx.AsyncClient(
                        headers=headers,
                        timeout=httpx.Timeout(self.timeout),
                        transport=self._transport,
                    )

                    logger.info(
                        "Riot API client session started",
                        region=self.region.value,
                        platform=self.platform.value,
                        api_key_prefix="[REDACTED]" if self.api_key else "None",
                    )

    async def close(self) -> None:
        """Close the httpx session."""
        if self.session and not self.session.is_closed:
            await self.session.aclose()
            logger.info("Riot API client session closed")

    def _backoff_delay(self, attempt: int) -> float:
        """Exponential backoff: base delay doubled for every previous attempt."""
        return self.base_delay * (2**attempt)

    @staticmethod
    def _parse_retry_after(response: httpx.Response) -> Optional[float]:
        """Read the upstream Retry-After hint in seconds, if usable."""
        value = response.headers.get("Retry-After")
        if value is None:
            return None
        try:
            seconds = float(value)
        except ValueError:
            return None
        return seconds if seconds >= 0 else None

    def _build_http_error(self, response: httpx.Response, url: str) -> RiotAPIError:
        """Build the classified error for a non-success response."""
        status = response.status_code
        error_class = error_class_for_status(status)
        cause = httpx.HTTPStatusError(
            f"HTTP {status} for {url}", request=response.request, response=response
        )
        return error_class(
            response.reason_phrase or f"HTTP {status}",
            status_code=status,
            url=url,
            cause=cause,
            retry_after=(
                self._parse_retry_after(response)
                if is_retryable_status(status)
                else None
            ),
        )

    @staticmethod
    def _parse_json(response: httpx.Response, url: str) -> Any:
        """Decode a response body, classifying garbage as an invalid response."""
        try:
            return response.json()
        except ValueError as e:
            raise InvalidResponseError(
                "Response body is not valid JSON",
                status_code=response.status_code,
                url=url,
                cause=e,
            ) from e

    async def _make_request(self, url: str) -> Any:
        """
        Make a GET request with retry logic.

        4xx other than 429 fail immediately. 429, 5xx and transport failures
        are retried up to ``max_retries`` times, waiting for the Retry-After
        hint when the server sends one and for the exponential backoff delay
        otherwise, never longer than ``max_delay``.

        Args:
            url: Request URL

        Returns:
            Decoded JSON response

        Raises:
            RiotAPIError: Classified error once retries are exhausted
        """
        await self.start_session()

        if self.session is None:
            raise UnknownAPIError("Session not initialized", url=url)

        for attempt in range(self.max_retries + 1):
            try:
                response = await self.session.get(url)
            except httpx.RequestError as e:
                error: RiotAPIError = UnknownAPIError(
                    f"Request failed: {e}", url=url, cause=e
                )
                delay = self._backoff_delay(attempt)
            else:
                if response.is_success:
                    if self.request_callback:
                        self.request_callback("requests_made", 1)
                    return self._parse_json(response, url)

                error = self._build_http_error(response, url)
                if not is_retryable_status(response.status_code):
                    raise error
                delay = (
                    error.retry_after
                    if error.retry_after is not None
                    else self._backoff_delay(attempt)
                )

            if attempt >= self.max_retries:
                logger.warning(
                    "Riot API request failed after retries",
                    url=url,
                    attempts=attempt + 1,
                    error_kind=error.kind.value,
                    status_code=error.status_code,
                )
                raise error

            delay = min(delay, self.max_delay)
            logger.warning(
                "Retrying Riot API request",
                url=url,
                attempt=attempt + 1,
                max_retries=self.max_retries,
                delay_seconds=delay,
                error_kind=error.kind.value,
                status_code=error.status_code,
            )
            await asyncio.sleep(delay)

        raise UnknownAPIError("Retry loop exited without a result", url=url)

    @staticmethod
    def _validate(model: Type[ModelT], data: Any, url: str) -> ModelT:
        """Validate a payload against a DTO, without retrying on failure."""
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise InvalidResponseError(
                f"Unexpected {model.__name__} response shape", url=url, cause=e
            ) from e

    # Account endpoints
    async def get_player_id(
        self, region: Union[Region, str], game_name: str, tag_line: str
    ) -> str:
        """Resolve a Riot ID (gameName#tagLine) to the player's puuid."""
        url = self.endpoints.account_by_riot_id(game_name, tag_line, region)
        response = await self._make_request(url)
        return self._validate(AccountDTO, response, url).puuid

    # Match endpoints
    async def get_last_match_id(
        self, puuid: str, region: Union[Region, str]
    ) -> Optional[str]:
        """Get the most recent match id, or None when the player has no match."""
        url = self.endpoints.match_ids_by_puuid(puuid, start=0, count=1, region=region)
        try:
            response = await self._make_request(url)
        except NotFoundError:
            logger.debug("No match history found", puuid=puuid)
            return None

        if not isinstance(response, list) or not all(
            isinstance(match_id, str) for match_id in response
        ):
            raise InvalidResponseError(
                f"Expected list of match ids, got {type(response).__name__}", url=url
            )
        return response[0] if response else None

    async def get_match_details(
        self, region: Union[Region, str], match_id: str
    ) -> Optional[MatchDTO]:
        """Get match details by match ID, or None when the match is unknown."""
        url = self.endpoints.match_by_id(match_id, region)
        try:
            response = await self._make_request(url)
        except NotFoundError:
            logger.warning("Match not found", match_id=match_id)
            return None
        return self._validate(MatchDTO, response, url)

    # League endpoints
    async def get_league_entries(
        self, puuid: str, platform: Optional[Union[Platform, str]] = None
    ) -> List[LeagueEntryDTO]:
        """Get TFT league entries by PUUID; unknown players have none."""
        url = self.endpoints.league_entries_by_puuid(puuid, platform)
        try:
            response = await self._make_request(url)
        except NotFoundError:
            logger.debug("No league entries found", puuid=puuid)
            return []

        # API returns a list of league entries
        if not isinstance(response, list):
            raise InvalidResponseError(
                f"Expected list response for league entries, got {type(response).__name__}",
                url=url,
            )

        return [self._validate(LeagueEntryDTO, entry, url) for entry in response]
