"""
Resilient HTTP client for the Jolpica (Ergast-compatible) F1 API.

- Per-attempt deadline covering connect, headers and body
- Bounded retries with exponential backoff on 408/429, 5xx, timeouts and
  network failures; other 4xx fail immediately
- Response-shape validation before anything is returned
"""
import socket
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from contextlib import suppress
from typing import Any, Callable

import requests

from src.config import cfg
from src.ingest_jolpica.errors import TransportError, ValidationError
from src.ingest_jolpica.schemas import validate_response
from src.utils.logger import logger


def retry_delay(attempt: int, base_delay: float) -> float:
    """Backoff before retry number `attempt` (counting from 1)."""
    return base_delay * 2 ** (attempt - 1)


def _abort(response: requests.Response) -> None:
    """Shut down the socket under a streaming response so a blocked read returns."""
    connection = getattr(response.raw, "_connection", None)
    sock = getattr(connection, "sock", None)
    if sock is not None:
        with suppress(OSError):  # peer already gone
            sock.shutdown(socket.SHUT_RDWR)
    response.close()


class JolpicaClient:
    """
    HTTP client for the Jolpica REST API.

    One call to fetch() is one logical request: at most max_retries + 1
    sequential network attempts, each bounded by the timeout.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        base_retry_delay: float | None = None,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.base_url = (base_url or cfg.api.base_url).rstrip("/")
        self.timeout = cfg.api.timeout if timeout is None else timeout
        self.max_retries = cfg.api.max_retries if max_retries is None else max_retries
        self.base_retry_delay = (
            cfg.api.base_retry_delay if base_retry_delay is None else base_retry_delay
        )
        self._sleep = sleep

        if session is None:
            session = requests.Session()
            session.headers.update({
                "Accept": "application/json",
                "User-Agent": cfg.api.user_agent,
            })
        self.session = session

    def url_for(self, endpoint: str) -> str:
        return f"{self.base_url}{endpoint}"

    def _send(self, url: str, in_flight: list[requests.Response]) -> requests.Response:
        """Issue the GET and read the whole body (runs on the attempt's worker thread)."""
        response = self.session.get(url, timeout=self.timeout, stream=True)
        in_flight.append(response)
        response.content
        return response

    def _timeout_error(self, url: str) -> TransportError:
        return TransportError(
            f"Request timeout after {self.timeout * 1000:.0f}ms", url=url, reason="timeout"
        )

    def _attempt(self, url: str) -> requests.Response:
        # The deadline covers connect, headers and body together; requests'
        # own timeout only bounds each socket operation.
        in_flight: list[requests.Response] = []
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="jolpica-attempt")
        future = executor.submit(self._send, url, in_flight)
        try:
            response = future.result(timeout=self.timeout)
        except FutureTimeoutError as e:
            for pending in in_flight:
                _abort(pending)
            raise self._timeout_error(url) from e
        except requests.exceptions.Timeout as e:
            raise self._timeout_error(url) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Request failed: {e}", url=url, reason="network") from e
        finally:
            executor.shutdown(wait=False)

        if not response.ok:
            raise TransportError(
                f"HTTP {response.status_code}: {response.reason}",
                url=url,
                status=response.status_code,
                reason="status",
            )
        return response

    def _request(self, url: str) -> requests.Response:
        attempts = self.max_retries + 1
        attempt = 1
        while True:
            try:
                return self._attempt(url)
            except TransportError as e:
                if not e.retryable or attempt == attempts:
                    logger.error(f"Giving up on {url} after {attempt} attempt(s): {e}")
                    raise
                delay = retry_delay(attempt, self.base_retry_delay)
                logger.warning(
                    f"Request failed (attempt {attempt}/{attempts}): {e}. "
                    f"Retrying in {delay * 1000:.0f}ms..."
                )
                self._sleep(delay)
                attempt += 1

    def fetch(self, endpoint: str) -> dict[str, Any]:
        """
        Fetch and validate one API resource.

        Args:
            endpoint: Path relative to the base URL, query string already
                encoded (e.g. '/seasons.json?limit=100').

        Returns:
            The decoded JSON body, validated against the response envelope.

        Raises:
            TransportError: timeout, network failure or non-2xx status.
            ValidationError: body is not JSON or does not match the shape.
        """
        url = self.url_for(endpoint)
        logger.debug(f"Fetching: {url}")
        response = self._request(url)
        try:
            data = response.json()
        except ValueError as e:
            raise ValidationError(f"response body is not valid JSON ({e})", url=url) from e
        return validate_response(data, url=url)
