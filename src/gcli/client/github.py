"""Synchronous GitHub REST API client.

This module provides :class:`GitHubClient`, the remote-API collaborator
behind every ``gcli <group> <verb>`` command.  It wraps
:class:`httpx.Client` and layers on:

- **Auth injection** -- an OAuth token (``Authorization: token ...``) or
  login/password basic auth, taken from the resolved configuration.
- **Endpoint expansion** -- positional arguments fill the path template of a
  :class:`~gcli.models.Endpoint`; keywords become query parameters for
  ``GET`` and a JSON body otherwise.
- **Pagination** -- collection endpoints return a
  :class:`~gcli.client.pagination.PaginatedCursor` that follows ``Link``
  headers on demand.
- **Retry with backoff** -- retries idempotent calls on 5xx and network
  errors with exponential delay (1 s, 2 s, ...).
- **Error mapping** -- HTTP failures become
  :class:`~gcli.exceptions.RemoteCallError` subclasses carrying GitHub's
  error message.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, Optional, Sequence
from urllib.parse import quote

import httpx

from gcli import __version__
from gcli.client.pagination import Page, PaginatedCursor, extract_records, next_page_url
from gcli.exceptions import AuthError, ConnectionError_, NotFoundError, ServerError
from gcli.models import Endpoint, HTTPMethod

if TYPE_CHECKING:
    from gcli.config import ResolvedConfig
    from gcli.output import OutputManager

DEFAULT_ACCEPT = "application/vnd.github+json"
_QUERY_METHODS = {HTTPMethod.GET}
_IDEMPOTENT_METHODS = {"GET", "PUT", "DELETE"}


class GitHubClient:
    """Synchronous client for the GitHub REST API.

    Must be used as a context manager so that the underlying transport is
    properly opened and closed.

    Args:
        endpoint: API base URL (``core.endpoint``).
        token: OAuth token (``user.token``).  Takes precedence over basic auth.
        login: Login for basic auth (``user.login``).
        password: Password for basic auth (``user.password``).
        timeout: Request timeout in seconds.
        max_retries: Retry attempts on 5xx and network errors.
        output: Terminal used for debug messages.
        transport: Optional httpx transport (tests inject
            :class:`httpx.MockTransport`).

    Example::

        with GitHubClient(token="ghp_...") as client:
            cursor = client.invoke(endpoint, ["octocat"], {"type": "owner"})
    """

    def __init__(
        self,
        endpoint: str = "https://api.github.com",
        token: Optional[str] = None,
        login: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 30,
        max_retries: int = 2,
        output: Optional[OutputManager] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._endpoint = endpoint.rstrip("/")
        self._token = token or None
        self._login = login or None
        self._password = password or None
        self._timeout = timeout
        self._max_retries = max_retries
        self._output = output
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @classmethod
    def from_config(
        cls,
        config: ResolvedConfig,
        output: Optional[OutputManager] = None,
        **kwargs: Any,
    ) -> GitHubClient:
        """Build a client from ``core.endpoint`` and the ``user`` credentials."""
        return cls(
            endpoint=config.fetch("core.endpoint") or "https://api.github.com",
            token=config.fetch("user.token"),
            login=config.fetch("user.login"),
            password=config.fetch("user.password"),
            output=output,
            **kwargs,
        )

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> GitHubClient:
        headers = {
            "Accept": DEFAULT_ACCEPT,
            "User-Agent": f"gcli/{__version__}",
        }
        auth: Optional[httpx.BasicAuth] = None
        if self._token:
            headers["Authorization"] = f"token {self._token}"
        elif self._login and self._password:
            auth = httpx.BasicAuth(self._login, self._password)

        self._client = httpx.Client(
            base_url=self._endpoint,
            headers=headers,
            auth=auth,
            timeout=self._timeout,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Remote-API collaborator interface
    # ------------------------------------------------------------------ #

    def invoke(
        self,
        endpoint: Endpoint,
        positionals: Sequence[Any],
        keywords: dict[str, Any],
    ) -> Any:
        """Call *endpoint* and return its decoded result.

        Args:
            endpoint: The HTTP shape of the call.
            positionals: Values for the path placeholders, followed by
                values for ``endpoint.query_keys``.
            keywords: API parameters.

        Returns:
            A :class:`PaginatedCursor` for paginated endpoints, otherwise the
            decoded JSON body (``dict`` or ``list``), or ``None`` for an
            empty body (e.g. ``204 No Content``).
        """
        path, params = self.expand(endpoint, positionals)
        json_body: Optional[dict[str, Any]] = None
        if endpoint.method in _QUERY_METHODS:
            params.update(keywords)
        elif keywords:
            json_body = dict(keywords)

        response = self.request(
            endpoint.method.value.upper(),
            path,
            params=params or None,
            json_body=json_body,
            accept=endpoint.accept,
        )

        if endpoint.paginated:
            records = extract_records(_decode(response), endpoint.items_key)
            return PaginatedCursor(
                records,
                next_page_url(response),
                lambda token: self.fetch_page(token, endpoint),
            )
        return _decode(response)

    def fetch_page(self, url: str, endpoint: Endpoint) -> Page:
        """Fetch one follow-up page by its continuation URL."""
        if self._output:
            self._output.debug(f"Fetching next page: {url}")
        response = self.request("GET", url, accept=endpoint.accept)
        return extract_records(_decode(response), endpoint.items_key), next_page_url(response)

    @staticmethod
    def expand(endpoint: Endpoint, positionals: Sequence[Any]) -> tuple[str, dict[str, Any]]:
        """Fill the path template and collect left-over positionals as query params."""
        values = list(positionals)
        placeholders = endpoint.placeholders
        path = endpoint.path
        for name, value in zip(placeholders, values):
            path = path.replace("{" + name + "}", quote(str(value), safe="/"), 1)
        params = dict(zip(endpoint.query_keys, values[len(placeholders):]))
        return path, params

    # ------------------------------------------------------------------ #
    # HTTP
    # ------------------------------------------------------------------ #

    def request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json_body: Optional[Any] = None,
        accept: Optional[str] = None,
    ) -> httpx.Response:
        """Make an HTTP request with retry and error mapping.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE).
            path: URL path relative to the endpoint, or an absolute URL
                (continuation tokens are absolute).
            params: Query parameters.
            json_body: JSON-serialisable body.
            accept: ``Accept`` header override.

        Raises:
            AuthError: On 401 / 403.
            NotFoundError: On 404.
            ServerError: On any other error status or an unreadable response.
            ConnectionError_: On network / timeout errors after all retries.
        """
        headers = {"Accept": accept} if accept else {}
        if self._output:
            self._output.debug(f"{method} {path} params={params or {}}")
        response = self._execute_with_retry(method, path, headers, params, json_body)
        self._map_response_error(response)
        return response

    def _execute_with_retry(
        self,
        method: str,
        path: str,
        headers: dict[str, str],
        params: Optional[dict[str, Any]],
        json_body: Any,
    ) -> httpx.Response:
        """Execute the HTTP request with exponential-backoff retry.

        Idempotent methods (GET, PUT, DELETE) are retried on 5xx status
        codes and transport errors up to ``max_retries`` times; POST and
        PATCH are retried only when the connection could not be opened at
        all.  The delay doubles each attempt: 1 s, 2 s, 4 s, ...

        Raises:
            ConnectionError_: A transport error persisted after all retries.
            ServerError: The response could not be read (bad encoding, too
                many redirects).
        """
        assert self._client is not None, "Client not initialised -- use as context manager"

        retries = self._max_retries if method.upper() in _IDEMPOTENT_METHODS else 0
        for attempt in range(self._max_retries + 1):
            try:
                kwargs: dict[str, Any] = {
                    "method": method,
                    "url": path,
                    "headers": headers,
                    "params": params,
                }
                if json_body is not None:
                    kwargs["json"] = json_body
                response = self._client.request(**kwargs)

                if response.status_code >= 500 and attempt < retries:
                    self._backoff(attempt, f"Server error {response.status_code}")
                    continue
                return response

            except httpx.ConnectError as exc:
                if attempt < self._max_retries:
                    self._backoff(attempt, f"Connection error: {exc}")
                    continue
                raise ConnectionError_(
                    f"Connection failed after {attempt + 1} attempts: {exc}"
                ) from exc
            except httpx.TransportError as exc:
                if attempt < retries:
                    self._backoff(attempt, f"Connection error: {exc}")
                    continue
                raise ConnectionError_(
                    f"Connection failed after {attempt + 1} attempts: {exc}"
                ) from exc
            except httpx.HTTPError as exc:
                raise ServerError(f"Invalid response from {path}: {exc}") from exc

        raise ServerError("Request failed after all retries")  # pragma: no cover

    def _backoff(self, attempt: int, reason: str) -> None:
        delay = 2 ** attempt
        if self._output:
            self._output.debug(
                f"{reason}, retrying in {delay}s (attempt {attempt + 1}/{self._max_retries})"
            )
        time.sleep(delay)

    @staticmethod
    def _map_response_error(response: httpx.Response) -> None:
        """Raise a typed exception for error HTTP status codes."""
        status = response.status_code
        if status < 400:
            return

        try:
            detail = response.json()
            if isinstance(detail, dict):
                msg = detail.get("message") or ""
                errors = detail.get("errors")
                if isinstance(errors, list) and errors:
                    reasons = [
                        e.get("message") or e.get("code", "") if isinstance(e, dict) else str(e)
                        for e in errors
                    ]
                    msg = f"{msg} ({'; '.join(r for r in reasons if r)})" if msg else "; ".join(reasons)
            else:
                msg = str(detail)
        except ValueError:
            msg = response.text[:200] if response.text else ""

        full_msg = f"HTTP {status}: {msg}" if msg else f"HTTP {status}"

        if status in (401, 403):
            raise AuthError(full_msg)
        if status == 404:
            raise NotFoundError(full_msg)
        raise ServerError(full_msg)


def _decode(response: httpx.Response) -> Any:
    """Decode a response body as JSON; ``None`` when empty, raw text otherwise."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
