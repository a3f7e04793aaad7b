"""Tests for the GitHub REST client."""

from __future__ import annotations

import base64
import json
from typing import Any, Callable
from unittest.mock import patch

import httpx
import pytest

from gcli.client import GitHubClient, PaginatedCursor
from gcli.config import ResolvedConfig
from gcli.exceptions import AuthError, ConnectionError_, NotFoundError, ServerError
from gcli.models import Endpoint, HTTPMethod


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _json_response(data: Any, status_code: int = 200, **headers: str) -> httpx.Response:
    """Build an httpx.Response with a JSON body."""
    return httpx.Response(status_code=status_code, json=data, headers=headers)


def _client(handler: Callable[[httpx.Request], httpx.Response], **kwargs: Any) -> GitHubClient:
    kwargs.setdefault("max_retries", 0)
    return GitHubClient(transport=httpx.MockTransport(handler), **kwargs)


def _recorder(*responses: httpx.Response) -> tuple[list[httpx.Request], Callable]:
    """A handler answering with *responses* in order and recording requests."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return responses[min(len(seen), len(responses)) - 1]

    return seen, handler


REF_UPDATE = Endpoint(method=HTTPMethod.PATCH, path="/repos/{user}/{repo}/git/refs/{ref}")
REPO_LIST = Endpoint(method=HTTPMethod.GET, path="/user/repos", paginated=True)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_context_manager_opens_and_closes(self) -> None:
        client = GitHubClient()
        assert client._client is None
        with client:
            assert client._client is not None
        assert client._client is None

    def test_from_config(self) -> None:
        config = ResolvedConfig({
            "core": {"endpoint": "https://ghe.example.com/api/v3/"},
            "user": {"token": "abc", "login": "", "password": ""},
        })
        client = GitHubClient.from_config(config)
        assert client._endpoint == "https://ghe.example.com/api/v3"
        assert client._token == "abc"
        assert client._login is None


class TestHeaders:
    def test_token_auth(self) -> None:
        seen, handler = _recorder(_json_response({}))
        with _client(handler, token="ghp_secret") as client:
            client.request("GET", "/user")
        request = seen[0]
        assert request.headers["Authorization"] == "token ghp_secret"
        assert request.headers["Accept"] == "application/vnd.github+json"
        assert request.headers["User-Agent"].startswith("gcli/")

    def test_basic_auth(self) -> None:
        seen, handler = _recorder(_json_response({}))
        with _client(handler, login="octocat", password="pw") as client:
            client.request("GET", "/user")
        expected = base64.b64encode(b"octocat:pw").decode()
        assert seen[0].headers["Authorization"] == f"Basic {expected}"

    def test_no_auth(self) -> None:
        seen, handler = _recorder(_json_response({}))
        with _client(handler) as client:
            client.request("GET", "/users/octocat")
        assert "Authorization" not in seen[0].headers

    def test_accept_override(self) -> None:
        seen, handler = _recorder(_json_response({}))
        with _client(handler) as client:
            client.request("GET", "/search/code", accept="application/vnd.github.v3.text-match+json")
        assert seen[0].headers["Accept"] == "application/vnd.github.v3.text-match+json"


# ---------------------------------------------------------------------------
# invoke
# ---------------------------------------------------------------------------


class TestInvoke:
    def test_expand_quotes_values(self) -> None:
        path, params = GitHubClient.expand(REF_UPDATE, ["octo cat", "hello", "heads/main"])
        assert path == "/repos/octo%20cat/hello/git/refs/heads/main"
        assert params == {}

    def test_expand_leftover_positionals_become_query(self) -> None:
        endpoint = Endpoint(method=HTTPMethod.GET, path="/search/repositories", query_keys=("q",))
        assert GitHubClient.expand(endpoint, ["gcli"]) == ("/search/repositories", {"q": "gcli"})

    def test_patch_sends_json_body(self) -> None:
        seen, handler = _recorder(_json_response({"ref": "refs/heads/main"}))
        with _client(handler) as client:
            result = client.invoke(
                REF_UPDATE, ["octocat", "hello", "heads/main"], {"sha": "aa2", "force": False}
            )
        request = seen[0]
        assert request.method == "PATCH"
        assert request.url.path == "/repos/octocat/hello/git/refs/heads/main"
        assert json.loads(request.content) == {"sha": "aa2", "force": False}
        assert result == {"ref": "refs/heads/main"}

    def test_get_sends_query_params(self) -> None:
        endpoint = Endpoint(method=HTTPMethod.GET, path="/repos/{user}/{repo}/issues")
        seen, handler = _recorder(_json_response([]))
        with _client(handler) as client:
            client.invoke(endpoint, ["octocat", "hello"], {"state": "open"})
        assert seen[0].url.params["state"] == "open"
        assert seen[0].content == b""

    def test_put_without_keywords_has_no_body(self) -> None:
        endpoint = Endpoint(method=HTTPMethod.PUT, path="/teams/{id}/memberships/{user}")
        seen, handler = _recorder(httpx.Response(204))
        with _client(handler) as client:
            result = client.invoke(endpoint, [42, "alice"], {})
        assert seen[0].url.path == "/teams/42/memberships/alice"
        assert seen[0].content == b""
        assert result is None

    def test_non_json_body_returned_as_text(self) -> None:
        endpoint = Endpoint(method=HTTPMethod.GET, path="/markdown")
        _, handler = _recorder(httpx.Response(200, text="<p>hi</p>"))
        with _client(handler) as client:
            assert client.invoke(endpoint, [], {}) == "<p>hi</p>"


class TestPagination:
    def test_follows_link_header(self) -> None:
        next_url = "https://api.github.com/user/repos?page=2"
        seen, handler = _recorder(
            _json_response([{"id": "A"}, {"id": "B"}], Link=f'<{next_url}>; rel="next"'),
            _json_response([{"id": "C"}, {"id": "D"}]),
        )
        with _client(handler) as client:
            cursor = client.invoke(REPO_LIST, [], {"per_page": 2})
            assert isinstance(cursor, PaginatedCursor)
            assert len(seen) == 1

            first = cursor.next()
            assert first == ([{"id": "A"}, {"id": "B"}], next_url)
            assert len(seen) == 1

            second = cursor.next()
            assert second == ([{"id": "C"}, {"id": "D"}], None)

        assert str(seen[1].url) == next_url
        assert seen[0].url.params["per_page"] == "2"
        assert cursor.exhausted

    def test_items_key_unwraps_search_results(self) -> None:
        endpoint = Endpoint(
            method=HTTPMethod.GET, path="/search/repositories",
            query_keys=("q",), paginated=True, items_key="items",
        )
        _, handler = _recorder(_json_response({"total_count": 1, "items": [{"name": "gcli"}]}))
        with _client(handler) as client:
            records, token = client.invoke(endpoint, ["gcli"], {}).next()
        assert records == [{"name": "gcli"}]
        assert token is None


# ---------------------------------------------------------------------------
# Errors and retry
# ---------------------------------------------------------------------------


class TestErrorMapping:
    @pytest.mark.parametrize(
        "status, exc_type, exit_code",
        [
            (401, AuthError, 3),
            (403, AuthError, 3),
            (404, NotFoundError, 4),
            (422, ServerError, 5),
            (500, ServerError, 5),
        ],
    )
    def test_status_mapping(self, status: int, exc_type: type, exit_code: int) -> None:
        _, handler = _recorder(_json_response({"message": "Nope"}, status))
        with _client(handler) as client:
            with pytest.raises(exc_type) as exc_info:
                client.request("GET", "/user")
        assert str(exc_info.value) == f"HTTP {status}: Nope"
        assert exc_info.value.exit_code == exit_code

    def test_validation_errors_included(self) -> None:
        body = {"message": "Validation Failed", "errors": [{"code": "invalid", "message": "sha is invalid"}]}
        _, handler = _recorder(_json_response(body, 422))
        with _client(handler) as client:
            with pytest.raises(ServerError, match=r"Validation Failed \(sha is invalid\)"):
                client.request("PATCH", "/repos/o/r/git/refs/heads/x")

    def test_non_json_error_body(self) -> None:
        _, handler = _recorder(httpx.Response(502, text="Bad Gateway"))
        with _client(handler) as client:
            with pytest.raises(ServerError, match="HTTP 502: Bad Gateway"):
                client.request("GET", "/user")


class TestRetry:
    def test_retries_server_errors(self) -> None:
        seen, handler = _recorder(
            _json_response({"message": "oops"}, 503),
            _json_response({"login": "octocat"}),
        )
        with patch("gcli.client.github.time.sleep") as sleep:
            with _client(handler, max_retries=2) as client:
                response = client.request("GET", "/user")
        assert response.json() == {"login": "octocat"}
        assert len(seen) == 2
        sleep.assert_called_once_with(1)

    def test_gives_up_after_max_retries(self) -> None:
        seen, handler = _recorder(_json_response({"message": "down"}, 500))
        with patch("gcli.client.github.time.sleep") as sleep:
            with _client(handler, max_retries=2) as client:
                with pytest.raises(ServerError):
                    client.request("GET", "/user")
        assert len(seen) == 3
        assert [c.args[0] for c in sleep.call_args_list] == [1, 2]

    def test_client_errors_not_retried(self) -> None:
        seen, handler = _recorder(_json_response({"message": "Not Found"}, 404))
        with patch("gcli.client.github.time.sleep") as sleep:
            with _client(handler, max_retries=2) as client:
                with pytest.raises(NotFoundError):
                    client.request("GET", "/repos/o/missing")
        assert len(seen) == 1
        sleep.assert_not_called()

    def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with patch("gcli.client.github.time.sleep"):
            with _client(handler, max_retries=1) as client:
                with pytest.raises(ConnectionError_, match="after 2 attempts") as exc_info:
                    client.request("GET", "/user")
        assert exc_info.value.exit_code == 6

    @pytest.mark.parametrize("method", ["POST", "PATCH"])
    def test_non_idempotent_not_retried_on_server_error(self, method: str) -> None:
        seen, handler = _recorder(_json_response({"message": "down"}, 502))
        with patch("gcli.client.github.time.sleep") as sleep:
            with _client(handler, max_retries=2) as client:
                with pytest.raises(ServerError):
                    client.request(method, "/repos/o/r/issues", json_body={"title": "x"})
        assert len(seen) == 1
        sleep.assert_not_called()

    def test_non_idempotent_not_retried_on_timeout(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            raise httpx.ReadTimeout("timed out", request=request)

        with patch("gcli.client.github.time.sleep") as sleep:
            with _client(handler, max_retries=2) as client:
                with pytest.raises(ConnectionError_):
                    client.request("POST", "/repos/o/r/issues", json_body={"title": "x"})
        assert len(seen) == 1
        sleep.assert_not_called()

    def test_put_retried_on_timeout(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if len(seen) == 1:
                raise httpx.ReadTimeout("timed out", request=request)
            return httpx.Response(204)

        with patch("gcli.client.github.time.sleep"):
            with _client(handler, max_retries=2) as client:
                assert client.request("PUT", "/user/starred/o/r").status_code == 204
        assert len(seen) == 2

    def test_post_retried_when_connection_refused(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if len(seen) == 1:
                raise httpx.ConnectError("connection refused", request=request)
            return _json_response({"number": 1}, 201)

        with patch("gcli.client.github.time.sleep"):
            with _client(handler, max_retries=2) as client:
                assert client.request("POST", "/repos/o/r/issues").json() == {"number": 1}
        assert len(seen) == 2


class TestTransportFailures:
    def test_server_disconnect_is_a_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.RemoteProtocolError("Server disconnected", request=request)

        with _client(handler) as client:
            with pytest.raises(ConnectionError_, match="Server disconnected") as exc_info:
                client.request("GET", "/user/repos")
        assert exc_info.value.exit_code == 6

    @pytest.mark.parametrize(
        "error",
        [httpx.TooManyRedirects, httpx.DecodingError],
    )
    def test_unreadable_response_is_a_server_error(self, error: type) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise error("broken", request=request)

        with _client(handler) as client:
            with pytest.raises(ServerError, match="broken") as exc_info:
                client.request("GET", "/user/repos")
        assert exc_info.value.exit_code == 5

    def test_failing_next_page_surfaces_as_remote_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params.get("page") == "2":
                raise httpx.RemoteProtocolError("Server disconnected", request=request)
            return _json_response(
                [{"id": 1}], Link='<https://api.github.com/user/repos?page=2>; rel="next"'
            )

        with _client(handler) as client:
            cursor = client.invoke(REPO_LIST, [], {})
            assert cursor.next()[0] == [{"id": 1}]
            with pytest.raises(ConnectionError_):
                cursor.next()
