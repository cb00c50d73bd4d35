"""Precise unit tests for declarative REST endpoints.

Tests focus on parameter building, request construction and decoding.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from pydantic import BaseModel, ValidationError

from remotekit.core import HTTPRequest, HTTPResponse, ProgramInterface
from remotekit.endpoints import (
    BuildRequestContext,
    DecodeOutputContext,
    JSONEndpoint,
    ResponseAdapter,
    RestEndpoint,
    RestEndpointSpec,
)
from remotekit.pagination import CursorPaginationOptions, OffsetCursor


class User(BaseModel):
    id: int
    name: str


class UserQuery(BaseModel):
    team: str
    active: bool | None = None


class TestRestEndpoint:
    """Test RestEndpoint request building."""

    @pytest.fixture
    def mock_adapter(self):
        """Create mock response adapter."""
        adapter = MagicMock(spec=ResponseAdapter)
        adapter.parse = MagicMock(return_value={"parsed": "data"})
        return adapter

    def test_build_get_request(self, mock_adapter):
        """Test building a GET request."""
        spec = RestEndpointSpec(
            id="test",
            method="GET",
            build_path=lambda p: f"/test/{p['id']}",
            build_query=lambda p: {"param": p.get("param")},
        )
        endpoint = RestEndpoint(spec, mock_adapter)

        request = endpoint.build_request(
            {"id": "123", "param": "value"}, BuildRequestContext(root=ProgramInterface())
        )

        assert request == HTTPRequest(method="GET", path="/test/123", query={"param": "value"})
        assert endpoint.id == "test"

    def test_build_post_request(self, mock_adapter):
        """Test building a POST request with body and headers."""
        spec = RestEndpointSpec(
            id="create",
            method="POST",
            build_path=lambda p: "/test",
            build_body=lambda p: {"data": p["data"]},
            build_headers=lambda p: {"X-Request": "1"},
        )
        request = RestEndpoint(spec, mock_adapter).build_request(
            {"data": "value"}, BuildRequestContext(root=ProgramInterface())
        )

        assert request.method == "POST"
        assert request.body == {"data": "value"}
        assert request.headers_dict == {"X-Request": "1"}

    def test_model_input_and_options_merge(self, mock_adapter):
        """Test params merge model input with non-None option fields."""
        spec = RestEndpointSpec(
            id="users",
            method="GET",
            build_path=lambda p: f"/teams/{p['team']}/users",
            build_query=lambda p: {
                "active": p["active"],
                "limit": p.get("fetch_limit"),
                "offset": p["pagination_cursor"].offset_value()
                if "pagination_cursor" in p
                else None,
            },
        )
        endpoint = RestEndpoint(spec, mock_adapter, options_type=CursorPaginationOptions)
        options = endpoint.make_default_options().with_pagination_cursor(OffsetCursor(20))

        request = endpoint.build_request(
            UserQuery(team="core"), BuildRequestContext(root=ProgramInterface(), options=options)
        )

        assert request.path == "/teams/core/users"
        assert request.query_dict == {"offset": "20"}

    def test_scalar_input(self, mock_adapter):
        spec = RestEndpointSpec(id="get", method="GET", build_path=lambda p: f"/items/{p['input']}")
        request = RestEndpoint(spec, mock_adapter).build_request(
            7, BuildRequestContext(root=ProgramInterface())
        )
        assert request.path == "/items/7"

    def test_decode_passes_json_payload_to_adapter(self, mock_adapter):
        spec = RestEndpointSpec(id="get", method="GET", build_path=lambda p: "/x")
        endpoint = RestEndpoint(spec, mock_adapter)
        context = DecodeOutputContext(
            root=ProgramInterface(), input={"id": 1}, options=None, request=HTTPRequest(path="/x")
        )

        result = endpoint.decode_output(HTTPResponse.from_json({"raw": True}), context)

        assert result == {"parsed": "data"}
        mock_adapter.parse.assert_called_once_with({"raw": True}, {"id": 1})


class TestJSONEndpoint:
    """Test JSONEndpoint decoding."""

    def _context(self):
        return DecodeOutputContext(
            root=ProgramInterface(), input=None, options=None, request=HTTPRequest(path="/u")
        )

    def test_decodes_model(self):
        endpoint = JSONEndpoint(
            RestEndpointSpec(id="me", method="GET", build_path=lambda p: "/me"), User
        )
        user = endpoint.decode_output(
            HTTPResponse.from_json({"id": 1, "name": "ada"}), self._context()
        )
        assert user == User(id=1, name="ada")

    def test_decodes_list(self):
        endpoint = JSONEndpoint(
            RestEndpointSpec(id="users", method="GET", build_path=lambda p: "/users"), list[User]
        )
        users = endpoint.decode_output(
            HTTPResponse.from_json([{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]),
            self._context(),
        )
        assert [u.id for u in users] == [1, 2]

    def test_invalid_payload_raises(self):
        endpoint = JSONEndpoint(
            RestEndpointSpec(id="me", method="GET", build_path=lambda p: "/me"), User
        )
        with pytest.raises(ValidationError):
            endpoint.decode_output(HTTPResponse.from_json({"id": "x"}), self._context())
