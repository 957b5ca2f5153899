import json
from unittest.mock import MagicMock

import pytest
import requests

from cluster_profile_cleaner.collectors.palette_api import PaletteApiClient
from cluster_profile_cleaner.exceptions import ApiResponseError
from cluster_profile_cleaner.exceptions import MAX_BODY_CHARS
from cluster_profile_cleaner.exceptions import PaletteApiError


def _response(status_code: int, body: bytes = b"") -> requests.Response:
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = body
    resp.encoding = "utf-8"
    return resp


def _client(*responses):
    session = MagicMock()
    session.request.side_effect = list(responses)
    return PaletteApiClient("https://palette.example.com/", "secret", session=session), session


def test_execute_attaches_api_key_without_project_header():
    client, session = _client(_response(200, b'{"items": []}'))

    assert client.execute("GET", "clusterprofiles") == {"items": []}

    args, kwargs = session.request.call_args
    assert args == ("GET", "https://palette.example.com/v1/clusterprofiles")
    assert kwargs["headers"]["ApiKey"] == "secret"
    assert "ProjectUid" not in kwargs["headers"]


def test_execute_attaches_project_header_when_scoped():
    client, session = _client(_response(200, b"{}"))

    client.execute("GET", "clusterprofiles/p1", project_uid="proj-1")

    _, kwargs = session.request.call_args
    assert kwargs["headers"]["ProjectUid"] == "proj-1"


def test_no_content_is_empty_success():
    client, _ = _client(_response(204))

    assert client.delete_cluster_profile("p1") == {"success": True}


@pytest.mark.parametrize("status_code", [400, 403, 404, 500])
def test_error_status_raises_with_context(status_code):
    body = ("x" * (MAX_BODY_CHARS + 100)).encode()
    client, session = _client(_response(status_code, body))

    with pytest.raises(PaletteApiError) as excinfo:
        client.get_cluster_profile("p1")

    error = excinfo.value
    assert error.status_code == status_code
    assert error.method == "GET"
    assert error.endpoint == "clusterprofiles/p1"
    assert len(error.body) == MAX_BODY_CHARS
    # single attempt, no retries
    assert session.request.call_count == 1


def test_empty_body_is_a_failure():
    client, _ = _client(_response(200, b""))

    with pytest.raises(ApiResponseError):
        client.execute("GET", "projects")


def test_invalid_json_is_a_failure():
    client, _ = _client(_response(200, b"<html>maintenance</html>"))

    with pytest.raises(ApiResponseError) as excinfo:
        client.execute("GET", "projects")
    assert "maintenance" in excinfo.value.body


def test_transport_error_is_wrapped():
    session = MagicMock()
    session.request.side_effect = requests.exceptions.ConnectionError("refused")
    client = PaletteApiClient("https://palette.example.com", "secret", session=session)

    with pytest.raises(PaletteApiError) as excinfo:
        client.list_projects()
    assert excinfo.value.status_code is None


def test_list_helpers_return_items():
    projects = {"items": [{"metadata": {"uid": "u1", "name": "a"}}]}
    client, _ = _client(
        _response(200, json.dumps(projects).encode()),
        _response(200, b'{"items": null}'),
    )

    assert client.list_projects() == projects["items"]
    assert client.list_cluster_profiles("u1") == []


def test_export_requests_binary_payload():
    client, session = _client(_response(200, b"\x00raw-export"))

    payload = client.export_cluster_profile("p1", project_uid="proj-1")

    assert payload == b"\x00raw-export"
    args, kwargs = session.request.call_args
    assert args[1].endswith("/v1/clusterprofiles/p1/export")
    assert kwargs["headers"]["Accept"] == "application/octet-stream"
    assert kwargs["headers"]["ProjectUid"] == "proj-1"


def test_export_failure_raises():
    client, _ = _client(_response(500, b"nope"))

    with pytest.raises(PaletteApiError):
        client.export_cluster_profile("p1")
