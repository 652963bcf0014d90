import json
import logging
from typing import Any

import httpx
import pytest

from nextcloud_ocs_plugin.config import ConnectionConfig

logger = logging.getLogger(__name__)

CAPABILITIES_PATH = "/ocs/v1.php/cloud/capabilities"
ACTIVITY_PATH = "/ocs/v2.php/apps/activity/api/v2/activity"
SHARES_PATH = "/ocs/v2.php/apps/files_sharing/api/v1/shares"


def ocs_envelope(
    data: Any,
    status: str = "ok",
    statuscode: int = 200,
    message: str = "OK",
) -> dict[str, Any]:
    """Build an OCS response body."""
    return {
        "ocs": {
            "meta": {"status": status, "statuscode": statuscode, "message": message},
            "data": data,
        }
    }


CAPABILITIES = ocs_envelope(
    {
        "version": {"major": 29, "minor": 0, "micro": 4, "string": "29.0.4"},
        "capabilities": {"activity": {"apiv2": ["filters", "rich-strings"]}},
    },
    statuscode=100,
)


class FakeNextcloud:
    """Routes requests by path to canned responses and records them.

    A route value is either a dict/list (sent as JSON with status 200), a
    `(status_code, body)` tuple where body is JSON-serializable or a raw
    string, or an `httpx.Response`.
    """

    def __init__(self, routes: dict[str, Any] | None = None):
        self.routes: dict[str, Any] = {CAPABILITIES_PATH: CAPABILITIES}
        self.routes.update(routes or {})
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, text=f"no route for {request.url.path}")
        if isinstance(route, httpx.Response):
            return route
        if isinstance(route, tuple):
            status_code, body = route
            if isinstance(body, str):
                return httpx.Response(status_code, text=body)
            return httpx.Response(status_code, content=json.dumps(body).encode())
        return httpx.Response(200, json=route)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


@pytest.fixture
def config() -> ConnectionConfig:
    return ConnectionConfig(
        server_url="https://cloud.example.com",
        username="alice",
        password="s3cret",
    )


@pytest.fixture
def fake_nextcloud() -> FakeNextcloud:
    return FakeNextcloud()


@pytest.fixture
def activity_payload() -> dict[str, Any]:
    """A single activity entry as sent by the Activity app."""
    return {
        "activity_id": 1234,
        "app": "files",
        "type": "file_created",
        "user": "alice",
        "affecteduser": "alice",
        "subject": "You created report.pdf",
        "subject_rich": [
            "You created {file}",
            {"file": {"type": "file", "id": "42", "name": "report.pdf"}},
        ],
        "message": "",
        "object_type": "files",
        "object_id": 42,
        "object_name": "/Documents/report.pdf",
        "link": "https://cloud.example.com/apps/files/?dir=/Documents",
        "icon": "https://cloud.example.com/apps/files/img/add-color.svg",
        "datetime": "2024-05-01T10:15:00+00:00",
    }


@pytest.fixture
def share_payload() -> dict[str, Any]:
    """A public link share as sent by the Files Sharing app."""
    return {
        "id": "17",
        "share_type": 3,
        "uid_owner": "alice",
        "displayname_owner": "Alice",
        "permissions": 1,
        "stime": 1714557300,
        "token": "AbCdEfGh",
        "expiration": "2024-06-01 00:00:00",
        "share_with": None,
        "share_with_displayname": None,
        "path": "/Documents/report.pdf",
        "item_type": "file",
        "mimetype": "application/pdf",
        "item_mtime": 1714557000,
        "url": "https://cloud.example.com/s/AbCdEfGh",
        "note": "",
        "label": "",
        "uid_file_owner": "alice",
        "password": None,
    }
