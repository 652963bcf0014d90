"""Unit tests for OCS envelope decoding."""

import json

import httpx
import pytest
from conftest import ocs_envelope

from nextcloud_ocs_plugin.client.ocs import decode_ocs_payload, decode_ocs_response
from nextcloud_ocs_plugin.exceptions import (
    NextcloudHTTPError,
    OCSAPIError,
    OCSDecodeError,
)
from nextcloud_ocs_plugin.models.activity import Activity


@pytest.mark.unit
def test_decode_returns_data():
    payload = json.dumps(ocs_envelope([{"a": 1}, {"a": 2}]))
    assert decode_ocs_payload(payload) == [{"a": 1}, {"a": 2}]


@pytest.mark.unit
def test_decode_validates_records(activity_payload):
    payload = json.dumps(ocs_envelope([activity_payload]))
    activities = decode_ocs_payload(payload, list[Activity])
    assert len(activities) == 1
    assert activities[0].activity_id == 1234


@pytest.mark.unit
def test_decode_malformed_json_is_decode_error():
    with pytest.raises(OCSDecodeError, match="failed to decode") as exc:
        decode_ocs_payload(b"{not json")
    assert isinstance(exc.value.__cause__, ValueError)


@pytest.mark.unit
def test_decode_missing_envelope_is_decode_error():
    with pytest.raises(OCSDecodeError, match="not an OCS envelope"):
        decode_ocs_payload(json.dumps({"data": []}))


@pytest.mark.unit
def test_decode_bad_record_is_decode_error():
    payload = json.dumps(ocs_envelope([{"activity_id": "not-a-number"}]))
    with pytest.raises(OCSDecodeError, match="unexpected OCS data"):
        decode_ocs_payload(payload, list[Activity])


@pytest.mark.unit
def test_decode_failure_status_is_api_error():
    payload = json.dumps(
        ocs_envelope([], status="failure", statuscode=997, message="Unauthorised")
    )
    with pytest.raises(OCSAPIError) as exc:
        decode_ocs_payload(payload)

    assert exc.value.message == "Unauthorised"
    assert exc.value.statuscode == 997
    assert str(exc.value) == "OCS API error: Unauthorised (code: 997)"
    assert not isinstance(exc.value, NextcloudHTTPError)


@pytest.mark.unit
def test_decode_failure_without_message():
    payload = json.dumps(
        {"ocs": {"meta": {"status": "failure", "statuscode": 400, "message": None}}}
    )
    with pytest.raises(OCSAPIError, match=r"\(code: 400\)"):
        decode_ocs_payload(payload)


@pytest.mark.unit
def test_decode_null_data_for_list_is_empty():
    payload = json.dumps(ocs_envelope(None))
    assert decode_ocs_payload(payload, list[Activity]) == []


@pytest.mark.unit
def test_decode_response():
    response = httpx.Response(200, json=ocs_envelope({"version": "29"}))
    assert decode_ocs_response(response) == {"version": "29"}
