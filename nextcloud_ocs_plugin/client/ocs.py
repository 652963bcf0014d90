"""Decoding of the OCS `{"ocs": {"meta": ..., "data": ...}}` envelope."""

import json
import logging
from typing import Any, TypeVar, get_origin

from httpx import Response
from pydantic import TypeAdapter, ValidationError

from nextcloud_ocs_plugin.exceptions import OCSAPIError, OCSDecodeError
from nextcloud_ocs_plugin.models.ocs import OCSEnvelope

logger = logging.getLogger(__name__)

T = TypeVar("T")

_envelope_adapter = TypeAdapter(OCSEnvelope[Any])


def decode_ocs_payload(
    payload: bytes | str, data_type: type[T] | Any = Any
) -> T:
    """Decode a raw OCS response body.

    Args:
        payload: Response body
        data_type: Type to validate `ocs.data` into, e.g. `list[Activity]`

    Returns:
        The validated `data` member of the envelope

    Raises:
        OCSDecodeError: If the body is not JSON, does not have the envelope
            shape, or `data` does not match `data_type`
        OCSAPIError: If `meta.status` is not "ok"
    """
    try:
        raw = json.loads(payload)
    except ValueError as e:
        raise OCSDecodeError(f"failed to decode Nextcloud JSON response: {e}") from e

    try:
        envelope = _envelope_adapter.validate_python(raw)
    except ValidationError as e:
        raise OCSDecodeError(f"response is not an OCS envelope: {e}") from e

    meta = envelope.ocs.meta
    if not meta.ok:
        logger.debug(
            f"OCS failure status={meta.status} statuscode={meta.statuscode}: {meta.message}"
        )
        raise OCSAPIError(meta.message or "", meta.statuscode)

    data = envelope.ocs.data
    if data is None and get_origin(data_type) is list:
        data = []

    try:
        return TypeAdapter(data_type).validate_python(data)
    except ValidationError as e:
        raise OCSDecodeError(f"unexpected OCS data: {e}") from e


def decode_ocs_response(response: Response, data_type: type[T] | Any = Any) -> T:
    """Decode the OCS envelope of an httpx response, see decode_ocs_payload."""
    return decode_ocs_payload(response.content, data_type)
