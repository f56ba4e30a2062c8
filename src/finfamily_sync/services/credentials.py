"""Decoding of the credential blobs stored on bank connections."""

import base64
import binascii
import json
from typing import Any

from finfamily_sync.exceptions import CredentialDecodeFailure


def decode_credentials(blob: str | bytes | None) -> dict[str, Any]:
    """Decode a base64-encoded JSON credential blob.

    Args:
        blob: The stored ``encrypted_credentials`` value.

    Returns:
        The credentials object, in the shape the scraper expects.

    Raises:
        CredentialDecodeFailure: If the blob is missing or is not base64 of a
            UTF-8 JSON object.
    """
    if not blob:
        raise CredentialDecodeFailure("No stored credentials")

    try:
        raw = base64.b64decode(blob, validate=True)
        data = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError, ValueError) as e:
        raise CredentialDecodeFailure(f"Could not decode stored credentials: {e}") from e

    if not isinstance(data, dict):
        raise CredentialDecodeFailure("Stored credentials are not an object")
    return data


def encode_credentials(credentials: dict[str, Any]) -> str:
    """Encode credentials into the stored blob format."""
    payload = json.dumps(credentials, ensure_ascii=False).encode("utf-8")
    return base64.b64encode(payload).decode("ascii")
