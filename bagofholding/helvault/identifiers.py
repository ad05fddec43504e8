"""
Binder identifier codec.

Helvault stores binder identifiers as raw bytes (a BLOB column). Everywhere a
binder surfaces as a Collection id, including InventoryItem.collection_id,
it is rendered with this one encoding so the two can be compared directly.

The encoding is standard padded base64, matching the ids the web client
produced for the same exports.
"""

import base64
import binascii


def encode_binder_id(raw: bytes | bytearray | memoryview | str) -> str:
    """
    Encode a raw binder identifier as text.

    Text identifiers (an export written by a tool that stored the column as
    TEXT) are encoded from their UTF-8 bytes.
    """
    if isinstance(raw, str):
        raw = raw.encode("utf-8")
    return base64.b64encode(bytes(raw)).decode("ascii")


def decode_binder_id(encoded: str) -> bytes:
    """
    Decode a text binder identifier back to its raw bytes.

    Raises:
        ValueError: If the text is not valid base64
    """
    try:
        return base64.b64decode(encoded.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError(f"Invalid binder id: {encoded!r}") from e


def normalize_binder_id(encoded: str) -> str:
    """
    Canonical form of an encoded binder identifier.

    Round-trips through the raw bytes so ids given with missing padding or
    surrounding whitespace compare equal to the ids the importer produced.
    """
    text = encoded.strip()
    text += "=" * (-len(text) % 4)
    return encode_binder_id(decode_binder_id(text))
