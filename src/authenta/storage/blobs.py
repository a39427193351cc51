import base64
import binascii

from typing import Tuple

from authenta.utils.dataModels import DEFAULT_MIME
from authenta.utils.errors import CorruptOrWrongKey


def encode_data_uri(data: bytes, mime: str = DEFAULT_MIME) -> str:
    return f"data:{mime};base64," + base64.b64encode(data).decode("ascii")


def decode_data_uri(uri: str) -> Tuple[str, bytes]:
    """data:application/octet-stream;base64,AAAA -> (mime, bytes)"""
    if not uri.startswith("data:") or "," not in uri:
        raise CorruptOrWrongKey("Payload is not a data URI")
    header, payload = uri.split(",", 1)
    params = header[len("data:"):].split(";")
    if "base64" not in params[1:]:
        raise CorruptOrWrongKey("Payload is not base64 encoded")
    mime = params[0] or DEFAULT_MIME
    try:
        return mime, base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise CorruptOrWrongKey("Payload is corrupted") from e
