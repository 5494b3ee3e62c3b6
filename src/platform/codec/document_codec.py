from typing import Any, Dict, Mapping, Union

import msgpack
import orjson

from src.platform.exception.exceptions import MalformedPayloadError


_UTF8_BOM = b'\xef\xbb\xbf'
_JSON_WHITESPACE = b' \t\r\n'


class DocumentCodec:
    """Encodes/decodes broadcast documents for byte-oriented transports

    Supports MessagePack (binary) and JSON (text). Decoding accepts either
    format, a JSON string, or a table some transport already decoded.
    JSON may carry a UTF-8 BOM and leading whitespace (hand-edited files).
    """

    @staticmethod
    def encode(*, document: Mapping[str, Any], use_binary: bool = False) -> bytes:
        if use_binary:
            return msgpack.packb(document)  # type: ignore[return-value]
        return orjson.dumps(document)

    @staticmethod
    def decode(*, raw_data: Union[str, bytes, Mapping[str, Any]]) -> Dict[str, Any]:
        if isinstance(raw_data, Mapping):
            return dict(raw_data)
        try:
            if isinstance(raw_data, bytes):
                # A msgpack table never starts with '{', '[', whitespace or a BOM
                text = raw_data.removeprefix(_UTF8_BOM).lstrip(_JSON_WHITESPACE)
                if text[:1] in (b'{', b'['):
                    decoded = orjson.loads(text)
                else:
                    decoded = msgpack.unpackb(raw_data, raw=False, strict_map_key=False)
            else:
                decoded = orjson.loads(raw_data.removeprefix('\ufeff'))
        # unpackb raises TypeError for unhashable map keys
        except (orjson.JSONDecodeError, msgpack.UnpackException, ValueError, TypeError) as e:
            raise MalformedPayloadError(f'Failed to decode document: {e}') from e

        if not isinstance(decoded, dict):
            raise MalformedPayloadError(
                f'Decoded payload is a {type(decoded).__name__}, expected a table'
            )
        return decoded
