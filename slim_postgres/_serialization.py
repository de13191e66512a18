"""JSON encoding and decoding backed by ``msgspec``."""

from typing import Any, Literal, Union, overload

import msgspec

__all__ = ("decode_json", "encode_json")

_encoder = msgspec.json.Encoder()
_decoder = msgspec.json.Decoder()


@overload
def encode_json(data: Any, *, as_bytes: Literal[False] = ...) -> str: ...


@overload
def encode_json(data: Any, *, as_bytes: Literal[True]) -> bytes: ...


def encode_json(data: Any, *, as_bytes: bool = False) -> Union[str, bytes]:
    """Encode data to JSON.

    Values ``msgspec`` cannot encode natively fall back to ``str()``.

    Args:
        data: Data to encode.
        as_bytes: Return ``bytes`` instead of ``str``.

    Returns:
        The JSON document.
    """
    try:
        encoded = _encoder.encode(data)
    except TypeError:
        encoded = msgspec.json.encode(data, enc_hook=str)
    return encoded if as_bytes else encoded.decode("utf-8")


def decode_json(data: Union[str, bytes]) -> Any:
    """Decode a JSON document."""
    return _decoder.decode(data)
