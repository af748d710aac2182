"""
Utility functions for the SpiceFlow SDK.
"""
import urllib.parse
from typing import Any, Union

from eth_utils import decode_hex, is_hex, to_checksum_address

from .exceptions import ConfigError, EncodingError

UINT256_MAX = 2**256 - 1

BytesLike = Union[bytes, bytearray, memoryview, str]


def to_uint256(value: Any, name: str = "value") -> int:
    """
    Coerce a value into an unsigned 256-bit integer.

    Accepts ints, decimal strings and 0x-prefixed hex strings. Booleans and
    floats are rejected so that precision is never silently lost.

    Args:
        value: The value to coerce
        name: Field name used in error messages

    Returns:
        The integer value

    Raises:
        EncodingError: If the value is not an integer in [0, 2**256 - 1]
    """
    if isinstance(value, bool) or value is None:
        raise EncodingError(f"{name} must be an integer, got {type(value).__name__}")

    if isinstance(value, str):
        text = value.strip()
        try:
            if text.lower().startswith("0x"):
                result = int(text, 16)
            else:
                result = int(text, 10)
        except ValueError:
            raise EncodingError(f"{name} is not a valid integer string: {value!r}")
    elif isinstance(value, int):
        result = value
    else:
        raise EncodingError(f"{name} must be an integer, got {type(value).__name__}")

    if result < 0 or result > UINT256_MAX:
        raise EncodingError(f"{name} does not fit in uint256: {result}")
    return result


def to_bytes(value: Any, name: str = "data") -> bytes:
    """
    Convert hex strings or byte-like objects into ``bytes``.

    Raises:
        EncodingError: If the value is neither bytes nor a valid hex string
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        if value in ("", "0x", "0X"):
            return b""
        if not is_hex(value) or len(value.lower().replace("0x", "", 1)) % 2:
            raise EncodingError(f"{name} is not a valid hex string: {value[:20]}...")
        return decode_hex(value)
    raise EncodingError(f"{name} must be bytes or a hex string, got {type(value).__name__}")


def to_bytes32(value: Any, name: str = "hash") -> bytes:
    """Convert a value into exactly 32 bytes."""
    result = to_bytes(value, name)
    if len(result) != 32:
        raise EncodingError(f"{name} must be exactly 32 bytes, got {len(result)}")
    return result


def to_address(value: Any, name: str = "address") -> str:
    """
    Normalize a 20-byte address into its EIP-55 checksum form.

    Raises:
        EncodingError: If the value is not a 20-byte address
    """
    raw = to_bytes(value, name)
    if len(raw) != 20:
        raise EncodingError(f"{name} must be 20 bytes, got {len(raw)}")
    return to_checksum_address(raw)


def to_hex(value: bytes) -> str:
    """Encode bytes as a lowercase 0x-prefixed hex string."""
    return "0x" + bytes(value).hex()


def int_to_hex32(value: int) -> str:
    """Encode an integer as a 0x-prefixed, 32-byte left padded hex string."""
    return "0x" + format(to_uint256(value), "064x")


def validate_service_url(url_name: str, url: str) -> str:
    """
    Require https:// for remote services, allowing plain http on localhost.

    Returns:
        The URL without a trailing slash

    Raises:
        ConfigError: If the URL is not https and not local
    """
    parsed = urllib.parse.urlparse(url)
    # Check if it's a localhost or 127.0.0.1 address (with or without port)
    host = parsed.netloc.split(':')[0] if parsed.netloc else ''
    is_local = host in ('localhost', '127.0.0.1')
    if parsed.scheme != 'https' and not (is_local and parsed.scheme == 'http'):
        raise ConfigError(f"{url_name} must use https:// for security (got: {parsed.scheme}://)")
    return url.rstrip('/')
