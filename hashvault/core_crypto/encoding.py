"""
Byte Encoding

Normalizes caller input into the canonical byte sequence consumed by the
hash engines, HMAC and PBKDF2.

Accepted input:
- str: encoded as UTF-8
- bytes, bytearray, memoryview: passed through as bytes

A str may carry UTF-16 surrogate halves (for example text decoded with
'surrogatepass'). A high/low pair is combined into one supplementary code
point and encoded as 4 bytes; a lone surrogate becomes U+FFFD.
"""

from typing import Union


BytesLike = Union[bytes, bytearray, memoryview]
Data = Union[str, bytes, bytearray, memoryview]


def _encode_text(text: str) -> bytes:
    """Encode text as UTF-8, combining embedded surrogate pairs."""
    try:
        return text.encode('utf-8')
    except UnicodeEncodeError:
        # Round-trip through UTF-16 code units so pairs merge into one code point
        units = text.encode('utf-16-le', 'surrogatepass')
        return units.decode('utf-16-le', 'replace').encode('utf-8')


def to_bytes(data: Data) -> bytes:
    """
    Convert text or byte-like input to bytes.

    Args:
        data: Text (UTF-8 encoded) or a byte-like object

    Returns:
        The canonical byte sequence

    Raises:
        TypeError: If data is neither text nor byte-like
    """
    if isinstance(data, str):
        return _encode_text(data)
    if isinstance(data, bytes):
        return data
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    raise TypeError(
        f"Input must be str, bytes, bytearray or memoryview, not {type(data).__name__}"
    )
