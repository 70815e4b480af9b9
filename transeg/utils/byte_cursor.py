"""Conversion between character offsets and encoded byte offsets.

Word counting and boundary decisions work on decoded text, while persisted
offsets address raw file bytes. Characters outside ASCII take 2-4 bytes in
UTF-8, so every character offset has to be mapped through the encoding.
"""

from ..errors import EncodingError, RangeError

DEFAULT_ENCODING = "utf-8"


def _encode(text: str, encoding: str) -> bytes:
    try:
        return text.encode(encoding)
    except UnicodeEncodeError as e:
        raise EncodingError(
            f"Cannot encode text as {encoding}: {e.reason}",
            encoding=encoding,
            position=e.start,
        ) from e
    except LookupError as e:
        raise EncodingError(f"Unknown encoding: {encoding}", encoding=encoding) from e


def byte_length(text: str, encoding: str = DEFAULT_ENCODING) -> int:
    """Return the number of bytes `text` occupies when encoded.

    Args:
        text: Decoded text
        encoding: Encoding of the underlying source

    Returns:
        Encoded byte length

    Raises:
        EncodingError: If the text cannot be encoded
    """
    return len(_encode(text, encoding))


def byte_offset_at(text: str, char_offset: int, encoding: str = DEFAULT_ENCODING) -> int:
    """Return the byte offset of character position `char_offset` in `text`.

    Args:
        text: Decoded text whose first character sits at byte 0
        char_offset: Character position, 0 <= char_offset <= len(text)
        encoding: Encoding of the underlying source

    Returns:
        Byte length of the prefix text[:char_offset]
    """
    if char_offset < 0 or char_offset > len(text):
        raise RangeError(
            f"Character offset {char_offset} outside text of length {len(text)}",
            char_offset=char_offset,
            length=len(text),
        )
    return byte_length(text[:char_offset], encoding)


def char_offset_at(text: str, byte_offset: int, encoding: str = DEFAULT_ENCODING) -> int:
    """Return the character position that starts at `byte_offset`.

    Args:
        text: Decoded text whose first character sits at byte 0
        byte_offset: Byte position inside the encoded text
        encoding: Encoding of the underlying source

    Returns:
        Character offset c such that byte_offset_at(text, c) == byte_offset

    Raises:
        RangeError: If the offset is out of range or splits a character
    """
    data = _encode(text, encoding)
    if byte_offset < 0 or byte_offset > len(data):
        raise RangeError(
            f"Byte offset {byte_offset} outside text of {len(data)} bytes",
            byte_offset=byte_offset,
            length=len(data),
        )
    try:
        return len(data[:byte_offset].decode(encoding))
    except UnicodeDecodeError as e:
        raise RangeError(
            f"Byte offset {byte_offset} does not fall on a character boundary",
            byte_offset=byte_offset,
        ) from e
