"""Decoder for the LZSS compression used inside the game's archives."""

from __future__ import annotations

from tm2kit.errors import InvalidDecodeLengthError

THRESHOLD = 2
MAX_LENGTH = 18
WINDOW_SIZE = 4096


def decode(src: bytes) -> bytes:
    """Decompress an LZSS stream with a 4096-byte window and 18-byte matches."""
    src = bytes(src)
    src_len = len(src)
    window = bytearray(WINDOW_SIZE)
    r_pos = WINDOW_SIZE - MAX_LENGTH
    out = bytearray()
    flags = 0
    f_pos = 0
    offset = 0

    while offset < src_len:
        if f_pos == 0:
            flags = src[offset]
            offset += 1
            if offset == src_len:
                break

        if flags & 1:
            value = src[offset]
            offset += 1
            out.append(value)
            window[r_pos] = value
            r_pos = (r_pos + 1) % WINDOW_SIZE
        else:
            if offset + 1 == src_len:
                raise InvalidDecodeLengthError(offset, src_len)
            low, high = src[offset], src[offset + 1]
            offset += 2
            position = low | ((high & 0xF0) << 4)
            length = (high & 0x0F) + THRESHOLD + 1
            for k in range(length):
                value = window[(position + k) % WINDOW_SIZE]
                out.append(value)
                window[r_pos] = value
                r_pos = (r_pos + 1) % WINDOW_SIZE

        flags >>= 1
        f_pos = (f_pos + 1) % 8

    return bytes(out)