"""Key-sequence decoding for raw terminal input.

Turns raw byte sequences into normalized key tokens. Escape sequences are
assembled by a small explicit decoder with a bounded continuation length so a
lone Escape keypress can never stall the read loop.
"""

from __future__ import annotations

ESC = b"\x1b"
MAX_CONTINUATION_BYTES = 4

AWAITING_FIRST_BYTE = "awaiting_first_byte"
AWAITING_CONTINUATION = "awaiting_continuation"
SEQUENCE_COMPLETE = "sequence_complete"

_SIMPLE_KEYS: dict[bytes, str] = {
    b"\x1b": "ESC",
    b"\r": "ENTER",
    b"\n": "ENTER",
    b"\x7f": "BACKSPACE",
    b"\x08": "BACKSPACE",
    b"\x03": "CTRL_C",
    b"\x10": "CTRL_P",
    b"\x0e": "CTRL_N",
}

_ESCAPE_KEYS: dict[bytes, str] = {
    b"\x1b[A": "UP",
    b"\x1b[B": "DOWN",
    b"\x1b[C": "RIGHT",
    b"\x1b[D": "LEFT",
    b"\x1bOA": "UP",
    b"\x1bOB": "DOWN",
    b"\x1bOC": "RIGHT",
    b"\x1bOD": "LEFT",
}

# Reverse mapping used by scripted sessions.
_SCRIPT_TOKENS: dict[str, bytes] = {
    "UP": b"\x1b[A",
    "DOWN": b"\x1b[B",
    "LEFT": b"\x1b[D",
    "RIGHT": b"\x1b[C",
    "ENTER": b"\r",
    "ESC": b"\x1b",
    "BACKSPACE": b"\x7f",
    "CTRL-C": b"\x03",
    "CTRL-N": b"\x0e",
    "CTRL-P": b"\x10",
}


class EscapeSequenceDecoder:
    """Assemble one key's raw bytes, one byte at a time.

    ``feed`` returns ``True`` once the sequence is complete. Callers that run
    out of input can stop feeding at any point; ``sequence`` then holds
    whatever bytes were captured. A byte that cannot continue a UTF-8
    character ends the sequence and is left in ``rejected`` for the caller.
    """

    def __init__(self, max_continuation: int = MAX_CONTINUATION_BYTES) -> None:
        self.max_continuation = max_continuation
        self.state = AWAITING_FIRST_BYTE
        self._buffer = bytearray()
        self._utf8_remaining = 0
        self.rejected = b""

    @property
    def sequence(self) -> bytes:
        return bytes(self._buffer)

    @property
    def complete(self) -> bool:
        return self.state == SEQUENCE_COMPLETE

    @property
    def is_escape(self) -> bool:
        return self._buffer[:1] == ESC

    def feed(self, byte: bytes) -> bool:
        if self.state == SEQUENCE_COMPLETE:
            raise ValueError("sequence already complete")
        self._buffer += byte
        if self.state == AWAITING_FIRST_BYTE:
            self._start(byte[0])
        elif self.is_escape:
            self._continue_escape(byte[0])
        else:
            self._continue_utf8(byte)
        return self.complete

    def _start(self, first: int) -> None:
        if first == ESC[0]:
            self.state = AWAITING_CONTINUATION
            return
        self._utf8_remaining = _utf8_continuation_count(first)
        self.state = AWAITING_CONTINUATION if self._utf8_remaining else SEQUENCE_COMPLETE

    def _continue_utf8(self, byte: bytes) -> None:
        if not 0x80 <= byte[0] <= 0xBF:
            # Not part of this character; hand it back as the next key.
            del self._buffer[-1]
            self.rejected = byte
            self.state = SEQUENCE_COMPLETE
            return
        self._utf8_remaining -= 1
        if self._utf8_remaining <= 0:
            self.state = SEQUENCE_COMPLETE

    def _continue_escape(self, value: int) -> None:
        continuation = len(self._buffer) - 1
        if continuation >= self.max_continuation:
            self.state = SEQUENCE_COMPLETE
            return
        introducer = self._buffer[1]
        if continuation == 1:
            # ESC [ and ESC O introduce longer sequences; anything else is Alt+key.
            if value not in (ord("["), ord("O")):
                self.state = SEQUENCE_COMPLETE
            return
        if introducer == ord("O") or 0x40 <= value <= 0x7E:
            self.state = SEQUENCE_COMPLETE


def _utf8_continuation_count(lead: int) -> int:
    if 0xF0 <= lead <= 0xF4:
        return 3
    if 0xE0 <= lead <= 0xEF:
        return 2
    if 0xC2 <= lead <= 0xDF:
        return 1
    return 0


def decode_key(raw: bytes) -> str:
    """Translate one raw key sequence into a token.

    Named keys come back as upper-case tokens (``UP``, ``ENTER``, ...).
    Printable input comes back as the decoded character. Unknown escape
    sequences and other control bytes come back verbatim so callers can
    ignore them.
    """
    if not raw:
        return ""
    named = _SIMPLE_KEYS.get(raw) or _ESCAPE_KEYS.get(raw)
    if named is not None:
        return named
    return raw.decode("utf-8", errors="replace")


def is_printable_query_char(key: str) -> bool:
    """Return whether ``key`` may be appended to the search query."""
    if len(key) != 1 or ord(key) < 32:
        return False
    return key.isalpha() or key.isdigit() or key in "-_. "


def parse_key_script(script: str | None) -> list[str]:
    """Parse a comma-separated key script into key tokens.

    ``TYPE=text`` expands to one token per character. Unknown multi-character
    tokens are dropped; single characters, including a bare space, pass
    through as typed keys.
    """
    if not script:
        return []
    keys: list[str] = []
    for raw_token in script.split(","):
        if len(raw_token) == 1:
            keys.append(raw_token)
            continue
        token = raw_token.strip()
        if not token:
            continue
        if token.upper().startswith("TYPE="):
            keys.extend(token[len("TYPE="):])
            continue
        sequence = _SCRIPT_TOKENS.get(token.upper().replace("_", "-"))
        if sequence is not None:
            keys.append(decode_key(sequence))
        elif len(token) == 1:
            keys.append(token)
    return keys


__all__ = [
    "AWAITING_CONTINUATION",
    "AWAITING_FIRST_BYTE",
    "EscapeSequenceDecoder",
    "MAX_CONTINUATION_BYTES",
    "SEQUENCE_COMPLETE",
    "decode_key",
    "is_printable_query_char",
    "parse_key_script",
]
