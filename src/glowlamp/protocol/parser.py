"""Inbound stream scanning for the ``TEMP:<number>`` status tag.

The firmware prints readings such as ``TEMP:23.5`` between other output.
Serial reads deliver arbitrary chunks, so a tag or its value may be split
across two reads. :class:`TempTagScanner` keeps a short carry-over buffer
to reassemble them.

Rules:
  - first tag in a chunk wins; later complete tags in the same chunk are
    dropped
  - a value touching the end of the buffered text is published at once and
    also carried, so a continuation in the next chunk (``TEMP:2`` then
    ``3.5``) republishes the full value
  - a tag followed by non-numeric text is malformed and leaves the reading
    alone
"""

from __future__ import annotations

import re

from glowlamp.exceptions import MalformedTagError
from glowlamp.utils.logging import get_logger

logger = get_logger(__name__)

TEMP_TAG = "TEMP:"
MAX_CARRY = 64

_VALUE_RE = re.compile(r"[ \t]*([+-]?(?:\d+(?:\.\d*)?|\.\d+))")
# Payload that could still become a value once more bytes arrive.
_PENDING_RE = re.compile(r"[ \t]*[+-]?\.?")
_CONTINUATION_CHARS = frozenset("0123456789.")


def parse_temperature(payload: str) -> str:
    """Return the numeric value at the start of *payload*.

    Leading spaces are skipped and anything after the number is ignored,
    so ``" 23.5 extra"`` gives ``"23.5"``.

    Raises:
        MalformedTagError: If *payload* does not start with a number.
    """
    match = _VALUE_RE.match(payload)
    if match is None:
        raise MalformedTagError(payload)
    return _normalize(match.group(1))


def _normalize(value: str) -> str:
    if value.endswith("."):
        value = value[:-1]
    return value


def _partial_tag_suffix(text: str) -> str:
    """Longest suffix of *text* that is a proper prefix of the tag."""
    for size in range(len(TEMP_TAG) - 1, 0, -1):
        if text.endswith(TEMP_TAG[:size]):
            return text[-size:]
    return ""


class TempTagScanner:
    """Incremental scanner for temperature tags in decoded text chunks."""

    def __init__(self) -> None:
        self._carry = ""
        self._carry_is_value = False
        self.tags_seen = 0
        self.malformed_count = 0

    @property
    def carry(self) -> str:
        return self._carry

    def reset(self) -> None:
        self._carry = ""
        self._carry_is_value = False

    def feed(self, chunk: str) -> str | None:
        """Scan one decoded chunk and return the value it yields, if any."""
        if self._carry_is_value and (not chunk or chunk[0] not in _CONTINUATION_CHARS):
            # Previous value was already complete.
            self.reset()

        text = self._carry + chunk
        self.reset()

        idx = text.find(TEMP_TAG)
        if idx == -1:
            self._set_carry(_partial_tag_suffix(text))
            return None

        start = idx + len(TEMP_TAG)
        match = _VALUE_RE.match(text, start)
        if match is None:
            if _PENDING_RE.fullmatch(text, start):
                self._set_carry(text[idx:])
                return None
            self.tags_seen += 1
            self.malformed_count += 1
            try:
                parse_temperature(text[start:])
            except MalformedTagError as exc:
                logger.debug("temp_tag_malformed", payload=exc.payload[:32])
            self._set_carry(*self._tail(text[start:]))
            return None

        self.tags_seen += 1
        value = _normalize(match.group(1))
        if match.end() == len(text):
            self._set_carry(text[idx:], is_value=True)
        else:
            self._set_carry(*self._tail(text[match.end():]))
        return value

    def _tail(self, rest: str) -> tuple[str, bool]:
        """Trailing tag in *rest* worth carrying to the next chunk.

        Returns the carry text and whether it already holds a complete value,
        which is dropped unless the next chunk continues its digits.
        """
        last = rest.rfind(TEMP_TAG)
        if last != -1:
            start = last + len(TEMP_TAG)
            match = _VALUE_RE.match(rest, start)
            if match is None and _PENDING_RE.fullmatch(rest, start):
                return rest[last:], False
            if match is not None and match.end() == len(rest):
                return rest[last:], True
        return _partial_tag_suffix(rest), False

    def _set_carry(self, text: str, is_value: bool = False) -> None:
        if len(text) > MAX_CARRY:
            text = ""
            is_value = False
        self._carry = text
        self._carry_is_value = is_value and bool(text)
