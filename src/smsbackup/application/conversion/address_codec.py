"""Header encoding of address local parts and display names.

Text that is already legal in the target position is passed through, plain
ASCII that is not gets quoted, and anything else becomes an RFC 2047
encoded word so that it survives header transport.
"""

from __future__ import annotations

import re
from email.header import Header
from email.utils import quote
from typing import Optional

# Line breaks would start a new header
_LINE_BREAK_RE = re.compile(r"[\r\n]+")

# RFC 5322 atext
_ATEXT = r"[A-Za-z0-9!#$%&'*+\-/=?^_`{|}~]"
_DOT_ATOM_RE = re.compile(rf"{_ATEXT}+(?:\.{_ATEXT}+)*")
_ATOM_PHRASE_RE = re.compile(rf"{_ATEXT}+(?:[ \t]+{_ATEXT}+)*")


def _is_ascii(s: str) -> bool:
    return all(ord(c) < 128 for c in s)


def one_line(s: str) -> str:
    return _LINE_BREAK_RE.sub(" ", s)


def _quote(s: str) -> str:
    return f'"{quote(s)}"'


def _encoded_word(s: str) -> str:
    return Header(s, "utf-8").encode(maxlinelen=0)


def encode_local_part(s: Optional[str]) -> Optional[str]:
    if s is None:
        return None
    s = one_line(s)
    if _DOT_ATOM_RE.fullmatch(s):
        return s
    if _is_ascii(s):
        return _quote(s)
    return _encoded_word(s)


def encode_display_name(s: Optional[str]) -> Optional[str]:
    if s is None:
        return None
    s = one_line(s)
    if _ATOM_PHRASE_RE.fullmatch(s):
        return s
    if _is_ascii(s):
        return _quote(s)
    return _encoded_word(s)
