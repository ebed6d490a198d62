from __future__ import annotations
from email.message import Message
from email.mime.text import MIMEText
from email.utils import format_datetime
from typing import Optional

from smsbackup.domain.entities.sms_message import Headers, RawRecord, SmsField, StructuredMessage


def to_mime(msg: StructuredMessage) -> Message:
    """Render a structured message as a text/plain MIME message."""
    em = MIMEText(msg.body, "plain", "utf-8")
    em["Subject"] = msg.subject
    em["From"] = str(msg.sender)
    em["To"] = str(msg.recipient)
    if msg.sent_date is not None:
        em["Date"] = format_datetime(msg.sent_date)
    for name, value in msg.headers.items():
        em[name] = value
    return em


def to_bytes(msg: StructuredMessage) -> bytes:
    return to_mime(msg).as_bytes()


def _as_text(em: Message) -> str:
    # Prefer text/plain; our own messages are never multipart
    if em.is_multipart():
        for part in em.walk():
            if part.get_content_type() == "text/plain":
                return _decode_payload(part)
        return ""
    return _decode_payload(em)


def _decode_payload(part: Message) -> str:
    payload = part.get_payload(decode=True) or b""
    charset = part.get_content_charset() or "utf-8"
    try:
        return payload.decode(charset, errors="replace")
    except LookupError:
        return payload.decode("utf-8", errors="replace")


def mime_to_record(em: Message) -> Optional[RawRecord]:
    """Map a backed up message back to the SMS record it came from.

    Returns None for messages that carry no smssync headers.
    """
    if em.get(Headers.ADDRESS) is None and em.get(Headers.ID) is None:
        return None

    record: dict[str, Optional[str]] = {}
    for header, field in Headers.FIELD_MAP.items():
        value = em.get(header)
        record[field] = str(value).strip() if value is not None else None
    record[SmsField.BODY] = _as_text(em)
    return record
