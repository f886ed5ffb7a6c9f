"""
PII masking for log records
===========================

Candidate cards carry e-mail addresses and phone numbers. Every loguru record
goes through :func:`redact_record` so those never reach a sink in clear text.
"""

import re

EMAIL = re.compile(r"\b[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}\b")

# International formats, (123) 456-7890 and French 0X XX XX XX XX
PHONE = re.compile(
    r"(?<![\w/])(?:"
    r"\+\d{1,3}[\s.\-]?\(?\d{1,4}\)?(?:[\s.\-]?\d{2,4}){2,4}"
    r"|\(?\d{3}\)?[\s.\-]?\d{3}[\s.\-]?\d{4}"
    r"|0[1-9](?:[\s.\-]?\d{2}){4}"
    r")(?![\w/])"
)


def mask_keep_shape(text: str, keep: int = 2) -> str:
    """Masque un texte en conservant ``keep`` caractères et la longueur apparente."""
    if not text:
        return text

    t = text.strip()
    if len(t) <= keep:
        return "*" * len(t)

    remaining = len(t) - keep
    visible = min(remaining, 8)
    masked = t[:keep] + "*" * visible
    if remaining > visible:
        masked += "+"
    return masked


def redact_pii(text: str) -> str:
    """Return ``text`` with e-mails and phone numbers masked."""
    if not text:
        return text
    text = EMAIL.sub(lambda m: mask_keep_shape(m.group(0)), text)
    return PHONE.sub(lambda m: mask_keep_shape(m.group(0)), text)


def redact_record(record: dict) -> None:
    """loguru patcher: rewrite the message in place."""
    record["message"] = redact_pii(record["message"])
