"""PII masking in log records."""

from loguru import logger

from cardcreator.logging import mask_keep_shape, redact_pii, redact_record


def test_mask_keep_shape():
    assert mask_keep_shape("ab") == "**"
    assert mask_keep_shape("abcdef") == "ab****"
    assert mask_keep_shape("a" * 20) == "aa" + "*" * 8 + "+"


def test_emails_and_phones_are_masked():
    text = redact_pii("Contact ana.li@example.com or +33 6 12 34 56 78 / (555) 123-4567")
    assert "ana.li@example.com" not in text
    assert "12 34 56 78" not in text
    assert "123-4567" not in text
    assert text.startswith("Contact an")


def test_urls_and_plain_text_untouched():
    text = "Exported Ana Li-card.pdf from https://linkedin.com/in/anali"
    assert redact_pii(text) == text


def test_patcher_rewrites_message():
    record = {"message": "mail bob@example.org"}
    redact_record(record)
    assert "bob@example.org" not in record["message"]


def test_patched_logger_never_emits_email():
    lines = []
    patched = logger.patch(redact_record)
    sink_id = logger.add(lines.append, format="{message}")
    try:
        patched.info("saved card for jane.doe@example.com")
    finally:
        logger.remove(sink_id)
    assert lines and "jane.doe@example.com" not in lines[0]
