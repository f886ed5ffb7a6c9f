"""External services used to prefill a card."""

from .autofill import ResumeAutofillService, extract_text_from_pdf, split_highlights

__all__ = ["ResumeAutofillService", "extract_text_from_pdf", "split_highlights"]
