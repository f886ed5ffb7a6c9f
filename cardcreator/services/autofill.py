"""
Résumé Autofill
===============

Turns an uploaded résumé PDF into suggested card fields: text is pulled out
with pypdf, then an OpenAI chat completion (JSON mode) maps it onto the
profile fields. The result is a :class:`ProfilePatch`; folding it into the
card is the caller's decision.
"""

from __future__ import annotations

import io
import json
import re
from pathlib import Path
from typing import Any, List, Optional, Union

from loguru import logger
from pydantic import ValidationError

from ..common.errors import AutofillServiceError, InputValidationError
from ..config import DEFAULT_CONFIG, CardCreatorConfig
from ..schemas.profile_schema import ProfilePatch

PdfSource = Union[str, Path, bytes]

FIELDS_PROMPT = """You are a professional resume parser. Extract the following information from the resume in a structured JSON format:
- name (full name)
- position (current or most recent job title)
- email
- phone
- address (full address if available)
- linkedin (LinkedIn URL if found)
- resumeLink (any other portfolio or resume links)
- coreSkills (array of 3 most important technical skills)
- highlights (array of 5-7 detailed achievements/experiences, each 2-3 sentences long, focusing on quantifiable results and impact)

Format the response as a valid JSON object with these exact field names. Ensure all fields are strings or arrays of strings.
For the highlights, include specific metrics, numbers, and outcomes where possible.
If a field is not found, use an empty string or empty array as appropriate."""

HIGHLIGHTS_PROMPT = (
    "You are a professional resume analyzer. Extract and generate 5-7 key highlights from the resume "
    "text provided. Each highlight should be exactly ONE paragraph with no more than 4 sentences, "
    "focusing on quantifiable achievements, specific technologies used, and business impact. Include "
    "metrics, numbers, and outcomes where possible."
)

HIGHLIGHTS_CONTEXT = (
    "\n\nIMPORTANT CONTEXT: The user wants highlights that specifically focus on: {context}. "
    "Prioritize experiences, skills, and achievements related to this context. If the resume has "
    "little about it, still generate relevant highlights."
)

HIGHLIGHTS_FORMAT = (
    "\n\nFORMAT REQUIREMENTS: Each highlight must be exactly one paragraph with a maximum of 4 "
    "sentences. Do not use bullet points or numbered lists. Each highlight should be a standalone paragraph."
)

_LEADING_MARKER = re.compile(r"^[•\-*\d]+\.?\s*")
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def extract_text_from_pdf(source: PdfSource) -> str:
    """Extract the text of every page, pages separated by a blank line."""
    from pypdf import PdfReader
    from pypdf.errors import PyPdfError

    try:
        if isinstance(source, (bytes, bytearray)):
            reader = PdfReader(io.BytesIO(source))
        else:
            reader = PdfReader(str(source))
        pages = [(page.extract_text() or "").strip() for page in reader.pages]
    except (OSError, PyPdfError, ValueError) as exc:
        logger.error(f"Impossible de lire le PDF : {exc}")
        raise InputValidationError(f"Unreadable PDF: {exc}",
                                   user_message="The uploaded file is not a readable PDF.") from exc

    text = "\n\n".join(page for page in pages if page)
    if not text.strip():
        raise InputValidationError("PDF contains no extractable text",
                                   user_message="No text could be found in the uploaded PDF.")
    logger.debug(f"Extracted {len(text)} chars from {len(pages)} page(s)")
    return text


def split_highlights(text: str) -> List[str]:
    """Paragraphs of a completion, with list markers removed."""
    return [
        _LEADING_MARKER.sub("", paragraph.strip())
        for paragraph in _PARAGRAPH_BREAK.split(text or "")
        if paragraph.strip()
    ]


class ResumeAutofillService:
    """Résumé text -> suggested profile fields through the OpenAI API."""

    def __init__(self, client: Any = None, config: Optional[CardCreatorConfig] = None) -> None:
        self.config = config or DEFAULT_CONFIG
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            try:
                from openai import OpenAI, OpenAIError
            except ImportError as exc:
                raise AutofillServiceError("openai package is not installed") from exc
            try:
                self._client = OpenAI()
            except OpenAIError as exc:
                logger.error(f"OpenAI client unavailable: {exc}")
                raise AutofillServiceError(str(exc)) from exc
        return self._client

    def _complete(self, messages: List[dict], **options: Any) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self.config.openai_model,
                messages=messages,
                **options,
            )
            content = response.choices[0].message.content
        except AutofillServiceError:
            raise
        except Exception as exc:
            logger.error(f"Autofill request failed: {exc}")
            raise AutofillServiceError(str(exc)) from exc
        if not content:
            raise AutofillServiceError("Empty completion")
        return content

    def suggest_fields_from_text(self, text: str) -> ProfilePatch:
        content = self._complete(
            [
                {"role": "system", "content": FIELDS_PROMPT},
                {"role": "user", "content": text},
            ],
            temperature=self.config.openai_temperature,
            max_tokens=self.config.openai_max_tokens,
            response_format={"type": "json_object"},
        )
        try:
            payload = json.loads(content)
        except json.JSONDecodeError as exc:
            logger.warning(f"Autofill returned invalid JSON: {exc}")
            raise InputValidationError(f"Malformed autofill response: {exc}") from exc
        if not isinstance(payload, dict):
            raise InputValidationError("Autofill response is not a JSON object")
        try:
            patch = ProfilePatch.model_validate(payload)
        except ValidationError as exc:
            logger.warning(f"Autofill response rejected: {exc.error_count()} invalid field(s)")
            raise InputValidationError(str(exc)) from exc

        filled = sorted(patch.model_dump(exclude_none=True))
        logger.info(f"Autofill suggested {len(filled)} field(s): {', '.join(filled)}")
        return patch

    def suggest_fields(self, pdf: PdfSource) -> ProfilePatch:
        return self.suggest_fields_from_text(extract_text_from_pdf(pdf))

    def generate_highlights(self, resume_text: str, context: str = "") -> List[str]:
        """Five to seven one-paragraph highlights, optionally steered by ``context``."""
        prompt = HIGHLIGHTS_PROMPT
        if context and context.strip():
            prompt += HIGHLIGHTS_CONTEXT.format(context=context.strip())
        prompt += HIGHLIGHTS_FORMAT
        content = self._complete(
            [
                {"role": "system", "content": prompt},
                {"role": "user", "content": resume_text},
            ],
            temperature=0.7,
            max_tokens=1000,
        )
        return split_highlights(content)
