"""Candidate profile record consumed by every card renderer."""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

CORE_SKILL_SLOTS = 3

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def normalize_url(url: Optional[str]) -> str:
    """Return ``url`` as an absolute ``https://`` URL.

    Already-prefixed URLs (``http://`` or ``https://``) pass through, so
    ``normalize_url(normalize_url(u)) == normalize_url(u)``.
    """
    if not url:
        return ""
    cleaned = url.strip()
    if not cleaned:
        return ""
    if _SCHEME_RE.match(cleaned):
        return cleaned
    return f"https://{cleaned.lstrip('/')}"


class PlacementType(str, Enum):
    """Placement types; each has a status pill asset."""
    CONTRACTOR = "Contractor"
    DIRECT_PLACEMENT = "Direct Placement"
    CONTRACT_TO_HIRE = "Contract to Hire"

    @classmethod
    def parse(cls, value: Any) -> Optional['PlacementType']:
        """Accept display labels and identifier spellings (``DirectPlacement``)."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = re.sub(r"[\s_\-]+", "", value).lower()
        for member in cls:
            if member.value.replace(" ", "").lower() == key:
                return member
        return None

    @property
    def asset_key(self) -> str:
        return f"status.{self.name.lower()}"


def _clean_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


class ProfileRecord(BaseModel):
    """Single source of truth for a card. Frozen: renderers only read it."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = ""
    position: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    linkedin_url: str = Field(default="", validation_alias=AliasChoices("linkedin_url", "linkedin", "linkedinUrl"))
    resume_url: str = Field(default="", validation_alias=AliasChoices("resume_url", "resumeLink", "resumeUrl"))
    portfolio_url: str = Field(default="", validation_alias=AliasChoices("portfolio_url", "portfolioLink", "portfolioUrl"))
    highlights: List[str] = Field(default_factory=lambda: [""])
    core_skills: List[str] = Field(
        default_factory=lambda: [""] * CORE_SKILL_SLOTS,
        validation_alias=AliasChoices("core_skills", "coreSkills"),
    )
    profile_image_payload: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("profile_image_payload", "profileImage", "profileImagePayload"),
    )
    # None: an unrecognised placement, drawn without a status pill
    placement_type: Optional[PlacementType] = Field(
        default=PlacementType.CONTRACTOR,
        validation_alias=AliasChoices("placement_type", "placementType"),
    )

    @field_validator("name", "position", "address", "phone", "email",
                     "linkedin_url", "resume_url", "portfolio_url", mode="before")
    @classmethod
    def _strip_text(cls, v):
        return _clean_text(v)

    @field_validator("highlights", mode="before")
    @classmethod
    def _keep_highlight_slots(cls, v):
        # Blank entries are kept: they are empty slots being edited.
        if v is None:
            return [""]
        if isinstance(v, str) or not isinstance(v, (list, tuple)):
            raise ValueError("highlights must be a list of strings")
        items = [("" if item is None else str(item)) for item in v]
        return items or [""]

    @field_validator("core_skills", mode="before")
    @classmethod
    def _pad_core_skills(cls, v):
        if v is not None and not isinstance(v, (list, tuple)):
            raise ValueError("coreSkills must be a list of strings")
        items = [_clean_text(item) for item in (v or [])]
        if len(items) > CORE_SKILL_SLOTS:
            logger.warning(f"Dropping {len(items) - CORE_SKILL_SLOTS} core skill(s) beyond {CORE_SKILL_SLOTS} slots")
            items = items[:CORE_SKILL_SLOTS]
        return items + [""] * (CORE_SKILL_SLOTS - len(items))

    @field_validator("profile_image_payload", mode="before")
    @classmethod
    def _empty_image_is_absent(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v

    @field_validator("placement_type", mode="before")
    @classmethod
    def _parse_placement(cls, v):
        if v is None:
            return None
        if isinstance(v, str) and not v.strip():
            return PlacementType.CONTRACTOR
        parsed = PlacementType.parse(v)
        if parsed is None:
            logger.warning(f"Unknown placement type {v!r}, no status pill will be shown")
        return parsed

    @classmethod
    def new(cls) -> 'ProfileRecord':
        """All-empty record for a new card."""
        return cls()

    @classmethod
    def from_form_data(cls, data: Dict[str, Any]) -> 'ProfileRecord':
        """Build a record from a form payload (camelCase keys accepted)."""
        return cls.model_validate(data or {})

    @property
    def visible_highlights(self) -> List[str]:
        """Non-blank highlights in display order."""
        return [h for h in self.highlights if h.strip()]

    @property
    def skill_labels(self) -> List[str]:
        """The three skill lines; blank slots read `Skill N`."""
        return [skill or f"Skill {index}" for index, skill in enumerate(self.core_skills, start=1)]

    @property
    def is_empty(self) -> bool:
        return not any((
            self.name, self.address, self.phone, self.email,
            self.position, self.linkedin_url, self.visible_highlights,
        ))

    def snapshot(self) -> 'ProfileRecord':
        """Detached deep copy (history entries and export snapshots)."""
        return self.model_copy(deep=True)


class ProfilePatch(BaseModel):
    """Partial record produced by the résumé autofill service."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[str] = None
    position: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    linkedin_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("linkedin_url", "linkedin", "linkedinUrl"))
    resume_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("resume_url", "resumeLink", "resumeUrl"))
    portfolio_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("portfolio_url", "portfolioLink", "portfolioUrl"))
    highlights: Optional[List[str]] = None
    core_skills: Optional[List[str]] = Field(default=None, validation_alias=AliasChoices("core_skills", "coreSkills"))

    @field_validator("name", "position", "address", "phone", "email",
                     "linkedin_url", "resume_url", "portfolio_url", mode="before")
    @classmethod
    def _strip_optional(cls, v):
        if v is None:
            return None
        if not isinstance(v, str):
            raise ValueError("expected a string")
        return v.strip()

    @field_validator("highlights", "core_skills", mode="before")
    @classmethod
    def _string_list(cls, v):
        if v is None:
            return None
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, list) or not all(isinstance(item, str) for item in v):
            raise ValueError("expected a list of strings")
        return [item.strip() for item in v]


def apply_patch(record: ProfileRecord, patch: ProfilePatch) -> ProfileRecord:
    """Return a new record with the non-empty patch values folded in."""
    updates: Dict[str, Any] = {}
    for field_name, value in patch.model_dump(exclude_none=True).items():
        if isinstance(value, str) and not value:
            continue
        if isinstance(value, list) and not any(item for item in value):
            continue
        updates[field_name] = value

    if not updates:
        return record
    # Re-validate so padding and trimming rules apply to patched lists.
    merged = {**record.model_dump(), **updates}
    return ProfileRecord.model_validate(merged)
