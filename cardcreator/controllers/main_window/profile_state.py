"""Profile state coordinator: owns the record currently being edited."""

from __future__ import annotations

from typing import Any, Callable, List, Optional

from pydantic import ValidationError

from ...common.errors import InputValidationError
from ...schemas.profile_schema import ProfilePatch, ProfileRecord, apply_patch
from .base import Coordinator, SimpleCoordinator

RecordListener = Callable[[ProfileRecord], None]


class ProfileStateCoordinator(SimpleCoordinator, Coordinator):
    """Holds the current card and notifies listeners on every change.

    The record itself is immutable; each change swaps in a new instance, so
    a snapshot handed to an export can never be altered underneath it.
    """

    __slots__ = ("_record", "_listeners")

    def __init__(self, record: Optional[ProfileRecord] = None) -> None:
        super().__init__()
        self._record = record or ProfileRecord.new()
        self._listeners: List[RecordListener] = []

    @property
    def record(self) -> ProfileRecord:
        return self._record

    def subscribe(self, listener: RecordListener) -> None:
        self._listeners.append(listener)

    def teardown(self) -> None:
        self._listeners.clear()
        super().teardown()

    def _replace(self, record: ProfileRecord) -> ProfileRecord:
        self._record = record
        for listener in list(self._listeners):
            listener(record)
        return record

    def new_card(self) -> ProfileRecord:
        return self._replace(ProfileRecord.new())

    def load(self, record: ProfileRecord) -> ProfileRecord:
        return self._replace(record.snapshot())

    def load_form_data(self, data: dict) -> ProfileRecord:
        try:
            record = ProfileRecord.from_form_data(data)
        except ValidationError as exc:
            raise InputValidationError(str(exc)) from exc
        return self._replace(record)

    def update_field(self, field_name: str, value: Any) -> ProfileRecord:
        if field_name not in ProfileRecord.model_fields:
            raise KeyError(field_name)
        data = self._record.model_dump()
        data[field_name] = value
        return self._replace(ProfileRecord.model_validate(data))

    def apply_suggestions(self, patch: ProfilePatch) -> ProfileRecord:
        """Fold autofill suggestions into the current card."""
        before = self._record.model_dump()
        updated = apply_patch(self._record, patch)
        if updated is self._record:
            self.report("Autofill returned no usable fields")
            return updated
        changed = sum(1 for key, value in updated.model_dump().items() if before[key] != value)
        self.report(f"Autofill updated {changed} field(s)")
        return self._replace(updated)
