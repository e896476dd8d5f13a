"""Source-specific submission adapters."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .api import ApiRecordAdapter
from .form import FormPayloadAdapter


@runtime_checkable
class SubmissionAdapter(Protocol):
    """Submission adapter contract.

    Implementations transform source-native evaluation payloads into
    provider-neutral submission dictionaries that conform to the shared
    schema.
    """

    source: str

    def can_handle(self, blob: bytes | str | dict, metadata: dict) -> bool:
        """Return True when the adapter can parse the given payload."""

    def parse_submission(self, payload: bytes | str | dict) -> dict:
        """Parse a payload and return a provider-neutral dictionary."""


__all__ = ["SubmissionAdapter", "ApiRecordAdapter", "FormPayloadAdapter"]
