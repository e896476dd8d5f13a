"""Digital signature capture lifecycle."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from enum import Enum

import structlog

from ..schemas import Employee

_DATA_URL_MIME = re.compile(r"^data:([^;,]*)")


class SignatureState(str, Enum):
    EMPTY = "empty"
    DRAFTING = "drafting"
    LOCAL_UNSAVED = "local_unsaved"
    PERSISTED = "persisted"


class SignatureDecodeError(ValueError):
    """Raised when an inline signature payload cannot be decoded."""


@dataclass(frozen=True, slots=True)
class DecodedSignature:
    mime_type: str
    data: bytes


def is_data_url(value: str | None) -> bool:
    return bool(value) and value.strip().startswith("data:")


def is_persisted_reference(value: str | None) -> bool:
    """Anything non-blank that is not inline image data came from storage."""
    return bool(value and value.strip()) and not is_data_url(value)


def resolve_reference(reference: str, storage_base_url: str = "") -> str:
    if reference.startswith(("http://", "https://")):
        return reference
    base = storage_base_url.rstrip("/")
    if reference.startswith("/"):
        return f"{base}{reference}"
    return f"{base}/{reference}"


def decode_data_url(value: str | None) -> DecodedSignature:
    if not value:
        raise SignatureDecodeError("Data URL is required")
    header, sep, payload = value.partition(",")
    if not sep:
        raise SignatureDecodeError("Invalid data URL format")
    if not payload:
        raise SignatureDecodeError("Invalid data URL: missing base64 data")
    match = _DATA_URL_MIME.match(header)
    mime_type = (match.group(1) if match else "") or "image/png"
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise SignatureDecodeError(f"Invalid base64 signature data: {exc}") from exc
    if not data:
        raise SignatureDecodeError("Signature data is empty")
    return DecodedSignature(mime_type=mime_type, data=data)


class SignatureLifecycle:
    """Single-slot signature state with reset request/approval flags.

    A persisted signature can only be cleared after an admin approves a
    reset, and the approval is consumed by that one clear. A local draft
    wins over external values until it is cleared or saved.
    """

    def __init__(
        self,
        *,
        value: str | None = None,
        reset_requested: int = 0,
        reset_approved: bool = False,
        storage_base_url: str | None = "",
    ) -> None:
        self._state = SignatureState.EMPTY
        self._draft: str | None = None
        self._reference: str | None = None
        self._state_before_stroke = SignatureState.EMPTY
        self._stroke_points: list[tuple[float, float]] = []
        self.reset_requested = int(reset_requested or 0)
        self.reset_approved = bool(reset_approved)
        self._storage_base_url = storage_base_url or ""
        self._logger = structlog.get_logger(__name__)
        if value:
            self.observe_external(value)

    @classmethod
    def for_employee(cls, employee: Employee, *, storage_base_url: str = "") -> "SignatureLifecycle":
        return cls(
            value=employee.signature,
            reset_requested=int(employee.request_signature_reset or 0),
            reset_approved=employee.reset_approved,
            storage_base_url=storage_base_url,
        )

    @property
    def state(self) -> SignatureState:
        return self._state

    @property
    def value(self) -> str | None:
        """Raw value to hand to the persistence layer."""
        if self._state is SignatureState.LOCAL_UNSAVED:
            return self._draft
        if self._state is SignatureState.PERSISTED:
            return self._reference
        return None

    @property
    def display_value(self) -> str | None:
        if self._state is SignatureState.LOCAL_UNSAVED:
            return self._draft
        if self._state is SignatureState.PERSISTED and self._reference:
            return resolve_reference(self._reference, self._storage_base_url)
        return None

    @property
    def reset_pending(self) -> bool:
        return self.reset_requested > 0

    @property
    def can_clear(self) -> bool:
        if self._state is SignatureState.PERSISTED:
            return self.reset_approved
        return self._state is not SignatureState.EMPTY

    @property
    def needs_reset_request(self) -> bool:
        return self._state is SignatureState.PERSISTED and not self.reset_approved

    def begin_stroke(self) -> bool:
        if self._state not in (SignatureState.EMPTY, SignatureState.LOCAL_UNSAVED):
            return False
        self._state_before_stroke = self._state
        self._stroke_points = []
        self._state = SignatureState.DRAFTING
        return True

    def extend_stroke(self, x: float, y: float) -> None:
        if self._state is SignatureState.DRAFTING:
            self._stroke_points.append((x, y))

    def end_stroke(self, image_data: str) -> bool:
        """Finish drawing; the rendered image replaces any previous draft."""
        if self._state is not SignatureState.DRAFTING:
            return False
        points, self._stroke_points = self._stroke_points, []
        if not points:
            self._state = self._state_before_stroke
            return False
        self._draft = image_data
        self._state = SignatureState.LOCAL_UNSAVED
        return True

    def clear(self) -> bool:
        if self._state is SignatureState.EMPTY:
            return False
        if self._state is SignatureState.PERSISTED:
            if not self.reset_approved:
                self._logger.info("signature.clear_blocked", reason="reset_not_approved")
                return False
            self.reset_approved = False
        self._logger.info("signature.cleared", previous_state=self._state.value)
        self._reset()
        return True

    def request_reset(self) -> bool:
        if self.reset_pending:
            return False
        self.reset_requested = 1
        self._logger.info("signature.reset_requested", state=self._state.value)
        return True

    def apply_user_record(self, employee: Employee) -> None:
        """Refresh reset flags from a freshly fetched user record."""
        self.reset_requested = int(employee.request_signature_reset or 0)
        self.reset_approved = employee.reset_approved

    def observe_external(self, value: str | None) -> None:
        """Reconcile with a value supplied from outside (props, server reads)."""
        if is_persisted_reference(value):
            if self._state is SignatureState.LOCAL_UNSAVED:
                self._logger.debug("signature.implicitly_saved")
            self._persist(value.strip())
            return
        if self._state in (SignatureState.LOCAL_UNSAVED, SignatureState.DRAFTING):
            return
        if is_data_url(value):
            self._draft = value.strip()
            self._reference = None
            self._state = SignatureState.LOCAL_UNSAVED
            return
        self._reset()

    def mark_saved(self, reference: str) -> None:
        """Explicit signal from the owning workflow that the draft was stored."""
        self._persist(reference)

    def image_bytes(self) -> DecodedSignature | None:
        """Decode the local draft; a corrupt payload resets the slot."""
        if self._state is not SignatureState.LOCAL_UNSAVED:
            return None
        try:
            return decode_data_url(self._draft)
        except SignatureDecodeError as exc:
            self._logger.warning("signature.decode_failed", error=str(exc))
            self._reset()
            return None

    def mark_load_failed(self) -> None:
        """The displayed image could not be loaded; fall back to an empty pad."""
        self._logger.warning("signature.load_failed", state=self._state.value)
        self._reset()

    def _persist(self, reference: str) -> None:
        self._reference = reference
        self._draft = None
        self._stroke_points = []
        self._state = SignatureState.PERSISTED

    def _reset(self) -> None:
        self._draft = None
        self._reference = None
        self._stroke_points = []
        self._state = SignatureState.EMPTY
