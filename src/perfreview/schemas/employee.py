from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class BranchRef(BaseModel):
    """Branch assignment as delivered by the directory API."""

    branch_name: str | None = None
    branch_code: str | None = None

    model_config = ConfigDict(extra="allow")


class PositionRef(BaseModel):
    """Position descriptor; some endpoints send `label`, others `name`."""

    label: str | None = None
    name: str | None = None

    model_config = ConfigDict(extra="allow")


class Employee(BaseModel):
    """Employee (or user) record referenced by a submission.

    The same record carries the signature reset flags that the admin
    workflow toggles, so it is also what the approval poller re-fetches.
    """

    id: int | str | None = None
    name: str | None = None
    email: str | None = None
    branches: list[BranchRef] | BranchRef | str | None = None
    positions: PositionRef | str | None = None
    branch: str | None = None
    position: str | None = None
    signature: str | None = None
    request_signature_reset: int | bool | None = Field(
        default=0, alias="requestSignatureReset"
    )
    approved_signature_reset: int | bool | None = Field(
        default=0, alias="approvedSignatureReset"
    )

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @property
    def reset_pending(self) -> bool:
        return bool(self.request_signature_reset)

    @property
    def reset_approved(self) -> bool:
        return bool(self.approved_signature_reset)

    def primary_branch(self) -> BranchRef | None:
        """Return the first branch assignment in whatever shape it arrived."""
        branches: Any = self.branches
        if isinstance(branches, list):
            return branches[0] if branches else None
        if isinstance(branches, BranchRef):
            return branches
        flat = self.flat_branch()
        return BranchRef(branch_name=flat) if flat else None

    def flat_branch(self) -> str | None:
        """Branch sent as a plain string instead of a branch record."""
        if isinstance(self.branches, (list, BranchRef)):
            return None
        flat = self.branches if isinstance(self.branches, str) else self.branch
        if flat and flat.strip():
            return flat.strip()
        return None

    def position_label(self) -> str:
        positions = self.positions
        if isinstance(positions, PositionRef):
            label = positions.label or positions.name or self.position
        elif isinstance(positions, str):
            label = positions
        else:
            label = self.position
        return (label or "").strip()
