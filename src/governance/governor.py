"""Milestone Governor — founder milestones, community votes, fund release.

State machines:
- Milestone: PENDING → RELEASED (terminal), only through a proposal release
- Proposal: open → released (terminal); open accepts unlimited votes

Release (founder only):
- rejected if already released or not approved (approvals >= 1 and
  approvals > rejections)
- amount = min(proposal.amount, reserve); reserve -= amount (floored at 0)
- cap_reached re-derived as reserve >= funding_goal, so a release can move a
  launched project back under its goal
- proposal and milestone both marked released
"""

import logging
from dataclasses import dataclass

from src.core.domain.errors import (
    AlreadyReleasedError,
    ForbiddenError,
    InvalidInputError,
    NotApprovedError,
    NotFoundError,
)
from src.core.domain.governance import Milestone, MilestoneStatus, Proposal
from src.core.domain.project import Project
from src.core.domain.validation import optional_text, require_text
from src.core.math.numerical_safeguards import is_positive_finite, subtract_non_negative
from src.core.store import TokenomicsStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReleaseResult:
    """Outcome of a proposal release."""

    project: Project
    proposal: Proposal
    milestone: Milestone

    # Funds actually moved out of reserve (<= proposal.amount)
    amount: float

    # Diagnostics
    cap_reached_before: bool
    details: str


class MilestoneGovernor:
    """Milestones and withdrawal proposals of every project."""

    def __init__(self, store: TokenomicsStore):
        self._store = store

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_milestones(self, project_id: str) -> list[Milestone]:
        """Milestones of a project, oldest first."""
        self._store.require_project(project_id)
        milestones = [
            m for m in self._store.snapshot(self._store.milestones)
            if m.project_id == project_id
        ]
        return sorted(milestones, key=lambda m: m.created_ts_utc_ms)

    def list_proposals(self, project_id: str) -> list[Proposal]:
        """Proposals of a project, newest first."""
        self._store.require_project(project_id)
        proposals = [
            p for p in self._store.snapshot(self._store.proposals)
            if p.project_id == project_id
        ]
        return sorted(proposals, key=lambda p: p.created_ts_utc_ms, reverse=True)

    # -------------------------------------------------------------------------
    # Founder operations
    # -------------------------------------------------------------------------

    def create_milestone(
        self,
        project_id: str,
        caller_id: str,
        title: str,
        amount: float,
        description: str | None = None,
    ) -> Milestone:
        """Define a funding milestone.

        Raises:
            NotFoundError: unknown project
            ForbiddenError: caller is not the founder
            InvalidInputError: empty title or amount not > 0
        """
        with self._store.project_lock(project_id):
            project = self._store.require_project(project_id)
            self._require_founder(project, caller_id, "create milestones")
            title = require_text(title, "title")
            if not is_positive_finite(amount):
                raise InvalidInputError(
                    "title and amount > 0 required", {"amount": repr(amount)}
                )

            milestone = Milestone(
                id=self._store.new_id(self._store.milestones),
                project_id=project_id,
                title=title,
                description=optional_text(description),
                amount=float(amount),
                status=MilestoneStatus.PENDING,
                created_ts_utc_ms=self._store.now_ms(),
            )
            self._store.put(self._store.milestones, milestone.id, milestone)

        logger.info(
            "milestone created: %s (%.2f)", title, milestone.amount,
            extra={"project_id": project_id, "user_id": caller_id},
        )
        return milestone

    def create_proposal(
        self,
        project_id: str,
        caller_id: str,
        milestone_id: str,
        amount: float,
    ) -> Proposal:
        """Open a withdrawal proposal against one of the project's milestones.

        Raises:
            NotFoundError: unknown project
            ForbiddenError: caller is not the founder
            InvalidInputError: milestone not in this project, or amount outside
                (0, milestone.amount]
        """
        with self._store.project_lock(project_id):
            project = self._store.require_project(project_id)
            self._require_founder(project, caller_id, "create proposals")
            milestone = self._store.milestones.get(milestone_id)
            if milestone is None or milestone.project_id != project_id:
                raise InvalidInputError("invalid milestone", {"milestone_id": milestone_id})
            if not is_positive_finite(amount) or amount > milestone.amount:
                raise InvalidInputError(
                    "invalid amount",
                    {"amount": repr(amount), "milestone_amount": milestone.amount},
                )

            proposal = Proposal(
                id=self._store.new_id(self._store.proposals),
                project_id=project_id,
                milestone_id=milestone_id,
                amount=float(amount),
                created_ts_utc_ms=self._store.now_ms(),
            )
            self._store.put(self._store.proposals, proposal.id, proposal)

        logger.info(
            "proposal created: %.2f against milestone %s", proposal.amount, milestone_id,
            extra={"project_id": project_id, "user_id": caller_id, "proposal_id": proposal.id},
        )
        return proposal

    # -------------------------------------------------------------------------
    # Community operations
    # -------------------------------------------------------------------------

    def vote(
        self,
        project_id: str,
        proposal_id: str,
        approve: bool,
        caller_id: str | None = None,
    ) -> Proposal:
        """Record one approval or rejection. Any caller, any number of times.

        Raises:
            NotFoundError: unknown project, or proposal missing / in another project
        """
        with self._store.project_lock(project_id):
            self._store.require_project(project_id)
            proposal = self._require_proposal(project_id, proposal_id)
            if approve:
                updated = proposal.model_copy(update={"approvals": proposal.approvals + 1})
            else:
                updated = proposal.model_copy(update={"rejections": proposal.rejections + 1})
            self._store.put(self._store.proposals, proposal_id, updated)

        logger.info(
            "vote %s (approvals=%d rejections=%d)",
            "approve" if approve else "reject", updated.approvals, updated.rejections,
            extra={"project_id": project_id, "user_id": caller_id, "proposal_id": proposal_id},
        )
        return updated

    # -------------------------------------------------------------------------
    # Release
    # -------------------------------------------------------------------------

    def release(self, project_id: str, caller_id: str, proposal_id: str) -> ReleaseResult:
        """Move approved proposal funds out of the project reserve.

        Check order: project exists, caller is founder, proposal exists in
        project, milestone exists, not yet released, approved.

        Raises:
            NotFoundError, ForbiddenError, AlreadyReleasedError, NotApprovedError
        """
        with self._store.project_lock(project_id):
            project = self._store.require_project(project_id)
            self._require_founder(project, caller_id, "release")
            proposal = self._require_proposal(project_id, proposal_id)
            milestone = self._store.milestones.get(proposal.milestone_id)
            if milestone is None:
                raise NotFoundError("milestone", proposal.milestone_id)
            if proposal.released:
                raise AlreadyReleasedError("already released", {"proposal_id": proposal_id})
            if not proposal.is_approved:
                raise NotApprovedError(
                    "not approved yet",
                    {
                        "proposal_id": proposal_id,
                        "approvals": proposal.approvals,
                        "rejections": proposal.rejections,
                    },
                )

            amount = min(proposal.amount, project.reserve)
            reserve = subtract_non_negative(project.reserve, amount)
            updated_project = project.model_copy(update={
                "reserve": reserve,
                "cap_reached": reserve >= project.funding_goal,
            })
            updated_proposal = proposal.model_copy(update={"released": True})
            updated_milestone = milestone.model_copy(update={"status": MilestoneStatus.RELEASED})

            self._store.put(self._store.projects, project_id, updated_project)
            self._store.put(self._store.proposals, proposal_id, updated_proposal)
            self._store.put(self._store.milestones, milestone.id, updated_milestone)

        details = (
            f"released {amount:.6f} of {proposal.amount:.6f}, "
            f"reserve {project.reserve:.6f} → {reserve:.6f}, "
            f"cap_reached {project.cap_reached} → {updated_project.cap_reached}"
        )
        logger.info(
            "proposal released: %s", details,
            extra={"project_id": project_id, "user_id": caller_id, "proposal_id": proposal_id},
        )
        return ReleaseResult(
            project=updated_project,
            proposal=updated_proposal,
            milestone=updated_milestone,
            amount=amount,
            cap_reached_before=project.cap_reached,
            details=details,
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require_founder(self, project: Project, caller_id: str, action: str) -> None:
        if not project.is_founder(caller_id):
            raise ForbiddenError(
                f"only founder can {action}",
                {"project_id": project.id, "caller_id": caller_id},
            )

    def _require_proposal(self, project_id: str, proposal_id: str) -> Proposal:
        proposal = self._store.proposals.get(proposal_id)
        if proposal is None or proposal.project_id != project_id:
            raise NotFoundError("proposal", proposal_id)
        return proposal
