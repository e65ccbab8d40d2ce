"""
Decision service orchestrator.

Coordinates decision points and voting: one vote per participant (upsert),
validation locks the decision, postponing is the only way to unlock it.

Dependencies: collabdoc.boundary.db.CRUD, collabdoc.boundary.notifications
System role: Decision and voting use case orchestration
"""

import logging
import uuid
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from collabdoc.application.services.base_service import BaseService, id_or_none, to_iso
from collabdoc.boundary.db.CRUD import decision_crud, document_crud, vote_crud
from collabdoc.boundary.db.models import (
    DecisionModel,
    DecisionStatus,
    DocumentModel,
    ParticipantModel,
    SessionModel,
    VoteModel,
)
from collabdoc.core.exceptions import ConflictError, LockedDecisionError, ValidationError

logger = logging.getLogger(__name__)

DECISION_STATUSES = tuple(s.value for s in DecisionStatus)
LOCKED_VOTE_MESSAGE = "Cette décision est verrouillée et ne peut plus recevoir de votes."


def compute_vote_stats(decision: DecisionModel, votes: Sequence[VoteModel]) -> dict[str, int]:
    """
    Tally votes per option id.

    Every option appears (0 when unvoted); votes for unknown options are ignored.
    """
    stats = {option["id"]: 0 for option in decision.options or []}
    for vote in votes:
        if vote.option_id in stats:
            stats[vote.option_id] += 1
    return stats


class DecisionService(BaseService):
    """Decision service orchestrator."""

    async def create(
        self,
        session: SessionModel,
        title: str,
        options: Sequence[dict[str, Any]],
        description: str | None = None,
        linked_document: DocumentModel | None = None,
    ) -> DecisionModel:
        """
        Create a decision; each option receives a fresh id.

        The minimum of two options is enforced by the HTTP layer.

        Args:
            session: Owning session
            title: Decision title
            options: Dicts with "label" and optional "description"
            description: Optional context
            linked_document: Optional related document

        Returns:
            DecisionModel: Created decision (status ouvert, unlocked)
        """
        formatted = [
            {
                "id": str(uuid.uuid4()),
                "label": option["label"],
                "description": option.get("description"),
            }
            for option in options
        ]
        decision = await decision_crud.create(
            self.db,
            session_id=session.id,
            title=title,
            description=description,
            status=DecisionStatus.OUVERT.value,
            options=formatted,
            is_locked=False,
            linked_document_id=linked_document.id if linked_document else None,
        )
        await self.db.commit()

        logger.info(
            "Decision created",
            extra={
                "decision_id": str(decision.id),
                "session_id": str(session.id),
                "option_count": len(formatted),
            },
        )
        await self.publisher.publish_decision_created(
            session.id,
            {
                "id": str(decision.id),
                "title": decision.title,
                "document_id": id_or_none(decision.linked_document_id),
            },
        )
        return decision

    async def vote(
        self,
        decision: DecisionModel,
        participant: ParticipantModel,
        option_id: str,
        comment: str | None = None,
    ) -> VoteModel:
        """
        Cast or replace the participant's vote.

        The read-then-write upsert is backed by the (decision, participant)
        unique constraint: when a concurrent insert wins, this call fails
        with a conflict and the first vote stands.

        Raises:
            LockedDecisionError: The decision is locked
            ValidationError: option_id is not one of the decision's options
            ConflictError: A concurrent vote was inserted first
        """
        if decision.is_locked:
            raise LockedDecisionError(decision.id, LOCKED_VOTE_MESSAGE)
        if not decision.has_option(option_id):
            raise ValidationError("Option invalide", field="option_id")

        decision_id = decision.id
        participant_id = participant.id
        vote = await vote_crud.get_by_decision_and_participant(self.db, decision_id, participant_id)
        try:
            if vote is not None:
                vote.option_id = option_id
                vote.comment = comment
                await self.db.flush()
            else:
                vote = await vote_crud.create(
                    self.db,
                    decision_id=decision_id,
                    participant_id=participant_id,
                    option_id=option_id,
                    comment=comment,
                )
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(
                "Concurrent vote rejected",
                extra={"decision_id": str(decision_id), "participant_id": str(participant_id)},
            )
            raise ConflictError(
                "Un vote de ce participant vient d'être enregistré.",
                {"decision_id": str(decision_id)},
            ) from e

        logger.info(
            "Vote recorded",
            extra={
                "decision_id": str(decision_id),
                "participant_id": str(participant_id),
                "option_id": option_id,
            },
        )
        await self.publisher.publish_vote_received(
            decision.session_id, decision_id, await self.get_vote_stats(decision)
        )
        return vote

    async def remove_vote(self, decision: DecisionModel, participant: ParticipantModel) -> bool:
        """
        Withdraw the participant's vote.

        Returns:
            bool: True when a vote existed

        Raises:
            LockedDecisionError: The decision is locked
        """
        if decision.is_locked:
            raise LockedDecisionError(decision.id)

        vote = await vote_crud.get_by_decision_and_participant(self.db, decision.id, participant.id)
        if vote is not None:
            await vote_crud.delete(self.db, vote)
        await self.db.commit()

        logger.info(
            "Vote removed",
            extra={"decision_id": str(decision.id), "participant_id": str(participant.id)},
        )
        await self.publisher.publish_vote_received(
            decision.session_id, decision.id, await self.get_vote_stats(decision)
        )
        return vote is not None

    async def update_status(self, decision: DecisionModel, status: str) -> DecisionModel:
        """
        Change the status; a locked decision only accepts reporte.

        The lock itself is left untouched: only postpone() unlocks.

        Raises:
            ValidationError: Unknown status
            LockedDecisionError: Locked and status is not reporte
        """
        if status not in DECISION_STATUSES:
            raise ValidationError("Statut invalide", field="status")
        if decision.is_locked and status != DecisionStatus.REPORTE.value:
            raise LockedDecisionError(decision.id)

        decision.status = status
        await self.db.commit()

        logger.info(
            "Decision status changed",
            extra={"decision_id": str(decision.id), "status": status},
        )
        await self._publish_status_changed(decision)
        return decision

    async def validate(self, decision: DecisionModel, selected_option_id: str) -> DecisionModel:
        """
        Select an option, set status valide and lock the decision.

        No quorum or vote precondition applies.

        Raises:
            LockedDecisionError: Already locked
            ValidationError: Unknown option
        """
        if decision.is_locked:
            raise LockedDecisionError(decision.id)
        if not decision.has_option(selected_option_id):
            raise ValidationError("Option invalide", field="selected_option_id")

        decision.selected_option_id = selected_option_id
        decision.status = DecisionStatus.VALIDE.value
        decision.is_locked = True
        await self.db.commit()

        logger.info(
            "Decision validated",
            extra={"decision_id": str(decision.id), "selected_option_id": selected_option_id},
        )
        await self._publish_status_changed(decision)
        return decision

    async def postpone(self, decision: DecisionModel) -> DecisionModel:
        """Set status reporte and unlock."""
        decision.status = DecisionStatus.REPORTE.value
        decision.is_locked = False
        await self.db.commit()

        logger.info("Decision postponed", extra={"decision_id": str(decision.id)})
        await self._publish_status_changed(decision)
        return decision

    async def delete(self, decision: DecisionModel) -> None:
        """Remove the votes, then the decision."""
        session_id = decision.session_id
        decision_id = decision.id
        document_id = decision.linked_document_id

        await vote_crud.delete_by_decision(self.db, decision_id)
        await decision_crud.delete(self.db, decision)
        await self.db.commit()

        logger.info("Decision deleted", extra={"decision_id": str(decision_id)})
        await self.publisher.publish_decision_deleted(session_id, decision_id, document_id)

    async def list_for_session(
        self,
        session_id: UUID,
        document_id: UUID | None = None,
        status: str | None = None,
    ) -> Sequence[DecisionModel]:
        return await decision_crud.get_by_session(self.db, session_id, document_id, status)

    async def get_vote_stats(self, decision: DecisionModel) -> dict[str, int]:
        votes = await vote_crud.get_by_decision(self.db, decision.id)
        return compute_vote_stats(decision, votes)

    async def get_arbitrations(self, session_id: UUID) -> list[dict]:
        """
        Summary of validated decisions, most recently validated first.

        Returns:
            list[dict]: id, title, description, selected_option, document,
            validated_at, vote_count
        """
        decisions = await decision_crud.get_validated(self.db, session_id)
        votes = await vote_crud.get_by_decisions(self.db, [d.id for d in decisions])
        documents = await document_crud.get_many_by_ids(
            self.db, [d.linked_document_id for d in decisions if d.linked_document_id]
        )

        arbitrations = []
        for decision in decisions:
            document = documents.get(decision.linked_document_id)
            arbitrations.append({
                "id": str(decision.id),
                "title": decision.title,
                "description": decision.description,
                "selected_option": decision.get_option(decision.selected_option_id),
                "document": {
                    "id": str(document.id),
                    "title": document.title,
                    "slug": document.slug,
                } if document else None,
                "validated_at": to_iso(decision.updated_at),
                "vote_count": len(votes.get(decision.id, [])),
            })
        return arbitrations

    async def serialize(self, decision: DecisionModel) -> dict:
        return (await self.serialize_many([decision]))[0]

    async def serialize_many(self, decisions: Sequence[DecisionModel]) -> list[dict]:
        """Serialize decisions with vote stats, votes loaded in one query."""
        votes = await vote_crud.get_by_decisions(self.db, [d.id for d in decisions])
        result = []
        for decision in decisions:
            decision_votes = votes.get(decision.id, [])
            result.append({
                "id": str(decision.id),
                "session_id": str(decision.session_id),
                "title": decision.title,
                "description": decision.description,
                "status": decision.status,
                "options": list(decision.options or []),
                "selected_option_id": decision.selected_option_id,
                "is_locked": decision.is_locked,
                "vote_stats": compute_vote_stats(decision, decision_votes),
                "vote_count": len(decision_votes),
                "linked_document_id": id_or_none(decision.linked_document_id),
                "created_at": to_iso(decision.created_at),
                "updated_at": to_iso(decision.updated_at),
            })
        return result

    @staticmethod
    def serialize_vote(vote: VoteModel) -> dict:
        return {
            "id": str(vote.id),
            "option_id": vote.option_id,
            "comment": vote.comment,
            "participant_id": str(vote.participant_id),
        }

    async def _publish_status_changed(self, decision: DecisionModel) -> None:
        await self.publisher.publish_decision_status_changed(
            decision.session_id, await self.serialize(decision)
        )
