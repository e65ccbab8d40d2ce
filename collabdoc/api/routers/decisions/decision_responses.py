"""
Decision response mapping utilities.

Builds the vote acknowledgement returned after a vote or its withdrawal.

Dependencies: collabdoc.application.services
System role: Decision response transformation
"""

from typing import Any

from collabdoc.application.services import DecisionService
from collabdoc.boundary.db.models import VoteModel


def map_vote_to_response(vote: VoteModel | None, stats: dict[str, int]) -> dict[str, Any]:
    """
    Vote acknowledgement.

    Args:
        vote: Recorded vote, or None after a withdrawal
        stats: Vote counts per option id

    Returns:
        dict: {"vote", "stats"} matching VoteResponse
    """
    return {
        "vote": DecisionService.serialize_vote(vote) if vote is not None else None,
        "stats": stats,
    }
