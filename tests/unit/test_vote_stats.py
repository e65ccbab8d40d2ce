"""Test suite for vote tallying."""

from types import SimpleNamespace

from collabdoc.application.services.decision_service import compute_vote_stats


def _decision(*option_ids: str) -> SimpleNamespace:
    return SimpleNamespace(options=[{"id": option_id, "label": option_id} for option_id in option_ids])


def _vote(option_id: str) -> SimpleNamespace:
    return SimpleNamespace(option_id=option_id)


def test_every_option_should_start_at_zero() -> None:
    assert compute_vote_stats(_decision("a", "b"), []) == {"a": 0, "b": 0}


def test_should_count_votes_per_option() -> None:
    stats = compute_vote_stats(_decision("a", "b"), [_vote("a"), _vote("b"), _vote("a")])

    assert stats == {"a": 2, "b": 1}


def test_votes_for_unknown_options_should_be_ignored() -> None:
    stats = compute_vote_stats(_decision("a"), [_vote("zzz"), _vote("a")])

    assert stats == {"a": 1}
