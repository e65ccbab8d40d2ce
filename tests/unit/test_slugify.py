"""Test suite for document slug generation."""

import pytest

from collabdoc.application.services import slugify


@pytest.mark.parametrize(
    "title, expected",
    [
        ("Plan", "plan"),
        ("Étude de cas : Postgres", "etude-de-cas-postgres"),
        ("  Compte-rendu du 12/03  ", "compte-rendu-du-12-03"),
        ("Choix   de la BDD!", "choix-de-la-bdd"),
        ("???", "document"),
    ],
)
def test_slugify(title: str, expected: str) -> None:
    assert slugify(title) == expected
