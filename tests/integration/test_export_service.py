"""
Test suite for ExportService against an in-memory database.

System role: Verification of Markdown and HTML session exports
"""

import pytest


@pytest.fixture
async def populated_session(
    document_service, annotation_service, decision_service, sample_session, alice, bob
):
    """Session with a two-level tree, an annotation thread and a validated decision."""
    plan = await document_service.create(
        sample_session, {"title": "Plan", "content": "Contenu du **plan**", "type": "synthesis"}, alice
    )
    await document_service.create(
        sample_session, {"title": "Détails", "content": "Sous-partie", "parent_id": plan.id}, alice
    )
    question = await annotation_service.create(plan, bob, "Pourquoi ce choix ?", "question")
    await annotation_service.create_reply(question, "Pour la robustesse", alice)
    await annotation_service.resolve(question, alice)

    decision = await decision_service.create(
        sample_session, "DB choice", [{"label": "Postgres"}, {"label": "MySQL"}], linked_document=plan
    )
    postgres = decision.options[0]["id"]
    await decision_service.vote(decision, alice, postgres)
    await decision_service.validate(decision, postgres)
    return sample_session


class TestMarkdownExport:
    async def test_should_render_header_and_toc(self, export_service, populated_session) -> None:
        markdown = await export_service.export_to_markdown(populated_session)

        assert markdown.startswith("# Sprint Review\n\nRevue de fin de sprint\n")
        assert "**Statut:** Préparation" in markdown
        assert "## Table des matières" in markdown
        assert "- [Plan](#plan)" in markdown
        assert "  - [Détails](#dtails)" in markdown

    async def test_documents_are_nested_by_heading_level(self, export_service, populated_session) -> None:
        markdown = await export_service.export_to_markdown(populated_session)

        assert "## Documents" in markdown
        assert '<a id="plan"></a>\n## Plan' in markdown
        assert "\n### Détails\n" in markdown
        assert "*Type: Synthèse | " in markdown
        assert markdown.index("## Plan") < markdown.index("### Détails")

    async def test_annotations_render_with_replies(self, export_service, populated_session) -> None:
        markdown = await export_service.export_to_markdown(populated_session)

        assert "#### Annotations" in markdown
        assert "- ❓ **bob** " in markdown
        assert "Pourquoi ce choix ?" in markdown
        assert "  - 💬 **alice** " in markdown
        assert "✅" in markdown

    async def test_decisions_mark_selected_option(self, export_service, populated_session) -> None:
        markdown = await export_service.export_to_markdown(populated_session)

        assert "## Décisions" in markdown
        assert "### ✅ DB choice" in markdown
        assert "**Document lié:** Plan" in markdown
        assert "- **Postgres** (1 vote(s)) ✓ **VALIDÉ**" in markdown
        assert "- **MySQL** (0 vote(s))" in markdown

    async def test_empty_session_has_no_toc_or_decisions(self, export_service, session_service) -> None:
        session = await session_service.create_session("Vide")

        markdown = await export_service.export_to_markdown(session)

        assert "## Table des matières" not in markdown
        assert "## Décisions" not in markdown
        assert "## Documents" in markdown


class TestHtmlExport:
    async def test_should_wrap_converted_markdown(self, export_service, populated_session) -> None:
        page = await export_service.export_to_html(populated_session)

        assert page.startswith("<!DOCTYPE html>")
        assert "<title>Sprint Review - Export Documentation</title>" in page
        assert "<h1>Sprint Review</h1>" in page
        assert '<a id="plan"></a>' in page
        assert "<h2>Plan</h2>" in page
        assert "<strong>plan</strong>" in page
        assert "Exporté depuis Documentation Collaborative le" in page
