"""
Test suite for export formatting helpers.

System role: Verification of anchors, filenames and the Markdown to HTML converter
"""

import pytest

from collabdoc.application.services.export_service import (
    export_filename,
    generate_anchor,
    markdown_to_html,
)


class TestGenerateAnchor:
    @pytest.mark.parametrize(
        "title, expected",
        [
            ("Plan", "plan"),
            ("Choix de la BDD", "choix-de-la-bdd"),
            ("Plan d'action 2024", "plan-daction-2024"),
            ("  Espaces   multiples  ", "espaces-multiples"),
        ],
    )
    def test_should_build_anchor(self, title: str, expected: str) -> None:
        assert generate_anchor(title) == expected


class TestExportFilename:
    def test_should_drop_special_characters_and_underscore_spaces(self) -> None:
        assert export_filename("Sprint Review: Q1/2024", "md") == "Sprint_Review_Q12024.md"

    def test_should_truncate_stem_to_fifty_characters(self) -> None:
        assert export_filename("a" * 80, "html") == "a" * 50 + ".html"

    def test_empty_stem_should_fall_back_to_export(self) -> None:
        assert export_filename("???", "md") == "export.md"


class TestMarkdownToHtml:
    def test_heading_should_not_be_wrapped_in_paragraph(self) -> None:
        assert markdown_to_html("# Titre") == "<h1>Titre</h1>"

    def test_should_render_bold_and_italic(self) -> None:
        result = markdown_to_html("**gras** et *italique*")

        assert result == "<p><strong>gras</strong> et <em>italique</em></p>"

    def test_should_escape_raw_html(self) -> None:
        result = markdown_to_html("<script>alert(1)</script>")

        assert "<script>" not in result
        assert "&lt;script&gt;" in result

    def test_should_group_list_items(self) -> None:
        result = markdown_to_html("- un\n- deux")

        assert result.startswith("<ul><li>un</li>")
        assert result.endswith("<li>deux</li></ul>")

    def test_should_keep_exporter_anchors(self) -> None:
        result = markdown_to_html('<a id="plan"></a>\n## Plan')

        assert '<a id="plan"></a>' in result
        assert "<h2>Plan</h2>" in result

    def test_should_render_links(self) -> None:
        assert '<a href="#plan">Plan</a>' in markdown_to_html("[Plan](#plan)")

    def test_fenced_code_should_be_left_untouched(self) -> None:
        result = markdown_to_html("```python\nx = 1 * 2 * 3\n```")

        assert result == '<pre><code class="language-python">x = 1 * 2 * 3\n</code></pre>'

    def test_inline_code(self) -> None:
        assert "<code>pip install</code>" in markdown_to_html("Lancer `pip install`")

    def test_horizontal_rule_between_paragraphs(self) -> None:
        assert markdown_to_html("a\n\n---\n\nb") == "<p>a</p><hr><p>b</p>"
