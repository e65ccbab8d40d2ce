"""
Session export.

Renders a whole session (documents tree, annotations, decisions) to
Markdown, and to a standalone HTML page through a small regex-based
Markdown converter.

Dependencies: collabdoc.boundary.db.CRUD
System role: Session export formatting
"""

import html
import logging
import re
from collections import defaultdict
from datetime import datetime, timezone
from uuid import UUID

from collabdoc.application.services.base_service import BaseService
from collabdoc.application.services.decision_service import compute_vote_stats
from collabdoc.boundary.db.base import ensure_utc
from collabdoc.boundary.db.CRUD import (
    annotation_crud,
    decision_crud,
    document_crud,
    participant_crud,
    vote_crud,
)
from collabdoc.boundary.db.models import (
    AnnotationModel,
    AnnotationStatus,
    DecisionModel,
    DocumentModel,
    ParticipantModel,
    SessionModel,
)

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d/%m/%Y %H:%M"
MAX_HEADING_LEVEL = 6

SESSION_STATUS_LABELS = {
    "preparation": "Préparation",
    "en_cours": "En cours",
    "termine": "Terminé",
    "archive": "Archivé",
}
DOCUMENT_TYPE_LABELS = {
    "synthesis": "Synthèse",
    "question": "Question",
    "comparison": "Comparaison",
    "annexe": "Annexe",
    "compte_rendu": "Compte-rendu",
    "general": "Général",
}
DECISION_STATUS_LABELS = {
    "ouvert": "Ouvert",
    "en_discussion": "En discussion",
    "consensus": "Consensus",
    "valide": "Validé",
    "reporte": "Reporté",
}
ANNOTATION_TYPE_ICONS = {
    "comment": "💬",
    "question": "❓",
    "suggestion": "💡",
    "objection": "⚠️",
    "validation": "✅",
}
DECISION_STATUS_ICONS = {
    "ouvert": "🔵",
    "en_discussion": "🟡",
    "consensus": "🟢",
    "valide": "✅",
    "reporte": "🔴",
}

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="fr">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title} - Export Documentation</title>
    <style>
        :root {{
            --primary-color: #2563eb;
            --text-color: #1f2937;
            --muted-color: #6b7280;
            --border-color: #e5e7eb;
            --code-bg: #f3f4f6;
        }}
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Arial, sans-serif;
            line-height: 1.6;
            color: var(--text-color);
            max-width: 900px;
            margin: 0 auto;
            padding: 2rem;
        }}
        h1 {{
            color: var(--primary-color);
            border-bottom: 2px solid var(--primary-color);
            padding-bottom: 0.5rem;
        }}
        h2 {{
            border-bottom: 1px solid var(--border-color);
            padding-bottom: 0.3rem;
            margin-top: 2rem;
        }}
        hr {{
            border: none;
            border-top: 1px solid var(--border-color);
            margin: 2rem 0;
        }}
        a {{ color: var(--primary-color); text-decoration: none; }}
        code {{ background: var(--code-bg); padding: 0.2em 0.4em; border-radius: 3px; }}
        pre {{ background: var(--code-bg); padding: 1rem; border-radius: 6px; overflow-x: auto; }}
        pre code {{ background: none; padding: 0; }}
        em {{ color: var(--muted-color); }}
        @media print {{
            body {{ max-width: none; padding: 1rem; }}
            h1, h2 {{ page-break-after: avoid; }}
            pre {{ page-break-inside: avoid; }}
        }}
    </style>
</head>
<body>
    {content}

    <footer style="margin-top: 3rem; padding-top: 1rem; border-top: 1px solid var(--border-color); color: var(--muted-color); font-size: 0.875rem;">
        <p>Exporté depuis Documentation Collaborative le {exported_at}</p>
    </footer>
</body>
</html>
"""


def format_date(value: datetime | None) -> str:
    value = ensure_utc(value)
    return value.strftime(DATE_FORMAT) if value else ""


def generate_anchor(title: str) -> str:
    """
    Heading anchor: lowercase, only [a-z0-9 -] kept, whitespace runs to '-'.

    >>> generate_anchor("Plan d'action 2024")
    'plan-daction-2024'
    """
    anchor = re.sub(r"[^a-z0-9\s-]", "", title.lower())
    anchor = re.sub(r"\s+", "-", anchor)
    return anchor.strip("-")


def export_filename(title: str, extension: str) -> str:
    """
    Download filename for an export.

    Characters outside [A-Za-z0-9-_ ] are dropped, whitespace becomes '_'
    and the stem is cut to 50 characters.
    """
    stem = re.sub(r"[^a-zA-Z0-9\-_ ]", "", title)
    stem = re.sub(r"\s+", "_", stem)[:50]
    return f"{stem or 'export'}.{extension}"


def markdown_to_html(markdown: str) -> str:
    """
    Convert the Markdown produced by the exporter to an HTML fragment.

    Handles headings, bold/italic, links, rules, fenced and inline code,
    flat lists, the exporter's <a id> anchors and paragraphs. Everything
    else is escaped text.
    """
    text = html.escape(markdown, quote=False)

    code_blocks: list[str] = []

    def _stash(match: re.Match) -> str:
        code_blocks.append(
            f'<pre><code class="language-{match.group(1)}">{match.group(2)}</code></pre>'
        )
        return f"\x00{len(code_blocks) - 1}\x00"

    text = re.sub(r"```(\w*)\n(.*?)```", _stash, text, flags=re.S)
    text = re.sub(r"`([^`\n]+)`", r"<code>\1</code>", text)

    for level in range(6, 0, -1):
        text = re.sub(rf"^{'#' * level} (.+)$", rf"<h{level}>\1</h{level}>", text, flags=re.M)

    text = re.sub(r"\*\*\*(.+?)\*\*\*", r"<strong><em>\1</em></strong>", text, flags=re.S)
    text = re.sub(r"\*\*(.+?)\*\*", r"<strong>\1</strong>", text, flags=re.S)
    text = re.sub(r"\*(.+?)\*", r"<em>\1</em>", text, flags=re.S)

    text = re.sub(r"\[([^\]]+)\]\(([^)]+)\)", r'<a href="\2">\1</a>', text)
    text = re.sub(r"^---$", "<hr>", text, flags=re.M)

    text = re.sub(r"^[ \t]*- (.+)$", r"<li>\1</li>", text, flags=re.M)
    text = re.sub(r"(?:<li>.*</li>\n?)+", lambda m: f"<ul>{m.group(0)}</ul>", text)

    text = re.sub(r'&lt;a id="([^"]+)"&gt;&lt;/a&gt;', r'<a id="\1"></a>', text)

    text = "<p>" + re.sub(r"\n\n+", "</p><p>", text) + "</p>"
    text = re.sub(r"<p>\s*</p>", "", text)
    text = re.sub(r"<p>\s*(<h[1-6]>)", r"\1", text)
    text = re.sub(r"(</h[1-6]>)\s*</p>", r"\1", text)
    text = re.sub(r"<p>\s*<hr>\s*</p>", "<hr>", text)
    text = re.sub(r"<p>\s*(<ul>)", r"\1", text)
    text = re.sub(r"(</ul>)\s*</p>", r"\1", text)
    text = re.sub(r"<p>\s*(<a id=)", r"\1", text)

    text = re.sub(r"<p>\s*\x00(\d+)\x00\s*</p>", lambda m: code_blocks[int(m.group(1))], text)
    return re.sub(r"\x00(\d+)\x00", lambda m: code_blocks[int(m.group(1))], text)


class ExportService(BaseService):
    """Session export to Markdown and HTML."""

    async def export_to_markdown(self, session: SessionModel) -> str:
        """
        Render the session as one Markdown document.

        Sections: header, table of contents, documents (depth-first, with
        root annotations and their direct replies), decisions.
        """
        documents = await document_crud.get_all_by_session(self.db, session.id)
        children: dict[UUID | None, list[DocumentModel]] = defaultdict(list)
        known = {doc.id for doc in documents}
        for doc in documents:
            parent_id = doc.parent_id if doc.parent_id in known else None
            children[parent_id].append(doc)

        annotations = await annotation_crud.get_by_session(self.db, session.id)
        annotations_by_document: dict[UUID, list[AnnotationModel]] = defaultdict(list)
        replies: dict[UUID, list[AnnotationModel]] = {}
        for annotation in annotations:
            annotations_by_document[annotation.document_id].append(annotation)
            replies[annotation.id] = list(await annotation_crud.get_replies(self.db, annotation.id))

        author_ids = [a.author_id for a in annotations]
        author_ids += [r.author_id for thread in replies.values() for r in thread]
        authors = await participant_crud.get_many_by_ids(self.db, author_ids)

        output = [f"# {session.title}", ""]
        if session.description:
            output += [session.description, ""]
        output += [
            f"**Statut:** {SESSION_STATUS_LABELS.get(session.status, session.status)}",
            f"**Créé le:** {format_date(session.created_at)}",
            f"**Dernière mise à jour:** {format_date(session.updated_at)}",
            "",
            "---",
            "",
        ]

        roots = children[None]
        if roots:
            output += ["## Table des matières", ""]
            output += self._table_of_contents(roots, children, 0)
            output += ["", "---", ""]

        output += ["## Documents", ""]
        for document in roots:
            output += self._document_to_markdown(
                document, 2, children, annotations_by_document, replies, authors
            )

        decisions = await decision_crud.get_by_session(self.db, session.id)
        if decisions:
            votes = await vote_crud.get_by_decisions(self.db, [d.id for d in decisions])
            titles = {doc.id: doc.title for doc in documents}
            output += ["---", "", "## Décisions", ""]
            for decision in decisions:
                output += self._decision_to_markdown(
                    decision,
                    compute_vote_stats(decision, votes.get(decision.id, [])),
                    titles.get(decision.linked_document_id),
                )

        logger.info(
            "Session exported",
            extra={
                "session_id": str(session.id),
                "documents": len(documents),
                "decisions": len(decisions),
            },
        )
        return "\n".join(output)

    async def export_to_html(self, session: SessionModel) -> str:
        """Markdown export converted to HTML and wrapped in a standalone page."""
        content = markdown_to_html(await self.export_to_markdown(session))
        return HTML_TEMPLATE.format(
            title=html.escape(session.title),
            content=content,
            exported_at=datetime.now(timezone.utc).strftime("%d/%m/%Y à %H:%M"),
        )

    def _table_of_contents(
        self,
        documents: list[DocumentModel],
        children: dict[UUID | None, list[DocumentModel]],
        level: int,
    ) -> list[str]:
        lines = []
        for document in documents:
            lines.append(f"{'  ' * level}- [{document.title}](#{generate_anchor(document.title)})")
            lines += self._table_of_contents(children.get(document.id, []), children, level + 1)
        return lines

    def _document_to_markdown(
        self,
        document: DocumentModel,
        heading_level: int,
        children: dict[UUID | None, list[DocumentModel]],
        annotations: dict[UUID, list[AnnotationModel]],
        replies: dict[UUID, list[AnnotationModel]],
        authors: dict[UUID, ParticipantModel],
    ) -> list[str]:
        doc_type = DOCUMENT_TYPE_LABELS.get(document.type, document.type)
        lines = [
            f'<a id="{generate_anchor(document.title)}"></a>',
            f"{'#' * heading_level} {document.title}",
            "",
            f"*Type: {doc_type} | ",
            f"Version: {document.current_version} | ",
            f"Mis à jour: {format_date(document.updated_at)}*",
            "",
        ]
        if document.content:
            lines += [document.content, ""]

        roots = annotations.get(document.id, [])
        if roots:
            lines += ["#### Annotations", ""]
            for annotation in roots:
                lines += self._annotation_to_markdown(annotation, 0, authors)
                for reply in replies.get(annotation.id, []):
                    lines += self._annotation_to_markdown(reply, 1, authors)
            lines.append("")

        for child in children.get(document.id, []):
            lines += self._document_to_markdown(
                child,
                min(heading_level + 1, MAX_HEADING_LEVEL),
                children,
                annotations,
                replies,
                authors,
            )
        return lines

    @staticmethod
    def _annotation_to_markdown(
        annotation: AnnotationModel,
        depth: int,
        authors: dict[UUID, ParticipantModel],
    ) -> list[str]:
        indent = "  " * depth
        icon = ANNOTATION_TYPE_ICONS.get(annotation.type, "📝")
        badge = " ✅" if annotation.status == AnnotationStatus.RESOLVED.value else ""
        author = authors.get(annotation.author_id)
        pseudo = author.pseudo if author else "?"
        content = (annotation.content or "").replace("\n", f"\n{indent}  ")
        return [
            f"{indent}- {icon} **{pseudo}** ",
            f"{indent}  *({format_date(annotation.created_at)})*{badge}",
            f"{indent}  ",
            f"{indent}  {content}",
        ]

    @staticmethod
    def _decision_to_markdown(
        decision: DecisionModel,
        vote_stats: dict[str, int],
        document_title: str | None,
    ) -> list[str]:
        icon = DECISION_STATUS_ICONS.get(decision.status, "⚪")
        lines = [
            f"### {icon} {decision.title}",
            "",
            f"**Statut:** {DECISION_STATUS_LABELS.get(decision.status, decision.status)}",
        ]
        if document_title:
            lines.append(f"**Document lié:** {document_title}")
        lines.append("")
        if decision.description:
            lines += [decision.description, ""]

        lines += ["**Options:**", ""]
        for option in decision.options or []:
            selected = " ✓ **VALIDÉ**" if option["id"] == decision.selected_option_id else ""
            lines.append(f"- **{option['label']}** ({vote_stats.get(option['id'], 0)} vote(s)){selected}")
            if option.get("description"):
                lines.append(f"  {option['description']}")
        lines.append("")
        return lines
