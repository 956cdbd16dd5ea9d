"""Reads a .docx draft into its two renderings: text lines and HTML.

The HTML follows a small, fixed style map:

* ``Heading 1`` .. ``Heading 4`` -> ``<h1>`` .. ``<h4>``
* ``List Bullet*`` -> ``<ul><li>``, ``List Number*`` -> ``<ol><li>``; other numbered
  paragraphs follow their numbering format (bullets unordered, anything else ordered)
* everything else -> ``<p>``

Inline runs keep bold (``<strong>``), italic (``<em>``), hyperlinks and line
breaks.  Empty paragraphs are skipped.
"""

import html as html_lib
import io
import logging
from itertools import groupby
from pathlib import Path
from typing import BinaryIO, Iterator, List, NamedTuple, Optional, Union
from zipfile import BadZipFile

from docx import Document
from docx.document import Document as DocumentObject
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.opc.exceptions import PackageNotFoundError
from docx.table import Table, _Cell
from docx.text.hyperlink import Hyperlink
from docx.text.paragraph import Paragraph
from lxml.etree import XMLSyntaxError

from docpress.errors import RenderError
from docpress.models.document import RawDocument

logger = logging.getLogger(__name__)

DocumentSource = Union[str, Path, bytes, BinaryIO]

_HEADING_TAGS = {
    "Heading 1": "h1",
    "Heading 2": "h2",
    "Heading 3": "h3",
    "Heading 4": "h4",
}


class _Segment(NamedTuple):
    text: str
    bold: bool
    italic: bool
    href: Optional[str]


def _style_name(paragraph: Paragraph) -> str:
    style = paragraph.style
    return style.name if style is not None and style.name else ""


def _list_kind(paragraph: Paragraph) -> Optional[str]:
    name = _style_name(paragraph)
    if name.startswith("List Number"):
        return "ol"
    if name.startswith("List Bullet"):
        return "ul"
    p_pr = paragraph._p.pPr
    if p_pr is not None and p_pr.numPr is not None:
        return "ul" if _number_format(paragraph, p_pr.numPr) in (None, "bullet") else "ol"
    return None


def _number_format(paragraph: Paragraph, num_pr) -> Optional[str]:
    """The ``w:numFmt`` of the paragraph's list level, e.g. ``decimal`` or ``bullet``."""
    if num_pr.numId is None:
        return None
    try:
        numbering = paragraph.part.part_related_by(RT.NUMBERING).element
    except KeyError:
        return None

    num_id = num_pr.numId.val
    ilvl = num_pr.ilvl.val if num_pr.ilvl is not None else 0
    abstract_ids = numbering.xpath(f'./w:num[@w:numId="{num_id}"]/w:abstractNumId/@w:val')
    if not abstract_ids:
        return None
    formats = numbering.xpath(
        f'./w:abstractNum[@w:abstractNumId="{abstract_ids[0]}"]'
        f'/w:lvl[@w:ilvl="{ilvl}"]/w:numFmt/@w:val'
    )
    return formats[0] if formats else None


def _segments(paragraph: Paragraph) -> List[_Segment]:
    segments: List[_Segment] = []
    for item in paragraph.iter_inner_content():
        if isinstance(item, Hyperlink):
            href = item.url or None
            for run in item.runs:
                segments.append(_Segment(run.text, bool(run.bold), bool(run.italic), href))
        else:
            segments.append(_Segment(item.text, bool(item.bold), bool(item.italic), None))

    # Word splits text into runs freely; merge neighbours with equal formatting
    merged: List[_Segment] = []
    for segment in segments:
        if not segment.text:
            continue
        if merged and merged[-1][1:] == segment[1:]:
            merged[-1] = merged[-1]._replace(text=merged[-1].text + segment.text)
        else:
            merged.append(segment)
    return merged


def _format(text: str, bold: bool, italic: bool) -> str:
    markup = html_lib.escape(text, quote=False).replace("\n", "<br />")
    if italic:
        markup = f"<em>{markup}</em>"
    if bold:
        markup = f"<strong>{markup}</strong>"
    return markup


def _render_inline(paragraph: Paragraph) -> str:
    parts: List[str] = []
    for href, group in groupby(_segments(paragraph), key=lambda segment: segment.href):
        group = list(group)
        if href is None:
            parts.extend(_format(s.text, s.bold, s.italic) for s in group)
            continue
        # A fully bold link renders as <strong><a>..</a></strong>
        all_bold = all(s.bold for s in group)
        inner = "".join(_format(s.text, s.bold and not all_bold, s.italic) for s in group)
        anchor = f'<a href="{html_lib.escape(href, quote=True)}">{inner}</a>'
        parts.append(f"<strong>{anchor}</strong>" if all_bold else anchor)
    return "".join(parts)


def _unique_cells(table: Table) -> Iterator[List[_Cell]]:
    """Yield each row's cells with horizontally merged cells reported once."""
    for row in table.rows:
        seen: set = set()
        cells: List[_Cell] = []
        for cell in row.cells:
            if id(cell._tc) not in seen:
                seen.add(id(cell._tc))
                cells.append(cell)
        yield cells


def _render_table(table: Table) -> str:
    rows: List[str] = []
    for cells in _unique_cells(table):
        rendered = []
        for cell in cells:
            inner = "".join(
                f"<p>{_render_inline(p)}</p>" for p in cell.paragraphs if p.text.strip()
            )
            rendered.append(f"<td>{inner}</td>")
        rows.append(f"<tr>{''.join(rendered)}</tr>")
    return f"<table>{''.join(rows)}</table>"


def render_html(document: DocumentObject) -> str:
    """Render the body of *document* as an HTML fragment."""
    blocks: List[str] = []
    open_list: Optional[str] = None

    for item in document.iter_inner_content():
        if isinstance(item, Paragraph) and not item.text.strip():
            continue

        kind = _list_kind(item) if isinstance(item, Paragraph) else None
        if kind != open_list:
            if open_list:
                blocks.append(f"</{open_list}>")
            if kind:
                blocks.append(f"<{kind}>")
            open_list = kind

        if isinstance(item, Table):
            blocks.append(_render_table(item))
        elif kind:
            blocks.append(f"<li>{_render_inline(item)}</li>")
        else:
            tag = _HEADING_TAGS.get(_style_name(item), "p")
            blocks.append(f"<{tag}>{_render_inline(item)}</{tag}>")

    if open_list:
        blocks.append(f"</{open_list}>")
    return "".join(blocks)


def render_text_lines(document: DocumentObject) -> List[str]:
    """Plain text of *document*, one entry per paragraph line, in document order."""
    lines: List[str] = []
    for item in document.iter_inner_content():
        if isinstance(item, Paragraph):
            lines.extend(item.text.splitlines() or [""])
            continue
        for cells in _unique_cells(item):
            for cell in cells:
                for paragraph in cell.paragraphs:
                    lines.extend(paragraph.text.splitlines() or [""])
    return lines


def _source_name(source: DocumentSource, name: Optional[str]) -> str:
    if name:
        return name
    if isinstance(source, (str, Path)):
        return Path(source).name
    stream_name = getattr(source, "name", None)
    return Path(stream_name).name if isinstance(stream_name, str) else "<upload>"


def render_document(source: DocumentSource, name: Optional[str] = None) -> RawDocument:
    """Open a .docx file (path, bytes or binary file object) and render it.

    Raises:
        RenderError: if *source* is missing, not a zip archive, or not a Word
            document.
    """
    file_name = _source_name(source, name)
    stream = io.BytesIO(source) if isinstance(source, bytes) else source
    if isinstance(stream, Path):
        stream = str(stream)

    try:
        document = Document(stream)
        lines = render_text_lines(document)
        html = render_html(document)
    except (PackageNotFoundError, BadZipFile, KeyError, ValueError, XMLSyntaxError) as exc:
        raise RenderError(f"Could not read the document: {exc}", file_name=file_name) from exc

    logger.debug("Rendered %s: %d lines, %d HTML chars", file_name, len(lines), len(html))
    return RawDocument(name=file_name, lines=tuple(lines), html=html)
