"""Shared fixtures: .docx drafts built with python-docx."""

import io
import os
import tempfile

# Keep the failure log out of the working tree while tests run
os.environ.setdefault(
    "ERROR_LOG_FILE", os.path.join(tempfile.gettempdir(), "docpress-test-error.log")
)

import pytest
from docx import Document
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.oxml import OxmlElement
from docx.oxml.ns import qn

TITLE = "How to Get a Medical Certificate Online"
SLUG = "how-to-get-a-medical-certificate-online"


def add_hyperlink(paragraph, url: str, text: str, bold: bool = False) -> None:
    """Append an external hyperlink run to *paragraph*."""
    r_id = paragraph.part.relate_to(url, RT.HYPERLINK, is_external=True)
    hyperlink = OxmlElement("w:hyperlink")
    hyperlink.set(qn("r:id"), r_id)
    run = OxmlElement("w:r")
    if bold:
        r_pr = OxmlElement("w:rPr")
        r_pr.append(OxmlElement("w:b"))
        run.append(r_pr)
    text_el = OxmlElement("w:t")
    text_el.text = text
    run.append(text_el)
    hyperlink.append(run)
    paragraph._p.append(hyperlink)


def to_bytes(document) -> bytes:
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def build_draft(
    title: str = TITLE,
    seo_lines=(
        "SEO & Meta Details for Blog Post:",
        "URL Slug: /how-to-get-a-medical-certificate-online",
        "Meta Title: Online Medical Certificates | Medicly",
        "Meta Description: Get a valid medical certificate",
        "from an Australian doctor in minutes.",
        "Primary Keywords: medical certificate, online doctor",
    ),
    disclaimer: bool = True,
):
    """A realistic author draft: preamble, byline, title, article, SEO block."""
    doc = Document()
    doc.add_paragraph("Draft v3")
    doc.add_paragraph("By Dr. Gurbakhshish Singh")
    doc.add_heading(title, level=1)
    doc.add_paragraph("Medically reviewed by Dr. Jane Citizen, MBBS")
    doc.add_heading("Why you might need one", level=2)
    doc.add_paragraph(
        "Employers often ask for medical certificates after a sick day. "
        "An online doctor consultation is the quickest route."
    )
    doc.add_paragraph("Keep a copy for your records", style="List Bullet")
    doc.add_paragraph("Send it to your manager", style="List Bullet")
    cta = doc.add_paragraph()
    add_hyperlink(cta, "https://medicly.com.au/certificates", "Get your certificate now", bold=True)
    if disclaimer:
        doc.add_paragraph("Always consult your healthcare provider for personal medical concerns.")
    for line in seo_lines:
        doc.add_paragraph(line)
    return doc


@pytest.fixture
def draft_bytes() -> bytes:
    return to_bytes(build_draft())


@pytest.fixture
def draft_path(tmp_path, draft_bytes):
    path = tmp_path / "certificate-post.docx"
    path.write_bytes(draft_bytes)
    return path
