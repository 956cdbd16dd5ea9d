"""End-to-end tests: .docx draft in, publishable record out."""

import pytest

from docpress.config import default_link_rules
from docpress.errors import BoundaryError, ValidationError
from docpress.models.document import RawDocument
from docpress.services.pipeline import extract, extract_file

from conftest import SLUG, TITLE, build_draft, to_bytes

_BASE = "https://medicly.com.au"
_RULES = default_link_rules(_BASE)


class TestExtractFile:
    def test_metadata(self, draft_path):
        result = extract_file(draft_path, _RULES)
        assert result.title == TITLE
        assert result.author == "By Dr. Gurbakhshish Singh"
        assert result.slug == SLUG
        assert result.meta_title == "Online Medical Certificates | Medicly"
        assert result.meta_description == (
            "Get a valid medical certificate from an Australian doctor in minutes."
        )
        assert result.keywords == "medical certificate, online doctor"

    def test_content_starts_after_title(self, draft_path):
        content = extract_file(draft_path, _RULES).content
        assert content.startswith("<p>Medically reviewed by Dr. Jane Citizen, MBBS</p>")
        assert "<h1>" not in content
        assert "Draft v3" not in content
        assert "By Dr. Gurbakhshish Singh" not in content

    def test_content_ends_before_disclaimer_and_seo_block(self, draft_path):
        content = extract_file(draft_path, _RULES).content
        assert content.endswith("</strong></p>")
        assert "Always consult" not in content
        assert "Meta Title" not in content
        assert "URL Slug" not in content

    def test_article_structure_is_kept(self, draft_path):
        content = extract_file(draft_path, _RULES).content
        assert "<h2>Why you might need one</h2>" in content
        assert (
            "<ul><li>Keep a copy for your records</li><li>Send it to your manager</li></ul>"
            in content
        )

    def test_internal_links_are_added(self, draft_path):
        content = extract_file(draft_path, _RULES).content
        assert f'medical <a href="{_BASE}/certificates">certificates</a> after' in content
        assert f'<a href="{_BASE}/doctor-consultation">online doctor consultation</a>' in content

    def test_call_to_action_is_tagged(self, draft_path):
        content = extract_file(draft_path, _RULES).content
        assert (
            f'<p><strong><a href="{_BASE}/certificates" class="blog_cta">'
            "Get your certificate now</a></strong></p>"
        ) in content

    def test_without_rules_no_links_are_added(self, draft_path):
        content = extract_file(draft_path).content
        assert "doctor-consultation" not in content

    def test_extraction_is_deterministic(self, draft_bytes):
        first = extract_file(draft_bytes, _RULES, name="a.docx")
        second = extract_file(draft_bytes, _RULES, name="a.docx")
        assert first == second

    def test_seo_block_without_disclaimer(self):
        result = extract_file(to_bytes(build_draft(disclaimer=False)), _RULES)
        assert "SEO &amp; Meta Details" not in result.content
        assert result.content.endswith("</strong></p>")


class TestExtractFailures:
    def test_missing_seo_block(self):
        with pytest.raises(ValidationError) as exc_info:
            extract_file(to_bytes(build_draft(seo_lines=())), name="no-seo.docx")
        assert exc_info.value.missing == ("slug", "meta_title")
        assert exc_info.value.file_name == "no-seo.docx"

    def test_title_not_in_html(self):
        document = RawDocument(
            name="odd.docx",
            lines=("A Sufficiently Long Post Title", "Body.", "Slug: s", "Meta Title: T"),
            html="<h1>Something Else</h1><p>Body.</p><p>Slug: s</p><p>Meta Title: T</p>",
        )
        with pytest.raises(BoundaryError) as exc_info:
            extract(document)
        assert exc_info.value.file_name == "odd.docx"

    def test_body_with_no_text(self):
        document = RawDocument(
            name="empty.docx",
            lines=("A Sufficiently Long Post Title", "Slug: s", "Meta Title: T"),
            html=(
                "<h1>A Sufficiently Long Post Title</h1><p><strong> </strong></p>"
                "<p>Slug: s</p><p>Meta Title: T</p>"
            ),
        )
        with pytest.raises(BoundaryError):
            extract(document)
