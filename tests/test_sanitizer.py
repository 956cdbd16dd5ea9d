"""Tests for sanitizer.sanitize_body."""

from docpress.services.sanitizer import sanitize_body


class TestSanitizeBody:
    def test_removes_script_tags(self):
        result = sanitize_body("<p>Text</p><script>alert('xss')</script>")
        assert "alert" not in result
        assert "<p>Text</p>" in result

    def test_removes_style_tags(self):
        result = sanitize_body("<style>body { color: red; }</style><p>Text</p>")
        assert "color" not in result

    def test_removes_iframe_tags(self):
        result = sanitize_body('<p>Hello</p><iframe src="https://example.com"></iframe>')
        assert "iframe" not in result
        assert "Hello" in result

    def test_removes_html_comments(self):
        result = sanitize_body("<p>Visible</p><!-- reviewer note -->")
        assert "reviewer note" not in result

    def test_strips_inline_style_attribute(self):
        result = sanitize_body('<p style="color:red;font-size:14px">Styled text</p>')
        assert result == "<p>Styled text</p>"

    def test_strips_event_handler_attributes(self):
        result = sanitize_body('<p><a href="/page" onclick="doSomething()">Link</a></p>')
        assert "onclick" not in result
        assert 'href="/page"' in result

    def test_unwraps_javascript_links(self):
        result = sanitize_body('<p><a href="javascript:alert(1)">Click</a></p>')
        assert result == "<p>Click</p>"

    def test_drops_empty_paragraphs(self):
        result = sanitize_body("<p>One</p><p>  </p><p><strong></strong></p><p>Two</p>")
        assert result == "<p>One</p><p>Two</p>"

    def test_drops_list_left_empty(self):
        result = sanitize_body("<ul><li> </li></ul><p>Text</p>")
        assert result == "<p>Text</p>"

    def test_keeps_line_breaks_and_images(self):
        result = sanitize_body('<p><br/></p><p><img src="a.png"/></p>')
        assert "<br/>" in result
        assert '<img src="a.png"/>' in result

    def test_balances_cut_fragment(self):
        # Fragments cut by string offsets can start with a stray closing tag
        result = sanitize_body("</h1><p>Body <strong>text</strong></p><p>")
        assert result == "<p>Body <strong>text</strong></p>"

    def test_normal_content_preserved(self):
        html = "<h2>Heading</h2><p>Paragraph <strong>bold</strong> and <em>italic</em>.</p>"
        assert sanitize_body(html) == html

    def test_is_idempotent(self):
        html = '<p style="x">A &amp; B</p><p></p><ul><li>one</li></ul>'
        once = sanitize_body(html)
        assert sanitize_body(once) == once

    def test_empty_input(self):
        assert sanitize_body("") == ""
