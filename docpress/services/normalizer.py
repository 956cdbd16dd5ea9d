"""Data normalisation utilities: slug clean-up, frontmatter, Markdown export."""

import re
import unicodedata
from typing import Optional
from urllib.parse import urlparse

from markdownify import markdownify

from docpress.models.post import ExtractionResult


def normalize_slug(value: str) -> str:
    """Turn an author-supplied slug into a clean URL slug.

    Authors write slugs as ``my-post``, ``/blog/my-post/`` or a full URL; the
    last path segment is kept.  The result is lowercased, ASCII-only, and uses
    hyphens as separators.  Returns ``""`` when nothing usable is left.
    """
    value = value.strip().strip("`'\"")
    parsed = urlparse(value)
    path = parsed.path if parsed.scheme or parsed.netloc else value
    segments = [segment for segment in path.split("/") if segment.strip()]
    slug_base = segments[-1] if segments else ""

    # Normalise unicode, keep only ASCII
    slug = unicodedata.normalize("NFKD", slug_base)
    slug = slug.encode("ascii", "ignore").decode("ascii")

    # Lowercase and replace runs of non-alphanumeric chars with a single hyphen
    slug = re.sub(r"[^a-z0-9]+", "-", slug.lower())
    return slug.strip("-")


def make_frontmatter(
    title: str,
    description: str,
    slug: str,
    author: Optional[str] = None,
    keywords: Optional[str] = None,
) -> str:
    """Return a YAML frontmatter block for use in Markdown files."""
    lines = [
        "---",
        f'title: "{_escape_yaml(title)}"',
        f'description: "{_escape_yaml(description)}"',
        f'slug: "{slug}"',
    ]
    if author:
        lines.append(f'author: "{_escape_yaml(author)}"')
    if keywords:
        lines.append(f'keywords: "{_escape_yaml(keywords)}"')
    lines.append("---")
    return "\n".join(lines)


def to_markdown(result: ExtractionResult) -> str:
    """Render *result* as a Markdown file: frontmatter followed by the body."""
    frontmatter = make_frontmatter(
        result.meta_title,
        result.meta_description or "",
        result.slug,
        author=result.author,
        keywords=result.keywords,
    )
    body = markdownify(result.content, heading_style="ATX").strip()
    return f"{frontmatter}\n\n# {result.title}\n\n{body}\n" if body else f"{frontmatter}\n"


def _escape_yaml(value: str) -> str:
    """Escape characters that would break inline double-quoted YAML strings."""
    return value.replace("\\", "\\\\").replace('"', '\\"')
