"""Per-document error taxonomy.

Every error raised while turning one draft into a post derives from
:class:`DocpressError`.  The batch publisher and the HTTP layer catch the base
class, report the file name and message, and move on to the next document.
"""

from typing import Iterable, Optional, Tuple


class DocpressError(Exception):
    """Base class for failures scoped to a single document."""

    def __init__(self, message: str, file_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.file_name = file_name

    def __str__(self) -> str:
        if self.file_name:
            return f"{self.file_name}: {self.message}"
        return self.message


class RenderError(DocpressError):
    """The .docx file could not be opened or converted."""


class ValidationError(DocpressError):
    """One or more required metadata fields are missing or empty."""

    def __init__(
        self,
        message: str,
        missing: Iterable[str] = (),
        file_name: Optional[str] = None,
    ) -> None:
        super().__init__(message, file_name)
        self.missing: Tuple[str, ...] = tuple(missing)


class BoundaryError(DocpressError):
    """The article body could not be delimited inside the rendered HTML."""


class PersistenceError(DocpressError):
    """Writing to storage failed for a reason other than a duplicate slug."""
