"""Session ids and shareable URLs for live presentations.

Session ids only need to be unique in practice; they are not secrets and
anyone holding an audience URL can join.
"""

import random
import string
import time
from dataclasses import dataclass

NOTES_PREFIX = "notes"
SERMON_PREFIX = "live"

_SUFFIX_ALPHABET = string.digits + string.ascii_lowercase
_SUFFIX_LENGTH = 9


def generate_session_id(prefix: str = NOTES_PREFIX) -> str:
    """Return a new id made of the current epoch millis and a random suffix."""
    millis = time.time_ns() // 1_000_000
    suffix = "".join(random.choices(_SUFFIX_ALPHABET, k=_SUFFIX_LENGTH))  # noqa: S311
    return f"{prefix}-{millis}-{suffix}"


@dataclass(frozen=True)
class SermonSessionUrls:
    """Audience and presenter URLs for one sermon session."""

    session_id: str
    audience_url: str
    presenter_url: str


@dataclass(frozen=True)
class LiveUrlBuilder:
    """Builds path-addressed session URLs from the public base URL."""

    base_url: str

    def _base(self) -> str:
        return self.base_url.rstrip("/")

    def notes_audience_url(self, session_id: str) -> str:
        return f"{self._base()}/notes/live/{session_id}"

    def sermon_audience_url(self, session_id: str) -> str:
        return f"{self._base()}/present/{session_id}"

    def sermon_presenter_url(self, session_id: str) -> str:
        return f"{self._base()}/presenter/{session_id}"

    def sermon_urls(self, session_id: str) -> SermonSessionUrls:
        """Return both sermon URLs for a session."""
        return SermonSessionUrls(
            session_id=session_id,
            audience_url=self.sermon_audience_url(session_id),
            presenter_url=self.sermon_presenter_url(session_id),
        )
