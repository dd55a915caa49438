"""Tests for session ids and live URLs."""

import re
from unittest.mock import patch

from sermon_studio.services.live_sessions import (
    NOTES_PREFIX,
    SERMON_PREFIX,
    LiveUrlBuilder,
    generate_session_id,
)

SESSION_ID_PATTERN = re.compile(r"^(notes|live)-\d+-[0-9a-z]{9}$")


def test_session_ids_have_prefix_millis_and_suffix() -> None:
    notes_id = generate_session_id(NOTES_PREFIX)
    sermon_id = generate_session_id(SERMON_PREFIX)

    assert SESSION_ID_PATTERN.match(notes_id)
    assert SESSION_ID_PATTERN.match(sermon_id)
    assert notes_id.startswith("notes-")
    assert sermon_id.startswith("live-")


def test_ids_generated_in_the_same_millisecond_differ() -> None:
    with patch(
        "sermon_studio.services.live_sessions.time.time_ns",
        return_value=1_700_000_000_000_000_000,
    ):
        ids = {generate_session_id() for _ in range(50)}

    assert len(ids) == 50
    assert all(session_id.startswith("notes-1700000000000-") for session_id in ids)


def test_url_builder_strips_trailing_slashes() -> None:
    builder = LiveUrlBuilder("https://sermons.example.org//")

    urls = builder.sermon_urls("live-1-abc")

    assert urls.audience_url == "https://sermons.example.org/present/live-1-abc"
    assert urls.presenter_url == "https://sermons.example.org/presenter/live-1-abc"
    assert builder.notes_audience_url("notes-1-abc") == (
        "https://sermons.example.org/notes/live/notes-1-abc"
    )
