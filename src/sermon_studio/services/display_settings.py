"""Persisted presentation display settings."""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from sermon_studio.domain.presentation import DEFAULT_SETTINGS, PresentationSettings

SETTINGS_KEY = "presentation-settings"

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """String key-value storage."""

    def get_item(self, key: str) -> str | None:
        """Return the stored value for a key, if any."""

    def set_item(self, key: str, value: str) -> None:
        """Store a value under a key."""


@dataclass
class DisplaySettingsService:
    """Loads and saves display settings as a JSON blob under a fixed key."""

    storage: KeyValueStore
    key: str = SETTINGS_KEY

    def load(self) -> PresentationSettings:
        """Return stored settings merged over the defaults.

        Fields missing from the stored blob (for example ones added after it
        was written) take their default values. Unreadable blobs yield the
        defaults.
        """
        try:
            raw = self.storage.get_item(self.key)
        except OSError:
            _logger.exception("Error reading presentation settings")
            return DEFAULT_SETTINGS
        if raw is None:
            return DEFAULT_SETTINGS
        try:
            stored = json.loads(raw)
            return PresentationSettings.model_validate(stored)
        except (ValueError, ValidationError):
            _logger.exception("Error loading presentation settings")
            return DEFAULT_SETTINGS

    def save(self, settings: PresentationSettings) -> None:
        """Persist the full settings object."""
        payload = json.dumps(settings.model_dump(mode="json", by_alias=True))
        try:
            self.storage.set_item(self.key, payload)
        except OSError:
            _logger.exception("Error saving presentation settings")

    def update(self, changes: Mapping[str, object]) -> PresentationSettings:
        """Apply camelCase changes over the current settings and persist them."""
        current = self.load().model_dump(by_alias=True)
        merged = PresentationSettings.model_validate({**current, **changes})
        self.save(merged)
        return merged
