"""Campaign lookup.

Each campaign is a JSON file named ``<id>.json`` holding at least ``id``,
``name`` and ``description``. Files are read on demand so that new
campaigns appear without a restart.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from dnd_engine.content.loader import json_files, read_json
from dnd_engine.core.exceptions import ContentError
from dnd_engine.core.logging import get_logger
from dnd_engine.models.campaign import Campaign


logger = get_logger(__name__)


class CampaignLibrary:
    """Read-only access to the campaigns directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def _load(self, path: Path) -> Campaign | None:
        try:
            return Campaign.model_validate(read_json(path))
        except ContentError as exc:
            logger.warning("Failed to load campaign", error=str(exc))
        except PydanticValidationError as exc:
            logger.warning("Invalid campaign file", source_file=str(path), errors=exc.error_count())
        return None

    def list_campaigns(self) -> list[dict[str, str]]:
        """Summaries of every readable campaign file."""
        summaries = []
        for path in json_files(self.directory):
            campaign = self._load(path)
            if campaign is not None:
                summaries.append(campaign.summary())
        return summaries

    def get_campaign(self, campaign_id: str) -> Campaign | None:
        """Load a campaign by id, or None if there is no such file."""
        path = self.directory / f"{campaign_id}.json"
        # ids come from clients; refuse anything that escapes the directory
        if path.parent.resolve() != self.directory.resolve() or not path.is_file():
            return None
        return self._load(path)


__all__ = ["CampaignLibrary"]
