"""
Campaign content loading and download.

Reads authored campaign content (JSON or YAML) from a content directory
and downloads missing campaigns from a content server with local caching.

Directory layout::

    {content_dir}/
        campaigns/{campaign_id}.json   - FullCampaign (or .yaml/.yml)
        campaigns/side.json            - side-scenario pool (optional)
        logs/{campaign_id}.json        - CampaignLogText (optional)
        errata.json                    - Errata (optional)
        encounter_sets.json            - {code: name} (optional)
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import httpx
import yaml
from pydantic import BaseModel, ValidationError

from .campaign_guide import CampaignGuide
from .models import Campaign, CampaignLogText, Errata, FullCampaign

logger = logging.getLogger("guided-campaign")

SUPPORTED_EXTENSIONS = (".json", ".yaml", ".yml")
SIDE_CAMPAIGN_ID = "side"
DEFAULT_TIMEOUT = 30.0
MAX_RETRIES = 3
RETRY_BACKOFF = 2.0


class CampaignContentError(Exception):
    """Error reading, parsing or downloading campaign content."""

    pass


def _read_document(path: Path) -> Any:
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise CampaignContentError(
            f"Unsupported file format: {suffix}. Supported: {', '.join(SUPPORTED_EXTENSIONS)}"
        )
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CampaignContentError(f"Failed to read file: {e}") from e
    try:
        if suffix == ".json":
            return json.loads(raw)
        return yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise CampaignContentError(f"Failed to parse {path.name}: {e}") from e


def _load_model(path: Path, model: type[BaseModel]) -> Any:
    data = _read_document(path)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise CampaignContentError(f"Invalid content in {path.name}: {e}") from e


def _find_document(directory: Path, stem: str) -> Path | None:
    for suffix in SUPPORTED_EXTENSIONS:
        candidate = directory / f"{stem}{suffix}"
        if candidate.exists():
            return candidate
    return None


def load_full_campaign(path: Path) -> FullCampaign:
    return _load_model(Path(path), FullCampaign)


def load_errata(path: Path) -> Errata:
    return _load_model(Path(path), Errata)


def load_campaign_log_text(path: Path) -> CampaignLogText:
    return _load_model(Path(path), CampaignLogText)


def load_campaign_guide(content_dir: Path, campaign_id: str) -> CampaignGuide:
    """Wire a CampaignGuide from a content directory.

    Raises:
        CampaignContentError: If the campaign file is missing or invalid.
    """
    content_dir = Path(content_dir)
    campaigns_dir = content_dir / "campaigns"
    campaign_path = _find_document(campaigns_dir, campaign_id)
    if campaign_path is None:
        raise CampaignContentError(f"Campaign '{campaign_id}' not found in {campaigns_dir}")
    campaign = load_full_campaign(campaign_path)

    side_path = _find_document(campaigns_dir, SIDE_CAMPAIGN_ID)
    if side_path is not None:
        side_campaign = load_full_campaign(side_path)
    else:
        logger.debug("No side-scenario pool found, using an empty one")
        side_campaign = FullCampaign(campaign=Campaign(id=SIDE_CAMPAIGN_ID, name="Side Scenarios"))

    log_path = _find_document(content_dir / "logs", campaign_id)
    log = (
        load_campaign_log_text(log_path)
        if log_path is not None
        else CampaignLogText(campaign_id=campaign_id)
    )

    errata_path = _find_document(content_dir, "errata")
    errata = load_errata(errata_path) if errata_path is not None else Errata()

    encounter_sets: dict[str, str] = {}
    encounter_path = _find_document(content_dir, "encounter_sets")
    if encounter_path is not None:
        data = _read_document(encounter_path)
        if not isinstance(data, dict):
            raise CampaignContentError("encounter_sets must map codes to names")
        encounter_sets = {str(k): str(v) for k, v in data.items()}

    logger.info(
        f"Loaded campaign '{campaign.campaign.name}' v{campaign.campaign.version} "
        f"({len(campaign.scenarios)} scenarios, {len(side_campaign.scenarios)} side scenarios)"
    )
    return CampaignGuide(campaign, log, encounter_sets, side_campaign, errata)


class CampaignContentFetcher:
    """Downloads campaign content on demand and caches it under ``content_dir``.

    Args:
        content_dir: Content directory the downloaded files are written to.
        base_url: Content server root; campaigns live at
            ``{base_url}/campaigns/{campaign_id}.json``.
    """

    def __init__(self, content_dir: Path, base_url: str):
        self.content_dir = Path(content_dir)
        self.base_url = base_url.rstrip("/")

    def cached_path(self, campaign_id: str) -> Path:
        return self.content_dir / "campaigns" / f"{campaign_id}.json"

    async def ensure_campaign(self, campaign_id: str, force: bool = False) -> Path:
        """Return the cached campaign file, downloading it if needed.

        A corrupt cached file is replaced by a fresh download.
        """
        cache_file = self.cached_path(campaign_id)
        if cache_file.exists() and not force:
            try:
                json.loads(cache_file.read_text(encoding="utf-8"))
                return cache_file
            except json.JSONDecodeError as e:
                logger.warning(f"Corrupt cache for {campaign_id}, re-downloading: {e}")
        await self._download(campaign_id, cache_file)
        return cache_file

    async def _download(self, campaign_id: str, cache_file: Path) -> None:
        url = f"{self.base_url}/campaigns/{campaign_id}.json"
        last_error: Exception | None = None

        async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as client:
            for attempt in range(MAX_RETRIES):
                try:
                    response = await client.get(url)

                    if response.status_code == 429:
                        wait = RETRY_BACKOFF ** attempt
                        logger.warning(f"Rate limited, waiting {wait}s")
                        await asyncio.sleep(wait)
                        continue

                    if response.status_code == 404:
                        raise CampaignContentError(f"Campaign {campaign_id} not found at {url}")

                    response.raise_for_status()
                    try:
                        data = response.json()
                    except ValueError as e:
                        raise CampaignContentError(
                            f"Downloaded campaign {campaign_id} is not valid JSON: {e}"
                        ) from e
                    try:
                        FullCampaign.model_validate(data)
                    except ValidationError as e:
                        raise CampaignContentError(
                            f"Downloaded campaign {campaign_id} is invalid: {e}"
                        ) from e

                    cache_file.parent.mkdir(parents=True, exist_ok=True)
                    cache_file.write_text(json.dumps(data, indent=2), encoding="utf-8")
                    logger.info(f"Downloaded campaign {campaign_id}")
                    return

                except httpx.TimeoutException as e:
                    logger.warning(
                        f"Timeout downloading {campaign_id}, attempt {attempt + 1}/{MAX_RETRIES}"
                    )
                    last_error = e
                    await asyncio.sleep(RETRY_BACKOFF ** attempt)

                except httpx.HTTPStatusError as e:
                    if e.response.status_code >= 500:
                        logger.warning(
                            f"Server error {e.response.status_code}, "
                            f"attempt {attempt + 1}/{MAX_RETRIES}"
                        )
                        last_error = e
                        await asyncio.sleep(RETRY_BACKOFF ** attempt)
                    else:
                        raise CampaignContentError(f"HTTP error: {e}") from e

        raise CampaignContentError(
            f"Failed to download campaign {campaign_id} after {MAX_RETRIES} retries: {last_error}"
        )


__all__ = [
    "CampaignContentError",
    "CampaignContentFetcher",
    "SIDE_CAMPAIGN_ID",
    "load_campaign_guide",
    "load_campaign_log_text",
    "load_errata",
    "load_full_campaign",
]
