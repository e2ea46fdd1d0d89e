"""
Guided campaign session tools.

A GuideSession binds one campaign guide to one decision store, keeps the
last processed campaign around so re-walks can reuse unchanged scenarios,
and persists the store after every change.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .campaign_guide import CampaignGuide
from .campaign_state import CampaignStateHelper, GuideState
from .content import load_campaign_guide
from .processed import ProcessedCampaign, ProcessedScenario
from .scenario_id import parse_scenario_id
from .scenario_state import ScenarioStateHelper

logger = logging.getLogger("guided-campaign")


class GuideSessionError(Exception):
    """A session operation was rejected."""

    pass


class GuideSession:
    """Interactive access to one guided campaign.

    Args:
        guide: The campaign guide.
        campaign_state: The campaign's decision store.
        state_path: Where to persist the store; ``None`` keeps it in memory.
        lang: Locale tag used to sort rules.
        standalone_id: Play a single scenario instead of the campaign.
    """

    def __init__(
        self,
        guide: CampaignGuide,
        campaign_state: CampaignStateHelper,
        state_path: Path | None = None,
        lang: str = "en",
        standalone_id: str | None = None,
    ):
        self.guide = guide
        self.campaign_state = campaign_state
        self.state_path = state_path
        self.lang = lang
        self.standalone_id = standalone_id
        self.processed: ProcessedCampaign | None = None
        self.error: str | None = None

    @classmethod
    def open(
        cls,
        data_dir: Path,
        campaign_id: str,
        investigators: list[str] | None = None,
        lang: str = "en",
    ) -> "GuideSession":
        """Load content from ``{data_dir}/content`` and state from ``{data_dir}/state``."""
        data_dir = Path(data_dir)
        guide = load_campaign_guide(data_dir / "content", campaign_id)
        state_path = data_dir / "state" / f"{campaign_id}.json"
        if state_path.exists():
            campaign_state = CampaignStateHelper.load(state_path)
            logger.info(f"Resumed campaign '{campaign_id}' from {state_path}")
        else:
            campaign_state = CampaignStateHelper(
                GuideState(campaign_id=campaign_id, investigators=list(investigators or []))
            )
        return cls(guide, campaign_state, state_path=state_path, lang=lang)

    # ------------------------------------------------------------------ #
    # Processing
    # ------------------------------------------------------------------ #

    def refresh(self) -> tuple[ProcessedCampaign | None, str | None]:
        """Re-walk the campaign, reusing unchanged scenarios from the last walk."""
        processed, error = self.guide.process_all_scenarios(
            self.campaign_state,
            self.standalone_id,
            self.processed,
            self.lang,
        )
        self.error = error
        if processed is not None:
            self.processed = processed
        return processed, error

    def progress(self) -> dict[str, Any]:
        """Summary of the campaign trace suitable for display."""
        processed, error = self.refresh()
        if processed is None:
            return {"campaign": self.guide.campaign_name(), "error": error, "scenarios": []}
        log = processed.campaign_log
        return {
            "campaign": self.guide.campaign_name(),
            "error": None,
            "scenarios": [self._describe(scenario) for scenario in processed.scenarios],
            "result": log.campaign_data.result,
            "investigators": {
                code: log.total_xp(code) for code in log.investigators(include_eliminated=True)
            },
        }

    @staticmethod
    def _describe(scenario: ProcessedScenario) -> dict[str, Any]:
        info: dict[str, Any] = {
            "id": scenario.id.encoded_scenario_id,
            "name": scenario.scenario_guide.full_name,
            "status": scenario.type,
            "can_undo": scenario.can_undo,
            "close_on_undo": scenario.close_on_undo,
        }
        if scenario.location:
            info["location"] = scenario.location
        if scenario.type == "started":
            pending = [s.step.id for s in scenario.steps if not s.complete]
            info["waiting_on"] = pending[0] if pending else None
        return info

    def _entry(self, encoded_scenario_id: str) -> ProcessedScenario | None:
        processed, error = self.refresh()
        if processed is None:
            raise GuideSessionError(error or "Campaign could not be processed")
        return processed.find(encoded_scenario_id)

    def _save(self) -> None:
        if self.state_path is not None:
            self.campaign_state.save(self.state_path)

    # ------------------------------------------------------------------ #
    # Recording decisions
    # ------------------------------------------------------------------ #

    def scenario_state(self, encoded_scenario_id: str) -> ScenarioStateHelper:
        parse_scenario_id(encoded_scenario_id)
        return ScenarioStateHelper(encoded_scenario_id, self.campaign_state)

    def start_scenario(self, encoded_scenario_id: str) -> None:
        entry = self._entry(encoded_scenario_id)
        if entry is None:
            raise GuideSessionError(f"Scenario {encoded_scenario_id} is not part of this campaign")
        if entry.type not in ("playable", "started", "completed"):
            raise GuideSessionError(f"Scenario {encoded_scenario_id} is {entry.type}")
        self.campaign_state.start_scenario(encoded_scenario_id)
        self._save()

    def record_choice(self, encoded_scenario_id: str, step_id: str, value: int) -> None:
        self.scenario_state(encoded_scenario_id).set_choice(step_id, value)
        self._save()

    def record_decision(self, encoded_scenario_id: str, step_id: str, value: bool) -> None:
        self.scenario_state(encoded_scenario_id).set_decision(step_id, value)
        self._save()

    def record_count(self, encoded_scenario_id: str, step_id: str, value: int) -> None:
        self.scenario_state(encoded_scenario_id).set_count(step_id, value)
        self._save()

    def record_text(self, encoded_scenario_id: str, step_id: str, value: str) -> None:
        self.scenario_state(encoded_scenario_id).set_text(step_id, value)
        self._save()

    def record_string_choices(
        self, encoded_scenario_id: str, step_id: str, value: dict[str, list[str]]
    ) -> None:
        self.scenario_state(encoded_scenario_id).set_string_choices(step_id, value)
        self._save()

    def undo(self, encoded_scenario_id: str) -> bool:
        """Undo the scenario's last decision.

        Only the campaign's current undo point may be undone.

        Returns:
            Whether the surrounding view should close (the scenario is no
            longer started).
        """
        entry = self._entry(encoded_scenario_id)
        if entry is None or not entry.can_undo:
            raise GuideSessionError(f"Scenario {encoded_scenario_id} cannot be undone")
        self.scenario_state(encoded_scenario_id).undo()
        self._save()
        return entry.close_on_undo

    def _require_completed(self, previous_scenario_id: str) -> None:
        entry = self._entry(previous_scenario_id)
        if entry is None or entry.type != "completed":
            status = entry.type if entry else "not part of this campaign"
            raise GuideSessionError(
                f"Side scenarios can only follow a completed scenario; "
                f"{previous_scenario_id} is {status}"
            )

    def add_side_scenario(self, previous_scenario_id: str, side_scenario_id: str) -> str:
        """Insert an authored side scenario; returns the encoded id it was given."""
        known = {scenario.id for scenario in self.guide.side_scenarios()}
        if parse_scenario_id(side_scenario_id).scenario_id not in known:
            raise GuideSessionError(f"Unknown side scenario: {side_scenario_id}")
        self._require_completed(previous_scenario_id)
        scenario_id = self.campaign_state.add_side_scenario(previous_scenario_id, side_scenario_id)
        self._save()
        return scenario_id

    def add_custom_side_scenario(self, previous_scenario_id: str, name: str, xp_cost: int) -> str:
        if xp_cost < 0:
            raise GuideSessionError("Experience cost cannot be negative")
        self._require_completed(previous_scenario_id)
        scenario_id = self.campaign_state.add_custom_side_scenario(previous_scenario_id, name, xp_cost)
        self._save()
        return scenario_id


__all__ = ["GuideSession", "GuideSessionError"]
