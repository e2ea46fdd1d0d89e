"""
Results of walking a campaign: one entry per scenario in play order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from .campaign_log import GuidedCampaignLog
from .campaign_state import EmbarkData, GuideInput
from .models import CampaignRule, Scenario
from .scenario_guide import ExecutedStep, ScenarioGuide
from .scenario_id import ScenarioId

ProcessedScenarioType = Literal[
    "skipped", "playable", "locked", "placeholder", "started", "completed"
]


@dataclass
class UnprocessedScenario:
    """A scenario id resolved to its definition; ``side`` marks the side-scenario pool."""

    id: ScenarioId
    scenario: Scenario
    side: bool


@dataclass
class ProcessedScenario:
    """One scenario's place in the campaign trace.

    ``started`` and ``completed`` entries also carry the ``inputs`` that
    produced them and the rules in force; these are what the memoized
    reuse check compares against on the next walk.
    """

    type: ProcessedScenarioType
    id: ScenarioId
    scenario_guide: ScenarioGuide
    latest_campaign_log: GuidedCampaignLog
    can_undo: bool = False
    close_on_undo: bool = False
    steps: list[ExecutedStep] = field(default_factory=list)
    location: str | None = None
    inputs: list[GuideInput] | None = None
    rules: list[CampaignRule] = field(default_factory=list)

    @property
    def played(self) -> bool:
        return self.type in ("started", "completed")


@dataclass
class ProcessedCampaign:
    scenarios: list[ProcessedScenario]
    campaign_log: GuidedCampaignLog

    def find(self, encoded_scenario_id: str) -> ProcessedScenario | None:
        for scenario in self.scenarios:
            if scenario.id.encoded_scenario_id == encoded_scenario_id:
                return scenario
        return None


def embark_destination(data: EmbarkData | None) -> str | None:
    return data.destination if data else None


__all__ = [
    "ProcessedCampaign",
    "ProcessedScenario",
    "ProcessedScenarioType",
    "UnprocessedScenario",
    "embark_destination",
]
