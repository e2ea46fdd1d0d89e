"""
Accumulated campaign log.

A GuidedCampaignLog is an immutable value: applying effects, starting or
finishing a scenario always returns a new log chained from the previous
one, so every processed scenario owns the log it produced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, Field

from .scenario_id import parse_scenario_id
from .steps import (
    CampaignDataEffect,
    CampaignLogCountEffect,
    CampaignLogEffect,
    EarnXpEffect,
    Effect,
    ScenarioDataEffect,
    TraumaEffect,
)

if TYPE_CHECKING:
    from .campaign_guide import CampaignGuide
    from .campaign_state import CampaignStateHelper

logger = logging.getLogger("guided-campaign")

ScenarioStatus = Literal["started", "completed", "resolution", "skipped", "unknown"]

SECTION_COUNT_ID = "$count"


class SectionEntry(BaseModel):
    id: str
    text: str | None = None
    crossed_out: bool = False


class SectionState(BaseModel):
    entries: list[SectionEntry] = Field(default_factory=list)
    counts: dict[str, int] = Field(default_factory=dict)

    def find(self, entry_id: str) -> SectionEntry | None:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None


class InvestigatorState(BaseModel):
    earned_xp: int = 0
    side_scenario_xp: int = 0
    physical: int = 0
    mental: int = 0
    killed: bool = False
    insane: bool = False

    @property
    def eliminated(self) -> bool:
        return self.killed or self.insane


class CampaignData(BaseModel):
    result: str | None = None
    next_scenario: str | None = None
    difficulty: str | None = None
    scenarios: list[str] | None = None


class LogData(BaseModel):
    scenario_id: str | None = None
    scenario_status: dict[str, str] = Field(default_factory=dict)
    resolutions: dict[str, str] = Field(default_factory=dict)
    campaign_data: CampaignData = Field(default_factory=CampaignData)
    sections: dict[str, SectionState] = Field(default_factory=dict)
    investigators: dict[str, InvestigatorState] = Field(default_factory=dict)


@dataclass
class EffectsWithInput:
    """Effects produced by one step, with the player input that feeds them."""

    scenario_id: str
    effects: list[Effect]
    input_value: int | None = None
    text: str | None = None
    investigators: list[str] | None = field(default=None)


class GuidedCampaignLog:
    """Campaign state derived from the effects of every scenario played so far.

    Args:
        entries: Effects to replay on top of ``previous``.
        campaign_guide: The guide the content belongs to.
        campaign_state: The decision store (for the investigator roster).
        standalone: Whether a single scenario is played outside a campaign.
        previous: Log to chain from; its data is copied, never shared.
    """

    def __init__(
        self,
        entries: list[EffectsWithInput],
        campaign_guide: "CampaignGuide",
        campaign_state: "CampaignStateHelper",
        standalone: bool,
        previous: "GuidedCampaignLog | None" = None,
    ):
        self.campaign_guide = campaign_guide
        self.campaign_state = campaign_state
        self.standalone = standalone
        if previous is not None:
            self._data = previous._data.model_copy(deep=True)
        else:
            self._data = LogData(
                investigators={
                    code: InvestigatorState() for code in campaign_state.investigators()
                }
            )
        for entry in entries:
            self._apply(entry)

    # ------------------------------------------------------------------ #
    # Chaining
    # ------------------------------------------------------------------ #

    def _derive(self, entries: list[EffectsWithInput] | None = None) -> "GuidedCampaignLog":
        return GuidedCampaignLog(
            entries or [],
            self.campaign_guide,
            self.campaign_state,
            self.standalone,
            previous=self,
        )

    def with_effects(self, entry: EffectsWithInput) -> "GuidedCampaignLog":
        return self._derive([entry])

    def start_scenario(self, encoded_scenario_id: str) -> "GuidedCampaignLog":
        """New log whose current scenario is ``encoded_scenario_id``."""
        log = self._derive()
        data = log._data
        data.scenario_id = encoded_scenario_id
        if data.scenario_status.get(encoded_scenario_id) not in ("completed", "resolution"):
            data.scenario_status[encoded_scenario_id] = "started"
        forced = data.campaign_data.next_scenario
        if forced and forced in (
            encoded_scenario_id,
            parse_scenario_id(encoded_scenario_id).scenario_id,
        ):
            data.campaign_data.next_scenario = None
        return log

    def finish_scenario(self, encoded_scenario_id: str) -> "GuidedCampaignLog":
        """New log with the scenario marked completed (a recorded resolution is kept)."""
        log = self._derive()
        if log._data.scenario_status.get(encoded_scenario_id) != "resolution":
            log._data.scenario_status[encoded_scenario_id] = "completed"
        return log

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    @property
    def scenario_id(self) -> str | None:
        return self._data.scenario_id

    @property
    def campaign_data(self) -> CampaignData:
        return self._data.campaign_data.model_copy(deep=True)

    def campaign_next_scenario_id(self) -> str | None:
        return self._data.campaign_data.next_scenario

    def scenario_status(self, scenario_id: str) -> ScenarioStatus:
        return self._data.scenario_status.get(scenario_id, "unknown")  # type: ignore[return-value]

    def resolution(self, scenario_id: str) -> str | None:
        return self._data.resolutions.get(scenario_id)

    def has_entry(self, section_id: str, entry_id: str) -> bool:
        section = self._data.sections.get(section_id)
        if section is None:
            return False
        entry = section.find(entry_id)
        return entry is not None and not entry.crossed_out

    def is_crossed_out(self, section_id: str, entry_id: str) -> bool:
        section = self._data.sections.get(section_id)
        entry = section.find(entry_id) if section else None
        return bool(entry and entry.crossed_out)

    def section_entries(self, section_id: str) -> list[SectionEntry]:
        section = self._data.sections.get(section_id)
        return [e.model_copy() for e in section.entries] if section else []

    def count(self, section_id: str, entry_id: str | None = None) -> int:
        section = self._data.sections.get(section_id)
        if section is None:
            return 0
        return section.counts.get(entry_id or SECTION_COUNT_ID, 0)

    def investigators(self, include_eliminated: bool = False) -> list[str]:
        return [
            code for code, inv in self._data.investigators.items()
            if include_eliminated or not inv.eliminated
        ]

    def investigator_data(self, code: str) -> InvestigatorState | None:
        data = self._data.investigators.get(code)
        return data.model_copy() if data else None

    def earned_xp(self, code: str) -> int:
        """Experience awarded by scenarios, excluding side-scenario costs."""
        data = self._data.investigators.get(code)
        return data.earned_xp if data else 0

    def total_xp(self, code: str) -> int:
        data = self._data.investigators.get(code)
        return data.earned_xp + data.side_scenario_xp if data else 0

    # ------------------------------------------------------------------ #
    # Effect application (only ever on a freshly derived copy)
    # ------------------------------------------------------------------ #

    def _targets(self, investigator: str, restrict: list[str] | None) -> list[str]:
        if investigator == "all":
            codes = restrict if restrict is not None else self.investigators()
        elif investigator == "lead":
            alive = self.investigators()
            codes = alive[:1]
        else:
            codes = [investigator]
        for code in codes:
            self._data.investigators.setdefault(code, InvestigatorState())
        return codes

    def _section(self, section_id: str) -> SectionState:
        return self._data.sections.setdefault(section_id, SectionState())

    def _apply(self, entry: EffectsWithInput) -> None:
        self._data.scenario_id = self._data.scenario_id or entry.scenario_id
        for effect in entry.effects:
            if isinstance(effect, EarnXpEffect):
                self._apply_xp(effect, entry)
            elif isinstance(effect, TraumaEffect):
                for code in self._targets(effect.investigator, entry.investigators):
                    inv = self._data.investigators[code]
                    inv.physical += effect.physical
                    inv.mental += effect.mental
                    inv.killed = inv.killed or effect.killed
                    inv.insane = inv.insane or effect.insane
            elif isinstance(effect, CampaignLogEffect):
                self._apply_campaign_log(effect, entry.text)
            elif isinstance(effect, CampaignLogCountEffect):
                section = self._section(effect.section)
                key = effect.id or SECTION_COUNT_ID
                value = effect.value if effect.value is not None else (entry.input_value or 0)
                current = section.counts.get(key, 0)
                if effect.operation == "set":
                    section.counts[key] = value
                elif effect.operation == "add":
                    section.counts[key] = current + value
                else:
                    section.counts[key] = max(current - value, 0)
            elif isinstance(effect, CampaignDataEffect):
                self._apply_campaign_data(effect)
            elif isinstance(effect, ScenarioDataEffect):
                if effect.setting == "skip_scenario":
                    if not effect.scenario:
                        raise ValueError("skip_scenario effect requires a scenario id")
                    self._data.scenario_status[effect.scenario] = "skipped"
                else:
                    target = effect.scenario or entry.scenario_id
                    self._data.scenario_status[target] = "resolution"
                    if effect.resolution:
                        self._data.resolutions[target] = effect.resolution
            else:
                raise TypeError(f"Unsupported effect: {effect!r}")

    def _apply_xp(self, effect: EarnXpEffect, entry: EffectsWithInput) -> None:
        if effect.side_scenario_cost and self.campaign_guide.campaign_no_side_scenario_xp():
            return
        amount = effect.bonus if effect.bonus is not None else (entry.input_value or 0)
        for code in self._targets(effect.investigator, entry.investigators):
            inv = self._data.investigators[code]
            if effect.side_scenario_cost:
                inv.side_scenario_xp += amount
            else:
                inv.earned_xp += amount

    def _apply_campaign_log(self, effect: CampaignLogEffect, text: str | None) -> None:
        section = self._section(effect.section)
        existing = section.find(effect.id)
        if effect.remove:
            section.entries = [e for e in section.entries if e.id != effect.id]
        elif effect.cross_out:
            if existing is None:
                section.entries.append(SectionEntry(id=effect.id, crossed_out=True))
            else:
                existing.crossed_out = True
        elif existing is None:
            section.entries.append(SectionEntry(id=effect.id, text=text))
        else:
            existing.crossed_out = False
            if text is not None:
                existing.text = text

    def _apply_campaign_data(self, effect: CampaignDataEffect) -> None:
        data = self._data.campaign_data
        if effect.setting == "result":
            data.result = effect.value
        elif effect.setting == "next_scenario":
            data.next_scenario = effect.value
        elif effect.setting == "difficulty":
            data.difficulty = effect.value
        else:
            data.scenarios = list(effect.scenarios or [])


__all__ = [
    "CampaignData",
    "EffectsWithInput",
    "GuidedCampaignLog",
    "InvestigatorState",
    "LogData",
    "SectionEntry",
    "SectionState",
    "ScenarioStatus",
]
