"""
Per-scenario view of the campaign decision store.
"""

from __future__ import annotations

from typing import Any, Literal

from .campaign_state import (
    CampaignStateHelper,
    EmbarkData,
    NumberChoices,
    StringChoices,
    SupplyCounts,
)


class ScenarioStateHelper:
    """Forwards every read and write to the store, scoped to one encoded scenario id.

    Holds no state of its own, so creating one per execution is free.
    """

    def __init__(self, scenario_id: str, campaign_state: CampaignStateHelper):
        self.scenario_id = scenario_id
        self.campaign_state = campaign_state

    def set_choice(self, step_id: str, value: int) -> None:
        self.campaign_state.set_choice(step_id, value, self.scenario_id)

    def choice(self, step_id: str) -> int | None:
        return self.campaign_state.choice(step_id, self.scenario_id)

    def set_text(self, step_id: str, value: str, input_id: str | None = None) -> None:
        self.campaign_state.set_text(step_id, value, self.scenario_id, input_id)

    def text(self, step_id: str) -> str | None:
        return self.campaign_state.text(step_id, self.scenario_id)

    def set_number_choices(
        self,
        step_id: str,
        value: NumberChoices,
        deck_id: str | None = None,
        deck_edits: dict[str, Any] | None = None,
    ) -> None:
        self.campaign_state.set_number_choices(step_id, value, deck_id, deck_edits, self.scenario_id)

    def number_choices(self, step_id: str) -> NumberChoices | None:
        return self.campaign_state.number_choices(step_id, self.scenario_id)[0]

    def number_and_deck_choices(
        self, step_id: str
    ) -> tuple[NumberChoices | None, str | None, dict[str, Any] | None]:
        return self.campaign_state.number_choices(step_id, self.scenario_id)

    def set_string_choices(self, step_id: str, value: StringChoices) -> None:
        self.campaign_state.set_string_choices(step_id, value, self.scenario_id)

    def string_choices(self, step_id: str) -> StringChoices | None:
        return self.campaign_state.string_choices(step_id, self.scenario_id)

    def set_supplies(self, step_id: str, value: SupplyCounts) -> None:
        self.campaign_state.set_supplies(step_id, value, self.scenario_id)

    def supplies(self, step_id: str) -> SupplyCounts | None:
        return self.campaign_state.supplies(step_id, self.scenario_id)

    def set_decision(self, step_id: str, value: bool) -> None:
        self.campaign_state.set_decision(step_id, value, self.scenario_id)

    def decision(self, step_id: str) -> bool | None:
        return self.campaign_state.decision(step_id, self.scenario_id)

    def set_count(self, step_id: str, value: int) -> None:
        self.campaign_state.set_count(step_id, value, self.scenario_id)

    def count(self, step_id: str) -> int | None:
        return self.campaign_state.count(step_id, self.scenario_id)

    def campaign_link(self, send_or_receive: Literal["send", "receive"], link_id: str) -> str | None:
        return self.campaign_state.campaign_link(send_or_receive, link_id, self.scenario_id)

    def set_campaign_link(self, link_id: str, decision: str) -> None:
        self.campaign_state.set_campaign_link(link_id, decision, self.scenario_id)

    def inter_scenario_investigator_data(self) -> dict[str, dict[str, Any]] | None:
        return self.campaign_state.inter_scenario_investigator_data(self.scenario_id)

    def inter_scenario_campaign_log_entries(self) -> list[str] | None:
        return self.campaign_state.inter_scenario_campaign_log_entries(self.scenario_id)

    def embark_data(self) -> EmbarkData | None:
        return self.campaign_state.scenario_embark_data(self.scenario_id)

    def arrive_data(self) -> EmbarkData | None:
        return self.campaign_state.scenario_arrive_data(self.scenario_id)

    def undo(self) -> None:
        self.campaign_state.undo(self.scenario_id)


__all__ = ["ScenarioStateHelper"]
