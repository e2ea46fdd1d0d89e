"""
Persisted decision store for a guided campaign.

Every player decision is an immutable guide input tagged with the encoded
scenario id it belongs to. Inputs are only ever appended or popped, so the
latest write for a key wins and ``undo`` restores the previous value.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from shortuuid import random as shortuuid_random

from .scenario_id import encode_scenario_id, parse_scenario_id

logger = logging.getLogger("guided-campaign")

STATE_SCHEMA_VERSION = "1.0"

NumberChoices = dict[str, list[int]]
StringChoices = dict[str, list[str]]
SupplyCounts = dict[str, dict[str, int]]


class EmbarkData(BaseModel):
    """Travel record between map locations."""

    model_config = ConfigDict(frozen=True)

    departure: str | None = None
    destination: str
    time: int = 0
    transit: list[str] = Field(default_factory=list)


class GuideInputBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    scenario: str | None = Field(default=None, description="Encoded scenario id")
    step: str | None = Field(default=None, description="Step id the input answers")


class GuideStartScenarioInput(GuideInputBase):
    type: Literal["start_scenario"] = "start_scenario"


class GuideChoiceInput(GuideInputBase):
    type: Literal["choice"] = "choice"
    value: int


class GuideTextInput(GuideInputBase):
    type: Literal["text"] = "text"
    value: str
    input_id: str | None = None


class GuideDecisionInput(GuideInputBase):
    type: Literal["decision"] = "decision"
    value: bool


class GuideCountInput(GuideInputBase):
    type: Literal["count"] = "count"
    value: int


class GuideNumberChoicesInput(GuideInputBase):
    type: Literal["number_choices"] = "number_choices"
    choices: NumberChoices
    deck_id: str | None = None
    deck_edits: dict[str, Any] | None = None


class GuideStringChoicesInput(GuideInputBase):
    type: Literal["string_choices"] = "string_choices"
    choices: StringChoices


class GuideSuppliesInput(GuideInputBase):
    type: Literal["supplies"] = "supplies"
    supplies: SupplyCounts


class GuideCampaignLinkInput(GuideInputBase):
    type: Literal["campaign_link"] = "campaign_link"
    decision: str


class GuideInterScenarioInput(GuideInputBase):
    type: Literal["inter_scenario"] = "inter_scenario"
    investigator_data: dict[str, dict[str, Any]] = Field(default_factory=dict)
    campaign_log_entries: list[str] = Field(default_factory=list)


class GuideEmbarkInput(GuideInputBase):
    type: Literal["embark"] = "embark"
    data: EmbarkData


class GuideArriveInput(GuideInputBase):
    type: Literal["arrive"] = "arrive"
    data: EmbarkData


class GuideSideScenarioInput(GuideInputBase):
    """Inserts ``side_scenario`` after the scenario named by ``scenario``."""

    type: Literal["side_scenario"] = "side_scenario"
    side_scenario_type: Literal["official", "custom"] = "official"
    side_scenario: str
    name: str | None = None
    xp_cost: int = 0


GuideInput = Annotated[
    Union[
        GuideStartScenarioInput,
        GuideChoiceInput,
        GuideTextInput,
        GuideDecisionInput,
        GuideCountInput,
        GuideNumberChoicesInput,
        GuideStringChoicesInput,
        GuideSuppliesInput,
        GuideCampaignLinkInput,
        GuideInterScenarioInput,
        GuideEmbarkInput,
        GuideArriveInput,
        GuideSideScenarioInput,
    ],
    Field(discriminator="type"),
]


class GuideState(BaseModel):
    """Serialized form of a campaign's decisions."""

    version: str = STATE_SCHEMA_VERSION
    campaign_id: str
    investigators: list[str] = Field(default_factory=list)
    inputs: list[GuideInput] = Field(default_factory=list)


class CampaignStateError(Exception):
    """Error loading or saving campaign state."""

    pass


class CampaignStateHelper:
    """Source of truth for all player choices in one campaign.

    Args:
        state: The decision document to read and append to.
        linked_state: The other half of a linked campaign pair, if any.
            Its ``campaign_link`` inputs are visible through
            ``linked_entries`` and ``campaign_link('receive', ...)``.
    """

    def __init__(
        self,
        state: GuideState,
        linked_state: "CampaignStateHelper | None" = None,
    ):
        self.state = state
        self.linked_state = linked_state

    # ------------------------------------------------------------------ #
    # Persistence
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, path: Path) -> "CampaignStateHelper":
        """Load a decision document from a JSON file."""
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise CampaignStateError(f"Failed to read campaign state {path}: {e}") from e
        version = raw.get("version")
        if version != STATE_SCHEMA_VERSION:
            logger.warning(
                f"Campaign state version '{version}' differs from current "
                f"'{STATE_SCHEMA_VERSION}'"
            )
        return cls(GuideState.model_validate(raw))

    def save(self, path: Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.state.model_dump(mode="json"), f, indent=2, ensure_ascii=False)
        logger.debug(f"Saved {len(self.state.inputs)} guide inputs to {path}")
        return path

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    @property
    def campaign_id(self) -> str:
        return self.state.campaign_id

    def investigators(self) -> list[str]:
        return list(self.state.investigators)

    def scenario_entries(self, scenario_id: str) -> list[GuideInput]:
        """All inputs recorded for one encoded scenario id, oldest first."""
        return [i for i in self.state.inputs if i.scenario == scenario_id]

    def linked_entries(self) -> list[GuideInput]:
        """Campaign-link inputs made by the linked campaign."""
        if self.linked_state is None:
            return []
        return [
            i for i in self.linked_state.state.inputs
            if isinstance(i, GuideCampaignLinkInput)
        ]

    def started_scenario(self, scenario_id: str) -> bool:
        # Side-scenario records are tagged with the scenario they follow
        return any(
            i.scenario == scenario_id and not isinstance(i, GuideSideScenarioInput)
            for i in self.state.inputs
        )

    def close_on_undo(self, scenario_id: str) -> bool:
        """Whether undoing the scenario's last input would un-start it."""
        entries = self.scenario_entries(scenario_id)
        return len(entries) == 1 and isinstance(entries[0], GuideStartScenarioInput)

    def _latest(self, kind: type, step_id: str | None, scenario_id: str | None):
        for entry in reversed(self.state.inputs):
            if (
                isinstance(entry, kind)
                and entry.scenario == scenario_id
                and (step_id is None or entry.step == step_id)
            ):
                return entry
        return None

    def choice(self, step_id: str, scenario_id: str | None) -> int | None:
        entry = self._latest(GuideChoiceInput, step_id, scenario_id)
        return entry.value if entry else None

    def text(self, step_id: str, scenario_id: str | None) -> str | None:
        entry = self._latest(GuideTextInput, step_id, scenario_id)
        return entry.value if entry else None

    def decision(self, step_id: str, scenario_id: str | None) -> bool | None:
        entry = self._latest(GuideDecisionInput, step_id, scenario_id)
        return entry.value if entry else None

    def count(self, step_id: str, scenario_id: str | None) -> int | None:
        entry = self._latest(GuideCountInput, step_id, scenario_id)
        return entry.value if entry else None

    def number_choices(
        self, step_id: str, scenario_id: str | None
    ) -> tuple[NumberChoices | None, str | None, dict[str, Any] | None]:
        entry = self._latest(GuideNumberChoicesInput, step_id, scenario_id)
        if entry is None:
            return None, None, None
        return entry.choices, entry.deck_id, entry.deck_edits

    def string_choices(self, step_id: str, scenario_id: str | None) -> StringChoices | None:
        entry = self._latest(GuideStringChoicesInput, step_id, scenario_id)
        return entry.choices if entry else None

    def supplies(self, step_id: str, scenario_id: str | None) -> SupplyCounts | None:
        entry = self._latest(GuideSuppliesInput, step_id, scenario_id)
        return entry.supplies if entry else None

    def campaign_link(
        self,
        send_or_receive: Literal["send", "receive"],
        link_id: str,
        scenario_id: str | None,
    ) -> str | None:
        """Read a cross-campaign link decision.

        ``send`` reads what this campaign sent from ``scenario_id``;
        ``receive`` reads what the linked campaign sent, from any scenario.
        """
        if send_or_receive == "send":
            entry = self._latest(GuideCampaignLinkInput, link_id, scenario_id)
            return entry.decision if entry else None
        for entry in reversed(self.linked_entries()):
            if entry.step == link_id:
                return entry.decision
        return None

    def inter_scenario_investigator_data(self, scenario_id: str | None) -> dict[str, dict[str, Any]] | None:
        entry = self._latest(GuideInterScenarioInput, None, scenario_id)
        return entry.investigator_data if entry else None

    def inter_scenario_campaign_log_entries(self, scenario_id: str | None) -> list[str] | None:
        entry = self._latest(GuideInterScenarioInput, None, scenario_id)
        return entry.campaign_log_entries if entry else None

    def scenario_embark_data(self, scenario_id: str | None) -> EmbarkData | None:
        entry = self._latest(GuideEmbarkInput, None, scenario_id)
        return entry.data if entry else None

    def scenario_arrive_data(self, scenario_id: str | None) -> EmbarkData | None:
        entry = self._latest(GuideArriveInput, None, scenario_id)
        return entry.data if entry else None

    def side_scenario_embark_data(self, main_scenario_id: str | None) -> EmbarkData | None:
        """Travel record for the scenario a side scenario is attached to."""
        if not main_scenario_id:
            return None
        return self.scenario_embark_data(main_scenario_id)

    def side_scenario(self, scenario_id: str) -> GuideSideScenarioInput | None:
        """The side scenario inserted after ``scenario_id``, if any."""
        return self._latest(GuideSideScenarioInput, None, scenario_id)

    def side_scenario_origin(self, side_scenario_id: str) -> str | None:
        """The scenario a side scenario was inserted after."""
        for entry in reversed(self.state.inputs):
            if isinstance(entry, GuideSideScenarioInput) and entry.side_scenario == side_scenario_id:
                return entry.scenario
        return None

    # ------------------------------------------------------------------ #
    # Mutations
    # ------------------------------------------------------------------ #

    def _append(self, entry: GuideInputBase) -> None:
        self.state.inputs.append(entry)

    def start_scenario(self, scenario_id: str) -> None:
        if not self.started_scenario(scenario_id):
            self._append(GuideStartScenarioInput(scenario=scenario_id))

    def set_choice(self, step_id: str, value: int, scenario_id: str | None) -> None:
        self._append(GuideChoiceInput(scenario=scenario_id, step=step_id, value=value))

    def set_text(
        self,
        step_id: str,
        value: str,
        scenario_id: str | None,
        input_id: str | None = None,
    ) -> None:
        self._append(
            GuideTextInput(scenario=scenario_id, step=step_id, value=value, input_id=input_id)
        )

    def set_decision(self, step_id: str, value: bool, scenario_id: str | None) -> None:
        self._append(GuideDecisionInput(scenario=scenario_id, step=step_id, value=value))

    def set_count(self, step_id: str, value: int, scenario_id: str | None) -> None:
        self._append(GuideCountInput(scenario=scenario_id, step=step_id, value=value))

    def set_number_choices(
        self,
        step_id: str,
        value: NumberChoices,
        deck_id: str | None,
        deck_edits: dict[str, Any] | None,
        scenario_id: str | None,
    ) -> None:
        self._append(
            GuideNumberChoicesInput(
                scenario=scenario_id,
                step=step_id,
                choices=value,
                deck_id=deck_id,
                deck_edits=deck_edits,
            )
        )

    def set_string_choices(self, step_id: str, value: StringChoices, scenario_id: str | None) -> None:
        self._append(GuideStringChoicesInput(scenario=scenario_id, step=step_id, choices=value))

    def set_supplies(self, step_id: str, value: SupplyCounts, scenario_id: str | None) -> None:
        self._append(GuideSuppliesInput(scenario=scenario_id, step=step_id, supplies=value))

    def set_campaign_link(self, link_id: str, decision: str, scenario_id: str | None) -> None:
        self._append(GuideCampaignLinkInput(scenario=scenario_id, step=link_id, decision=decision))

    def set_inter_scenario_data(
        self,
        investigator_data: dict[str, dict[str, Any]],
        campaign_log_entries: list[str],
        scenario_id: str,
    ) -> None:
        self._append(
            GuideInterScenarioInput(
                scenario=scenario_id,
                investigator_data=investigator_data,
                campaign_log_entries=campaign_log_entries,
            )
        )

    def set_embark_data(self, data: EmbarkData, scenario_id: str) -> None:
        self._append(GuideEmbarkInput(scenario=scenario_id, data=data))

    def set_arrive_data(self, data: EmbarkData, scenario_id: str) -> None:
        self._append(GuideArriveInput(scenario=scenario_id, data=data))

    def next_side_scenario_id(self, side_scenario_id: str) -> str:
        """``side_scenario_id``, or its next replay attempt if it is already in use."""
        scenario_id = parse_scenario_id(side_scenario_id).scenario_id
        used = [
            parse_scenario_id(entry.side_scenario)
            for entry in self.state.inputs
            if isinstance(entry, GuideSideScenarioInput)
        ]
        used_ids = {u.encoded_scenario_id for u in used}
        if side_scenario_id not in used_ids and not self.started_scenario(side_scenario_id):
            return side_scenario_id
        attempts = [u.replay_attempt or 0 for u in used if u.scenario_id == scenario_id]
        return encode_scenario_id(scenario_id, max(attempts, default=0) + 1)

    def add_side_scenario(self, previous_scenario_id: str, side_scenario_id: str) -> str:
        """Insert an authored side scenario after ``previous_scenario_id``.

        A side scenario that was already inserted gets a fresh replay
        attempt, so each play keeps its own decisions.

        Returns:
            The encoded id the side scenario was inserted under.
        """
        side_scenario_id = self.next_side_scenario_id(side_scenario_id)
        self._append(
            GuideSideScenarioInput(
                scenario=previous_scenario_id,
                side_scenario_type="official",
                side_scenario=side_scenario_id,
            )
        )
        return side_scenario_id

    def add_custom_side_scenario(
        self,
        previous_scenario_id: str,
        name: str,
        xp_cost: int,
    ) -> str:
        """Insert a player-defined side scenario; returns its generated id."""
        side_scenario_id = f"$custom_{shortuuid_random(length=8)}"
        self._append(
            GuideSideScenarioInput(
                scenario=previous_scenario_id,
                side_scenario_type="custom",
                side_scenario=side_scenario_id,
                name=name,
                xp_cost=xp_cost,
            )
        )
        logger.info(f"Added custom side scenario '{name}' ({side_scenario_id})")
        return side_scenario_id

    def undo(self, scenario_id: str) -> None:
        """Remove the most recent input recorded for ``scenario_id``."""
        for index in range(len(self.state.inputs) - 1, -1, -1):
            if self.state.inputs[index].scenario == scenario_id:
                removed = self.state.inputs.pop(index)
                logger.debug(f"Undid {removed.type} input for {scenario_id}")
                return


__all__ = [
    "CampaignStateError",
    "CampaignStateHelper",
    "EmbarkData",
    "GuideArriveInput",
    "GuideCampaignLinkInput",
    "GuideChoiceInput",
    "GuideCountInput",
    "GuideDecisionInput",
    "GuideEmbarkInput",
    "GuideInput",
    "GuideInterScenarioInput",
    "GuideNumberChoicesInput",
    "GuideSideScenarioInput",
    "GuideStartScenarioInput",
    "GuideState",
    "GuideStringChoicesInput",
    "GuideSuppliesInput",
    "GuideTextInput",
    "NumberChoices",
    "StringChoices",
    "SupplyCounts",
]
