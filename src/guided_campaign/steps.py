"""
Step, input, effect and condition kinds for scenario scripts.

Every kind is its own pydantic model tagged by a ``type`` literal, so the
executor can match on concrete classes and unknown kinds fail validation
when content is loaded rather than at play time.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Discriminator, Field, Tag


# ------------------------------------------------------------------ #
# Effects
# ------------------------------------------------------------------ #


class EarnXpEffect(BaseModel):
    """Award (or charge) experience to one or all investigators.

    A missing ``bonus`` means the amount comes from the step's input value,
    e.g. the victory display counter.
    """

    type: Literal["earn_xp"] = "earn_xp"
    investigator: str = "all"
    bonus: int | None = None
    side_scenario_cost: bool = False


class TraumaEffect(BaseModel):
    """Physical/mental trauma, or outright death/insanity."""

    type: Literal["trauma"] = "trauma"
    investigator: str = "all"
    physical: int = 0
    mental: int = 0
    killed: bool = False
    insane: bool = False


class CampaignLogEffect(BaseModel):
    """Record, cross out or remove an entry in a campaign log section."""

    type: Literal["campaign_log"] = "campaign_log"
    section: str
    id: str
    cross_out: bool = False
    remove: bool = False


class CampaignLogCountEffect(BaseModel):
    """Adjust a tally in a campaign log section.

    ``id=None`` targets the section's own count. ``value=None`` uses the
    step's input value.
    """

    type: Literal["campaign_log_count"] = "campaign_log_count"
    section: str
    id: str | None = None
    operation: Literal["set", "add", "subtract"] = "add"
    value: int | None = None


class CampaignDataEffect(BaseModel):
    """Change campaign-wide data: result, forced next scenario, difficulty or scenario order."""

    type: Literal["campaign_data"] = "campaign_data"
    setting: Literal["result", "next_scenario", "difficulty", "scenarios"]
    value: str | None = None
    scenarios: list[str] | None = None


class ScenarioDataEffect(BaseModel):
    """Mark another scenario skipped, or record the current scenario's resolution."""

    type: Literal["scenario_data"] = "scenario_data"
    setting: Literal["skip_scenario", "resolution"]
    scenario: str | None = None
    resolution: str | None = None


Effect = Annotated[
    Union[
        EarnXpEffect,
        TraumaEffect,
        CampaignLogEffect,
        CampaignLogCountEffect,
        CampaignDataEffect,
        ScenarioDataEffect,
    ],
    Field(discriminator="type"),
]


# ------------------------------------------------------------------ #
# Branch conditions
# ------------------------------------------------------------------ #


class BaseCondition(BaseModel):
    true_steps: list[str] = Field(default_factory=list)
    false_steps: list[str] = Field(default_factory=list)


class CampaignLogCondition(BaseCondition):
    """True when the section holds the entry and it is not crossed out."""

    type: Literal["campaign_log"] = "campaign_log"
    section: str
    id: str


class CampaignLogCountCondition(BaseCondition):
    """True when the tally (or section count when ``id`` is None) reaches ``min``."""

    type: Literal["campaign_log_count"] = "campaign_log_count"
    section: str
    id: str | None = None
    min: int = 1


class CampaignDataCondition(BaseCondition):
    type: Literal["campaign_data"] = "campaign_data"
    setting: Literal["result", "difficulty", "next_scenario"]
    value: str


class ScenarioDataCondition(BaseCondition):
    type: Literal["scenario_data"] = "scenario_data"
    scenario: str
    status: Literal["started", "completed", "resolution", "skipped", "unknown"]


Condition = Annotated[
    Union[
        CampaignLogCondition,
        CampaignLogCountCondition,
        CampaignDataCondition,
        ScenarioDataCondition,
    ],
    Field(discriminator="type"),
]


# ------------------------------------------------------------------ #
# Inputs
# ------------------------------------------------------------------ #


class Choice(BaseModel):
    id: str
    text: str = ""
    steps: list[str] = Field(default_factory=list)
    effects: list[Effect] = Field(default_factory=list)


class ChooseOneInput(BaseModel):
    """Pick one of several choices; the recorded choice is its index."""

    type: Literal["choose_one"] = "choose_one"
    choices: list[Choice]


class BinaryInput(BaseModel):
    """Yes/no question recorded as a decision."""

    type: Literal["binary"] = "binary"
    text: str = ""
    effects: list[Effect] = Field(default_factory=list)
    yes_steps: list[str] = Field(default_factory=list)
    no_steps: list[str] = Field(default_factory=list)


class CounterInput(BaseModel):
    type: Literal["counter"] = "counter"
    text: str = ""
    max: int | None = None
    effects: list[Effect] = Field(default_factory=list)
    steps: list[str] = Field(default_factory=list)


class TextBoxInput(BaseModel):
    type: Literal["text_box"] = "text_box"
    text: str = ""
    section: str | None = None


class PlayScenarioBranch(BaseModel):
    id: str
    text: str = ""
    steps: list[str] = Field(default_factory=list)


class PlayScenarioCampaignLog(BaseModel):
    """An entry players may record in the log while the scenario is in play."""

    id: str
    text: str = ""
    effects: list[Effect] = Field(default_factory=list)


class PlayScenarioInput(BaseModel):
    """The 'play the scenario' prompt.

    Choice ``0`` means the scenario was played through to a resolution;
    choice ``n`` selects ``branches[n - 1]``.
    """

    type: Literal["play_scenario"] = "play_scenario"
    no_resolutions: bool = False
    branches: list[PlayScenarioBranch] = Field(default_factory=list)
    campaign_log: list[PlayScenarioCampaignLog] = Field(default_factory=list)


class InvestigatorStatusInput(BaseModel):
    """End-of-scenario status for each investigator."""

    type: Literal["investigator_status"] = "investigator_status"


class ConfirmInput(BaseModel):
    """A step the player acknowledges before the script moves on."""

    type: Literal["confirm"] = "confirm"
    text: str = ""


Input = Annotated[
    Union[
        ChooseOneInput,
        BinaryInput,
        CounterInput,
        TextBoxInput,
        PlayScenarioInput,
        InvestigatorStatusInput,
        ConfirmInput,
    ],
    Field(discriminator="type"),
]


# ------------------------------------------------------------------ #
# Steps
# ------------------------------------------------------------------ #


class BaseStep(BaseModel):
    id: str
    title: str | None = None
    text: str | None = None


class GenericStep(BaseStep):
    """Narration and/or effects applied without asking the player anything."""

    type: Literal["generic"] = "generic"
    effects: list[Effect] = Field(default_factory=list)
    steps: list[str] = Field(default_factory=list)


class InputStep(BaseStep):
    type: Literal["input"] = "input"
    input: Input


class BranchStep(BaseStep):
    type: Literal["branch"] = "branch"
    condition: Condition


def _step_kind(value: Any) -> str:
    """Authored steps without a ``type`` are generic."""
    if isinstance(value, dict):
        return value.get("type") or "generic"
    return getattr(value, "type", "generic")


Step = Annotated[
    Union[
        Annotated[GenericStep, Tag("generic")],
        Annotated[InputStep, Tag("input")],
        Annotated[BranchStep, Tag("branch")],
    ],
    Discriminator(_step_kind),
]


__all__ = [
    "BaseCondition",
    "BaseStep",
    "BinaryInput",
    "BranchStep",
    "CampaignDataCondition",
    "CampaignDataEffect",
    "CampaignLogCondition",
    "CampaignLogCountCondition",
    "CampaignLogCountEffect",
    "CampaignLogEffect",
    "Choice",
    "ChooseOneInput",
    "Condition",
    "ConfirmInput",
    "CounterInput",
    "EarnXpEffect",
    "Effect",
    "GenericStep",
    "Input",
    "InputStep",
    "InvestigatorStatusInput",
    "PlayScenarioBranch",
    "PlayScenarioCampaignLog",
    "PlayScenarioInput",
    "ScenarioDataCondition",
    "ScenarioDataEffect",
    "Step",
    "TextBoxInput",
    "TraumaEffect",
]
