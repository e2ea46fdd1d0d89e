"""
Data models for authored campaign content.

Campaign and scenario definitions, the campaign log schema, the text
catalogue of log entries, and the errata/FAQ bundle. All of these are
loaded once and never modified afterwards.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from .steps import Step


ScenarioType = Literal["scenario", "interlude", "epilogue", "placeholder"]


class CampaignRule(BaseModel):
    """A rule reminder surfaced alongside a scenario."""

    id: str
    title: str
    text: str = ""


class Partner(BaseModel):
    code: str
    name: str
    description: str = ""


class Supply(BaseModel):
    id: str
    name: str
    description: str = ""
    multiple: bool = False


class LogSectionDefinition(BaseModel):
    """Schema of one campaign log section."""

    id: str
    title: str
    type: Literal[
        "text", "count", "supplies", "investigator_count", "partner", "card", "hidden"
    ] = "text"
    partners: list[Partner] = Field(default_factory=list)


class CampaignCard(BaseModel):
    code: str
    name: str
    gender: Literal["m", "f", "nb"] | None = None
    description: str | None = None
    img: str | None = None


class Achievement(BaseModel):
    id: str
    title: str
    description: str = ""
    type: Literal["binary", "count"] = "binary"
    max: int | None = None


class CampaignMap(BaseModel):
    width: float
    height: float
    locations: list[dict[str, Any]] = Field(default_factory=list)


class CustomData(BaseModel):
    """Attribution for fan-made content."""

    creator: str
    download_link: str | None = None


class Scenario(BaseModel):
    """A single playable unit with its own step script."""

    id: str
    scenario_name: str
    full_name: str
    header: str = ""
    type: ScenarioType = "scenario"
    icon: str | None = None
    setup: list[str] = Field(default_factory=list, description="Ordered step ids")
    steps: list[Step] = Field(default_factory=list)
    main_scenario_id: str | None = Field(
        default=None, description="Parent scenario when this is a side scenario"
    )
    xp_cost: int | None = None
    rules: list[CampaignRule] = Field(default_factory=list)
    custom: CustomData | None = None


class Campaign(BaseModel):
    """Campaign-level definition: scenario order, setup script and log schema."""

    id: str
    name: str
    version: int = 1
    scenarios: list[str] = Field(default_factory=list)
    setup: list[str] = Field(default_factory=list)
    steps: list[Step] = Field(default_factory=list)
    side_scenario_steps: list[Step] = Field(default_factory=list)
    scenario_setup: list[str] = Field(default_factory=list)
    side_scenario_resolution: list[str] = Field(default_factory=list)
    campaign_log: list[LogSectionDefinition] = Field(default_factory=list)
    rules: list[CampaignRule] = Field(default_factory=list)
    cards: list[CampaignCard] = Field(default_factory=list)
    achievements: list[Achievement] = Field(default_factory=list)
    map: CampaignMap | None = None
    tarot: list[str] | None = None
    custom: CustomData | None = None
    no_side_scenario_xp: bool = False


class FullCampaign(BaseModel):
    campaign: Campaign
    scenarios: list[Scenario] = Field(default_factory=list)


# ------------------------------------------------------------------ #
# Log entry text catalogue
# ------------------------------------------------------------------ #


class CampaignLogEntryText(BaseModel):
    """Display text for a log entry; gendered variants replace ``text`` when set."""

    id: str
    text: str | None = None
    masculine_text: str | None = None
    feminine_text: str | None = None
    nonbinary_text: str | None = None


class CampaignLogTextSection(BaseModel):
    section: str
    entries: list[CampaignLogEntryText] = Field(default_factory=list)


class CampaignLogText(BaseModel):
    campaign_id: str
    sections: list[CampaignLogTextSection] = Field(default_factory=list)
    supplies: list[Supply] = Field(default_factory=list)


# ------------------------------------------------------------------ #
# Errata and FAQ
# ------------------------------------------------------------------ #


class Question(BaseModel):
    question: str
    answer: str


class ScenarioFaq(BaseModel):
    scenario_code: str
    campaign_code: str | None = None
    questions: list[Question] = Field(default_factory=list)


class CampaignFaq(BaseModel):
    cycles: list[str] = Field(default_factory=list)
    questions: list[Question] = Field(default_factory=list)


class CardErrata(BaseModel):
    code: list[str] = Field(default_factory=list)
    text: str


class EncounterErrata(BaseModel):
    encounter_code: str
    cards: list[CardErrata] = Field(default_factory=list)


class Errata(BaseModel):
    cards: list[EncounterErrata] = Field(default_factory=list)
    faq: list[ScenarioFaq] = Field(default_factory=list)
    campaign_faq: list[CampaignFaq] = Field(default_factory=list)


__all__ = [
    "Achievement",
    "Campaign",
    "CampaignCard",
    "CampaignFaq",
    "CampaignLogEntryText",
    "CampaignLogText",
    "CampaignLogTextSection",
    "CampaignMap",
    "CampaignRule",
    "CardErrata",
    "CustomData",
    "EncounterErrata",
    "Errata",
    "FullCampaign",
    "LogSectionDefinition",
    "Partner",
    "Question",
    "Scenario",
    "ScenarioFaq",
    "ScenarioType",
    "Supply",
]
