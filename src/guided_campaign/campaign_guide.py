"""
CampaignGuide - structured access to a guided campaign.

Wraps the authored campaign, its side-scenario pool and the errata bundle,
and walks the campaign's scenario graph against the decision store to
produce the ordered trace of scenario outcomes.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass, replace
from typing import Union

from .campaign_log import GuidedCampaignLog
from .campaign_state import CampaignStateHelper, GuideSideScenarioInput
from .fixed_steps import (
    CAMPAIGN_SETUP_ID,
    PLAY_SCENARIO_STEP_ID,
    PROCEED_STEP_ID,
    UPGRADE_DECKS_STEP_ID,
    create_investigator_status_step,
)
from .models import (
    Achievement,
    CampaignCard,
    CampaignLogText,
    CampaignMap,
    CampaignRule,
    CardErrata,
    CustomData,
    Errata,
    FullCampaign,
    LogSectionDefinition,
    Partner,
    Question,
    Scenario,
    Supply,
)
from .processed import (
    ProcessedCampaign,
    ProcessedScenario,
    UnprocessedScenario,
    embark_destination,
)
from .scenario_guide import ScenarioGuide
from .scenario_id import ScenarioId, parse_scenario_id
from .scenario_state import ScenarioStateHelper
from .steps import (
    CounterInput,
    EarnXpEffect,
    GenericStep,
    InputStep,
    PlayScenarioInput,
    Step,
)

logger = logging.getLogger("guided-campaign")

CARD_REGEX = re.compile(r"\d\d\d\d\d[a-z]?")
INPUT_VALUE_SECTION = "$input_value"
OZ = "zoz"

# Letters these languages sort after 'z' instead of folding onto a base letter
_LETTERS_AFTER_Z = {
    "sv": "åäö",
    "fi": "åäö",
    "da": "æøå",
    "nb": "æøå",
    "no": "æøå",
}


class CampaignGuideError(Exception):
    """Base error for campaign guide operations."""

    pass


class CampaignUpdateRequiredError(CampaignGuideError):
    """Referenced content is not known locally; the app or content must be updated."""

    def __init__(self, scenario_id: str | None = None):
        self.scenario_id = scenario_id
        super().__init__("An app update is required to access this campaign.")


class CampaignLoopError(CampaignGuideError):
    """A scenario chain pointed back at a scenario it already visited."""

    pass


class LogEntryError(CampaignGuideError):
    """A campaign log section or entry could not be resolved."""

    def __init__(self, message: str, section_id: str, entry_id: str | None = None):
        self.section_id = section_id
        self.entry_id = entry_id
        super().__init__(message)


@dataclass
class LogSection:
    section: str


@dataclass
class LogEntryCard(LogSection):
    code: str
    type: str = "card"


@dataclass
class LogEntrySectionCount(LogSection):
    type: str = "section_count"


@dataclass
class LogEntryText(LogSection):
    text: str
    feminine_text: str | None = None
    nonbinary_text: str | None = None
    type: str = "text"


@dataclass
class LogEntrySupplies(LogSection):
    supply: Supply
    type: str = "supplies"


@dataclass
class LogEntryInvestigatorCount(LogSection):
    type: str = "investigator_count"


LogEntry = Union[
    LogEntrySectionCount,
    LogEntryCard,
    LogEntryText,
    LogEntrySupplies,
    LogEntryInvestigatorCount,
]


def title_sort_key(title: str, lang: str) -> str:
    """Accent- and case-insensitive collation key for rule titles."""
    late_letters = _LETTERS_AFTER_Z.get(lang.split("-")[0].lower(), "")
    chars = []
    for char in title.casefold():
        if char in late_letters:
            chars.append(chr(ord("z") + 1 + late_letters.index(char)))
            continue
        decomposed = unicodedata.normalize("NFKD", char)
        chars.append("".join(c for c in decomposed if not unicodedata.combining(c)))
    return "".join(chars)


def sort_rules(rules: list[CampaignRule], lang: str) -> list[CampaignRule]:
    return sorted(rules, key=lambda rule: title_sort_key(rule.title, lang))


class CampaignGuide:
    """Wrapper utility providing structured access to one campaign.

    Args:
        campaign: The authored campaign and its scenarios.
        log: Display text for campaign log entries and supplies.
        encounter_sets: Encounter set code to display name.
        side_campaign: The pool of authored side scenarios.
        errata: Card errata and FAQ bundle.
    """

    def __init__(
        self,
        campaign: FullCampaign,
        log: CampaignLogText,
        encounter_sets: dict[str, str],
        side_campaign: FullCampaign,
        errata: Errata,
    ):
        self.campaign = campaign
        self.log = log
        self.encounter_sets = encounter_sets
        self.side_campaign = side_campaign
        self.errata = errata

    # ------------------------------------------------------------------ #
    # Static content lookups
    # ------------------------------------------------------------------ #

    def card_errata(self, encounter_sets: list[str]) -> list[CardErrata]:
        sets = set(encounter_sets)
        return [
            card
            for errata in self.errata.cards
            if errata.encounter_code in sets
            for card in errata.cards
        ]

    def include_parallel_investigators(self) -> bool:
        return self.campaign_cycle_code() == OZ

    def scenario_setup_step_ids(self) -> list[str]:
        return list(self.campaign.campaign.scenario_setup)

    def side_scenario_resolution_step_ids(self) -> list[str]:
        return list(self.campaign.campaign.side_scenario_resolution)

    def tarot_scenarios(self) -> list[str] | None:
        return self.campaign.campaign.tarot

    def campaign_faq(self) -> list[Question]:
        for faq in self.errata.campaign_faq:
            if self.campaign.campaign.id in faq.cycles:
                return faq.questions
        return []

    def scenario_faq(self, scenario_id: str) -> list[Question]:
        for faq in self.errata.faq:
            if faq.scenario_code == scenario_id and (
                not faq.campaign_code or faq.campaign_code == self.campaign.campaign.id
            ):
                return faq.questions
        return []

    def campaign_rules(self, lang: str) -> list[CampaignRule]:
        return sort_rules(self.campaign.campaign.rules, lang)

    def scenario_rules(self, lang: str, scenario_id: str | None) -> list[CampaignRule]:
        """Campaign rules plus the scenario's own, sorted by localized title."""
        if not scenario_id or scenario_id == CAMPAIGN_SETUP_ID:
            return self.campaign_rules(lang)
        scenario = self.find_scenario_data(parse_scenario_id(scenario_id).scenario_id)
        return sort_rules(
            [*self.campaign.campaign.rules, *(scenario.rules if scenario else [])],
            lang,
        )

    def campaign_map(self) -> CampaignMap | None:
        return self.campaign.campaign.map

    def side_scenarios(self) -> list[Scenario]:
        """Authored side scenarios, in the side campaign's declared order."""
        by_id = {scenario.id: scenario for scenario in self.side_campaign.scenarios}
        return [
            by_id[scenario_id]
            for scenario_id in self.side_campaign.campaign.scenarios
            if scenario_id in by_id
        ]

    def card(self, code: str) -> CampaignCard | None:
        for card in self.campaign.campaign.cards:
            if card.code == code:
                return card
        return None

    def achievements(self) -> list[Achievement]:
        return list(self.campaign.campaign.achievements)

    def campaign_cycle_code(self) -> str:
        return self.campaign.campaign.id

    def campaign_custom_data(self) -> CustomData | None:
        return self.campaign.campaign.custom

    def campaign_name(self) -> str:
        return self.campaign.campaign.name

    def campaign_no_side_scenario_xp(self) -> bool:
        return self.campaign.campaign.no_side_scenario_xp

    def campaign_version(self) -> int:
        return self.campaign.campaign.version

    def encounter_set(self, code: str) -> str | None:
        return self.encounter_sets.get(code)

    def get_full_scenario_name(self, encoded_scenario_id: str) -> str | None:
        scenario = self.find_scenario_data(parse_scenario_id(encoded_scenario_id).scenario_id)
        return scenario.full_name if scenario else None

    def find_scenario_data(self, scenario_id: str) -> Scenario | None:
        for scenario in self.campaign.scenarios:
            if scenario.id == scenario_id:
                return scenario
        return None

    def _find_side_scenario_data(self, scenario_id: str) -> Scenario | None:
        for scenario in self.side_campaign.scenarios:
            if scenario.id == scenario_id:
                return scenario
        return None

    def scenario_name(self, scenario_id: str) -> str | None:
        scenario = self.find_scenario_data(scenario_id)
        return scenario.scenario_name if scenario else None

    def campaign_step(self, step_id: str) -> Step | None:
        """Campaign-level step shared by scenarios (setup or side-scenario steps)."""
        for step in [*self.campaign.campaign.steps, *self.campaign.campaign.side_scenario_steps]:
            if step.id == step_id:
                return step
        return None

    def campaign_log_sections(self) -> list[LogSectionDefinition]:
        return list(self.campaign.campaign.campaign_log)

    def campaign_log_partners(self, section_id: str) -> list[Partner]:
        for section in self.campaign.campaign.campaign_log:
            if section.id == section_id and section.type == "partner":
                return list(section.partners)
        return []

    def prologue_scenario_id(self, scenarios: list[str] | None = None) -> str:
        return (scenarios or self.campaign.campaign.scenarios)[0]

    def all_scenario_ids(self, scenarios: list[str] | None = None) -> list[str]:
        return [CAMPAIGN_SETUP_ID, *(scenarios or self.campaign.campaign.scenarios)]

    # ------------------------------------------------------------------ #
    # Scenario lookup and graph navigation
    # ------------------------------------------------------------------ #

    def parse_scenario_id(self, encoded_scenario_id: str) -> ScenarioId:
        return parse_scenario_id(encoded_scenario_id)

    def find_scenario(self, encoded_scenario_id: str) -> UnprocessedScenario:
        """Resolve an encoded id against the main campaign, then the side pool.

        Raises:
            CampaignUpdateRequiredError: If neither pool knows the scenario.
        """
        if encoded_scenario_id == CAMPAIGN_SETUP_ID:
            return UnprocessedScenario(
                id=parse_scenario_id(CAMPAIGN_SETUP_ID),
                scenario=Scenario(
                    id=CAMPAIGN_SETUP_ID,
                    type="interlude",
                    icon=self.campaign.campaign.id,
                    scenario_name="Campaign Setup",
                    full_name="Campaign Setup",
                    setup=list(self.campaign.campaign.setup),
                    steps=list(self.campaign.campaign.steps),
                ),
                side=False,
            )
        scenario_id = parse_scenario_id(encoded_scenario_id)
        main_scenario = self.find_scenario_data(scenario_id.scenario_id)
        if main_scenario is not None:
            return UnprocessedScenario(id=scenario_id, scenario=main_scenario, side=False)
        side_scenario = self._find_side_scenario_data(scenario_id.scenario_id)
        if side_scenario is not None:
            return UnprocessedScenario(id=scenario_id, scenario=side_scenario, side=True)
        raise CampaignUpdateRequiredError(encoded_scenario_id)

    def next_scenario(
        self,
        campaign_state: CampaignStateHelper,
        campaign_log: GuidedCampaignLog,
        include_skipped: bool,
    ) -> UnprocessedScenario | None:
        """What follows the log's current scenario.

        A pending side scenario wins over a forced next scenario, which in
        turn wins over the authored scenario order.
        """
        if not campaign_log.scenario_id:
            return self.find_scenario(CAMPAIGN_SETUP_ID)
        current = parse_scenario_id(campaign_log.scenario_id)
        entry = campaign_state.side_scenario(current.encoded_scenario_id)
        if entry is not None:
            return self._side_scenario_for(entry)

        forced = campaign_log.campaign_next_scenario_id()
        if forced:
            return self.find_scenario(forced)

        scenario_ids = [
            scenario_id
            for scenario_id in self.all_scenario_ids(campaign_log.campaign_data.scenarios)
            if include_skipped or campaign_log.scenario_status(scenario_id) != "skipped"
        ]
        anchor = self._main_line_anchor(campaign_state, current, scenario_ids)
        if anchor is None:
            return None
        index = scenario_ids.index(anchor)
        if index + 1 < len(scenario_ids):
            return self.find_scenario(scenario_ids[index + 1])
        return None

    def _main_line_anchor(
        self,
        campaign_state: CampaignStateHelper,
        current: ScenarioId,
        scenario_ids: list[str],
    ) -> str | None:
        """Position in the scenario order to continue from.

        A finished side scenario resumes after the scenario it was inserted
        behind, following nested insertions back to the main line.
        """
        seen: set[str] = set()
        scenario_id = current
        while scenario_id.scenario_id not in scenario_ids:
            if scenario_id.encoded_scenario_id in seen:
                return None
            seen.add(scenario_id.encoded_scenario_id)
            origin = campaign_state.side_scenario_origin(scenario_id.encoded_scenario_id)
            if origin is None:
                return None
            scenario_id = parse_scenario_id(origin)
        return scenario_id.scenario_id

    def _side_scenario_for(self, entry: GuideSideScenarioInput) -> UnprocessedScenario:
        side_id = parse_scenario_id(entry.side_scenario)
        if entry.side_scenario_type == "custom":
            scenario: Scenario | None = self.get_custom_scenario(entry)
        else:
            scenario = self._find_side_scenario_data(side_id.scenario_id)
        if scenario is None:
            raise CampaignUpdateRequiredError(entry.side_scenario)
        return UnprocessedScenario(
            id=side_id,
            scenario=self.insert_custom_play_scenario_step(scenario),
            side=True,
        )

    def next_scenario_name(
        self,
        campaign_state: CampaignStateHelper,
        campaign_log: GuidedCampaignLog,
    ) -> str | None:
        scenario = self.next_scenario(campaign_state, campaign_log, False)
        return scenario.scenario.full_name if scenario else None

    def get_custom_scenario(self, entry: GuideSideScenarioInput) -> Scenario:
        """Build a playable scenario from a player-entered name and XP cost."""
        xp_cost = entry.xp_cost
        name = entry.name or entry.side_scenario
        points = "point" if xp_cost == 1 else "points"
        return Scenario(
            id=parse_scenario_id(entry.side_scenario).scenario_id,
            scenario_name=name,
            full_name=name,
            setup=[
                "spend_xp_cost",
                *self.scenario_setup_step_ids(),
                PLAY_SCENARIO_STEP_ID,
                "$end_of_scenario_status",
                "$earn_xp",
                UPGRADE_DECKS_STEP_ID,
                *self.side_scenario_resolution_step_ids(),
                PROCEED_STEP_ID,
            ],
            steps=[
                create_investigator_status_step("$end_of_scenario_status"),
                InputStep(
                    id="$earn_xp",
                    text=(
                        "Each investigator earns experience equal to the Victory X "
                        "value of each card in the victory display."
                    ),
                    input=CounterInput(
                        text="Victory display:",
                        effects=[EarnXpEffect(investigator="all")],
                    ),
                ),
                InputStep(
                    id=PLAY_SCENARIO_STEP_ID,
                    input=PlayScenarioInput(no_resolutions=True),
                ),
                GenericStep(
                    id="spend_xp_cost",
                    text=f"Each investigator pays {xp_cost} experience {points} to play this scenario.",
                    effects=[
                        EarnXpEffect(
                            investigator="all",
                            bonus=-xp_cost,
                            side_scenario_cost=True,
                        )
                    ],
                ),
            ],
        )

    @staticmethod
    def _play_scenario_step(steps: list[Step]) -> InputStep | None:
        for step in steps:
            if step.id == PLAY_SCENARIO_STEP_ID:
                if isinstance(step, InputStep) and isinstance(step.input, PlayScenarioInput):
                    return step
                return None
        return None

    def insert_custom_play_scenario_step(self, scenario: Scenario) -> Scenario:
        """Merge the campaign's side-scenario steps into a side scenario.

        Both play-scenario steps present: their branches and campaign log
        options are unioned, campaign first. Otherwise the campaign's block
        is prepended as-is.
        """
        campaign_steps = list(self.campaign.campaign.side_scenario_steps)
        campaign_play = self._play_scenario_step(campaign_steps)
        scenario_play = self._play_scenario_step(scenario.steps)
        if campaign_play is None or scenario_play is None:
            if not campaign_steps:
                return scenario
            return scenario.model_copy(update={"steps": [*campaign_steps, *scenario.steps]})

        merged = InputStep(
            id=PLAY_SCENARIO_STEP_ID,
            input=PlayScenarioInput(
                no_resolutions=scenario_play.input.no_resolutions,
                branches=[*campaign_play.input.branches, *scenario_play.input.branches],
                campaign_log=[
                    *campaign_play.input.campaign_log,
                    *scenario_play.input.campaign_log,
                ],
            ),
        )
        return scenario.model_copy(
            update={
                "steps": [
                    *(s for s in campaign_steps if s.id != PLAY_SCENARIO_STEP_ID),
                    *(s for s in scenario.steps if s.id != PLAY_SCENARIO_STEP_ID),
                    merged,
                ]
            }
        )

    # ------------------------------------------------------------------ #
    # Chain walk
    # ------------------------------------------------------------------ #

    def process_all_scenarios(
        self,
        campaign_state: CampaignStateHelper,
        standalone_id: str | None,
        previous_campaign: ProcessedCampaign | None,
        lang: str,
    ) -> tuple[ProcessedCampaign | None, str | None]:
        """Walk every scenario in play order.

        Returns:
            ``(campaign, None)`` on success, ``(None, message)`` if anything
            in the walk failed. A partial trace is never returned.
        """
        try:
            standalone = bool(standalone_id)
            campaign_log = GuidedCampaignLog([], self, campaign_state, standalone)
            scenarios = self._actually_process_scenario(
                self.find_scenario(standalone_id or CAMPAIGN_SETUP_ID),
                campaign_state,
                campaign_log,
                standalone,
                previous_campaign,
                lang,
            )
            if scenarios:
                campaign_log = scenarios[-1].latest_campaign_log

            scenario_ids = campaign_log.campaign_data.scenarios or self.campaign.campaign.scenarios
            for scenario_id in scenario_ids:
                if any(s.scenario_guide.id == scenario_id for s in scenarios):
                    continue
                next_scenarios = self._actually_process_scenario(
                    self.find_scenario(scenario_id),
                    campaign_state,
                    campaign_log,
                    standalone,
                    previous_campaign,
                    lang,
                    emitted=frozenset(s.id.encoded_scenario_id for s in scenarios),
                )
                scenarios.extend(next_scenarios)
                if next_scenarios:
                    campaign_log = next_scenarios[-1].latest_campaign_log

            scenarios = self._lock_extra_playable(scenarios)
            scenarios = self._keep_last_undo(scenarios)
            return ProcessedCampaign(scenarios=scenarios, campaign_log=campaign_log), None
        except Exception as e:
            logger.error(f"Failed to process campaign {self.campaign_cycle_code()}: {e}")
            return None, str(e)

    @staticmethod
    def _lock_extra_playable(scenarios: list[ProcessedScenario]) -> list[ProcessedScenario]:
        """Only the first playable (or started) scenario stays available."""
        result = []
        found_playable = False
        for scenario in scenarios:
            if scenario.type == "playable":
                if found_playable:
                    scenario = replace(scenario, type="locked")
                else:
                    found_playable = True
            if scenario.type == "started":
                found_playable = True
            result.append(scenario)
        return result

    @staticmethod
    def _keep_last_undo(scenarios: list[ProcessedScenario]) -> list[ProcessedScenario]:
        """Undo is LIFO across the campaign: only the last undoable entry keeps it."""
        result = []
        found_undoable = False
        for scenario in reversed(scenarios):
            if scenario.can_undo:
                if found_undoable:
                    scenario = replace(scenario, can_undo=False)
                else:
                    found_undoable = True
            result.append(scenario)
        result.reverse()
        return result

    def _actually_process_scenario(
        self,
        unprocessed: UnprocessedScenario,
        campaign_state: CampaignStateHelper,
        campaign_log: GuidedCampaignLog,
        standalone: bool,
        previous_campaign: ProcessedCampaign | None,
        lang: str,
        chain: frozenset[str] = frozenset(),
        emitted: frozenset[str] = frozenset(),
    ) -> list[ProcessedScenario]:
        """Process one scenario and, once it completes, everything it leads to.

        ``chain`` holds the ids visited by this recursion; ``emitted`` the
        ids produced by earlier chains of the same walk.
        """
        scenario_id = unprocessed.id
        encoded_id = scenario_id.encoded_scenario_id
        scenario = unprocessed.scenario
        scenario_guide = ScenarioGuide(
            encoded_id,
            scenario,
            unprocessed.side,
            self,
            campaign_log,
            standalone,
        )

        if not campaign_state.started_scenario(encoded_id):
            if (
                campaign_log.campaign_data.result == "lose"
                and scenario_guide.scenario_type() != "epilogue"
            ) or campaign_log.scenario_status(encoded_id) == "skipped":
                return [
                    ProcessedScenario(
                        type="skipped",
                        id=scenario_id,
                        scenario_guide=scenario_guide,
                        latest_campaign_log=campaign_log,
                    )
                ]
            return [
                ProcessedScenario(
                    type="placeholder" if scenario_guide.scenario_type() == "placeholder" else "playable",
                    id=scenario_id,
                    scenario_guide=scenario_guide,
                    latest_campaign_log=campaign_log,
                    location=embark_destination(
                        campaign_state.side_scenario_embark_data(scenario.main_scenario_id)
                    ),
                )
            ]

        inputs = [
            *campaign_state.scenario_entries(encoded_id),
            *campaign_state.linked_entries(),
        ]
        previous = previous_campaign.find(encoded_id) if previous_campaign else None
        if previous is not None and previous.played and previous.inputs == inputs:
            # Nothing that can steer this scenario changed; reuse the previous result.
            result = replace(previous, can_undo=True)
        else:
            executed = scenario_guide.setup_steps(ScenarioStateHelper(encoded_id, campaign_state))
            result = ProcessedScenario(
                type="started" if executed.in_progress else "completed",
                id=scenario_id,
                scenario_guide=scenario_guide,
                latest_campaign_log=executed.latest_campaign_log,
                can_undo=True,
                close_on_undo=campaign_state.close_on_undo(encoded_id),
                steps=executed.steps,
                location=embark_destination(
                    campaign_state.side_scenario_embark_data(scenario.main_scenario_id or encoded_id)
                ),
                inputs=inputs,
                rules=sort_rules([*self.campaign.campaign.rules, *scenario.rules], lang),
            )

        if result.type == "started":
            return [result]
        next_scenario = self.next_scenario(campaign_state, result.latest_campaign_log, True)
        if next_scenario is None:
            return [result]

        next_id = next_scenario.id.encoded_scenario_id
        visited = chain | {encoded_id}
        if next_id in visited:
            raise CampaignLoopError(
                f"Scenario {encoded_id} leads back to already visited scenario {next_id}"
            )
        if next_id in emitted:
            logger.warning(f"Scenario {encoded_id} leads to {next_id}, which was already processed")
            return [result]
        return [
            result,
            *self._actually_process_scenario(
                next_scenario,
                campaign_state,
                result.latest_campaign_log,
                standalone,
                previous_campaign,
                lang,
                chain=visited,
                emitted=emitted,
            ),
        ]

    # ------------------------------------------------------------------ #
    # Campaign log sections and entries
    # ------------------------------------------------------------------ #

    def _log_section_definition(self, section_id: str) -> LogSectionDefinition | None:
        for section in self.campaign.campaign.campaign_log:
            if section.id == section_id:
                return section
        return None

    def log_section(self, section_id: str) -> LogSection | None:
        section = self._log_section_definition(section_id)
        return LogSection(section=section.title) if section else None

    def log_entry(
        self,
        section_id: str,
        entry_id: str,
        ignore_investigator_count: bool = False,
    ) -> LogEntry:
        """Resolve a log entry id within a section into something displayable.

        Falls back to the ``$input_value`` section for ids the section's
        own text catalogue does not know.

        Raises:
            LogEntryError: If the section or entry cannot be found.
        """
        section = self._log_section_definition(section_id)
        if section is None:
            raise LogEntryError(f"Could not find section: {section_id}", section_id, entry_id)
        if section.type == "supplies":
            supply = next((s for s in self.log.supplies if s.id == entry_id), None)
            if supply is None:
                raise LogEntryError(f"Could not find Supply: {entry_id}", section_id, entry_id)
            return LogEntrySupplies(section=section.title, supply=supply)
        if section.type == "investigator_count" and not ignore_investigator_count:
            return LogEntryInvestigatorCount(section=section.title)
        if entry_id == "$count":
            return LogEntrySectionCount(section=section.title)

        text_section = next((s for s in self.log.sections if s.section == section_id), None)
        if CARD_REGEX.search(entry_id):
            return LogEntryCard(section=section.title, code=entry_id)

        if text_section is not None:
            if entry_id == "$num_entries":
                return LogEntrySectionCount(section=section.title)
            entry = next((e for e in text_section.entries if e.id == entry_id), None)
            if entry is not None:
                if entry.text is None:
                    return LogEntryText(
                        section=section.title,
                        text=entry.masculine_text or "",
                        feminine_text=entry.feminine_text,
                        nonbinary_text=entry.nonbinary_text,
                    )
                return LogEntryText(section=section.title, text=entry.text)

        detail = text_section.model_dump() if text_section else None
        if section_id != INPUT_VALUE_SECTION:
            try:
                entry = self.log_entry(INPUT_VALUE_SECTION, entry_id)
            except LogEntryError as e:
                raise LogEntryError(
                    f"Could not find section({section_id}), id({entry_id}), "
                    f"textSection({detail}), checked input value too",
                    section_id,
                    entry_id,
                ) from e
            return replace(entry, section=section_id)
        raise LogEntryError(
            f"Could not find section({section_id}), id({entry_id}), textSection({detail})",
            section_id,
            entry_id,
        )


__all__ = [
    "CARD_REGEX",
    "CampaignGuide",
    "CampaignGuideError",
    "CampaignLoopError",
    "CampaignUpdateRequiredError",
    "LogEntry",
    "LogEntryCard",
    "LogEntryError",
    "LogEntryInvestigatorCount",
    "LogEntrySectionCount",
    "LogEntrySupplies",
    "LogEntryText",
    "LogSection",
    "sort_rules",
    "title_sort_key",
]
