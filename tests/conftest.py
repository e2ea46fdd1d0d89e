"""
Pytest configuration and fixtures for guided-campaign tests.
"""

import copy
import sys
from pathlib import Path
from typing import Any

import pytest

# Add src directory to Python path to allow importing guided_campaign
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from guided_campaign.campaign_guide import CampaignGuide  # noqa: E402
from guided_campaign.campaign_state import CampaignStateHelper, GuideState  # noqa: E402
from guided_campaign.fixed_steps import CAMPAIGN_SETUP_ID  # noqa: E402
from guided_campaign.models import CampaignLogText, Errata, FullCampaign  # noqa: E402
from guided_campaign.processed import ProcessedCampaign  # noqa: E402
from guided_campaign.scenario_state import ScenarioStateHelper  # noqa: E402


# Configure anyio to only use asyncio (not trio)
@pytest.fixture
def anyio_backend():
    return "asyncio"


# --- Mock Campaign Content ---


CAMPAIGN_DATA: dict[str, Any] = {
    "campaign": {
        "id": "test_cycle",
        "name": "The Test Cycle",
        "version": 2,
        "scenarios": ["s1", "s2", "s3", "epilogue"],
        "setup": ["setup_intro"],
        "steps": [{"id": "setup_intro", "text": "Welcome to the campaign."}],
        "campaign_log": [
            {"id": "memories", "title": "Memories"},
            {"id": "supplies", "title": "Supplies", "type": "supplies"},
            {"id": "tally", "title": "Tally", "type": "count"},
            {"id": "roster", "title": "Roster", "type": "investigator_count"},
            {"id": "$input_value", "title": "Input", "type": "hidden"},
        ],
        "rules": [
            {"id": "zeal", "title": "Zeal", "text": "Be zealous."},
            {"id": "orn", "title": "Örn", "text": "An eagle."},
            {"id": "elan", "title": "Élan", "text": "Move with élan."},
            {"id": "ability", "title": "Ability", "text": "Be able."},
        ],
        "cards": [{"code": "90001", "name": "Relic"}],
    },
    "scenarios": [
        {
            "id": "s1",
            "scenario_name": "First",
            "full_name": "I: First",
            "setup": ["s1_intro", "$play_scenario", "s1_resolution", "s1_xp", "$proceed"],
            "rules": [{"id": "darkness", "title": "Darkness", "text": "It is dark."}],
            "steps": [
                {"id": "s1_intro", "text": "It begins."},
                {
                    "id": "$play_scenario",
                    "type": "input",
                    "input": {
                        "type": "play_scenario",
                        "campaign_log": [
                            {
                                "id": "found_clue",
                                "text": "Found a clue",
                                "effects": [
                                    {"type": "campaign_log", "section": "memories", "id": "found_clue"}
                                ],
                            }
                        ],
                    },
                },
                {
                    "id": "s1_resolution",
                    "type": "input",
                    "input": {
                        "type": "choose_one",
                        "choices": [
                            {
                                "id": "r1",
                                "text": "Resolution 1",
                                "effects": [
                                    {"type": "campaign_log", "section": "memories", "id": "house_burned"}
                                ],
                            },
                            {
                                "id": "r2",
                                "text": "Resolution 2",
                                "effects": [
                                    {"type": "campaign_log", "section": "memories", "id": "house_standing"}
                                ],
                            },
                            {
                                "id": "r3",
                                "text": "Defeat",
                                "effects": [
                                    {"type": "campaign_data", "setting": "result", "value": "lose"}
                                ],
                            },
                        ],
                    },
                },
                {
                    "id": "s1_xp",
                    "type": "input",
                    "input": {
                        "type": "counter",
                        "text": "Victory display",
                        "effects": [{"type": "earn_xp"}],
                    },
                },
            ],
        },
        {
            "id": "s2",
            "scenario_name": "Second",
            "full_name": "II: Second",
            "setup": ["s2_check", "$proceed"],
            "steps": [
                {
                    "id": "s2_check",
                    "type": "branch",
                    "condition": {
                        "type": "campaign_log",
                        "section": "memories",
                        "id": "house_burned",
                        "true_steps": ["s2_burned"],
                        "false_steps": ["s2_standing"],
                    },
                },
                {
                    "id": "s2_burned",
                    "effects": [{"type": "scenario_data", "setting": "skip_scenario", "scenario": "s3"}],
                },
                {"id": "s2_standing", "effects": [{"type": "trauma", "physical": 1}]},
            ],
        },
        {
            "id": "s3",
            "scenario_name": "Third",
            "full_name": "III: Third",
            "setup": ["$proceed"],
        },
        {
            "id": "epilogue",
            "scenario_name": "Epilogue",
            "full_name": "Epilogue",
            "type": "epilogue",
            "setup": ["$proceed"],
        },
    ],
}

SIDE_CAMPAIGN_DATA: dict[str, Any] = {
    "campaign": {"id": "side", "name": "Side Stories", "scenarios": ["side_a"]},
    "scenarios": [
        {
            "id": "side_a",
            "scenario_name": "Side A",
            "full_name": "Side A",
            "xp_cost": 2,
            "setup": ["$play_scenario", "$proceed"],
            "steps": [
                {
                    "id": "$play_scenario",
                    "type": "input",
                    "input": {
                        "type": "play_scenario",
                        "branches": [{"id": "side_branch", "text": "Bonus", "steps": ["side_a_bonus"]}],
                    },
                },
                {"id": "side_a_bonus", "effects": [{"type": "earn_xp", "bonus": 1}]},
            ],
        }
    ],
}

LOG_TEXT_DATA: dict[str, Any] = {
    "campaign_id": "test_cycle",
    "sections": [
        {
            "section": "memories",
            "entries": [
                {"id": "house_burned", "text": "The house burned down."},
                {
                    "id": "found_clue",
                    "masculine_text": "He found a clue.",
                    "feminine_text": "She found a clue.",
                    "nonbinary_text": "They found a clue.",
                },
            ],
        },
        {"section": "$input_value", "entries": [{"id": "spoken_name", "text": "A spoken name"}]},
    ],
    "supplies": [{"id": "rope", "name": "Rope", "description": "Climb things."}],
}

ERRATA_DATA: dict[str, Any] = {
    "cards": [
        {"encounter_code": "ghouls", "cards": [{"code": ["01160"], "text": "Ghoul errata."}]},
        {"encounter_code": "rats", "cards": [{"code": ["01159"], "text": "Rat errata."}]},
    ],
    "faq": [
        {"scenario_code": "s1", "questions": [{"question": "Can I flee?", "answer": "No."}]},
        {
            "scenario_code": "s2",
            "campaign_code": "other_cycle",
            "questions": [{"question": "Wrong cycle?", "answer": "Yes."}],
        },
    ],
    "campaign_faq": [
        {"cycles": ["test_cycle"], "questions": [{"question": "Deck size?", "answer": "30."}]}
    ],
}


def build_guide(
    campaign_data: dict[str, Any] | None = None,
    side_data: dict[str, Any] | None = None,
) -> CampaignGuide:
    return CampaignGuide(
        FullCampaign.model_validate(campaign_data or CAMPAIGN_DATA),
        CampaignLogText.model_validate(LOG_TEXT_DATA),
        {"ghouls": "The Ghouls"},
        FullCampaign.model_validate(side_data or SIDE_CAMPAIGN_DATA),
        Errata.model_validate(ERRATA_DATA),
    )


class CampaignDriver:
    """Records decisions the way a player working through the guide would."""

    def __init__(self, guide: CampaignGuide, state: CampaignStateHelper):
        self.guide = guide
        self.state = state

    def walk(self, previous: ProcessedCampaign | None = None, lang: str = "en") -> ProcessedCampaign:
        campaign, error = self.guide.process_all_scenarios(self.state, None, previous, lang)
        assert error is None, error
        assert campaign is not None
        return campaign

    def scenario(self, scenario_id: str) -> ScenarioStateHelper:
        return ScenarioStateHelper(scenario_id, self.state)

    def complete_setup(self) -> None:
        self.state.start_scenario(CAMPAIGN_SETUP_ID)

    def complete_s1(self, resolution: int = 0, xp: int = 3, clue: bool = False) -> None:
        self.state.start_scenario("s1")
        s1 = self.scenario("s1")
        if clue:
            s1.set_number_choices("$play_scenario", {"found_clue": [1]})
        s1.set_choice("$play_scenario", 0)
        s1.set_choice("s1_resolution", resolution)
        s1.set_count("s1_xp", xp)
        s1.set_decision("$proceed", True)

    def complete_proceed_only(self, scenario_id: str) -> None:
        self.state.start_scenario(scenario_id)
        self.scenario(scenario_id).set_decision("$proceed", True)


@pytest.fixture
def campaign_data() -> dict[str, Any]:
    """Deep copy of the mock campaign, safe to edit per test."""
    return copy.deepcopy(CAMPAIGN_DATA)


@pytest.fixture
def campaign_guide() -> CampaignGuide:
    return build_guide()


@pytest.fixture
def campaign_state() -> CampaignStateHelper:
    return CampaignStateHelper(GuideState(campaign_id="test_cycle", investigators=["daisy", "roland"]))


@pytest.fixture
def driver(campaign_guide: CampaignGuide, campaign_state: CampaignStateHelper) -> CampaignDriver:
    return CampaignDriver(campaign_guide, campaign_state)


@pytest.fixture
def guide_factory():
    """Builds a guide from edited campaign data."""
    return build_guide
