"""
Tests for the accumulated campaign log.
"""

import pytest

from guided_campaign.campaign_log import EffectsWithInput, GuidedCampaignLog
from guided_campaign.steps import (
    CampaignDataEffect,
    CampaignLogCountEffect,
    CampaignLogEffect,
    EarnXpEffect,
    ScenarioDataEffect,
    TraumaEffect,
)


@pytest.fixture
def log(campaign_guide, campaign_state) -> GuidedCampaignLog:
    return GuidedCampaignLog([], campaign_guide, campaign_state, False)


def effects(*items, **kwargs) -> EffectsWithInput:
    return EffectsWithInput(scenario_id="s1", effects=list(items), **kwargs)


class TestImmutability:
    """Test that every change derives a new log."""

    def test_with_effects_returns_new_log(self, log):
        updated = log.with_effects(effects(CampaignLogEffect(section="memories", id="a")))
        assert updated is not log
        assert updated.has_entry("memories", "a")
        assert not log.has_entry("memories", "a")

    def test_start_and_finish_leave_log_unchanged(self, log):
        started = log.start_scenario("s1")
        finished = started.finish_scenario("s1")
        assert log.scenario_id is None
        assert log.scenario_status("s1") == "unknown"
        assert started.scenario_status("s1") == "started"
        assert finished.scenario_status("s1") == "completed"

    def test_queries_return_copies(self, log):
        updated = log.with_effects(effects(CampaignLogEffect(section="memories", id="a")))
        updated.section_entries("memories")[0].crossed_out = True
        updated.investigator_data("daisy").earned_xp = 99
        assert updated.has_entry("memories", "a")
        assert updated.earned_xp("daisy") == 0

    def test_campaign_data_is_a_copy(self, log):
        data = log.campaign_data
        data.result = "win"
        data.scenarios = ["s3"]
        assert log.campaign_data.result is None
        assert log.campaign_data.scenarios is None

    def test_constructor_replays_entries_on_previous(self, campaign_guide, campaign_state, log):
        first = log.with_effects(effects(CampaignLogEffect(section="memories", id="a")))
        chained = GuidedCampaignLog(
            [effects(CampaignLogEffect(section="memories", id="b"))],
            campaign_guide,
            campaign_state,
            False,
            previous=first,
        )
        assert chained.has_entry("memories", "a")
        assert chained.has_entry("memories", "b")
        assert not first.has_entry("memories", "b")


class TestSections:
    """Test campaign log section effects."""

    def test_cross_out(self, log):
        log = log.with_effects(effects(CampaignLogEffect(section="memories", id="a")))
        log = log.with_effects(effects(CampaignLogEffect(section="memories", id="a", cross_out=True)))
        assert not log.has_entry("memories", "a")
        assert log.is_crossed_out("memories", "a")

    def test_remove(self, log):
        log = log.with_effects(effects(CampaignLogEffect(section="memories", id="a")))
        log = log.with_effects(effects(CampaignLogEffect(section="memories", id="a", remove=True)))
        assert log.section_entries("memories") == []

    def test_entry_text_from_input(self, log):
        log = log.with_effects(
            effects(CampaignLogEffect(section="memories", id="name"), text="Carl Sanford")
        )
        assert log.section_entries("memories")[0].text == "Carl Sanford"

    def test_counts(self, log):
        log = log.with_effects(
            effects(CampaignLogCountEffect(section="tally", operation="set", value=2))
        )
        log = log.with_effects(
            effects(CampaignLogCountEffect(section="tally", operation="add"), input_value=3)
        )
        assert log.count("tally") == 5
        log = log.with_effects(
            effects(CampaignLogCountEffect(section="tally", operation="subtract", value=10))
        )
        assert log.count("tally") == 0

    def test_named_count(self, log):
        log = log.with_effects(
            effects(CampaignLogCountEffect(section="tally", id="doom", operation="add", value=2))
        )
        assert log.count("tally", "doom") == 2
        assert log.count("tally") == 0
        assert log.count("missing") == 0


class TestScenarioData:
    """Test scenario status and campaign data."""

    def test_unknown_status_by_default(self, log):
        assert log.scenario_status("anything") == "unknown"

    def test_skip_scenario(self, log):
        log = log.with_effects(
            effects(ScenarioDataEffect(setting="skip_scenario", scenario="s3"))
        )
        assert log.scenario_status("s3") == "skipped"

    def test_skip_requires_scenario(self, log):
        with pytest.raises(ValueError):
            log.with_effects(effects(ScenarioDataEffect(setting="skip_scenario")))

    def test_resolution_survives_finish(self, log):
        log = log.start_scenario("s1")
        log = log.with_effects(
            effects(ScenarioDataEffect(setting="resolution", resolution="R2"))
        )
        log = log.finish_scenario("s1")
        assert log.scenario_status("s1") == "resolution"
        assert log.resolution("s1") == "R2"

    def test_restart_keeps_completed_status(self, log):
        log = log.start_scenario("s1").finish_scenario("s1").start_scenario("s1")
        assert log.scenario_status("s1") == "completed"

    def test_campaign_data(self, log):
        log = log.with_effects(
            effects(
                CampaignDataEffect(setting="result", value="win"),
                CampaignDataEffect(setting="difficulty", value="hard"),
                CampaignDataEffect(setting="scenarios", scenarios=["s2", "s1"]),
            )
        )
        assert log.campaign_data.result == "win"
        assert log.campaign_data.difficulty == "hard"
        assert log.campaign_data.scenarios == ["s2", "s1"]

    def test_starting_forced_next_clears_it(self, log):
        log = log.with_effects(
            effects(CampaignDataEffect(setting="next_scenario", value="s3"))
        )
        assert log.campaign_next_scenario_id() == "s3"
        assert log.start_scenario("s2").campaign_next_scenario_id() == "s3"
        assert log.start_scenario("s3").campaign_next_scenario_id() is None
        assert log.start_scenario("s3#1").campaign_next_scenario_id() is None


class TestInvestigators:
    """Test XP and trauma bookkeeping."""

    def test_roster_from_state(self, log):
        assert log.investigators() == ["daisy", "roland"]

    def test_earn_xp_from_input_value(self, log):
        log = log.with_effects(effects(EarnXpEffect(), input_value=4))
        assert log.earned_xp("daisy") == 4
        assert log.earned_xp("roland") == 4
        assert log.earned_xp("nobody") == 0

    def test_earn_xp_for_one_investigator(self, log):
        log = log.with_effects(effects(EarnXpEffect(investigator="roland", bonus=2)))
        assert log.earned_xp("daisy") == 0
        assert log.earned_xp("roland") == 2

    def test_side_scenario_cost(self, log):
        log = log.with_effects(effects(EarnXpEffect(bonus=5)))
        log = log.with_effects(effects(EarnXpEffect(bonus=-3, side_scenario_cost=True)))
        assert log.earned_xp("daisy") == 5
        assert log.investigator_data("daisy").side_scenario_xp == -3
        assert log.total_xp("daisy") == 2
        assert log.total_xp("nobody") == 0

    def test_side_scenario_cost_ignored_when_campaign_waives_it(
        self, campaign_data, campaign_state, guide_factory
    ):
        campaign_data["campaign"]["no_side_scenario_xp"] = True
        log = GuidedCampaignLog([], guide_factory(campaign_data), campaign_state, False)
        log = log.with_effects(effects(EarnXpEffect(bonus=-3, side_scenario_cost=True)))
        assert log.total_xp("daisy") == 0

    def test_trauma_and_elimination(self, log):
        log = log.with_effects(
            effects(
                TraumaEffect(physical=1),
                TraumaEffect(investigator="roland", mental=2, insane=True),
            )
        )
        assert log.investigator_data("daisy").physical == 1
        assert log.investigator_data("roland").mental == 2
        assert log.investigators() == ["daisy"]
        assert log.investigators(include_eliminated=True) == ["daisy", "roland"]

    def test_eliminated_investigators_earn_nothing(self, log):
        log = log.with_effects(effects(TraumaEffect(investigator="roland", killed=True)))
        log = log.with_effects(effects(EarnXpEffect(), input_value=3))
        assert log.earned_xp("daisy") == 3
        assert log.earned_xp("roland") == 0

    def test_lead_investigator(self, log):
        log = log.with_effects(effects(EarnXpEffect(investigator="lead", bonus=1)))
        assert log.earned_xp("daisy") == 1
        assert log.earned_xp("roland") == 0
