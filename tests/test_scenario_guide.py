"""
Tests for the single-scenario step executor.
"""

import pytest

from guided_campaign.campaign_log import EffectsWithInput, GuidedCampaignLog
from guided_campaign.models import Scenario
from guided_campaign.scenario_guide import MAX_STEPS_PER_SCENARIO, ScenarioGuide, ScenarioStepError
from guided_campaign.steps import (
    BranchStep,
    CampaignLogCountEffect,
    CampaignLogEffect,
    GenericStep,
    InputStep,
)


@pytest.fixture
def log(campaign_guide, campaign_state) -> GuidedCampaignLog:
    return GuidedCampaignLog([], campaign_guide, campaign_state, False)


def guide_for(campaign_guide, log, scenario_id: str, side: bool = False) -> ScenarioGuide:
    unprocessed = campaign_guide.find_scenario(scenario_id)
    return ScenarioGuide(scenario_id, unprocessed.scenario, side, campaign_guide, log, False)


def scripted(campaign_guide, log, setup: list[str], steps: list[dict]) -> ScenarioGuide:
    scenario = Scenario.model_validate(
        {"id": "x", "scenario_name": "X", "full_name": "X", "setup": setup, "steps": steps}
    )
    return ScenarioGuide("x", scenario, False, campaign_guide, log, False)


class TestStepResolution:
    """Test how step ids resolve."""

    def test_own_steps_first(self, campaign_guide, log):
        guide = guide_for(campaign_guide, log, "s1")
        step = guide.step("$play_scenario")
        assert isinstance(step, InputStep)
        assert step.input.type == "play_scenario"

    def test_falls_back_to_fixed_steps(self, campaign_guide, log):
        guide = guide_for(campaign_guide, log, "s1")
        assert guide.step("$proceed").input.type == "confirm"
        assert guide.step("$upgrade_decks") is not None
        assert guide.step("nope") is None

    def test_untyped_steps_are_generic(self, campaign_guide, log):
        guide = guide_for(campaign_guide, log, "s1")
        assert isinstance(guide.step("s1_intro"), GenericStep)
        assert isinstance(guide_for(campaign_guide, log, "s2").step("s2_check"), BranchStep)

    def test_names(self, campaign_guide, log):
        guide = guide_for(campaign_guide, log, "s1")
        assert guide.id == "s1"
        assert guide.scenario_name == "First"
        assert guide.full_name == "I: First"
        assert guide.scenario_type() == "scenario"


class TestSetupSteps:
    """Test walking a scenario script."""

    def test_waits_on_first_unanswered_input(self, campaign_guide, log, driver):
        guide = guide_for(campaign_guide, log, "s1")
        result = guide.setup_steps(driver.scenario("s1"))
        assert result.in_progress
        assert [s.step.id for s in result.steps] == ["s1_intro", "$play_scenario"]
        assert [s.complete for s in result.steps] == [True, False]

    def test_runs_to_completion(self, campaign_guide, log, driver):
        driver.complete_s1(resolution=0, xp=3)
        guide = guide_for(campaign_guide, log, "s1")
        result = guide.setup_steps(driver.scenario("s1"))

        assert not result.in_progress
        assert all(s.complete for s in result.steps)
        final = result.latest_campaign_log
        assert final.scenario_status("s1") == "completed"
        assert final.has_entry("memories", "house_burned")
        assert final.earned_xp("daisy") == 3
        # Starting log is untouched
        assert log.scenario_status("s1") == "unknown"

    def test_play_scenario_campaign_log_options(self, campaign_guide, log, driver):
        driver.complete_s1(clue=True)
        result = guide_for(campaign_guide, log, "s1").setup_steps(driver.scenario("s1"))
        assert result.latest_campaign_log.has_entry("memories", "found_clue")

    def test_play_scenario_branch(self, campaign_guide, log, driver):
        side = driver.scenario("side_a")
        side.set_choice("$play_scenario", 1)
        side.set_decision("$proceed", True)
        result = guide_for(campaign_guide, log, "side_a", side=True).setup_steps(side)
        assert [s.step.id for s in result.steps] == ["$play_scenario", "side_a_bonus", "$proceed"]
        assert result.latest_campaign_log.earned_xp("daisy") == 1

    def test_play_scenario_branch_out_of_range(self, campaign_guide, log, driver):
        side = driver.scenario("side_a")
        side.set_choice("$play_scenario", 2)
        with pytest.raises(ScenarioStepError, match="out of range"):
            guide_for(campaign_guide, log, "side_a", side=True).setup_steps(side)

    def test_choice_out_of_range(self, campaign_guide, log, driver):
        s1 = driver.scenario("s1")
        s1.set_choice("$play_scenario", 0)
        s1.set_choice("s1_resolution", 7)
        with pytest.raises(ScenarioStepError, match="out of range"):
            guide_for(campaign_guide, log, "s1").setup_steps(s1)

    def test_branch_true_and_false(self, campaign_guide, log, driver):
        s2 = driver.scenario("s2")
        s2.set_decision("$proceed", True)
        guide = guide_for(campaign_guide, log, "s2")

        standing = guide.setup_steps(s2)
        assert [s.step.id for s in standing.steps] == ["s2_check", "s2_standing", "$proceed"]
        assert standing.latest_campaign_log.investigator_data("daisy").physical == 1

        burned_log = log.with_effects(
            EffectsWithInput(
                scenario_id="s1",
                effects=[CampaignLogEffect(section="memories", id="house_burned")],
            )
        )
        burned = guide_for(campaign_guide, burned_log, "s2").setup_steps(s2)
        assert [s.step.id for s in burned.steps] == ["s2_check", "s2_burned", "$proceed"]
        assert burned.latest_campaign_log.scenario_status("s3") == "skipped"

    def test_confirm_waits_for_true(self, campaign_guide, log, driver):
        s3 = driver.scenario("s3")
        s3.set_decision("$proceed", False)
        assert guide_for(campaign_guide, log, "s3").setup_steps(s3).in_progress
        s3.set_decision("$proceed", True)
        assert not guide_for(campaign_guide, log, "s3").setup_steps(s3).in_progress

    def test_missing_step_raises(self, campaign_guide, log, driver):
        guide = scripted(campaign_guide, log, ["nope"], [])
        with pytest.raises(ScenarioStepError, match="Could not find step 'nope'"):
            guide.setup_steps(driver.scenario("x"))

    def test_runaway_expansion_raises(self, campaign_guide, log, driver):
        guide = scripted(campaign_guide, log, ["loop"], [{"id": "loop", "steps": ["loop"]}])
        with pytest.raises(ScenarioStepError, match=str(MAX_STEPS_PER_SCENARIO)):
            guide.setup_steps(driver.scenario("x"))

    def test_counter_respects_max(self, campaign_guide, log, driver):
        guide = scripted(
            campaign_guide,
            log,
            ["count"],
            [
                {
                    "id": "count",
                    "type": "input",
                    "input": {
                        "type": "counter",
                        "max": 2,
                        "effects": [{"type": "campaign_log_count", "section": "tally"}],
                    },
                }
            ],
        )
        driver.scenario("x").set_count("count", 5)
        result = guide.setup_steps(driver.scenario("x"))
        assert result.latest_campaign_log.count("tally") == 2

    def test_text_box_records_entry(self, campaign_guide, log, driver):
        guide = scripted(
            campaign_guide,
            log,
            ["name"],
            [{"id": "name", "type": "input", "input": {"type": "text_box", "section": "memories"}}],
        )
        driver.scenario("x").set_text("name", "Carl")
        result = guide.setup_steps(driver.scenario("x"))
        assert result.latest_campaign_log.section_entries("memories")[0].text == "Carl"

    def test_binary_no_skips_effects(self, campaign_guide, log, driver):
        guide = scripted(
            campaign_guide,
            log,
            ["ask"],
            [
                {
                    "id": "ask",
                    "type": "input",
                    "input": {
                        "type": "binary",
                        "effects": [{"type": "campaign_log", "section": "memories", "id": "yes"}],
                        "no_steps": ["after_no"],
                    },
                },
                {"id": "after_no", "effects": [{"type": "campaign_log", "section": "memories", "id": "no"}]},
            ],
        )
        driver.scenario("x").set_decision("ask", False)
        final = guide.setup_steps(driver.scenario("x")).latest_campaign_log
        assert final.has_entry("memories", "no")
        assert not final.has_entry("memories", "yes")

    def test_count_condition(self, campaign_guide, log, driver):
        steps = [
            {
                "id": "check",
                "type": "branch",
                "condition": {
                    "type": "campaign_log_count",
                    "section": "tally",
                    "min": 2,
                    "true_steps": ["high"],
                },
            },
            {"id": "high", "effects": [{"type": "campaign_data", "setting": "difficulty", "value": "hard"}]},
        ]
        guide = scripted(campaign_guide, log, ["check"], steps)
        assert guide.setup_steps(driver.scenario("x")).latest_campaign_log.campaign_data.difficulty is None

        tallied = log.with_effects(
            EffectsWithInput(
                scenario_id="x",
                effects=[CampaignLogCountEffect(section="tally", operation="set", value=2)],
            )
        )
        guide = scripted(campaign_guide, tallied, ["check"], steps)
        assert guide.setup_steps(driver.scenario("x")).latest_campaign_log.campaign_data.difficulty == "hard"

