"""
Single-scenario step executor.

Walks a scenario's step script against the recorded decisions, applying
effects to a fresh campaign log, until it either runs out of steps
(completed) or reaches an input nobody has answered yet (in progress).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .campaign_log import EffectsWithInput, GuidedCampaignLog
from .fixed_steps import FIXED_STEPS
from .models import Scenario, ScenarioType
from .steps import (
    BinaryInput,
    BranchStep,
    CampaignDataCondition,
    CampaignLogCondition,
    CampaignLogCountCondition,
    CampaignLogEffect,
    ChooseOneInput,
    Condition,
    ConfirmInput,
    CounterInput,
    Effect,
    GenericStep,
    InputStep,
    InvestigatorStatusInput,
    PlayScenarioInput,
    ScenarioDataCondition,
    Step,
    TextBoxInput,
    TraumaEffect,
)

if TYPE_CHECKING:
    from .campaign_guide import CampaignGuide
    from .scenario_state import ScenarioStateHelper

logger = logging.getLogger("guided-campaign")

MAX_STEPS_PER_SCENARIO = 500


class ScenarioStepError(Exception):
    """A scenario script references a missing step or an impossible decision."""

    pass


@dataclass
class ExecutedStep:
    step: Step
    complete: bool


@dataclass
class ExecutedScenario:
    in_progress: bool
    latest_campaign_log: GuidedCampaignLog
    steps: list[ExecutedStep] = field(default_factory=list)


@dataclass
class _StepResult:
    complete: bool
    log: GuidedCampaignLog
    next_steps: list[str] = field(default_factory=list)


class ScenarioGuide:
    """One scenario definition bound to the campaign log it starts from."""

    def __init__(
        self,
        encoded_scenario_id: str,
        scenario: Scenario,
        side: bool,
        campaign_guide: "CampaignGuide",
        campaign_log: GuidedCampaignLog,
        standalone: bool,
    ):
        self.encoded_scenario_id = encoded_scenario_id
        self.scenario = scenario
        self.side = side
        self.campaign_guide = campaign_guide
        self.campaign_log = campaign_log
        self.standalone = standalone

    @property
    def id(self) -> str:
        return self.encoded_scenario_id

    @property
    def scenario_name(self) -> str:
        return self.scenario.scenario_name

    @property
    def full_name(self) -> str:
        return self.scenario.full_name

    def scenario_type(self) -> ScenarioType:
        return self.scenario.type

    def step(self, step_id: str) -> Step | None:
        for step in self.scenario.steps:
            if step.id == step_id:
                return step
        campaign_step = self.campaign_guide.campaign_step(step_id)
        if campaign_step is not None:
            return campaign_step
        return FIXED_STEPS.get(step_id)

    def setup_steps(self, scenario_state: "ScenarioStateHelper") -> ExecutedScenario:
        """Run the script as far as the recorded decisions allow."""
        log = self.campaign_log.start_scenario(self.id)
        queue = list(self.scenario.setup)
        executed: list[ExecutedStep] = []
        while queue:
            if len(executed) >= MAX_STEPS_PER_SCENARIO:
                raise ScenarioStepError(
                    f"Scenario {self.id} exceeded {MAX_STEPS_PER_SCENARIO} steps"
                )
            step_id = queue.pop(0)
            step = self.step(step_id)
            if step is None:
                raise ScenarioStepError(f"Could not find step '{step_id}' in scenario {self.id}")
            result = self._execute(step, scenario_state, log)
            executed.append(ExecutedStep(step=step, complete=result.complete))
            if not result.complete:
                logger.debug(f"{self.id}: waiting on step '{step_id}'")
                return ExecutedScenario(in_progress=True, latest_campaign_log=log, steps=executed)
            log = result.log
            queue = result.next_steps + queue
        logger.debug(f"{self.id}: completed after {len(executed)} steps")
        return ExecutedScenario(
            in_progress=False,
            latest_campaign_log=log.finish_scenario(self.id),
            steps=executed,
        )

    # ------------------------------------------------------------------ #
    # Step execution
    # ------------------------------------------------------------------ #

    def _effects(
        self,
        log: GuidedCampaignLog,
        effects: list[Effect],
        input_value: int | None = None,
        text: str | None = None,
    ) -> GuidedCampaignLog:
        if not effects:
            return log
        return log.with_effects(
            EffectsWithInput(
                scenario_id=self.id,
                effects=list(effects),
                input_value=input_value,
                text=text,
            )
        )

    def _execute(
        self,
        step: Step,
        state: "ScenarioStateHelper",
        log: GuidedCampaignLog,
    ) -> _StepResult:
        if isinstance(step, GenericStep):
            return _StepResult(True, self._effects(log, step.effects), list(step.steps))
        if isinstance(step, BranchStep):
            condition = step.condition
            passed = self._check_condition(condition, log)
            return _StepResult(
                True, log, list(condition.true_steps if passed else condition.false_steps)
            )
        if isinstance(step, InputStep):
            return self._execute_input(step, state, log)
        raise ScenarioStepError(f"Unsupported step kind: {step!r}")

    def _execute_input(
        self,
        step: InputStep,
        state: "ScenarioStateHelper",
        log: GuidedCampaignLog,
    ) -> _StepResult:
        step_input = step.input
        waiting = _StepResult(False, log)

        if isinstance(step_input, ChooseOneInput):
            index = state.choice(step.id)
            if index is None:
                return waiting
            if not 0 <= index < len(step_input.choices):
                raise ScenarioStepError(f"Choice {index} out of range for step '{step.id}'")
            choice = step_input.choices[index]
            return _StepResult(True, self._effects(log, choice.effects), list(choice.steps))

        if isinstance(step_input, BinaryInput):
            decision = state.decision(step.id)
            if decision is None:
                return waiting
            if decision:
                return _StepResult(
                    True, self._effects(log, step_input.effects), list(step_input.yes_steps)
                )
            return _StepResult(True, log, list(step_input.no_steps))

        if isinstance(step_input, CounterInput):
            value = state.count(step.id)
            if value is None:
                return waiting
            if step_input.max is not None:
                value = min(value, step_input.max)
            return _StepResult(
                True,
                self._effects(log, step_input.effects, input_value=value),
                list(step_input.steps),
            )

        if isinstance(step_input, TextBoxInput):
            text = state.text(step.id)
            if text is None:
                return waiting
            if step_input.section:
                log = self._effects(
                    log,
                    [CampaignLogEffect(section=step_input.section, id=step.id)],
                    text=text,
                )
            return _StepResult(True, log)

        if isinstance(step_input, PlayScenarioInput):
            return self._execute_play_scenario(step, step_input, state, log)

        if isinstance(step_input, InvestigatorStatusInput):
            statuses = state.string_choices(step.id)
            if statuses is None:
                return waiting
            effects: list[Effect] = []
            for code, values in statuses.items():
                status = values[0] if values else "alive"
                if status == "killed":
                    effects.append(TraumaEffect(investigator=code, killed=True))
                elif status == "insane":
                    effects.append(TraumaEffect(investigator=code, insane=True))
            return _StepResult(True, self._effects(log, effects))

        if isinstance(step_input, ConfirmInput):
            if not state.decision(step.id):
                return waiting
            return _StepResult(True, log)

        raise ScenarioStepError(f"Unsupported input kind on step '{step.id}'")

    def _execute_play_scenario(
        self,
        step: InputStep,
        step_input: PlayScenarioInput,
        state: "ScenarioStateHelper",
        log: GuidedCampaignLog,
    ) -> _StepResult:
        selected = state.number_choices(step.id) or {}
        for option in step_input.campaign_log:
            if sum(selected.get(option.id, [])) > 0:
                log = self._effects(log, option.effects)
        choice = state.choice(step.id)
        if choice is None:
            return _StepResult(False, log)
        if choice == 0:
            return _StepResult(True, log)
        if not 1 <= choice <= len(step_input.branches):
            raise ScenarioStepError(f"Branch {choice} out of range for step '{step.id}'")
        return _StepResult(True, log, list(step_input.branches[choice - 1].steps))

    def _check_condition(self, condition: Condition, log: GuidedCampaignLog) -> bool:
        if isinstance(condition, CampaignLogCondition):
            return log.has_entry(condition.section, condition.id)
        if isinstance(condition, CampaignLogCountCondition):
            return log.count(condition.section, condition.id) >= condition.min
        if isinstance(condition, CampaignDataCondition):
            return getattr(log.campaign_data, condition.setting) == condition.value
        if isinstance(condition, ScenarioDataCondition):
            return log.scenario_status(condition.scenario) == condition.status
        raise ScenarioStepError(f"Unsupported condition: {condition!r}")


__all__ = [
    "ExecutedScenario",
    "ExecutedStep",
    "MAX_STEPS_PER_SCENARIO",
    "ScenarioGuide",
    "ScenarioStepError",
]
