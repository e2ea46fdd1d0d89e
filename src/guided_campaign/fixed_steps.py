"""
Steps the guide synthesizes rather than reading from content.
"""

from __future__ import annotations

from .steps import ConfirmInput, InputStep, InvestigatorStatusInput, Step

CAMPAIGN_SETUP_ID = "$campaign_setup"
PLAY_SCENARIO_STEP_ID = "$play_scenario"
PROCEED_STEP_ID = "$proceed"
UPGRADE_DECKS_STEP_ID = "$upgrade_decks"


def create_investigator_status_step(step_id: str) -> InputStep:
    return InputStep(
        id=step_id,
        title="Investigator Status",
        text="Record the status of each investigator at the end of the scenario.",
        input=InvestigatorStatusInput(),
    )


FIXED_STEPS: dict[str, Step] = {
    PROCEED_STEP_ID: InputStep(
        id=PROCEED_STEP_ID,
        title="Proceed",
        input=ConfirmInput(text="Proceed to the next scenario."),
    ),
    UPGRADE_DECKS_STEP_ID: InputStep(
        id=UPGRADE_DECKS_STEP_ID,
        title="Upgrade Decks",
        text="Investigators may now spend experience to upgrade their decks.",
        input=ConfirmInput(text="Done upgrading decks."),
    ),
}


__all__ = [
    "CAMPAIGN_SETUP_ID",
    "FIXED_STEPS",
    "PLAY_SCENARIO_STEP_ID",
    "PROCEED_STEP_ID",
    "UPGRADE_DECKS_STEP_ID",
    "create_investigator_status_step",
]
