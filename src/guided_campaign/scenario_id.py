"""
Scenario identifier codec.

An encoded scenario id is the stable scenario id, optionally followed by
``#<replay attempt>`` for scenarios that can be played more than once.
The encoded form keys all persisted decisions, so replays never collide.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

REPLAY_SEPARATOR = "#"


class MalformedScenarioIdError(ValueError):
    """Raised when a scenario id cannot be decoded or encoded."""

    pass


class ScenarioId(BaseModel):
    """A decoded scenario identifier."""

    model_config = ConfigDict(frozen=True)

    encoded_scenario_id: str = Field(description="Key used for persisted state")
    scenario_id: str = Field(description="Key used to look up the scenario definition")
    replay_attempt: int | None = Field(default=None, description="Replay counter, if any")

    def encode(self) -> str:
        """Re-encode this id; always equal to ``encoded_scenario_id``."""
        return encode_scenario_id(self.scenario_id, self.replay_attempt)


def encode_scenario_id(scenario_id: str, replay_attempt: int | None = None) -> str:
    """Build the encoded form of a scenario id.

    Raises:
        MalformedScenarioIdError: If ``scenario_id`` already contains the
            replay separator or ``replay_attempt`` is negative.
    """
    if REPLAY_SEPARATOR in scenario_id:
        raise MalformedScenarioIdError(
            f"Scenario id '{scenario_id}' must not contain '{REPLAY_SEPARATOR}'"
        )
    if replay_attempt is None:
        return scenario_id
    if replay_attempt < 0:
        raise MalformedScenarioIdError(
            f"Replay attempt for '{scenario_id}' must be non-negative, got {replay_attempt}"
        )
    return f"{scenario_id}{REPLAY_SEPARATOR}{replay_attempt}"


def parse_scenario_id(encoded_scenario_id: str) -> ScenarioId:
    """Decode an encoded scenario id.

    Splits on the first ``#``. The suffix must be a base-10 non-negative
    integer without leading zeros; anything else is rejected.

    Raises:
        MalformedScenarioIdError: If the replay suffix is not a number.
    """
    scenario_id, separator, suffix = encoded_scenario_id.partition(REPLAY_SEPARATOR)
    if not separator:
        return ScenarioId(
            encoded_scenario_id=encoded_scenario_id,
            scenario_id=encoded_scenario_id,
        )
    # Leading zeros would not survive re-encoding
    if not (suffix.isascii() and suffix.isdigit()) or (len(suffix) > 1 and suffix[0] == "0"):
        raise MalformedScenarioIdError(
            f"Invalid replay attempt '{suffix}' in scenario id '{encoded_scenario_id}'"
        )
    return ScenarioId(
        encoded_scenario_id=encoded_scenario_id,
        scenario_id=scenario_id,
        replay_attempt=int(suffix, 10),
    )


__all__ = [
    "MalformedScenarioIdError",
    "REPLAY_SEPARATOR",
    "ScenarioId",
    "encode_scenario_id",
    "parse_scenario_id",
]
