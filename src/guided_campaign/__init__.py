"""
Guided Campaign - a scripted campaign guide engine with a FastMCP server front end.
"""

from .campaign_guide import (
    CampaignGuide,
    CampaignGuideError,
    CampaignLoopError,
    CampaignUpdateRequiredError,
)
from .campaign_log import GuidedCampaignLog
from .campaign_state import CampaignStateHelper, GuideState
from .content import load_campaign_guide
from .models import *
from .processed import ProcessedCampaign, ProcessedScenario, UnprocessedScenario
from .scenario_guide import ScenarioGuide
from .scenario_id import ScenarioId, parse_scenario_id
from .scenario_state import ScenarioStateHelper

try:
    from importlib.metadata import version as _get_version
    __version__ = _get_version("guided-campaign")
except Exception:
    __version__ = "0.1.0"  # Fallback if metadata unavailable
__all__ = [
    "CampaignGuide",
    "CampaignGuideError",
    "CampaignLoopError",
    "CampaignStateHelper",
    "CampaignUpdateRequiredError",
    "GuideState",
    "GuidedCampaignLog",
    "ProcessedCampaign",
    "ProcessedScenario",
    "ScenarioGuide",
    "ScenarioId",
    "ScenarioStateHelper",
    "UnprocessedScenario",
    "load_campaign_guide",
    "parse_scenario_id",
]
