"""
Guided Campaign MCP Server
Walks scripted tabletop campaigns against the players' recorded decisions.
"""

import json
import logging
import os
from pathlib import Path
from typing import Annotated

from dotenv import load_dotenv
from fastmcp import FastMCP
from pydantic import Field

from .campaign_guide import CampaignGuideError
from .content import CampaignContentError, CampaignContentFetcher
from .scenario_id import MalformedScenarioIdError
from .tools import GuideSession, GuideSessionError

logger = logging.getLogger("guided-campaign")

logging.basicConfig(
    level=logging.INFO,
    )

if not load_dotenv():
    logger.warning("❌ .env file invalid or not found! Using defaults.")

data_path = Path(os.getenv("GUIDED_CAMPAIGN_DATA_DIR", "")).resolve()
content_url = os.getenv("GUIDED_CAMPAIGN_CONTENT_URL", "")
lang = os.getenv("GUIDED_CAMPAIGN_LANG", "en")
logger.debug(f"📂 Data path: {data_path}")

mcp = FastMCP(
    name="guided-campaign"
)

session: GuideSession | None = None

REJECTED = (GuideSessionError, CampaignGuideError, MalformedScenarioIdError)


def _require_session() -> GuideSession:
    if session is None:
        raise GuideSessionError("No campaign open. Use `open_campaign` first.")
    return session


# ----------------------------------------------------------------------
# Tools
# ----------------------------------------------------------------------

@mcp.tool
async def fetch_campaign(
    campaign_id: Annotated[str, Field(description="Campaign id on the content server")],
    force: Annotated[bool, Field(description="Re-download even if cached")] = False,
) -> str:
    """Download a campaign's content into the local content directory."""
    if not content_url:
        return "❌ GUIDED_CAMPAIGN_CONTENT_URL is not configured."
    fetcher = CampaignContentFetcher(data_path / "content", content_url)
    try:
        path = await fetcher.ensure_campaign(campaign_id, force=force)
    except CampaignContentError as e:
        return f"❌ {e}"
    return f"✅ Campaign '{campaign_id}' available at {path}"


@mcp.tool
def open_campaign(
    campaign_id: Annotated[str, Field(description="Campaign id in the content directory")],
    investigators: Annotated[
        list[str] | None,
        Field(description="Investigator codes, used when starting a new campaign"),
    ] = None,
) -> str:
    """Open a campaign, resuming saved decisions if any exist."""
    global session
    try:
        session = GuideSession.open(data_path, campaign_id, investigators, lang=lang)
    except CampaignContentError as e:
        return f"❌ {e}"
    return f"🌟 Opened campaign '{session.guide.campaign_name()}'"


@mcp.tool
def campaign_progress() -> str:
    """Show every scenario's status, the next step awaiting a decision, and XP totals."""
    try:
        progress = _require_session().progress()
    except REJECTED as e:
        return f"❌ {e}"
    if progress["error"]:
        return f"❌ {progress['error']}"
    return json.dumps(progress, indent=2, ensure_ascii=False)


@mcp.tool
def start_scenario(
    scenario_id: Annotated[str, Field(description="Encoded scenario id, e.g. 'the_gathering' or 'the_gathering#1'")],
) -> str:
    """Start playing a scenario."""
    try:
        _require_session().start_scenario(scenario_id)
    except REJECTED as e:
        return f"❌ {e}"
    return f"▶️ Started {scenario_id}"


@mcp.tool
def record_choice(
    scenario_id: Annotated[str, Field(description="Encoded scenario id")],
    step_id: Annotated[str, Field(description="Step awaiting the decision")],
    value: Annotated[int, Field(description="Index of the selected choice (play-scenario: 0 = resolution, n = branch n)")],
) -> str:
    """Record a choose-one or play-scenario decision."""
    try:
        _require_session().record_choice(scenario_id, step_id, value)
    except REJECTED as e:
        return f"❌ {e}"
    return f"✅ Recorded choice {value} for {step_id}"


@mcp.tool
def record_decision(
    scenario_id: Annotated[str, Field(description="Encoded scenario id")],
    step_id: Annotated[str, Field(description="Step awaiting the decision")],
    value: Annotated[bool, Field(description="Yes/no answer; true also confirms a proceed step")],
) -> str:
    """Record a yes/no decision or confirmation."""
    try:
        _require_session().record_decision(scenario_id, step_id, value)
    except REJECTED as e:
        return f"❌ {e}"
    return f"✅ Recorded {'yes' if value else 'no'} for {step_id}"


@mcp.tool
def record_count(
    scenario_id: Annotated[str, Field(description="Encoded scenario id")],
    step_id: Annotated[str, Field(description="Step awaiting the count")],
    value: Annotated[int, Field(description="Counter value", ge=0)],
) -> str:
    """Record a counter value (e.g. victory display XP)."""
    try:
        _require_session().record_count(scenario_id, step_id, value)
    except REJECTED as e:
        return f"❌ {e}"
    return f"✅ Recorded {value} for {step_id}"


@mcp.tool
def record_text(
    scenario_id: Annotated[str, Field(description="Encoded scenario id")],
    step_id: Annotated[str, Field(description="Step awaiting the text")],
    value: Annotated[str, Field(description="Text to record")],
) -> str:
    """Record free text."""
    try:
        _require_session().record_text(scenario_id, step_id, value)
    except REJECTED as e:
        return f"❌ {e}"
    return f"✅ Recorded text for {step_id}"


@mcp.tool
def record_investigator_status(
    scenario_id: Annotated[str, Field(description="Encoded scenario id")],
    step_id: Annotated[str, Field(description="Investigator status step")],
    statuses: Annotated[
        dict[str, str],
        Field(description="Investigator code to 'alive', 'killed' or 'insane'"),
    ],
) -> str:
    """Record each investigator's end-of-scenario status."""
    try:
        _require_session().record_string_choices(
            scenario_id, step_id, {code: [status] for code, status in statuses.items()}
        )
    except REJECTED as e:
        return f"❌ {e}"
    return f"✅ Recorded status for {len(statuses)} investigators"


@mcp.tool
def undo_scenario(
    scenario_id: Annotated[str, Field(description="Encoded scenario id of the current undo point")],
) -> str:
    """Undo the most recent decision of the scenario currently open for undo."""
    try:
        closed = _require_session().undo(scenario_id)
    except REJECTED as e:
        return f"❌ {e}"
    if closed:
        return f"↩️ Undid start of {scenario_id}"
    return f"↩️ Undid last decision in {scenario_id}"


@mcp.tool
def add_side_scenario(
    previous_scenario_id: Annotated[str, Field(description="Scenario the side scenario is played after")],
    side_scenario_id: Annotated[str, Field(description="Side scenario id from the side-scenario pool")],
) -> str:
    """Insert an authored side scenario into the campaign."""
    try:
        scenario_id = _require_session().add_side_scenario(previous_scenario_id, side_scenario_id)
    except REJECTED as e:
        return f"❌ {e}"
    return f"✅ Added {scenario_id} after {previous_scenario_id}"


@mcp.tool
def add_custom_side_scenario(
    previous_scenario_id: Annotated[str, Field(description="Scenario the side scenario is played after")],
    name: Annotated[str, Field(description="Name of the custom scenario")],
    xp_cost: Annotated[int, Field(description="Experience each investigator pays to play it", ge=0)],
) -> str:
    """Insert a player-defined side scenario into the campaign."""
    try:
        scenario_id = _require_session().add_custom_side_scenario(previous_scenario_id, name, xp_cost)
    except REJECTED as e:
        return f"❌ {e}"
    return f"✅ Added custom side scenario '{name}' ({scenario_id})"


@mcp.tool
def list_side_scenarios() -> str:
    """List authored side scenarios available to insert."""
    try:
        guide = _require_session().guide
    except REJECTED as e:
        return f"❌ {e}"
    scenarios = guide.side_scenarios()
    if not scenarios:
        return "No side scenarios available."
    lines = [f"- {s.id}: {s.full_name}" + (f" ({s.xp_cost} XP)" if s.xp_cost else "") for s in scenarios]
    return "\n".join(lines)


@mcp.tool
def scenario_rules(
    scenario_id: Annotated[str | None, Field(description="Scenario id; omit for campaign rules only")] = None,
) -> str:
    """Show the rules in force for a scenario, sorted by title."""
    try:
        current = _require_session()
        rules = current.guide.scenario_rules(current.lang, scenario_id)
    except REJECTED as e:
        return f"❌ {e}"
    if not rules:
        return "No rules."
    return "\n\n".join(f"## {rule.title}\n{rule.text}" for rule in rules)


@mcp.tool
def scenario_faq(
    scenario_id: Annotated[str | None, Field(description="Scenario id; omit for the campaign FAQ")] = None,
) -> str:
    """Show FAQ entries for a scenario or the whole campaign."""
    try:
        guide = _require_session().guide
    except REJECTED as e:
        return f"❌ {e}"
    questions = guide.scenario_faq(scenario_id) if scenario_id else guide.campaign_faq()
    if not questions:
        return "No FAQ entries."
    return "\n\n".join(f"Q: {q.question}\nA: {q.answer}" for q in questions)


def main() -> None:
    """Main entry point for the Guided Campaign MCP Server."""
    mcp.run()

if __name__ == "__main__":
    main()
