"""
Gradio dashboard for FRA Monitor.

This module provides a web UI over the same filter and aggregation
functions the HTTP API uses.
"""

from typing import Any, Dict, List, Optional, Tuple

import gradio as gr
import pandas as pd

from framonitor.config import Config, load_config
from framonitor.dashboard import Dashboard
from framonitor.db.mongo import get_fra_records, get_patta_holders, save_patta_holder
from framonitor.ingest import process_queue, queue_from_paths
from framonitor.log import get_logger
from framonitor.model import FilterState, StoreError, ValidationError
from framonitor.patta import filter_holders, holder_states, summarize_holders, validate_patta_submission
from framonitor.states import INDIAN_STATES

logger = get_logger(__name__)

GROUP_COLUMNS = ["state", "claims", "titles"]
TREND_COLUMNS = ["period", "claims", "titles", "count"]
MAP_COLUMNS = ["state", "claims", "titles", "forestLand", "lat", "lng", "size"]
UPLOAD_COLUMNS = ["name", "status", "records", "message"]
HOLDER_COLUMNS = ["claimNumber", "applicantName", "village", "district", "state", "claimType", "landArea"]


def stats_markdown(views: Dict[str, Any]) -> str:
    """
    Render the KPI cards as markdown.
    """
    stats = views["stats"]
    lines = [
        f"**Claims received:** {stats['totalClaimsReceived']:,}  ",
        f"**Titles distributed:** {stats['totalTitlesDistributed']:,}  ",
        f"**Forest land (ha):** {stats['totalForestLand']:,.0f}  ",
        f"**Disposal rate:** {stats['disposalRate']:.1f}%  ",
        f"**States:** {stats['stateCount']} ({views['recordCount']} records)",
    ]
    if views.get("error"):
        lines.insert(0, f"⚠️ {views['error']}\n")
    return "\n".join(lines)


def groups_frame(groups: List[Dict[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame(groups, columns=GROUP_COLUMNS)


def trend_frame(points: List[Dict[str, Any]]) -> pd.DataFrame:
    """Monthly trend as a frame with a "Month Year" period label."""
    rows = [
        {"period": f"{p['month']} {p['year']}", "claims": p["claims"],
         "titles": p["titles"], "count": p["count"]}
        for p in points
    ]
    return pd.DataFrame(rows, columns=TREND_COLUMNS)


def map_frame(lookup: Dict[str, Dict[str, Any]]) -> pd.DataFrame:
    """State lookup as a frame of map markers, biggest first."""
    rows = []
    for entry in lookup.values():
        lat, lng = entry["coordinates"] or (None, None)
        rows.append({
            "state": entry["name"],
            "claims": entry["claims"],
            "titles": entry["titles"],
            "forestLand": entry["forestLand"],
            "lat": lat,
            "lng": lng,
            "size": round(entry.get("size", 0), 1),
        })
    frame = pd.DataFrame(rows, columns=MAP_COLUMNS)
    return frame.sort_values("claims", ascending=False, kind="stable").reset_index(drop=True)


def upload_frame(queue) -> pd.DataFrame:
    rows = []
    for queued in queue:
        rows.append({
            "name": queued.name,
            "status": queued.status.value,
            "records": len(queued.result.saved) if queued.result else 0,
            "message": queued.result.get_message() if queued.result else (queued.error or ""),
        })
    return pd.DataFrame(rows, columns=UPLOAD_COLUMNS)


def holders_frame(holders: List[Dict[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame(holders, columns=HOLDER_COLUMNS)


def dashboard_outputs(session: Dashboard) -> Tuple:
    """Compute every dashboard output for the session's current filters."""
    views = session.views()
    return (
        stats_markdown(views),
        groups_frame(views["ifrTopStates"]),
        groups_frame(views["cfrTopStates"]),
        trend_frame(views["monthlyTrend"]),
        map_frame(views["map"]),
    )


def submit_holder(cfg: Config, claim_number: str, applicant_name: str, applicant_address: str,
                  village: str, district: str, state: str, claim_type: str, land_area: Optional[float],
                  land_description: str, lat: Optional[float], lng: Optional[float]) -> str:
    """
    Validate and store a patta holder from the form.

    Returns:
        Message to show under the form
    """
    body = {
        "claimNumber": claim_number,
        "applicantName": applicant_name,
        "applicantAddress": applicant_address,
        "village": village,
        "district": district,
        "state": state,
        "claimType": claim_type,
        "landArea": land_area,
        "landDescription": land_description,
        "coordinates": {"lat": lat, "lng": lng},
    }
    try:
        holder = validate_patta_submission(body)
        holder_id = save_patta_holder(holder, cfg.mongodb)
    except ValidationError as e:
        return f"❌ {e}"
    except StoreError as e:
        logger.error(f"Error saving patta holder: {e}")
        return "❌ Failed to save patta holder"
    return f"✓ Patta holder added successfully (ID: {holder_id})"


def load_holders(cfg: Config, search: str, state: str, claim_type: str) -> Tuple[pd.DataFrame, str, List[str]]:
    """
    Load, filter and summarize patta holders for the registry tab.

    Returns:
        Holder table, summary line, and state filter choices (the states
        holders are registered in)
    """
    try:
        holders = get_patta_holders(cfg.mongodb)
    except StoreError as e:
        logger.error(f"Error loading patta holders: {e}")
        return holders_frame([]), "❌ Error loading patta holders", ["all"]

    shown = filter_holders(holders, search or "", state or "all", claim_type or "all")
    summary = summarize_holders(holders)
    message = (f"Showing {len(shown)} of {summary['total']} patta holders · "
               f"{summary['individual']} individual, {summary['community']} community, "
               f"{summary['totalArea']:,.2f} ha")
    return holders_frame(shown), message, ["all"] + holder_states(holders)


def create_ui(cfg: Optional[Config] = None) -> gr.Blocks:
    """
    Create the Gradio UI.

    Returns:
        Gradio Blocks interface
    """
    cfg = cfg or load_config()
    session = Dashboard(
        lambda: get_fra_records(cfg.mongodb),
        FilterState(cfg.dashboard.default_state, cfg.dashboard.default_year, cfg.dashboard.default_month),
        cfg.dashboard.top_n,
    )
    session.refresh()

    def on_filters(state: str, year: str, month: str):
        session.set_filters(state=state or "all", month=month or "all")
        return dashboard_outputs(session)

    def on_year(year: str):
        session.select_year(year or "all")
        month_choices = ["all"] + session.month_options()
        return (gr.update(choices=month_choices, value=session.filters.month),) + dashboard_outputs(session)

    def on_refresh():
        session.refresh()
        year_choices = ["all"] + session.views()["availableYears"]
        return (gr.update(choices=year_choices),) + dashboard_outputs(session)

    def on_clear():
        session.clear_filters()
        return ("all", "all", "all") + dashboard_outputs(session)

    def on_load_holders(search: str, state: str, claim_type: str):
        frame, message, state_choices = load_holders(cfg, search, state, claim_type)
        return frame, message, gr.update(choices=state_choices)

    def on_upload(paths):
        if not paths:
            return upload_frame([])
        queue = process_queue(queue_from_paths(list(paths)), cfg)
        session.refresh()
        return upload_frame(queue)

    with gr.Blocks(title="FRA Monitor") as ui:
        gr.Markdown("# FRA Monitor")
        gr.Markdown("Forest Rights Act claims and titles across Indian states.")

        with gr.Tabs():
            with gr.TabItem("Analytics"):
                with gr.Row():
                    state_input = gr.Dropdown(["all"] + INDIAN_STATES, value=session.filters.state, label="State")
                    year_input = gr.Dropdown(["all"] + session.views()["availableYears"],
                                             value=session.filters.year, label="Year")
                    month_input = gr.Dropdown(["all"] + session.month_options(),
                                              value=session.filters.month, label="Month")
                    refresh_button = gr.Button("Refresh")
                    clear_button = gr.Button("Clear Filters")

                stats_output = gr.Markdown()
                with gr.Row():
                    ifr_output = gr.BarPlot(x="state", y="claims", title="Individual Forest Rights (top states)")
                    cfr_output = gr.BarPlot(x="state", y="claims", title="Community Forest Rights (top states)")
                trend_output = gr.Dataframe(label="Monthly trend")
                map_output = gr.Dataframe(label="State map data")

                outputs = [stats_output, ifr_output, cfr_output, trend_output, map_output]
                state_input.change(on_filters, [state_input, year_input, month_input], outputs)
                month_input.change(on_filters, [state_input, year_input, month_input], outputs)
                year_input.change(on_year, [year_input], [month_input] + outputs)
                refresh_button.click(on_refresh, [], [year_input] + outputs)
                clear_button.click(on_clear, [], [state_input, year_input, month_input] + outputs)
                ui.load(lambda: dashboard_outputs(session), [], outputs)

            with gr.TabItem("Upload Reports"):
                files_input = gr.File(label="FRA report PDFs", file_count="multiple",
                                      file_types=[".pdf"], type="filepath")
                upload_button = gr.Button("Extract", variant="primary")
                upload_output = gr.Dataframe(headers=UPLOAD_COLUMNS, label="Processing status")
                upload_button.click(on_upload, [files_input], [upload_output])

            with gr.TabItem("Patta Holders"):
                with gr.Row():
                    claim_number = gr.Textbox(label="Claim Number")
                    applicant_name = gr.Textbox(label="Applicant Name")
                    applicant_address = gr.Textbox(label="Applicant Address")
                with gr.Row():
                    village = gr.Textbox(label="Village")
                    district = gr.Textbox(label="District")
                    holder_state = gr.Dropdown(INDIAN_STATES, label="State")
                with gr.Row():
                    claim_type = gr.Dropdown(["Individual", "Community"], label="Claim Type")
                    land_area = gr.Number(label="Land Area (ha)")
                    lat = gr.Number(label="Latitude")
                    lng = gr.Number(label="Longitude")
                land_description = gr.Textbox(label="Land Description", lines=2)
                save_button = gr.Button("Save", variant="primary")
                save_output = gr.Markdown()
                save_button.click(
                    lambda *values: submit_holder(cfg, *values),
                    [claim_number, applicant_name, applicant_address, village, district, holder_state,
                     claim_type, land_area, land_description, lat, lng],
                    [save_output],
                )

                with gr.Row():
                    search_input = gr.Textbox(label="Search", placeholder="Name, claim number, village, or district")
                    list_state = gr.Dropdown(["all"], value="all", label="State")
                    list_type = gr.Dropdown(["all", "Individual", "Community"], value="all", label="Type")
                    list_button = gr.Button("Load")
                holders_summary = gr.Markdown()
                holders_output = gr.Dataframe(headers=HOLDER_COLUMNS)
                list_button.click(
                    on_load_holders,
                    [search_input, list_state, list_type],
                    [holders_output, holders_summary, list_state],
                )

    return ui
