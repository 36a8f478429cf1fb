from __future__ import annotations

__all__ = ["IDs", "param_remove_id"]


class IDs:
    class Store:
        VIEW_STATE = "view-state"
        REVISION = "session-revision"

    class Control:
        VIEW_SELECT = "view-select"
        BINS_SLIDER = "bins-slider"
        OPTIONS_CHECKLIST = "options-checklist"
        PEAK_INPUT = "peak-threshold-input"
        RANGE_SAMPLE_SELECT = "range-sample-select"
        RANGE_LOW_INPUT = "range-low-input"
        RANGE_HIGH_INPUT = "range-high-input"
        GENE_SELECT = "gene-select"

        # Sidebar metadata
        SIDEBAR_SUMMARY = "sidebar-summary"
        LOAD_STATUS = "load-status"

        # Graphs
        MAIN_GRAPH = "main-graph"
        TABLE_GRAPH = "table-graph"

        # Drawing pad
        PAD_GRAPH = "pad-graph"
        PAD_LIVE_LABEL = "pad-live-label"
        PAD_CANCEL_BTN = "pad-cancel-btn"
        PAD_CLEAR_BTN = "pad-clear-btn"
        PARAM_LIST = "param-list"

        # Downloads
        DOWNLOAD = "download"
        DOWNLOAD_CSV_BTN = "download-csv-btn"
        DOWNLOAD_HTML_BTN = "download-html-btn"
        DOWNLOAD_H5AD_BTN = "download-h5ad-btn"

    class Pattern:
        PARAM_REMOVE = "param-remove"


def param_remove_id(param_id: str) -> dict:
    return {"type": IDs.Pattern.PARAM_REMOVE, "index": param_id}
