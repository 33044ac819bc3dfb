from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

import pandas as pd

from photosim.engine.history import HistorySeries

logger = logging.getLogger(__name__)

CSV_COLUMNS = (
    "Time(s)",
    "P_Total(a.u.)",
    "ATP+NADPH(a.u.)",
    "ADP+NADP+(a.u.)",
    "C3(a.u.)",
    "C5(a.u.)",
    "Event",
)
VALUE_DECIMALS = 3


def _format_time(value: float) -> str:
    text = f"{value:.1f}"
    return text[:-2] if text.endswith(".0") else text


def history_to_frame(series: HistorySeries) -> pd.DataFrame:
    """One row per history slot, formatted the way the chart export expects."""
    values = {
        "P_Total(a.u.)": series.p_total,
        "ATP+NADPH(a.u.)": series.energy,
        "ADP+NADP+(a.u.)": series.precursor,
        "C3(a.u.)": series.c3,
        "C5(a.u.)": series.c5,
    }
    frame = pd.DataFrame({"Time(s)": [_format_time(float(t)) for t in series.time]})
    for column, data in values.items():
        frame[column] = [f"{float(v):.{VALUE_DECIMALS}f}" for v in data]
    frame["Event"] = ["" if marker is None else marker for marker in series.markers]
    return frame[list(CSV_COLUMNS)]


def format_history_csv(series: HistorySeries) -> str:
    return history_to_frame(series).to_csv(index=False, lineterminator="\n")


def default_export_filename(now: datetime | None = None) -> str:
    stamp = (now or datetime.now()).strftime("%H-%M-%S")
    return f"chloroplast_data_{stamp}.csv"


def export_history_csv(
    series: HistorySeries,
    output_path: str | Path | None = None,
    *,
    output_dir: str | Path = ".",
) -> Path:
    if output_path is None:
        path = Path(output_dir) / default_export_filename()
    else:
        path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_history_csv(series), encoding="utf-8")
    logger.info("Exported %d history rows to %s", len(series), path)
    return path


__all__ = [
    "CSV_COLUMNS",
    "default_export_filename",
    "export_history_csv",
    "format_history_csv",
    "history_to_frame",
]
