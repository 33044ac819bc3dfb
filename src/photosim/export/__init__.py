from photosim.export.history_csv import (
    CSV_COLUMNS,
    export_history_csv,
    format_history_csv,
    history_to_frame,
)

__all__ = ["CSV_COLUMNS", "history_to_frame", "format_history_csv", "export_history_csv"]
