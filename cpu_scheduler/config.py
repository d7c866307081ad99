"""Global settings for the simulator and its desktop front end."""

import logging
from typing import List, Union


# === Scheduling ===
DEFAULT_QUANTUM = 2  # Round Robin time slice, in time units (ms)

# === Appearance (customtkinter) ===
APPEARANCE_MODE = "dark"
COLOR_THEME = "dark-blue"
WINDOW_TITLE = "CPU Scheduling Simulator"
WINDOW_GEOMETRY = "1100x700"

# Gantt chart colors (bright accents on dark background).
GANTT_PALETTE: List[str] = [
    "#22C55E",  # emerald
    "#3B82F6",  # blue
    "#EAB308",  # amber
    "#EC4899",  # pink
    "#F97316",  # orange
    "#8B5CF6",  # violet
    "#06B6D4",  # cyan
    "#FACC15",  # yellow
    "#EF4444",  # red
    "#14B8A6",  # teal
]
IDLE_COLOR = "#4B5563"

# ttk Treeview styling to match the dark customtkinter theme.
ROW_COLORS = ("#020617", "#111827")  # even, odd
TABLE_SELECTED = "#1D4ED8"
TEXT_COLOR = "#E5E7EB"
SECONDARY_BUTTON = {"fg_color": "#1F2937", "hover_color": "#111827"}
TITLE_FONT = ("Segoe UI Semibold", 22)
HEADING_FONT = ("Segoe UI Semibold", 13)
AVERAGE_FONT = ("Segoe UI Semibold", 16)
TICK_FONT = ("Segoe UI", 8)
TABLE_STYLE = {
    "Treeview": {
        "background": ROW_COLORS[0],
        "fieldbackground": ROW_COLORS[0],
        "foreground": TEXT_COLOR,
        "rowheight": 22,
    },
    "Treeview.Heading": {
        "background": "#0F172A",
        "foreground": TEXT_COLOR,
        "font": ("Segoe UI Semibold", 9),
    },
}

# === Logging ===
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVEL = "WARNING"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def configure_logging(level: Union[int, str] = LOG_LEVEL) -> None:
    """Install a root handler. Only entry points call this, never the library."""
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
