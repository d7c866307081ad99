"""
Desktop front end
=================

A customtkinter window over ``cpu_scheduler.engine``. Processes are entered
by hand or loaded from a sample scenario, scheduled with the chosen
algorithm and drawn as a Gantt chart next to the per-process metrics.
A comparison table runs every algorithm on the same workload; selecting
one of its rows replays that algorithm in the main view.
"""

import logging
import tkinter as tk
from tkinter import messagebox, ttk
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import customtkinter as ctk

from . import config
from .engine import ALGORITHM_LABELS, Algorithm, schedule
from .metrics import aggregates, compare, process_stats, timeline
from .models import ExecutionSegment, Process, ProcessCollection

logger = logging.getLogger(__name__)

Headings = Sequence[Tuple[str, str]]

PROCESS_HEADINGS: Headings = (
    ("pid", "PID"),
    ("arrival", "Arrival"),
    ("burst", "Burst"),
    ("priority", "Priority"),
)
METRIC_HEADINGS: Headings = (
    *PROCESS_HEADINGS,
    ("completion", "Completion"),
    ("turnaround", "Turnaround"),
    ("waiting", "Waiting"),
)
COMPARISON_HEADINGS: Headings = (
    ("algorithm", "Algorithm"),
    ("avg_waiting", "Avg Waiting"),
    ("avg_turnaround", "Avg Turnaround"),
    ("cpu_util", "CPU Util (%)"),
    ("throughput", "Throughput"),
)

# (label, tooltip) for the arrival, burst and priority entries.
PROCESS_FIELDS = (
    ("Arrival", None),
    ("Burst", None),
    ("Priority", "Smaller numbers are scheduled first; blank means 0."),
)

# Sample workloads as (arrival, burst, priority) triples.
SCENARIOS: Dict[str, List[Tuple[int, int, int]]] = {
    "Convoy effect": [(0, 12, 1), (1, 2, 1), (2, 2, 1), (3, 1, 1)],
    "Priority starvation": [(0, 15, 4), (1, 3, 1), (3, 2, 1), (5, 4, 2), (7, 1, 1)],
    "SJF vs SRTF": [(0, 8, 1), (1, 4, 1), (2, 9, 1), (3, 5, 1)],
    "Round-robin ping-pong": [(0, 5, 0), (0, 5, 0), (2, 3, 0)],
}

NO_AVERAGES = ("Average Waiting Time: -", "Average Turnaround Time: -")
NO_EXTRA = "Utilization: -   Throughput: -   Waiting range: -"


class _ToolTip:
    """Borderless hint window shown while the pointer is over ``widget``."""

    def __init__(self, widget: tk.Widget, text: str) -> None:
        self.widget = widget
        self.text = text
        self._window: Optional[ctk.CTkToplevel] = None
        widget.bind("<Enter>", self._show)
        widget.bind("<Leave>", self._hide)

    def _show(self, _event: tk.Event) -> None:
        if self._window is not None:
            return
        x = self.widget.winfo_rootx() + 20
        y = self.widget.winfo_rooty() + self.widget.winfo_height() + 5
        self._window = ctk.CTkToplevel(self.widget)
        self._window.overrideredirect(True)
        self._window.geometry(f"+{x}+{y}")
        ctk.CTkLabel(self._window, text=self.text, justify="left").pack(padx=6, pady=3)

    def _hide(self, _event: tk.Event) -> None:
        if self._window is not None:
            self._window.destroy()
            self._window = None


class CPUSchedulerApp:
    """Main window: process form, algorithm controls, chart and tables."""

    def __init__(
        self,
        root: Optional[ctk.CTk] = None,
        appearance: str = config.APPEARANCE_MODE,
        theme: str = config.COLOR_THEME,
        quantum: int = config.DEFAULT_QUANTUM,
    ) -> None:
        ctk.set_appearance_mode(appearance)
        ctk.set_default_color_theme(theme)

        self.root = root if root is not None else ctk.CTk()
        self.root.title(config.WINDOW_TITLE)
        self.root.geometry(config.WINDOW_GEOMETRY)

        self._default_quantum = quantum
        self._by_label: Dict[str, Algorithm] = {
            label: algorithm for algorithm, label in ALGORITHM_LABELS.items()
        }
        self.algorithm_label = ctk.StringVar(value=Algorithm.FCFS.label)
        self.appearance = ctk.StringVar(value=appearance.capitalize())
        self.scenario = ctk.StringVar(value="")
        self._next_pid = 1
        self._compared: Dict[str, Algorithm] = {}

        self._style_tables()
        self._build_ui()

    @property
    def algorithm(self) -> Algorithm:
        return self._by_label.get(self.algorithm_label.get(), Algorithm.FCFS)

    def _style_tables(self) -> None:
        style = ttk.Style(self.root)
        if "clam" in style.theme_names():
            style.theme_use("clam")
        for element, options in config.TABLE_STYLE.items():
            style.configure(element, **options)
        style.map("Treeview", background=[("selected", config.TABLE_SELECTED)])

    def _set_appearance(self, mode: str) -> None:
        ctk.set_appearance_mode(mode.lower())
        self._style_tables()

    # Layout

    def _build_ui(self) -> None:
        body = ctk.CTkScrollableFrame(self.root, corner_radius=0, fg_color="transparent")
        body.pack(fill="both", expand=True, padx=16, pady=16)

        top = ctk.CTkFrame(body, fg_color="transparent")
        top.pack(fill="x")
        ctk.CTkLabel(top, text=config.WINDOW_TITLE, font=config.TITLE_FONT).pack(side="left")
        ctk.CTkSegmentedButton(
            top,
            values=["Dark", "Light"],
            variable=self.appearance,
            command=self._set_appearance,
        ).pack(side="right")

        self._build_process_panel(self._panel(body, "Processes"))
        self._build_control_panel(self._panel(body, "Scheduling"))

        chart = self._panel(body, "Gantt Chart")
        self.gantt_canvas = tk.Canvas(
            chart, height=140, bg=config.ROW_COLORS[0], highlightthickness=0
        )
        self.gantt_canvas.pack(fill="x", padx=12, pady=(0, 12))

        self.results_tree = self._table(self._panel(body, "Process Metrics"), METRIC_HEADINGS, 12)
        self.comparison_tree = self._table(
            self._panel(body, "Algorithm Comparison"), COMPARISON_HEADINGS, 6
        )
        self.comparison_tree.bind("<<TreeviewSelect>>", self._replay_compared)

    def _panel(self, parent: ctk.CTkBaseClass, title: str) -> ctk.CTkFrame:
        panel = ctk.CTkFrame(parent, corner_radius=12)
        panel.pack(fill="both", expand=True, pady=(10, 0))
        ctk.CTkLabel(panel, text=title, font=config.HEADING_FONT).pack(
            anchor="w", padx=12, pady=(10, 4)
        )
        return panel

    def _button(
        self,
        parent: ctk.CTkBaseClass,
        text: str,
        command: Callable[[], None],
        secondary: bool = False,
    ) -> None:
        colors = config.SECONDARY_BUTTON if secondary else {}
        ctk.CTkButton(parent, text=text, command=command, width=120, **colors).pack(
            side="left", padx=4
        )

    def _field(self, parent: ctk.CTkBaseClass, text: str, tip: Optional[str]) -> ctk.CTkEntry:
        label = ctk.CTkLabel(parent, text=text)
        label.pack(side="left", padx=(8, 4))
        if tip:
            _ToolTip(label, tip)
        entry = ctk.CTkEntry(parent, width=70)
        entry.pack(side="left")
        return entry

    def _table(self, parent: ctk.CTkBaseClass, headings: Headings, height: int) -> ttk.Treeview:
        holder = ctk.CTkFrame(parent, fg_color="transparent")
        holder.pack(fill="both", expand=True, padx=8, pady=(0, 8))

        tree = ttk.Treeview(
            holder, columns=[key for key, _ in headings], show="headings", height=height
        )
        for key, text in headings:
            tree.heading(key, text=text)
            tree.column(key, anchor="center", width=90)
        for tag, color in zip(("even", "odd"), config.ROW_COLORS):
            tree.tag_configure(tag, background=color)
        tree.pack(side="left", fill="both", expand=True)

        bar = ttk.Scrollbar(holder, orient="vertical", command=tree.yview)
        tree.configure(yscroll=bar.set)
        bar.pack(side="right", fill="y")
        return tree

    def _build_process_panel(self, panel: ctk.CTkFrame) -> None:
        form = ctk.CTkFrame(panel, fg_color="transparent")
        form.pack(fill="x", padx=4, pady=4)
        self.arrival_entry, self.burst_entry, self.priority_entry = (
            self._field(form, text, tip) for text, tip in PROCESS_FIELDS
        )
        self._button(form, "Add", self.add_process)
        self._button(form, "Remove", self.remove_selected_process, secondary=True)
        self.process_tree = self._table(panel, PROCESS_HEADINGS, 8)

    def _build_control_panel(self, panel: ctk.CTkFrame) -> None:
        row = ctk.CTkFrame(panel, fg_color="transparent")
        row.pack(fill="x", padx=4, pady=4)

        picker = ctk.CTkComboBox(
            row,
            values=list(self._by_label),
            variable=self.algorithm_label,
            width=300,
            state="readonly",
            command=self._algorithm_changed,
        )
        picker.pack(side="left", padx=8)
        _ToolTip(picker, "SRTF, preemptive priority and round robin can interrupt a running process.")
        self.quantum_entry = self._field(row, "Quantum", "Round robin time slice.")
        self.quantum_entry.insert(0, str(self._default_quantum))

        self._button(row, "Run", self.run_simulation)
        self._button(row, "Compare", self.run_comparison)
        self._button(row, "Clear", self.clear_all, secondary=True)

        ctk.CTkComboBox(
            row,
            values=list(SCENARIOS),
            variable=self.scenario,
            width=200,
            state="readonly",
            command=self._load_scenario,
        ).pack(side="left", padx=8)

        summary = ctk.CTkFrame(panel, fg_color="transparent")
        summary.pack(fill="x", padx=12, pady=(0, 10))
        self.avg_waiting_label, self.avg_turnaround_label = (
            ctk.CTkLabel(summary, text=text, font=config.AVERAGE_FONT) for text in NO_AVERAGES
        )
        self.extra_metrics_label = ctk.CTkLabel(summary, text=NO_EXTRA)
        for label in (self.avg_waiting_label, self.avg_turnaround_label, self.extra_metrics_label):
            label.pack(anchor="e")

        self._algorithm_changed(self.algorithm_label.get())

    def _algorithm_changed(self, _label: str) -> None:
        """Only round robin reads the quantum field."""
        rr = self.algorithm is Algorithm.RR
        self.quantum_entry.configure(state="normal" if rr else "disabled")

    # Process list

    def add_process(self) -> None:
        """Append a process from the form; blank priority means 0."""
        try:
            arrival = int(self.arrival_entry.get())
            burst = int(self.burst_entry.get())
            priority = int(self.priority_entry.get() or 0)
        except ValueError:
            self._show_error("Invalid input", "Arrival, burst and priority must be integers.")
            return
        if arrival < 0 or burst <= 0:
            self._show_error("Invalid input", "Arrival must be non-negative and burst positive.")
            return

        self._append_process(arrival, burst, priority)
        for entry in (self.arrival_entry, self.burst_entry, self.priority_entry):
            entry.delete(0, tk.END)

    def _append_process(self, arrival: int, burst: int, priority: int) -> None:
        values = (f"P{self._next_pid}", arrival, burst, priority)
        self._next_pid += 1
        self._insert_row(self.process_tree, values)

    def remove_selected_process(self) -> None:
        self.process_tree.delete(*self.process_tree.selection())
        for index, item in enumerate(self.process_tree.get_children()):
            self.process_tree.item(item, tags=("odd" if index % 2 else "even",))

    def clear_all(self) -> None:
        """Empty every table, the chart and the summary; numbering restarts at P1."""
        for tree in (self.process_tree, self.results_tree, self.comparison_tree):
            tree.delete(*tree.get_children())
        self._compared.clear()
        self.gantt_canvas.delete("all")
        self.avg_waiting_label.configure(text=NO_AVERAGES[0])
        self.avg_turnaround_label.configure(text=NO_AVERAGES[1])
        self.extra_metrics_label.configure(text=NO_EXTRA)
        self._next_pid = 1

    def _load_scenario(self, name: str) -> None:
        if name not in SCENARIOS:
            return
        self.clear_all()
        for arrival, burst, priority in SCENARIOS[name]:
            self._append_process(arrival, burst, priority)

    def _processes(self) -> ProcessCollection[Process]:
        rows = (self.process_tree.item(item, "values") for item in self.process_tree.get_children())
        return ProcessCollection(
            Process(str(pid), int(arrival), int(burst), int(priority))
            for pid, arrival, burst, priority in rows
        )

    @staticmethod
    def _insert_row(tree: ttk.Treeview, values: Sequence[Any]) -> str:
        tag = "odd" if len(tree.get_children()) % 2 else "even"
        return tree.insert("", "end", values=tuple(values), tags=(tag,))

    # Running

    def _quantum(self, required: bool) -> Optional[int]:
        text = self.quantum_entry.get().strip()
        if not text:
            if required:
                raise ValueError("Round robin needs a time quantum.")
            return None
        try:
            return int(text)
        except ValueError:
            raise ValueError(f"Time quantum must be a positive integer, not {text!r}.") from None

    def run_simulation(self) -> None:
        self._run(self.algorithm)

    def _run(self, algorithm: Algorithm) -> None:
        processes = self._processes()
        try:
            segments = schedule(
                processes, algorithm, self._quantum(required=algorithm is Algorithm.RR)
            )
        except ValueError as exc:
            self._show_error("Cannot schedule", str(exc))
            return

        self._show_metrics(processes, segments)
        self._draw_gantt_chart(segments)

    def run_comparison(self) -> None:
        """Fill the comparison table with one row per algorithm."""
        processes = self._processes()
        try:
            rows = compare(processes, self._quantum(required=False))
        except ValueError as exc:
            self._show_error("Cannot compare", str(exc))
            return

        self.comparison_tree.delete(*self.comparison_tree.get_children())
        self._compared.clear()
        for row in rows:
            item = self._insert_row(
                self.comparison_tree,
                (
                    row["label"],
                    f"{row['avg_waiting']:.2f}",
                    f"{row['avg_turnaround']:.2f}",
                    f"{row['cpu_utilization'] * 100:.2f}",
                    f"{row['throughput']:.3f}",
                ),
            )
            self._compared[item] = row["algorithm"]

    def _replay_compared(self, _event: tk.Event) -> None:
        selection = self.comparison_tree.selection()
        algorithm = self._compared.get(selection[0]) if selection else None
        if algorithm is None:
            return
        self.algorithm_label.set(algorithm.label)
        self._algorithm_changed(algorithm.label)
        self._run(algorithm)

    def _show_error(self, title: str, message: str) -> None:
        logger.warning("%s: %s", title, message)
        messagebox.showerror(title, message)

    def _show_metrics(
        self, processes: List[Process], segments: ProcessCollection[ExecutionSegment]
    ) -> None:
        self.results_tree.delete(*self.results_tree.get_children())
        columns = (
            "pid",
            "arrival_time",
            "burst_time",
            "priority",
            "completion_time",
            "turnaround_time",
            "waiting_time",
        )
        for stats in process_stats(processes, segments):
            self._insert_row(self.results_tree, [stats[column] for column in columns])

        extra = aggregates(processes, segments)
        self.avg_waiting_label.configure(
            text=f"Average Waiting Time: {segments.average_waiting_time:.2f}"
        )
        self.avg_turnaround_label.configure(
            text=f"Average Turnaround Time: {segments.average_turnaround_time:.2f}"
        )
        self.extra_metrics_label.configure(
            text=(
                f"Utilization: {extra['cpu_utilization'] * 100:.1f}%   "
                f"Throughput: {extra['throughput']:.3f}/unit   "
                f"Waiting range: {extra['min_waiting']:.0f} to {extra['max_waiting']:.0f}"
            )
        )

    def _draw_gantt_chart(self, segments: List[ExecutionSegment]) -> None:
        """One bar per timeline entry, scaled to the canvas width; gaps are idle."""
        canvas = self.gantt_canvas
        canvas.delete("all")

        entries = timeline(segments)
        end = max((entry["end"] for entry in entries), default=0)
        if end <= 0:
            canvas.create_text(10, 10, anchor="nw", text="Nothing scheduled.", fill=config.TEXT_COLOR)
            return

        width = canvas.winfo_width()
        if width <= 1:
            # Not mapped yet.
            width = 800
        margin, top, bottom = 20, 30, 80
        scale = max(1, width - 2 * margin) / end

        colors: Dict[Optional[str], str] = {None: config.IDLE_COLOR}
        palette = config.GANTT_PALETTE
        for entry in entries:
            pid = entry["pid"]
            colors.setdefault(pid, palette[(len(colors) - 1) % len(palette)])
            x1 = margin + entry["start"] * scale
            x2 = margin + entry["end"] * scale
            canvas.create_rectangle(x1, top, x2, bottom, fill=colors[pid], outline=config.ROW_COLORS[1])
            canvas.create_text(
                (x1 + x2) / 2, (top + bottom) / 2, text=pid or "Idle", fill=config.TEXT_COLOR
            )
            self._draw_tick(x1, bottom, entry["start"])
        self._draw_tick(margin + end * scale, bottom, end)

    def _draw_tick(self, x: float, y: float, time: int) -> None:
        self.gantt_canvas.create_line(x, y, x, y + 5, fill=config.IDLE_COLOR)
        self.gantt_canvas.create_text(
            x, y + 7, text=str(time), anchor="n", font=config.TICK_FONT, fill=config.TEXT_COLOR
        )

    def run(self) -> None:
        self.root.mainloop()
