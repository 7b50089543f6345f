from __future__ import annotations

import argparse
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional, Sequence, Tuple, Union

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS
from .engine import Simulator, run
from .errors import SchedsimError
from .gantt import build_rich_gantt
from .metrics import format_average
from .models import Process, RunResult
from .registry import make_process
from .workload_io import load_workload

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 2


@dataclass(frozen=True)
class Idle:
    """The process form adds a new process."""


@dataclass(frozen=True)
class Editing:
    """The process form replaces the process ``pid``."""

    pid: str


EditMode = Union[Idle, Editing]

FORM_FIELDS = ("pid", "arrival_time", "burst_time", "priority")


def submit_form(simulator: Simulator, mode: EditMode, fields: Dict[str, str]) -> EditMode:
    """
    Apply a filled-in process form: add in Idle mode, update in Editing mode.

    Returns the mode for the next form (always Idle after a successful
    submit). On error the exception propagates and the caller keeps its
    current mode.
    """
    process = make_process(
        fields.get("pid"),
        fields.get("arrival_time"),
        fields.get("burst_time"),
        fields.get("priority"),
    )
    if isinstance(mode, Editing):
        simulator.update_process(mode.pid, process)
    else:
        simulator.add_process(process)
    return Idle()


def start_edit(simulator: Simulator, pid: str) -> Tuple[Editing, Dict[str, str]]:
    """
    Switch the form to Editing mode and return the field values to prefill.
    """
    p = simulator.registry.get(pid)
    prefill = {
        "pid": p.pid,
        "arrival_time": str(p.arrival_time),
        "burst_time": str(p.burst_time),
        "priority": "" if p.priority is None else str(p.priority),
    }
    return Editing(pid=p.pid), prefill


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, SRTF, RR, Priority).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help="Algorithm to use (fcfs, sjf, srtf, rr, priority).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round-robin (ignored by the other algorithms).",
    )
    run_parser.add_argument(
        "--step",
        action="store_true",
        help="Show a simple time-stepped simulation in the terminal.",
    )
    run_parser.add_argument(
        "--step-delay",
        type=float,
        default=0.3,
        help="Seconds to wait between steps when --step is used (default: 0.3).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=list(ALGORITHMS),
        help="Algorithms to compare (default: fcfs sjf srtf rr priority).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for RR when included (default: {DEFAULT_QUANTUM}).",
    )

    menu_parser = subparsers.add_parser(
        "menu",
        help="Interactive process table editor with run and compare actions.",
    )
    menu_parser.add_argument(
        "--workload",
        "-w",
        default=None,
        help="Optional workload file to preload into the process table.",
    )
    menu_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Default quantum to prefill for RR (default: {DEFAULT_QUANTUM}).",
    )

    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _print_result(result: RunResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.label}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    panel, time_marks = build_rich_gantt(result.timeline)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "Start",
        "Complete",
        "Wait",
        "Turnaround",
        "Response",
        "Priority",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for r in result.records:
        proc_table.add_row(
            escape(r.pid),
            str(r.arrival_time),
            str(r.burst_time),
            str(r.first_start),
            str(r.completion_time),
            str(r.waiting_time),
            str(r.turnaround_time),
            str(r.response_time),
            "" if r.priority is None else str(r.priority),
        )

    console.print(proc_table)
    console.print()

    summary = result.summary
    system = result.system
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", format_average(summary.average_waiting_time))
    sys_table.add_row("Avg turnaround", format_average(summary.average_turnaround_time))
    sys_table.add_row("Avg response", format_average(summary.average_response_time))
    sys_table.add_row("Makespan", str(system.makespan))
    sys_table.add_row("Idle time", str(system.idle_time))
    sys_table.add_row("Throughput (proc/time)", f"{system.throughput:.3f}")
    sys_table.add_row("CPU utilization", f"{system.cpu_utilization*100:.1f}%")

    console.print(sys_table)


def _compare_table(
    processes: Sequence[Process],
    algorithms: Iterable[str],
    quantum: int,
    title: str = "Algorithm comparison",
) -> Table:
    summary_table = Table(title=title, box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")

    for alg in algorithms:
        result = run(alg, processes, quantum=quantum)
        summary_table.add_row(
            result.label,
            "" if result.quantum is None else str(result.quantum),
            format_average(result.summary.average_waiting_time),
            format_average(result.summary.average_turnaround_time),
            format_average(result.summary.average_response_time),
        )

    return summary_table


def _process_table(processes: Sequence[Process], mode: EditMode) -> Table:
    table = Table(title="Processes", box=box.SIMPLE_HEAVY)
    table.add_column("PID", justify="center")
    table.add_column("Arrive", justify="right")
    table.add_column("Burst", justify="right")
    table.add_column("Priority", justify="center")

    for p in processes:
        editing = isinstance(mode, Editing) and mode.pid == p.pid
        table.add_row(
            escape(p.pid),
            str(p.arrival_time),
            str(p.burst_time),
            "N/A" if p.priority is None else str(p.priority),
            style="reverse" if editing else None,
        )
    return table


def _animate_result(result: RunResult, delay: float, console: Console) -> None:
    """
    Simple time-stepped textual simulation using the computed schedule.
    """
    makespan = result.system.makespan
    console.print(f"[bold]Simulating {result.label}[/bold] (duration {makespan} time units)")
    console.print("[dim]Press Ctrl+C to skip animation.[/dim]")

    for t in range(makespan):
        seg = next(s for s in result.timeline if s.start <= t < s.end)
        if seg.is_idle:
            console.print(f"t={t:2d}: [dim]idle[/dim]")
        else:
            bar = "█" * (t - seg.start + 1)
            console.print(f"t={t:2d}: {escape(seg.pid)} [green]{bar}[/green]")
        time.sleep(delay)


def _interactive_menu(
    simulator: Simulator,
    default_quantum: int,
    console: Console,
    prompt: Callable[[str], str] = input,
) -> None:
    mode: EditMode = Idle()

    def ask(label: str, default: str = "") -> str:
        suffix = f" [{default}]" if default else ""
        value = prompt(f"{label}{suffix}: ").strip()
        return value or default

    def fill_form(prefill: Dict[str, str]) -> Dict[str, str]:
        return {name: ask(name, prefill.get(name, "")) for name in FORM_FIELDS}

    prefill: Dict[str, str] = {}

    while True:
        console.print("\n[bold cyan]Scheduler Menu[/bold cyan] [dim](q to quit)[/dim]")
        if isinstance(mode, Editing):
            console.print(f"[bold]Editing:[/bold] [yellow]{escape(mode.pid)}[/yellow]")
            submit_label = f"Update process {mode.pid}"
        else:
            submit_label = "Add process"

        actions = [
            ("submit", submit_label),
            ("edit", "Edit process"),
            ("delete", "Delete process"),
            ("list", "List processes"),
            ("run", "Run algorithm"),
            ("compare", "Compare algorithms"),
            ("load", "Load workload file"),
            ("clear", "Clear all processes"),
        ]
        if isinstance(mode, Editing):
            actions.append(("cancel", "Cancel edit"))

        for idx, (_, label) in enumerate(actions, start=1):
            console.print(f"  [yellow]{idx}[/yellow]. [white]{label}[/white]")

        choice = prompt(f"Choice [1-{len(actions)} or q]: ").strip().lower()
        if choice in {"q", "quit", "exit"}:
            return

        try:
            action = actions[int(choice) - 1][0]
        except (ValueError, IndexError):
            console.print("[red]Invalid selection.[/red]")
            continue

        try:
            if action == "submit":
                mode = submit_form(simulator, mode, fill_form(prefill))
                prefill = {}
            elif action == "edit":
                mode, prefill = start_edit(simulator, ask("PID to edit"))
            elif action == "delete":
                pid = ask("PID to delete")
                simulator.remove_process(pid)
                if isinstance(mode, Editing) and mode.pid == pid:
                    mode, prefill = Idle(), {}
            elif action == "list":
                console.print(_process_table(simulator.registry.snapshot(), mode))
            elif action == "run":
                alg = ask("Algorithm", "fcfs")
                quantum = None
                if alg.lower() in {"rr", "round-robin", "round_robin"}:
                    quantum = int(ask("Quantum", str(default_quantum)))
                _print_result(simulator.run(alg, quantum=quantum), console)
            elif action == "compare":
                quantum = int(ask("Quantum for rr", str(default_quantum)))
                console.print(_compare_table(simulator.registry.snapshot(), ALGORITHMS, quantum))
            elif action == "load":
                simulator.registry.extend(load_workload(Path(ask("Workload path"))))
            elif action == "clear":
                simulator.registry.clear()
                mode, prefill = Idle(), {}
            elif action == "cancel":
                mode, prefill = Idle(), {}
        except (SchedsimError, ValueError, OSError) as exc:
            console.print(f"[red]Error: {escape(str(exc))}[/red]")


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    console = Console()

    try:
        if args.command == "run":
            processes = load_workload(Path(args.workload))
            result = run(args.algorithm, processes, quantum=args.quantum)
            if args.step:
                try:
                    _animate_result(result, delay=args.step_delay, console=console)
                except KeyboardInterrupt:
                    console.print("[yellow]Animation skipped.[/yellow]")
            _print_result(result, console)
            return 0

        if args.command == "compare":
            processes = load_workload(Path(args.workload))
            console.print(_compare_table(processes, args.algorithms, args.quantum))
            return 0

        if args.command == "menu":
            simulator = Simulator()
            if args.workload:
                simulator.registry.extend(load_workload(Path(args.workload)))
            _interactive_menu(simulator, args.quantum, console)
            return 0
    except (SchedsimError, OSError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
