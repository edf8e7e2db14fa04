#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Device Partitioner - command line entry point.

Usage examples:
    device-partitioner export points.csv --path-column Path --device root/A --output out.csv
    device-partitioner tree points.csv --path-column Path --state device_state.yaml
    device-partitioner plan points.csv --path-column Path --state device_state.json --device root/A/sub
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .app.controller import DeviceWorkspace
from .app.csv_source import read_text_file
from .app.export import write_csv
from .app.models import DeviceConflictPlan
from .config import StateStore
from .core.folder_tree import count_points_under_folder
from .core.paths import display_path
from .exceptions import BaseError
from .logging_config import setup_logging
from .version import load_version

logger = logging.getLogger(__name__)


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parses command line arguments."""
    parser = argparse.ArgumentParser(
        prog="device-partitioner",
        description="Partition hierarchical CSV points into devices",
    )
    parser.add_argument("--version", action="store_true", help="Show version information")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-json", action="store_true", help="Emit structured JSON log lines")
    parser.add_argument("--log-dir", help="Also write rotating log files to this directory")

    sub = parser.add_subparsers(dest="command")

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("input", help="CSV file with a header row")
        p.add_argument("--path-column", required=True, help="Column holding the slash-delimited point path")
        p.add_argument("--type-column", default="", help="Optional column holding the point type")
        p.add_argument("--state", help="Persisted state file (.json, .yaml or .yml)")
        p.add_argument(
            "--device",
            action="append",
            default=[],
            metavar="PATH",
            help="Mark a folder as device (repeatable, conflicts are accepted)",
        )
        p.add_argument("--hide", action="append", default=[], metavar="PATH", help="Hide a folder (repeatable)")

    export_p = sub.add_parser("export", help="Write the CSV with a device_name column")
    add_common(export_p)
    export_p.add_argument("--output", help="Output file (default: stdout)")
    export_p.add_argument("--save-state", action="store_true", help="Write the resulting state back to --state")

    tree_p = sub.add_parser("tree", help="Print the folder tree with device names")
    add_common(tree_p)

    stats_p = sub.add_parser("stats", help="Print device and unassigned statistics")
    add_common(stats_p)

    plan_p = sub.add_parser("plan", help="Show the conflict plan for --device paths without applying it")
    add_common(plan_p)

    return parser.parse_args(argv)


def _build_workspace(args: argparse.Namespace) -> DeviceWorkspace:
    workspace = DeviceWorkspace()
    workspace.load_csv_text(read_text_file(args.input))
    workspace.select_path_column(args.path_column)
    if args.type_column:
        workspace.select_type_column(args.type_column)
    if args.state:
        workspace.restore(StateStore(Path(args.state)).load())
    return workspace


def _apply_edits(workspace: DeviceWorkspace, args: argparse.Namespace) -> None:
    if args.device:
        workspace.mark_as_devices(args.device, confirm=True)
    if args.hide:
        workspace.hide_folders(args.hide)


def plan_to_dict(plan: DeviceConflictPlan) -> Dict[str, Any]:
    return {
        "requires_confirmation": plan.requires_confirmation,
        "to_add": plan.to_add,
        "to_remove": plan.to_remove,
        "dropped_from_selection": plan.dropped_from_selection,
        "upstream_conflicts": plan.upstream_conflicts,
        "downstream_conflicts": plan.downstream_conflicts,
        "reassignment_groups": [
            {
                "from": group.from_device_path,
                "to": group.to_device_path,
                "point_paths": group.point_paths,
            }
            for group in plan.reassignment_groups
        ],
    }


def _cmd_export(workspace: DeviceWorkspace, args: argparse.Namespace) -> int:
    _apply_edits(workspace, args)
    text = workspace.export_csv_text() or ""
    if args.output:
        write_csv(text, args.output)
        logger.info("Wrote %s", args.output)
    else:
        sys.stdout.write(text)
    if args.save_state and args.state:
        StateStore(Path(args.state)).save(workspace.snapshot())
    return 0


def _cmd_tree(workspace: DeviceWorkspace, args: argparse.Namespace) -> int:
    _apply_edits(workspace, args)
    tree = workspace.tree
    if tree is None:
        print("(no folders)")
        return 0
    devices = set(workspace.device_paths)
    lines: List[str] = []
    for path in workspace.visible_folder_paths():
        node = tree.get(path)
        if node is None:
            continue
        depth = 0 if path == tree.root.path else display_path(path).count("/") + 1
        marker = f"  [{workspace.display_name(path)}]" if path in devices else ""
        lines.append(f"{'  ' * depth}{node.name}{marker}")
    print("\n".join(lines))
    return 0


def _cmd_stats(workspace: DeviceWorkspace, args: argparse.Namespace) -> int:
    _apply_edits(workspace, args)
    stats = workspace.unassigned_stats()
    print(f"Devices: {workspace.device_entity_count}")
    print(f"Points: {stats.total_points} (unassigned: {stats.unassigned_points})")
    for item in workspace.device_list_items():
        count = sum(count_points_under_folder(p, workspace.points) for p in item.member_paths)
        members = ", ".join(display_path(p) for p in item.member_paths)
        print(f"  {item.name}: {count} point(s) [{members}]")
    hidden = set(workspace.hidden_folder_paths)
    for folder in workspace.visible_unassigned_folder_paths():
        if folder not in hidden:
            print(f"  unassigned: {display_path(folder)}")
    return 0


def _cmd_plan(workspace: DeviceWorkspace, args: argparse.Namespace) -> int:
    if args.hide:
        workspace.hide_folders(args.hide)
    workspace.set_selection(args.device)
    plan = workspace.mark_selection_as_devices()
    if plan is None:
        print(json.dumps({"error": "no --device paths given"}))
        return 1
    print(json.dumps(plan_to_dict(plan), indent=2, ensure_ascii=False))
    return 0


_COMMANDS = {
    "export": _cmd_export,
    "tree": _cmd_tree,
    "stats": _cmd_stats,
    "plan": _cmd_plan,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main function of the command line tool."""
    args = parse_arguments(argv)

    if args.version:
        print(f"Device Partitioner v{load_version()}")
        return 0

    setup_logging(
        log_level="DEBUG" if args.debug else "WARNING",
        log_dir=args.log_dir,
        enable_file_logging=bool(args.log_dir),
        structured_json=True if args.log_json else None,
    )

    handler = _COMMANDS.get(args.command or "")
    if handler is None:
        print("No command given. Use --help for usage.", file=sys.stderr)
        return 2

    try:
        workspace = _build_workspace(args)
        return handler(workspace, args)
    except BaseError as exc:
        logger.error("%s (%s)", exc, exc.error_code)
        logger.debug("Error details: %s", exc.to_dict())
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
