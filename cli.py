#!/usr/bin/env python3
"""
depmap CLI

Builds the import/export dependency graph of a JavaScript/TypeScript project
and prints a summary, the relationships of one file, or the whole graph.
"""

import argparse
import logging
import sys
from pathlib import Path

from graph.project import ProjectGraph
from scanner.config import load_config
from scanner.exceptions import DepmapError
from exporters import (
    to_ascii,
    to_json,
    to_mermaid,
    relationships_to_ascii,
    result_to_json,
    summary_to_ascii,
)

logger = logging.getLogger("depmap")


def parse_args(args=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="depmap",
        description="Build the dependency graph of a JavaScript/TypeScript project.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  depmap .                           # Summary: file count, most referenced files
  depmap . --file src/index.ts       # Imports, importers and exports of one file
  depmap . --file utils.ts -f json   # Same, as JSON
  depmap . --graph                   # Import tree of the whole project
  depmap . -f mermaid -o graph.mmd   # Mermaid flowchart to a file
  depmap . --include-ext .ts .tsx    # Only scan TypeScript files
  depmap . --workers 8               # Analyze files on 8 threads
        """,
    )

    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Project root directory (default: current directory)",
    )

    # What to print
    target = parser.add_mutually_exclusive_group()
    target.add_argument(
        "--file",
        type=str,
        default=None,
        help="Print the relationships of this file (root-relative path or unique suffix)",
    )
    target.add_argument(
        "--graph",
        action="store_true",
        help="Print the whole graph instead of the summary",
    )

    # Output options
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output file (default: stdout)",
    )

    parser.add_argument(
        "-f", "--format",
        choices=["ascii", "mermaid", "json"],
        default="ascii",
        help="Output format (default: ascii); mermaid always renders the whole graph",
    )

    parser.add_argument(
        "--ascii-style",
        choices=["tree", "ascii"],
        default="tree",
        help="ASCII output style: 'tree' (Unicode) or 'ascii' (pure ASCII)",
    )

    parser.add_argument(
        "--orientation",
        choices=["LR", "TD", "TB", "RL", "BT"],
        default="LR",
        help="Mermaid flowchart orientation (default: LR)",
    )

    parser.add_argument(
        "--group-by-dir",
        action="store_true",
        help="Group nodes by top-level directory in Mermaid output",
    )

    parser.add_argument(
        "--show-all",
        action="store_true",
        help="Include files that have no connections in graph output",
    )

    # Scanning options
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Config file (default: .depmap.yaml or [tool.depmap] in pyproject.toml under root)",
    )

    parser.add_argument(
        "--include-ext",
        nargs="+",
        default=None,
        help="File extensions to include (e.g., .ts .tsx)",
    )

    parser.add_argument(
        "--exclude-dir",
        nargs="+",
        default=None,
        help="Additional directory names to exclude",
    )

    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Maximum directory depth to scan",
    )

    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of threads analyzing files (default: 1)",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-vv for debug output)",
    )

    return parser.parse_args(args)


def configure_logging(verbosity: int) -> None:
    """Send log records to stderr at a level chosen by -v flags."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(args=None):
    """Main entry point."""
    parsed = parse_args(args)
    configure_logging(parsed.verbose)

    root = Path(parsed.root).resolve()
    if not root.is_dir():
        print(f"Error: '{parsed.root}' is not a directory", file=sys.stderr)
        return 1

    try:
        config = load_config(root, Path(parsed.config) if parsed.config else None)
        config = config.merged(
            include_ext=parsed.include_ext,
            exclude_dirs=parsed.exclude_dir,
            max_depth=parsed.max_depth,
            workers=parsed.workers,
        )
    except DepmapError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    project = ProjectGraph(config)
    try:
        project.build(root)
    except DepmapError as e:
        print(f"Graph Build Error: {e}", file=sys.stderr)
        return 1

    if parsed.format == "mermaid":
        output = to_mermaid(
            project.graph,
            orientation=parsed.orientation,
            group_by_directory=parsed.group_by_dir,
            show_all=parsed.show_all,
        )

    elif parsed.file:
        try:
            relationships = project.get_relationships(parsed.file)
        except DepmapError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        if relationships is None:
            print(f"File not found in graph: {parsed.file}", file=sys.stderr)
            return 1
        if parsed.format == "json":
            output = result_to_json(relationships)
        else:
            output = relationships_to_ascii(relationships, style=parsed.ascii_style)

    elif parsed.graph:
        if parsed.format == "json":
            output = to_json(project.graph)
        else:
            output = to_ascii(project.graph, style=parsed.ascii_style, show_all=parsed.show_all)

    else:
        summary = project.get_summary()
        if parsed.format == "json":
            output = result_to_json(summary)
        else:
            output = summary_to_ascii(summary, style=parsed.ascii_style)

    if parsed.output:
        try:
            output_path = Path(parsed.output)
            output_path.write_text(output, encoding="utf-8")
            print(f"Output written to: {output_path}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    else:
        print(output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
