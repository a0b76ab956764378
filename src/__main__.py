#!/usr/bin/env python3
"""
mdcstream - Streaming renderer for MDC documents

Reveals an MDC (markdown + components) document a few characters at a
time, re-rendering every revealed prefix, and writes the final render as
HTML and as a JSON render tree.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Philosophy:
    - Stream-first: every prefix of a document must render, never crash
    - Stable identity: render keys come from document structure, so a host
      can reconcile successive trees without flicker
    - Open components: unknown components still show their content

Usage:
    mdcstream inputdir/ outputdir/ --inputFile doc.md

Examples:
    # Stream at the default speed, write index.html + tree.json
    mdcstream . output/ --inputFile demo.md

    # Fast, reproducible run with per-transition logging
    mdcstream . output/ --inputFile demo.md --speed fast --seed 7 -v

    # Skip the reveal and render the whole document at once
    mdcstream . output/ --inputFile demo.md --instant
"""

import sys
import json
import random
import asyncio
import dataclasses
from pathlib import Path
from collections import Counter
from typing import Any, Dict, Optional
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import (
    DocumentRenderer,
    RevealEngine,
    AsyncioScheduler,
    HtmlEmitter,
    parse,
    components_extract,
    __version__,
    LOG,
    state_connectToLogger,
)
from .models import ProgramState, pipeline, RevealState, RenderResult


DISPLAY_TITLE = r"""
               _          _
  _ __ ___  __| | ___ ___| |_ _ __ ___  __ _ _ __ ___
 | '_ ` _ \/ _` |/ __/ __| __| '__/ _ \/ _` | '_ ` _ \
 | | | | | | (_| | (__\__ \ |_| | |  __/ (_| | | | | | |
 |_| |_| |_|\__,_|\___|___/\__|_|  \___|\__,_|_| |_| |_|

  Streaming renderer for MDC documents
"""

# Define CLI arguments
parser = ArgumentParser(
    description="mdcstream - Streaming renderer for MDC (markdown + components) documents",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Input MDC/markdown file (relative to inputdir)"
)

parser.add_argument(
    "--speed",
    default=appsettings.default_speed,
    choices=sorted(appsettings.speeds_get()),
    help="Reveal speed preset",
)

parser.add_argument(
    "--seed",
    default=None,
    type=int,
    help="Seed for the chunk-size generator (reproducible runs)",
)

parser.add_argument(
    "--instant",
    action="store_true",
    help="Skip the reveal and render the complete document at once",
)

parser.add_argument(
    "--outputSubdir",
    default=".",
    type=str,
    help="Subdirectory within outputdir for the rendered output",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all file paths.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the input document
            - htmlOutputdir: Created output directory path
            - envOK: True if environment is valid

    Exits:
        1 if the input file is missing
    """
    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile
    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    state.htmlOutputdir = state.outputdir / state.outputSubdir
    state.htmlOutputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.htmlOutputdir}", level=2)

    state.envOK = True
    return state


def source_read(inputstate: ProgramState) -> ProgramState:
    """
    Read the source document.

    Returns:
        ProgramState with added field:
            - sourceText: Document text

    Exits:
        1 if the file cannot be read
    """
    state = inputstate.copy()

    LOG("Reading source file...", level=1)
    try:
        state.sourceText = state.inputSourceFile.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Read {len(state.sourceText)} characters from {state.inputSourceFile.name}", level=2)
    return state


async def reveal_drive(state: ProgramState) -> Dict[str, Any]:
    """
    Run the reveal engine to completion, rendering every prefix.

    Render failures are counted but do not stop the stream; the last
    successful render is kept as the final tree.

    Returns:
        Dict with ticks, renders, failures, last_error and the final result
    """
    renderer = DocumentRenderer()
    engine = RevealEngine(
        state.sourceText,
        interval_ms=appsettings.interval_resolve(state.speed),
        scheduler=AsyncioScheduler(),
        rng=random.Random(state.seed),
    )

    done = asyncio.Event()
    stats: Dict[str, Any] = {"ticks": 0, "renders": 0, "failures": 0, "last_error": None}
    latest: Dict[str, Optional[RenderResult]] = {"ok": None}
    revealed = {"length": 0}

    def on_update(prefix: str, reveal_state: RevealState) -> None:
        if len(prefix) > revealed["length"]:
            stats["ticks"] += 1
            revealed["length"] = len(prefix)
        result = renderer.render(prefix)
        stats["renders"] += 1
        if result.ok:
            latest["ok"] = result
        else:
            stats["failures"] += 1
            stats["last_error"] = result.error.message if result.error else None
            LOG(f"Render failed at {len(prefix)} characters: {stats['last_error']}", level=2)
        LOG(f"{engine.progress():6.2f}% [{reveal_state.value}]", level=3)
        if reveal_state is RevealState.COMPLETE:
            done.set()

    engine.subscribe(on_update)
    if state.instant:
        engine.complete()
    else:
        engine.start()
    await done.wait()

    stats["result"] = latest["ok"]
    return stats


def stream_run(inputstate: ProgramState) -> ProgramState:
    """
    Stream the document through the reveal engine and renderer.

    Returns:
        ProgramState with added fields:
            - renderTree: RenderTree of the complete document
            - streamResult: Dict with ticks, renders, failures, last_error

    Exits:
        1 if the complete document never rendered
    """
    state = inputstate.copy()

    mode = "instantly" if state.instant else f"at '{state.speed}' speed"
    LOG(f"Streaming document {mode}...", level=1)

    stats = asyncio.run(reveal_drive(state))
    result: Optional[RenderResult] = stats.pop("result")
    state.streamResult = stats

    if result is None or result.tree is None or result.tree.source_length != len(state.sourceText):
        print(f"Render error: {stats['last_error'] or 'document did not render'}", file=sys.stderr)
        sys.exit(1)

    state.renderTree = result.tree
    LOG(f"Streamed in {stats['ticks']} ticks, {stats['failures']} failed renders", level=2)
    return state


def results_write(inputstate: ProgramState) -> ProgramState:
    """
    Write the final render as HTML and as a JSON render tree.

    Returns:
        ProgramState with added field:
            - writeResult: Dict with html_file and tree_file paths
    """
    state = inputstate.copy()

    LOG("Writing output...", level=1)
    emitter = HtmlEmitter()
    html_file = state.htmlOutputdir / "index.html"
    html_file.write_text(emitter.document_build(state.renderTree), encoding="utf-8")
    LOG(f"Wrote {html_file}", level=2)

    tree_file = state.htmlOutputdir / "tree.json"
    tree_file.write_text(
        json.dumps(dataclasses.asdict(state.renderTree), indent=2, ensure_ascii=False, default=str),
        encoding="utf-8",
    )
    LOG(f"Wrote {tree_file}", level=2)

    state.writeResult = {"html_file": str(html_file), "tree_file": str(tree_file)}
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display a summary of the run.

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if writeResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.writeResult:
        print("Error: Nothing was written", file=sys.stderr)
        sys.exit(1)

    components = Counter(node.name for node in components_extract(parse(state.sourceText).body))

    LOG("\n✓ Streaming complete!", level=1)
    LOG(f"  Output: {state.writeResult['html_file']}", level=1)
    LOG(f"  Tree:   {state.writeResult['tree_file']}", level=1)
    LOG(f"  Ticks:  {state.streamResult['ticks']}", level=1)
    if components:
        summary = ", ".join(f"{name} x{count}" for name, count in sorted(components.items()))
        LOG(f"  Components: {summary}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="mdcstream - Streaming renderer for MDC documents",
    category="Visualization",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - stream an MDC document and write its final render.

    Orchestrates the pipeline:
        1. env_check: Validate paths and environment
        2. source_read: Read the document
        3. stream_run: Reveal and render every prefix
        4. results_write: Write index.html and tree.json
        5. results_report: Display results to user

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """
    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, source_read, stream_run, results_write, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
