#!/usr/bin/env python3
"""
ofman - Lua C API manpage generator

Reads a reference document written in the Lua manual's "Our Format"
(@APIEntry{...} blocks with nested @tag{} markup) and writes one ROFF
manpage per documented C function or type.

Usage:
    ofman manual.of man/

    Each entry is written to man/<name>.3 (functions) or man/<name>.3type
    (type aliases).

Examples:
    # Basic conversion
    ofman manual.of man/

    # Reproducible output with a fixed header date
    ofman manual.of man/ --date "Jan 01, 2024"

    # Fail on unknown tags and missing @apii{}
    ofman manual.of man/ --strict -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter
from typing import List, Optional

from .lib import Compiler, EntryError, __version__, LOG, state_connectToLogger
from .lib.compiler import manpage_write
from .models import ProgramState, pipeline


# Define CLI arguments
parser = ArgumentParser(
    prog="ofman",
    description="ofman - generate Lua C API manpages from an 'Our Format' document",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument("inputFile", type=Path, help="Source document (e.g. manual.of)")

parser.add_argument("outputdir", type=Path, help="Directory receiving the manpages")

parser.add_argument(
    "--date",
    default=None,
    type=str,
    help="Date written into every manpage header (default: today)",
)

parser.add_argument(
    "--strict",
    action="store_true",
    help="Treat unknown tags and missing @apii{} as errors",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment.

    The output directory is only created once every entry has converted.

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the source document
            - envOK: True if environment is valid

    Exits:
        1 if the input file is missing or the output path is not a directory
    """
    state = inputstate.copy()

    LOG("Checking environment...", level=2)

    input_file = Path(state.inputFile)
    if not input_file.is_file():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    if state.outputdir.exists() and not state.outputdir.is_dir():
        print(f"Error: Output path is not a directory: {state.outputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)
    LOG(f"Output directory: {state.outputdir}", level=2)

    state.envOK = True
    return state


def source_read(inputstate: ProgramState) -> ProgramState:
    """
    Read the source document.

    Returns:
        ProgramState with added field:
            - sourceText: Contents of the source document

    Exits:
        1 if the file cannot be read
    """
    state = inputstate.copy()

    LOG("Reading source file...", level=1)

    try:
        state.sourceText = state.inputSourceFile.read_text(encoding="utf-8")
        LOG(f"Read {len(state.sourceText)} characters from {state.inputSourceFile.name}", level=2)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    return state


def manpages_compile(inputstate: ProgramState) -> ProgramState:
    """
    Convert every entry of the document to a manpage.

    Nothing is written in this stage, so a fatal entry leaves no output.

    Returns:
        ProgramState with added field:
            - manpages: List[Manpage], in document order

    Exits:
        1 on the first entry that cannot be converted
    """
    state = inputstate.copy()

    LOG("Converting entries...", level=1)

    try:
        compiler = Compiler(
            source=state.sourceText,
            date=state.date,
            strict=state.strict,
            debug=(state.verbosity >= 3),
        )
        state.manpages = compiler.compile()
        LOG(f"Converted {len(state.manpages)} entries", level=2)
    except (EntryError, SyntaxError) as e:
        print(f"Conversion error: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            import traceback

            traceback.print_exc()
        sys.exit(1)

    return state


def manpages_write(inputstate: ProgramState) -> ProgramState:
    """
    Create the output directory and write each manpage to
    <outputdir>/<name>.<category>.

    Returns:
        ProgramState with added field:
            - writtenFiles: Paths of the written manpages

    Exits:
        1 if a file cannot be written
    """
    state = inputstate.copy()

    written: List[Path] = []
    try:
        state.outputdir.mkdir(parents=True, exist_ok=True)
        for page in state.manpages or []:
            written.append(manpage_write(page, state.outputdir))
    except OSError as e:
        print(f"Error writing manpage: {e}", file=sys.stderr)
        sys.exit(1)

    state.writtenFiles = written
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Summarize the run.

    Returns:
        ProgramState unchanged (terminal pipeline stage)
    """
    state: ProgramState = inputstate.copy()

    warnings = sum(len(page.warnings) for page in state.manpages or [])
    LOG(f"✓ {len(state.writtenFiles)} manpages written to {state.outputdir}", level=1)
    if warnings:
        LOG(f"  {warnings} warnings, see above", level=1)
    return state


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point - convert a source document into manpages.

    Orchestrates the pipeline:
        1. env_check: Validate paths
        2. source_read: Read the source document
        3. manpages_compile: Convert all entries
        4. manpages_write: Write one file per entry
        5. results_report: Summarize

    Args:
        argv: Command line arguments (default: sys.argv[1:])

    Returns:
        Process exit status (fatal conditions exit with 1 directly)
    """
    options: Namespace = parser.parse_args(argv)

    state: ProgramState = ProgramState.state_createFromNamespace(options)

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, source_read, manpages_compile, manpages_write, results_report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
