"""tiergraph CLI - consistency checking and tiered ranking.

Validates a graph of ordering relations and prints its ranking tiers.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .config import get_settings
from .engine.core import RankingEngine
from .engine.editor import GraphModel
from .parser.graph_state import GraphStateParser
from .parser.items import ItemListParser
from .storage import StateStore

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INVALID = 2


def read_content(input_arg: str | None, max_bytes: int = 10 * 1024 * 1024) -> str:
    """Read input content from a file path, '-' for stdin, or piped stdin.

    Args:
        input_arg: File path string, '-' for explicit stdin, or None to check
                   for piped stdin automatically.
        max_bytes: Size limit for file input

    Returns:
        File content as a string.
    """
    if input_arg == '-' or (input_arg is None and not sys.stdin.isatty()):
        return sys.stdin.read()

    if input_arg is None:
        raise ValueError("input_arg must be a file path or '-' for stdin")

    path = Path(input_arg)
    file_size = path.stat().st_size
    if file_size > max_bytes:
        raise ValueError(
            f"Input file exceeds {max_bytes // (1024 * 1024)}MB limit ({file_size // (1024 * 1024)}MB)"
        )

    for encoding in ['utf-8', 'utf-16']:
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode('utf-8', errors='replace')


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _write_or_print(content: str, output: Path | None) -> None:
    if output:
        output.write_text(content, encoding='utf-8')
        print(f"Report saved to: {output}", file=sys.stderr)
    else:
        print(content)


def main(args: list[str] | None = None) -> int:
    """Main CLI entry point.

    Args:
        args: Command line arguments (defaults to sys.argv)

    Returns:
        Exit code: 0 on success, 2 if the graph is invalid or cannot be
        ranked, 1 on input or I/O errors
    """
    parser = argparse.ArgumentParser(
        prog='tiergraph',
        description='Check a graph of ordering relations for consistency and rank its nodes into tiers',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tiergraph graph.json
  tiergraph -                                  # read from stdin
  cat graph.json | tiergraph                   # pipe input
  tiergraph graph.json --validate-only
  tiergraph graph.json --format json --output ranking.json
  tiergraph graph.json --import-items items.txt --save-state
  tiergraph --from-store --relations
  tiergraph --clear-state
        """
    )

    parser.add_argument(
        'input',
        nargs='?',
        help='Graph state JSON file, or "-" to read from stdin (omit when piping or using --from-store)'
    )

    parser.add_argument(
        '--validate-only',
        action='store_true',
        help='Only check consistency; do not rank'
    )

    parser.add_argument(
        '-f', '--format',
        choices=['terminal', 'markdown', 'json'],
        default='terminal',
        help='Output format (default: terminal)'
    )

    parser.add_argument(
        '-o', '--output',
        type=Path,
        help='Output file for markdown/json reports (default: stdout)'
    )

    parser.add_argument(
        '--relations',
        action='store_true',
        help='List every relation in the report'
    )

    parser.add_argument(
        '--import-items',
        metavar='FILE',
        type=Path,
        help='Replace the node library with labels from a .txt (one per line) or .json array file'
    )

    parser.add_argument(
        '--state-file',
        metavar='PATH',
        type=Path,
        help='State store file (default: $TIERGRAPH_STATE_PATH or ~/.tiergraph/state.json)'
    )

    parser.add_argument(
        '--from-store',
        action='store_true',
        help='Load the graph from the state store instead of INPUT'
    )

    parser.add_argument(
        '--save-state',
        action='store_true',
        help='Write the loaded graph (and imported library) to the state store'
    )

    parser.add_argument(
        '--clear-state',
        action='store_true',
        help='Remove the saved graph from the state store'
    )

    parser.add_argument(
        '--no-color',
        action='store_true',
        help='Disable colored output (terminal only)'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parsed_args = parser.parse_args(args)
    _configure_logging(parsed_args.verbose)

    settings = get_settings()
    store = StateStore(parsed_args.state_file or settings.state_path, settings.state_key)

    input_arg = parsed_args.input
    wants_input = not (parsed_args.from_store or parsed_args.clear_state)
    if input_arg is None and wants_input and not sys.stdin.isatty():
        input_arg = '-'

    if parsed_args.clear_state:
        if not store.clear():
            print(f"Error: Could not clear state in {store.path}", file=sys.stderr)
            return EXIT_ERROR
        print(f"Cleared saved state in {store.path}", file=sys.stderr)
        if input_arg is None and not parsed_args.from_store:
            return EXIT_OK

    if input_arg is None and not parsed_args.from_store:
        parser.error('the following arguments are required: input (or pipe data via stdin, or use --from-store)')

    if input_arg not in (None, '-'):
        input_path = Path(input_arg)
        if not input_path.exists():
            print(f"Error: Input file not found: {input_arg}", file=sys.stderr)
            return EXIT_ERROR
        if not input_path.is_file():
            print(f"Error: Input is not a file: {input_arg}", file=sys.stderr)
            return EXIT_ERROR

    try:
        graph_parser = GraphStateParser(max_bytes=settings.max_input_bytes)

        if parsed_args.from_store:
            state = store.load()
            if state is None:
                print(f"Error: No saved state in {store.path}", file=sys.stderr)
                return EXIT_ERROR
            graph_state = graph_parser.parse_data(state)
            source = str(store.path)
        else:
            source = 'stdin' if input_arg == '-' else input_arg
            if parsed_args.verbose:
                print(f"Parsing input: {source}", file=sys.stderr)
            graph_state = graph_parser.parse(read_content(input_arg, settings.max_input_bytes))

        model: GraphModel = graph_state.to_model()

        if parsed_args.import_items:
            items = ItemListParser().parse_file(parsed_args.import_items)
            model.replace_shelf((item.label, item.image_url) for item in items)
            if parsed_args.verbose:
                print(f"Imported {len(items)} library items", file=sys.stderr)

        if parsed_args.save_state:
            if store.save(model.to_state()):
                print(f"State saved to: {store.path}", file=sys.stderr)
            else:
                print(f"Warning: Could not save state to {store.path}", file=sys.stderr)

        snapshot = model.snapshot()
        engine = RankingEngine()
        validation = engine.validate(snapshot)
        ranking = None if parsed_args.validate_only else engine.rank(snapshot)

        if parsed_args.verbose:
            print(
                f"Checked {len(snapshot.entities)} nodes, {len(snapshot.relations)} relations: "
                f"{'valid' if validation.valid else 'invalid'}",
                file=sys.stderr,
            )

        if parsed_args.format == 'terminal':
            from .output.terminal import TerminalOutput

            output = TerminalOutput(no_color=parsed_args.no_color)
            output.print_header(snapshot, source=source)
            if parsed_args.relations:
                output.print_relations(model.relation_summaries())
            output.print_validation(validation)
            if ranking is not None:
                output.print_ranking(ranking)
            output.print_summary(validation, ranking)

        elif parsed_args.format == 'markdown':
            from .output.markdown import MarkdownOutput

            content = MarkdownOutput().generate(
                snapshot, validation, ranking, include_relations=parsed_args.relations
            )
            _write_or_print(content, parsed_args.output)

        elif parsed_args.format == 'json':
            from .output.json_out import JSONOutput

            content = JSONOutput().to_json(
                snapshot, validation, ranking=ranking, include_relations=parsed_args.relations
            )
            _write_or_print(content, parsed_args.output)

        if ranking is not None:
            return EXIT_OK if ranking.success else EXIT_INVALID
        return EXIT_OK if validation.valid else EXIT_INVALID

    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130
    except (MemoryError, RecursionError):
        raise
    except Exception as e:
        print(f"Error ({type(e).__name__}): {e}", file=sys.stderr)
        if parsed_args.verbose:
            import traceback
            traceback.print_exc()
        else:
            print("Use --verbose for full traceback", file=sys.stderr)
        return EXIT_ERROR


if __name__ == '__main__':
    sys.exit(main())
