"""CLI entry point for codepaint."""

import argparse
import logging
import sys

import codepaint.logging_setup
import codepaint.markdown
import codepaint.settings
from codepaint.colors import FormatError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codepaint",
        description="Render markdown with syntax-highlighted code for the terminal",
    )
    parser.add_argument(
        "file",
        nargs="?",
        default="-",
        help="Markdown (or source with --code) to render; '-' reads stdin (default)",
    )
    parser.add_argument(
        "--code",
        action="store_true",
        help="Treat the whole input as one code block instead of markdown",
    )
    parser.add_argument("--lang", type=str, default=None, help="Language tag for --code input")
    parser.add_argument(
        "--theme",
        type=str,
        default=None,
        help="Style table: dark, light or pygments:<style> (default: from settings, else dark)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Banner width (default: from settings, else terminal width)",
    )
    parser.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Save a setting (theme, fallback_language, tab_width, width, styles) and exit",
    )
    return parser


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as f:
        return f.read()


def _save_assignments(assignments: list) -> int:
    for raw in assignments:
        try:
            key, value = codepaint.settings.parse_assignment(raw)
            codepaint.settings.save_setting(key, value)
        except ValueError as e:
            print("codepaint: {}".format(e), file=sys.stderr)
            return 1
        except OSError as e:
            print("codepaint: cannot write settings: {}".format(e), file=sys.stderr)
            return 1
        logger.info("saved setting %s=%r", key, value)
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    codepaint.logging_setup.configure()

    if args.assignments:
        return _save_assignments(args.assignments)

    config = codepaint.settings.load_render_config({"theme": args.theme, "width": args.width})
    try:
        text = _read_input(args.file)
    except OSError as e:
        print("codepaint: cannot read {}: {}".format(args.file, e), file=sys.stderr)
        return 1

    try:
        table = config.style_table()
    except ValueError as e:
        print("codepaint: invalid style settings: {}".format(e), file=sys.stderr)
        return 1
    width = config.width or codepaint.markdown.terminal_width()
    logger.debug("rendering %s with theme %r at width %d", args.file, config.theme, width)

    if args.code:
        code = text.rstrip("\n")
        try:
            output = codepaint.markdown.render_code_block(
                code, args.lang, table, width, config.fallback_language, config.tab_width
            )
        except FormatError as e:
            logger.warning("rendering uncolored: %s", e)
            output = codepaint.markdown.render_plain_code_block(
                code, args.lang, width, config.tab_width
            )
        output += "\n"
    else:
        output = codepaint.markdown.render_document(
            text, table, width, config.fallback_language, config.tab_width
        )
    sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
