"""
fns - Command Line Interface

Usage:
    fns                          start the REPL
    fns input.fns [--debug] [--emit-ast]
    fns -e "1 + 2 * 3"
    python -m fns input.fns
"""

import argparse
import sys

from . import __version__


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="fns",
        description="fns: a small expression-oriented scripting language",
    )
    parser.add_argument("input", nargs="?", help="Path to the .fns source file")
    parser.add_argument(
        "-e", "--eval",
        dest="source",
        help="Evaluate SOURCE instead of reading a file",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print interpretation phase info to stderr",
    )
    parser.add_argument(
        "--emit-ast",
        action="store_true",
        dest="emit_ast",
        help="Print the parsed AST as JSON instead of evaluating it",
    )
    parser.add_argument(
        "--no-prelude",
        action="store_false",
        dest="prelude",
        help="Do not predefine the 'fns' and 'math' objects",
    )
    parser.add_argument("--version", action="version", version=f"fns {__version__}")

    args = parser.parse_args(argv)

    from .environment import Environment
    from .errors import FnsError
    from .interpreter import run_source
    from .prelude import install_prelude
    from .printer import format_value

    if args.input is None and args.source is None:
        from .repl import repl
        repl(prelude=args.prelude)
        return 0

    if args.source is not None:
        source = args.source
    else:
        try:
            with open(args.input, "r", encoding="utf-8") as f:
                source = f.read()
        except FileNotFoundError:
            print(f"[fns] Error: Input file not found: {args.input!r}", file=sys.stderr)
            sys.exit(1)
        except UnicodeDecodeError as e:
            print(f"[fns] Error: Input file is not valid UTF-8: {args.input!r} ({e.reason})",
                  file=sys.stderr)
            sys.exit(1)
        except OSError as e:
            print(f"[fns] Error: Cannot read input file {args.input!r}: {e.strerror or e}",
                  file=sys.stderr)
            sys.exit(1)

    environment = Environment()
    if args.prelude:
        install_prelude(environment)

    try:
        result = run_source(
            source,
            environment=environment,
            emit_ast=args.emit_ast,
            debug=args.debug,
        )
    except FnsError as e:
        print(e.format(source), file=sys.stderr)
        sys.exit(1)

    print(result if args.emit_ast else format_value(result))
    return 0


if __name__ == "__main__":
    main()
