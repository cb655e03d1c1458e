"""
fns - Interactive REPL
Bindings persist from one line to the next. A failing line leaves the
environment as the last successful statement left it.
"""

import sys
from typing import Optional, TextIO

from . import __version__
from .environment import Environment
from .errors import FnsError
from .interpreter import run_source
from .prelude import install_prelude
from .printer import format_value

PROMPT = "fns > "


def repl(
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
    prelude: bool = True,
) -> Environment:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    environment = Environment()
    if prelude:
        install_prelude(environment)

    print(f"fns repl v{__version__}", file=stdout)
    print("Type 'exit' or press Ctrl+D to quit.", file=stdout)

    while True:
        stdout.write(PROMPT)
        stdout.flush()
        raw = stdin.readline()
        if raw == "":
            print(file=stdout)
            break
        line = raw.strip()
        if not line:
            continue
        if line == "exit":
            break

        try:
            value = run_source(line, environment=environment)
        except FnsError as e:
            print(e.format(line), file=stderr)
            continue
        print(format_value(value), file=stdout)

    return environment
