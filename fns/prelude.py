"""
fns - Prelude
Constant host bindings installed by the command line front end and REPL.
"""

import math

from . import __version__
from .environment import Environment
from .values import ObjectValue

PRELUDE = {
    "fns": ObjectValue({"version": __version__}),
    "math": ObjectValue({"pi": math.pi, "e": math.e}),
}


def install_prelude(env: Environment) -> Environment:
    for name, value in PRELUDE.items():
        env.define(name, value, constant=True)
    return env
