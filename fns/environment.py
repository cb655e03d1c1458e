"""
fns - Environment
Name bindings with an optional parent used for lookup only.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class Binding:
    value: Any
    constant: bool = False


class Environment:
    """
    A scope of bindings. Lookup walks self -> parent; the parent is never
    written through except to update a binding it already owns.
    """

    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.bindings: Dict[str, Binding] = {}

    def child(self) -> 'Environment':
        return Environment(parent=self)

    def define(self, name: str, value: Any, constant: bool = False) -> None:
        """Bind name in this environment, replacing any existing binding."""
        self.bindings[name] = Binding(value, constant)

    def find_owner(self, name: str) -> Optional['Environment']:
        env = self
        while env is not None:
            if name in env.bindings:
                return env
            env = env.parent
        return None

    def resolve(self, name: str) -> Optional[Binding]:
        owner = self.find_owner(name)
        if owner is None:
            return None
        return owner.bindings[name]
