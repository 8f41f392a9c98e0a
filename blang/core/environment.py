"""Lexical scope chain. An Environment is one frame of bindings plus an optional enclosing frame.

Frames are shared by reference: every closure created while a frame is active captures that frame, and a frame may
hold a function that captures the frame itself (recursion). Such cycles are left to Python's garbage collector.
"""

from blang.core.objects import is_signal


class Environment:
    """One scope frame."""

    def __init__(self, outer=None):
        self.store = {}
        self.outer = outer

    @classmethod
    def new_enclosed(cls, outer):
        """Creates an empty frame whose lookups fall back to outer."""
        return cls(outer)

    def define(self, name, value):
        """Binds name in this frame only, shadowing (never modifying) any outer binding."""
        assert not is_signal(value), f"cannot bind {name} to transient {value.type}"
        self.store[name] = value
        return value

    def resolve(self, name):
        """Returns the value bound to name in the nearest frame that has it, or None if no frame does."""
        env = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def names(self):
        """Every name visible from this frame, innermost bindings first."""
        names, env = [], self
        while env is not None:
            names.extend(name for name in env.store if name not in names)
            env = env.outer
        return names

    def __contains__(self, name):
        return self.resolve(name) is not None

    def __repr__(self):
        # bindings may point back at this frame, so only names are shown
        return f"Environment(names={list(self.store)}, outer={self.outer!r})"
