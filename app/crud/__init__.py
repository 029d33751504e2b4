"""Data-access modules, loaded on first attribute access."""

from importlib import import_module

__all__ = ["user", "skill", "session", "rating"]


def __getattr__(name):
    if name in __all__:
        return import_module(f".{name}", __name__)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
