"""Command-line front end for pipekit.

``cli`` and ``main`` resolve on first access so that importing the library
never pulls in the click commands, and ``python -m pipekit.cli.main`` runs
without the module already sitting in ``sys.modules``.
"""

import importlib

__all__ = ["cli", "main"]


def __getattr__(name):
    if name not in __all__:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    entry = importlib.import_module(f"{__name__}.main")
    return getattr(entry, name)
