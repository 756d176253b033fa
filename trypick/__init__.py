"""Public package surface for trypick.

Exports ``main`` for programmatic CLI invocation and ``run_selector`` for
embedding the interactive picker. Implementation lives in submodules.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


def run_selector(*args, **kwargs):
    """Lazily import the selector session entrypoint."""
    from .selector import run_selector as _run_selector

    return _run_selector(*args, **kwargs)


__all__ = ["main", "run_selector"]
