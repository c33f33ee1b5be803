"""Bundled demo programs addressable by name from the CLI."""

from __future__ import annotations

from typing import Any

from . import density
from .circle import Circle

PROGRAMS: dict[str, Any] = {
    "circle": Circle,
    "density": density,
}


def list_programs() -> list[str]:
    return sorted(PROGRAMS)


def get_program(name: str) -> Any:
    """Return a fresh program instance; module programs are returned as-is."""
    try:
        target = PROGRAMS[name]
    except KeyError:
        raise KeyError(f"unknown program '{name}', choose from: {', '.join(list_programs())}") from None
    return target() if isinstance(target, type) else target
