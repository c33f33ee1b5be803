"""Program contract: optional lifecycle hooks resolved once per run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

HOOK_NAMES = ("boot", "pre", "main", "post")


class Program:
    """Base class for programs; override any subset of the hooks.

    ``main`` returns a glyph, a partial cell mapping, or ``None`` for each
    cell. Leave it unset to skip the per-cell pass entirely.
    """

    settings: Mapping[str, Any] | None = None
    user_vars: Any = None
    main: Callable[..., Any] | None = None

    def boot(self, context, buffer, user_vars) -> None:
        pass

    def pre(self, context, cursor, buffer, user_vars) -> None:
        pass

    def post(self, context, cursor, buffer, user_vars) -> None:
        pass


def _noop(*_args: Any) -> None:
    return None


@dataclass(frozen=True)
class ProgramHooks:
    boot: Callable[..., None] = _noop
    pre: Callable[..., None] = _noop
    post: Callable[..., None] = _noop
    main: Callable[..., Any] | None = None
    settings: Mapping[str, Any] = field(default_factory=dict)
    user_vars: Any = None


def resolve_program(program: Any) -> ProgramHooks:
    """Accept a Program, a module, a mapping of hooks, or any object with hook attributes."""
    if isinstance(program, ProgramHooks):
        return program

    def lookup(name: str) -> Any:
        if isinstance(program, Mapping):
            return program.get(name)
        return getattr(program, name, None)

    hooks: dict[str, Any] = {}
    for name in HOOK_NAMES:
        hook = lookup(name)
        if hook is None:
            continue
        if not callable(hook):
            raise TypeError(f"program hook '{name}' is not callable")
        hooks[name] = hook

    user_vars = lookup("user_vars")
    return ProgramHooks(
        settings=dict(lookup("settings") or {}),
        user_vars={} if user_vars is None else user_vars,
        **hooks,
    )
