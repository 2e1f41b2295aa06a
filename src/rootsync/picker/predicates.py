"""Named root predicates.

Predicates are plain callables over Root. RootPredicateSpec only adds a
readable repr so NoMatchingRootError messages say what was being matched.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rootsync.picker.base import Root


class RootPredicateSpec:
    """Callable predicate with a description."""

    def __init__(self, description: str, test: Callable[[Root], bool]) -> None:
        self.description = description
        self._test = test

    def __call__(self, root: Root) -> bool:
        return self._test(root)

    def __repr__(self) -> str:
        return f"<{self.description}>"


def is_dialog() -> RootPredicateSpec:
    return RootPredicateSpec("is dialog", lambda root: root.is_dialog())


def is_focusable() -> RootPredicateSpec:
    return RootPredicateSpec("is focusable", lambda root: root.is_focusable())


def any_root() -> RootPredicateSpec:
    return RootPredicateSpec("any root", lambda root: True)


def default_root() -> RootPredicateSpec:
    """Dialogs, plus any root that has or can take focus."""
    return RootPredicateSpec(
        "is dialog or has focus or is focusable",
        lambda root: root.is_dialog() or root.has_focus() or root.is_focusable(),
    )


def with_name(name: str) -> RootPredicateSpec:
    """Root whose repr-level name is *name* (roots exposing a `name` attribute)."""
    return RootPredicateSpec(
        f"root named {name!r}",
        lambda root: getattr(root, "name", None) == name,
    )


PREDICATE_REGISTRY: dict[str, Callable[[], RootPredicateSpec]] = {
    "default": default_root,
    "dialog": is_dialog,
    "focusable": is_focusable,
    "any": any_root,
}


def parse_predicate(expression: str) -> RootPredicateSpec:
    """Build a predicate from its scenario name.

    Supported: default, dialog, focusable, any, name:<root>.

    Raises:
        ValueError: If the expression is not recognised.
    """
    expression = expression.strip()
    if expression.startswith("name:"):
        name = expression[len("name:") :].strip()
        if not name:
            msg = "name: predicate requires a root name"
            raise ValueError(msg)
        return with_name(name)
    if expression not in PREDICATE_REGISTRY:
        expected = ", ".join(sorted(PREDICATE_REGISTRY))
        msg = f"Unknown root predicate: {expression!r} (expected one of {expected} or name:<root>)"
        raise ValueError(msg)
    return PREDICATE_REGISTRY[expression]()
