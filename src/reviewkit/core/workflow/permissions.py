"""Role allow-list check.

The engine never authenticates anyone. It receives a role string from the
session layer and tests membership against the configured editor roles,
once, when a workflow is constructed.
"""

from __future__ import annotations

from collections.abc import Iterable

from reviewkit.core.errors import PermissionDenied
from reviewkit.core.settings import load_settings


def editor_roles() -> frozenset[str]:
    """Return the configured allow-list (``REVIEWKIT_EDITOR_ROLES``)."""
    return load_settings().editor_roles


def can_edit(role: str, allowed: Iterable[str] | None = None) -> bool:
    """Return True if ``role`` may edit and submit reviews."""
    roles = frozenset(allowed) if allowed is not None else editor_roles()
    return role.strip() in roles


def require_editor(role: str, allowed: Iterable[str] | None = None) -> str:
    """Return the normalized role or raise :class:`PermissionDenied`."""
    roles = frozenset(allowed) if allowed is not None else editor_roles()
    if not can_edit(role, roles):
        raise PermissionDenied(role, roles)
    return role.strip()


__all__ = ["editor_roles", "can_edit", "require_editor"]
