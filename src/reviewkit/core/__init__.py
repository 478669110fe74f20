"""Core package initializer for reviewkit.

Submodules are imported explicitly by callers, e.g.:
    from reviewkit.core.settings import settings, load_settings, Settings, get_logger
    from reviewkit.core.workflow.machine import ReviewWorkflow
"""

from __future__ import annotations

__all__ = ["__doc__"]
