"""reviewkit: review workflow, weighted scoring and list-query engine.

The package is a library. The computational pieces live under
:mod:`reviewkit.core`; :mod:`reviewkit.cli` is a thin developer console.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.3.0"
