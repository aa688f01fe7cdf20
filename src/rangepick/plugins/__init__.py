"""Extension layer — picker notifications via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
INVARIANT: Plugin failures are warnings, never errors.
"""

from rangepick.plugins.hookspecs import hookimpl
from rangepick.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
