"""BaseService — shared foundation for rangepick services.

A service optionally receives a :class:`PluginManager` whose hooks are
notified of picker events. Without one, dispatch is a no-op.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from rangepick.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from rangepick.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class PickerService(BaseService):
            def clear(self) -> ServiceResult:
                warnings: list[str] = []
                self._dispatch_event("value_change", {"value": ...}, warnings)
                ...
    """

    def __init__(self, plugin_manager: PluginManager | None = None) -> None:
        self._plugins = plugin_manager

    @property
    def plugins(self) -> PluginManager | None:
        return self._plugins

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Call hook *hook_name* synchronously. No-op without plugins.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        if self._plugins is None:
            return
        hook_fn = getattr(self._plugins.hook, hook_name, None)
        if hook_fn is None:
            return
        try:
            hook_fn(**payload)
        except Exception:
            logger.debug("Hook %s failed", hook_name, exc_info=True)
            warnings.append(f"Event dispatch failed for {hook_name}")

    @staticmethod
    def _failure(
        op: str,
        code: str,
        message: str,
        **detail: Any,
    ) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail),
        )
