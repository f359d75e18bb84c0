# packdepot/app/context.py
from __future__ import annotations

from typing import Any

from packdepot.core.errors import ServiceMissingError



class _ProcessContext:
    """
    Process-wide services by name. lifecycle.startup() puts the pack library
    here; lifecycle.shutdown() takes it out again.

    Components never look services up themselves; only app.globals does.
    """
    def __init__(self) -> None:
        self._services: dict[str, Any] = {}

    def register(self, name: str, service: Any, *, overwrite: bool = False) -> None:
        if not overwrite and name in self._services:
            raise ValueError(f"Service '{name}' is already registered")
        self._services[name] = service

    def unregister(self, name: str) -> Any | None:
        """Removes and returns the service, or None when nothing was registered."""
        return self._services.pop(name, None)

    def get(self, name: str) -> Any | None:
        return self._services.get(name)

    def require(self, name: str, missingMessage: str | None = None) -> Any:
        service = self._services.get(name)
        if service is None:
            raise ServiceMissingError(missingMessage or f"Service '{name}' is not registered")
        return service

# One per process
PROCESS_REGISTRY = _ProcessContext()
