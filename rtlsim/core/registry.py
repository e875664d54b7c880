"""Module registry and factory.

Lets drivers (the YAML testbench loader, the example runners) look module
classes up by name instead of importing them directly.

Modules register themselves with @module(register="name") or by calling
register_module() when their defining module is imported.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Type

if TYPE_CHECKING:
    from rtlsim.core.schema import Module


class ModuleRegistry:
    """Registry of available module classes.

    THREAD SAFETY: Not thread-safe. All registration should happen at
    import time before any threads are spawned.
    """

    def __init__(self):
        self._modules: dict[str, Type[Module]] = {}

    def register(self, name: str, module_class: Type[Module]) -> None:
        """Register a module class under name."""
        if name in self._modules:
            raise ValueError(f"Module '{name}' already registered")
        self._modules[name] = module_class

    def unregister(self, name: str) -> None:
        self._modules.pop(name, None)

    def get(self, name: str) -> Type[Module]:
        """Get a module class by name."""
        if name not in self._modules:
            raise ValueError(
                f"Unknown module '{name}'. Available: {list(self._modules.keys())}"
            )
        return self._modules[name]

    def list_modules(self) -> list[str]:
        """List all registered module names."""
        return list(self._modules.keys())

    def create(self, name: str, **kwargs) -> Any:
        """Instantiate a module by name."""
        module_class = self.get(name)
        return module_class(**kwargs)


# Global registry
_REGISTRY = ModuleRegistry()


def register_module(name: str, module_class: Type[Module]) -> None:
    """Register a module class globally."""
    _REGISTRY.register(name, module_class)


def unregister_module(name: str) -> None:
    """Remove a module class from the global registry (no-op if absent)."""
    _REGISTRY.unregister(name)


def get_module(name: str) -> Type[Module]:
    """Get a module class by name."""
    return _REGISTRY.get(name)


def create_module(name: str, **kwargs) -> Any:
    """Create a module instance by name."""
    return _REGISTRY.create(name, **kwargs)


def list_available_modules() -> list[str]:
    """List all registered modules."""
    return _REGISTRY.list_modules()
