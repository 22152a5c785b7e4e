"""
Addon descriptors and the providers that load their handler modules.
"""
from __future__ import annotations

import importlib.util
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Callable

from emberls.addons.api import Capabilities, Operation, ResolveFunction

_MODULE_NAME_SANITIZER = re.compile(r"[^0-9A-Za-z_]")


class AddonLoadError(RuntimeError):
    """Raised when an addon's handler module cannot be imported."""

    def __init__(self, descriptor: AddonDescriptor, cause: BaseException) -> None:
        self.descriptor = descriptor
        self.cause = cause
        super().__init__(
            f"unable to load {descriptor.handler_module_path} for {descriptor.name}: "
            f"{type(cause).__name__}: {cause}"
        )


@dataclass(frozen=True)
class AddonDescriptor:
    """Static description of an addon, read from its package manifest."""

    name: str
    package_root: Path
    handler_module_path: Path
    declared_before: tuple[str, ...] = ()
    declared_after: tuple[str, ...] = ()
    capabilities: Capabilities = field(default_factory=Capabilities)
    debug_reload_enabled: bool = False

    @property
    def module_name(self) -> str:
        return "emberls_addon_" + _MODULE_NAME_SANITIZER.sub("_", self.name)


def load_module(descriptor: AddonDescriptor) -> ModuleType:
    """Import the handler module from its file path, bypassing the module cache."""
    path = descriptor.handler_module_path
    spec = importlib.util.spec_from_file_location(descriptor.module_name, path)
    if spec is None or spec.loader is None:
        raise AddonLoadError(descriptor, ImportError(f"no loader for {path}"))

    module = importlib.util.module_from_spec(spec)
    previous = sys.modules.get(descriptor.module_name)
    sys.modules[descriptor.module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        if previous is not None:
            sys.modules[descriptor.module_name] = previous
        else:
            sys.modules.pop(descriptor.module_name, None)
        raise AddonLoadError(descriptor, e) from e
    return module


class Provider:
    """
    Loaded handler module of one addon.

    Handlers are looked up once per load and kept in ``handlers``; the
    module itself is only replaced by ``reload()``.
    """

    def __init__(
        self,
        descriptor: AddonDescriptor,
        loader: Callable[[AddonDescriptor], ModuleType] = load_module,
    ) -> None:
        self.descriptor = descriptor
        self._loader = loader
        self.module: ModuleType | None = None
        self.handlers: dict[Operation, ResolveFunction] = {}

    def reload(self) -> None:
        """
        Load (or load again) the handler module.

        The new module and its handlers replace the old ones in a single
        assignment, so a failed reload keeps the previous handlers.

        Raises:
            AddonLoadError: if the module cannot be imported.
        """
        module = self._loader(self.descriptor)
        handlers: dict[Operation, ResolveFunction] = {}
        for operation in Operation:
            candidate = getattr(module, operation.handler_name, None)
            if callable(candidate):
                handlers[operation] = candidate
        self.module, self.handlers = module, handlers

    def handler(self, operation: Operation) -> ResolveFunction | None:
        if not self.descriptor.capabilities.supports(operation):
            return None
        return self.handlers.get(operation)
