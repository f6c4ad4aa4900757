"""Technique auto-discovery and registration.

Scans palette_tool/techniques/ for modules that define a `technique` object
of type Technique. Collects them into a dict keyed by technique name, and
remembers which module each came from so the CLI can show its docstring
(technique names need not match module names, e.g. 'csv' lives in export.py).

Handles both normal Python (pkgutil.iter_modules) and frozen PyInstaller
binaries (where iter_modules returns nothing, so it falls back to the
known module list below).
"""

import importlib
import pkgutil
from types import ModuleType

from palette_tool.core.types import Technique

_registry: dict[str, Technique] = {}
_modules: dict[str, ModuleType] = {}

# Known technique module names, fallback for frozen binaries
_TECHNIQUE_MODULES = [
    'all',
    'export',
    'palette',
    'strip',
]


def discover() -> dict[str, Technique]:
    """Import all technique modules and return the registry."""
    if _registry:
        return _registry

    import palette_tool.techniques as pkg

    found_modules = [
        modname for _importer, modname, _ispkg in pkgutil.iter_modules(pkg.__path__) if not modname.startswith('_')
    ]
    if not found_modules:
        found_modules = _TECHNIQUE_MODULES

    for modname in found_modules:
        module = importlib.import_module(f'palette_tool.techniques.{modname}')
        tech = getattr(module, 'technique', None)
        if isinstance(tech, Technique):
            _registry[tech.name] = tech
            _modules[tech.name] = module

    return _registry


def get(name: str) -> Technique:
    """Get a technique by name."""
    reg = discover()
    if name not in reg:
        raise KeyError(f'Unknown technique: {name}. Available: {", ".join(sorted(reg))}')
    return reg[name]


def module_for(name: str) -> ModuleType:
    """The module a technique was registered from."""
    get(name)
    return _modules[name]


def all_techniques() -> dict[str, Technique]:
    """Return all registered techniques."""
    return discover()
