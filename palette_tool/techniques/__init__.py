"""Auto-discovery of technique modules.

Every .py file in this package that defines a `technique` object is
auto-registered by palette_tool.registry.discover().

The explicit imports below ensure PyInstaller includes these modules
in the frozen binary. Without them, pkgutil.iter_modules cannot find
the technique files at runtime.
"""

# PyInstaller hidden imports, keep this list in sync with technique modules
import palette_tool.techniques.all as _all  # noqa: F401
import palette_tool.techniques.export as _export  # noqa: F401
import palette_tool.techniques.palette as _palette  # noqa: F401
import palette_tool.techniques.strip as _strip  # noqa: F401
