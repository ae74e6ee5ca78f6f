"""keysort: Schwartzian-transform adapters for in-place, index-based sorts.

Only `keysort` and `keysort.errors` are public. Everything else is internal.
This module also resolves `__version__` across installs.
"""
from __future__ import annotations

from typing import Any as _Any
from . import errors as errors  # re-export for star-import; noqa: F401

from importlib.metadata import version as _pkg_version, PackageNotFoundError


def _version_from_metadata() -> str | None:
    try:
        return _pkg_version("keysort")
    except PackageNotFoundError:
        return None


__version__ = _version_from_metadata() or "0+unknown"

_ENGINE_EXPORTS = (
    "FAILED",
    "ErrorAwareKeySortable",
    "KeySortable",
    "KeysortConfig",
    "Sortable",
    "keysort",
    "plain_keysort",
    "primed_keysort",
)
_CONFIG_EXPORTS = ("CONFIG_VERSION", "load_config", "validate_config", "validate_config_api")


def __getattr__(name: str) -> _Any:  # PEP 562 lazy exports to keep `import keysort.errors` light
    if name in _ENGINE_EXPORTS:
        from . import engine as _engine
        value = getattr(_engine, name)
    elif name in _CONFIG_EXPORTS:
        from . import config as _config
        value = getattr(_config, name)
    else:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return list(__all__)


# Star-export surface (deterministic ordering). Tests require __all__ to be lexicographically sorted.
__all__ = sorted(
    [
        "__version__",
        "errors",
        *_ENGINE_EXPORTS,
        *_CONFIG_EXPORTS,
    ]
)
