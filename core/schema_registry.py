# core/schema_registry.py
from __future__ import annotations
from typing import Callable, List, Tuple
from sqlalchemy.engine import Engine
import importlib
import logging
import pkgutil
import sys
from pathlib import Path

log = logging.getLogger(__name__)

# Schema installer type
SchemaInstaller = Callable[[Engine], None]

# Registry: (name, installer_func), in registration order
_REGISTRY: List[Tuple[str, SchemaInstaller]] = []

def _add(name: str, fn: SchemaInstaller) -> None:
    # re-importing a module must not queue its installer twice
    if any(existing is fn or (n == name and getattr(existing, "__module__", None) == fn.__module__)
           for n, existing in _REGISTRY):
        return
    _REGISTRY.append((name, fn))

def register(
    name: str | SchemaInstaller, installer: SchemaInstaller | None = None
) -> SchemaInstaller | Callable[[SchemaInstaller], SchemaInstaller]:
    """
    Registers a schema installer.
    Works as @register, @register("name") or register("name", fn).
    """
    if isinstance(name, str) and installer is None:
        def decorator(fn: SchemaInstaller) -> SchemaInstaller:
            _add(name, fn)
            return fn
        return decorator

    if callable(name) and installer is None:
        _add(name.__name__, name)
        return name

    if isinstance(name, str) and callable(installer):
        _add(name, installer)
        return installer

    raise TypeError("Invalid usage of @register")

def registered_names() -> List[str]:
    return [name for name, _ in _REGISTRY]

def run_all(engine: Engine) -> None:
    """Run every registered installer in order. A failing installer is logged and skipped."""
    log.info("SchemaRegistry: running %d installers", len(_REGISTRY))
    for name, installer_fn in _REGISTRY:
        try:
            installer_fn(engine)
            log.debug("Applied schema: %s", name)
        except Exception:
            log.exception("FAILED to apply schema %s", name)

def auto_discover(start_path: str | Path = "schemas", root_package: str | None = None) -> None:
    """Import every module under start_path so their @register decorators run."""
    start_path = Path(start_path)
    if not start_path.is_dir():
        log.warning("Schema auto_discover: %s is not a directory, skipping", start_path)
        return

    if root_package:
        base_import_name = f"{root_package}.{start_path.name}"
    else:
        parent_dir = str(start_path.parent.resolve())
        if parent_dir not in sys.path:
            sys.path.insert(0, parent_dir)
        base_import_name = start_path.name

    # _seed runs last: it needs every table in place
    modules = sorted(
        (m for _, m, is_pkg in pkgutil.iter_modules([str(start_path)]) if not is_pkg),
        key=lambda m: (m.startswith("_"), m),
    )
    for module_name in modules:
        full_name = f"{base_import_name}.{module_name}"
        try:
            importlib.import_module(full_name)
        except Exception:
            log.exception("FAILED to import schema module %s", full_name)
