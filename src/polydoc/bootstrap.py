from __future__ import annotations

import importlib
import sys
from typing import Iterable


BUILTIN_DOCUMENT_MODULES: tuple[str, ...] = (
    "polydoc.documents.student",
)


_LOADED = False


def load_builtin_documents(*, reload: bool = False, modules: Iterable[str] = BUILTIN_DOCUMENT_MODULES) -> None:
    """Import built-in document modules so their decorators register them.

    In production, call with reload=False (default) so imports are cheap.
    With reload=True the default registry is cleared and the modules are
    imported again. Classes imported before the reload are then no longer
    registered, so hold references only after reloading.
    """

    global _LOADED

    if _LOADED and not reload:
        return

    if reload:
        from polydoc.codec.registry import default_registry

        default_registry.clear()

    for module_name in modules:
        if reload:
            sys.modules.pop(module_name, None)
        importlib.import_module(module_name)

    _LOADED = True
