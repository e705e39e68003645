"""
Loaded function module cache.

Keeps an explicit mapping of compiled output path to loaded module so a
module can be invalidated and executed again after every recompile.
"""

import hashlib
import importlib.util
import logging
import re
import sys
from pathlib import Path
from types import ModuleType
from typing import Dict, Optional, Union

from ..core.exceptions import LoadError

logger = logging.getLogger("fnbridge.module_cache")

MODULE_NAMESPACE = "fnbridge_functions"
HANDLER_ATTR = "handler"


class ModuleCache:
    def __init__(self, handler_attr: str = HANDLER_ATTR):
        self.handler_attr = handler_attr
        self._modules: Dict[str, ModuleType] = {}

    def __contains__(self, path: Union[str, Path]) -> bool:
        return self._key(path) in self._modules

    def __len__(self) -> int:
        return len(self._modules)

    def get(self, path: Union[str, Path]) -> Optional[ModuleType]:
        return self._modules.get(self._key(path))

    def clear(self) -> None:
        for key in list(self._modules):
            self.invalidate(key)

    def invalidate(self, path: Union[str, Path]) -> None:
        """Forget the module loaded from ``path``, if any."""
        module = self._modules.pop(self._key(path), None)
        if module is not None:
            sys.modules.pop(module.__name__, None)
            logger.debug(f"Invalidated module {module.__name__} ({path})")

    def load(self, path: Union[str, Path], name: str) -> ModuleType:
        """
        Load the compiled module at ``path`` from scratch.

        Any previously loaded copy is invalidated first, so the module body
        runs again on every call.

        Raises:
            LoadError: the module raised while executing, or has no handler
        """
        key = self._key(path)
        self.invalidate(key)

        module_name = module_name_for(key, name)
        spec = importlib.util.spec_from_file_location(module_name, key)
        if spec is None or spec.loader is None:
            raise LoadError(key, ImportError(f"Cannot create a module spec for {key}"))

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            # Compile from source every time: bytecode caches are keyed by
            # whole-second mtimes and would miss a same-second recompile.
            code = spec.loader.source_to_code(spec.loader.get_data(key), key)
            exec(code, module.__dict__)
            handler = getattr(module, self.handler_attr, None)
            if not callable(handler):
                raise AttributeError(f"Module does not export a callable '{self.handler_attr}'")
        except Exception as e:
            sys.modules.pop(module_name, None)
            raise LoadError(key, e) from e

        self._modules[key] = module
        return module

    @staticmethod
    def _key(path: Union[str, Path]) -> str:
        return str(Path(path).resolve())


def module_name_for(path: Union[str, Path], name: str) -> str:
    """
    ``sys.modules`` name for a function module.

    The suffix is derived from the resolved output path, so names that
    sanitize alike (``a/b`` and ``a_b``) still get separate entries.
    """
    safe = re.sub(r"\W", "_", name)
    digest = hashlib.sha1(ModuleCache._key(path).encode("utf-8")).hexdigest()[:10]
    return f"{MODULE_NAMESPACE}.{safe}_{digest}"
