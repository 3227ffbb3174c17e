"""
Resolves ``module:attribute`` targets to controller definitions.
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..contract.metadata import ControllerDefinition
from ..faults import ControllerTargetFault

logger = logging.getLogger("charter.cli")


def load_controllers(target: str, search_path: Optional[str] = None) -> List[ControllerDefinition]:
    """
    Import ``module:attribute`` and return the controllers it names.

    The attribute may be a ``ControllerDefinition``, a list/tuple of them,
    or a zero-argument callable returning either.

    Raises:
        ControllerTargetFault: if the target cannot be imported or resolved
    """
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise ControllerTargetFault(target, "expected 'module:attribute'")

    if search_path:
        resolved = str(Path(search_path).resolve())
        if resolved not in sys.path:
            sys.path.insert(0, resolved)

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ControllerTargetFault(target, f"cannot import module: {exc}") from exc

    obj = module
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise ControllerTargetFault(target, f"'{part}' not found") from None

    if callable(obj) and not isinstance(obj, ControllerDefinition):
        obj = obj()

    if isinstance(obj, ControllerDefinition):
        controllers = [obj]
    elif isinstance(obj, (list, tuple)):
        controllers = list(obj)
    else:
        raise ControllerTargetFault(
            target, f"expected a ControllerDefinition or a list of them, got {type(obj).__name__}"
        )

    for item in controllers:
        if not isinstance(item, ControllerDefinition):
            raise ControllerTargetFault(
                target, f"list contains {type(item).__name__}, not ControllerDefinition"
            )

    logger.debug("Loaded %d controller(s) from %s", len(controllers), target)
    return controllers
