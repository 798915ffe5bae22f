import logging
from typing import Any, Dict, List
from importlib import import_module

from core.types import HealthModule

logger = logging.getLogger(__name__)


def load_enabled_modules(cfg: Dict[str, Any]) -> List[HealthModule]:
    mods = []
    mod_cfg = cfg.get("modules", {})
    ordered = sorted(((m, v.get("order", 999)) for m, v in mod_cfg.items() if v.get("enabled", True)), key=lambda x: x[1])
    for name, _ in ordered:
        mod = import_module(f"modules.{name}.{name}")
        logger.debug(f"Loaded module {name}")
        mods.append(mod)
    return mods
