import logging
from typing import Any, MutableMapping, Optional

from pydantic import ValidationError

from core.config import Settings
from core.types import HealthModule, PatientData

logger = logging.getLogger(__name__)


# Per-module session keys: queued input while scoring is pending, and the last input error
def pending_key(mod_id: str) -> str:
    return f"{mod_id}_pending"


def error_key(mod_id: str) -> str:
    return f"{mod_id}_error"


def is_pending(state: MutableMapping[str, Any], mod_id: str) -> bool:
    return state.get(pending_key(mod_id)) is not None


def queue(state: MutableMapping[str, Any], mod_id: str, data: PatientData) -> bool:
    """Queue submitted input; refuses while an earlier submission is still pending."""
    if is_pending(state, mod_id):
        logger.info(f"[{mod_id}] submission ignored, scoring already pending")
        return False
    state[pending_key(mod_id)] = data
    return True


def run_pending(state: MutableMapping[str, Any], mod: HealthModule, settings: Settings) -> bool:
    """Score the queued input, storing the result or an error message under the module id."""
    data: Optional[PatientData] = state.get(pending_key(mod.id))
    if data is None:
        return False
    try:
        state[mod.id] = mod.compute(data, settings)
        state.pop(error_key(mod.id), None)
    except ValidationError as e:
        logger.warning(f"[{mod.id}] rejected input: {e.error_count()} invalid field(s)")
        state.pop(mod.id, None)
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
        state[error_key(mod.id)] = f"Invalid input: {fields}"
    finally:
        state.pop(pending_key(mod.id), None)
    return True
