import os
import tomllib
from dataclasses import dataclass
from typing import Any, Dict, Optional

# Resolve config relative to the working directory by default, but allow env override
CONFIG_PATH = os.environ.get("HEALTH_APP_CONFIG", "config.toml")


@dataclass(frozen=True)
class Settings:
    page_title: str = "Heart Failure Risk Predictor"
    log_level: str = "INFO"
    simulated_delay_seconds: float = 2.0
    noise: bool = True
    seed: Optional[int] = None


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    with open(path or CONFIG_PATH, "rb") as f:
        return tomllib.load(f)


def load_settings(cfg: Dict[str, Any]) -> Settings:
    app_cfg = cfg.get("app", {})
    scoring_cfg = cfg.get("scoring", {})
    defaults = Settings()
    seed = scoring_cfg.get("seed")
    return Settings(
        page_title=str(app_cfg.get("page_title", defaults.page_title)),
        log_level=str(app_cfg.get("log_level", defaults.log_level)).upper(),
        simulated_delay_seconds=max(0.0, float(scoring_cfg.get("simulated_delay_seconds", defaults.simulated_delay_seconds))),
        noise=bool(scoring_cfg.get("noise", defaults.noise)),
        seed=None if seed is None else int(seed),
    )
