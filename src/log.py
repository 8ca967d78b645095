from __future__ import annotations

import logging
import sys
from typing import MutableMapping

from src.models.settings import IndicatorSettings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
SETTINGS_STATE_KEY = "bb_settings"


def setup_logging(level: str) -> None:
    numeric = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=numeric, format=LOG_FORMAT, handlers=[logging.StreamHandler(sys.stderr)])
    # basicConfig is a no-op once the root logger has handlers, as on Streamlit reruns
    logging.getLogger().setLevel(numeric)


def log_settings_change(
    state: MutableMapping,
    new_settings: IndicatorSettings,
    logger: logging.Logger,
) -> bool:
    """Log ``new_settings`` at INFO when they differ from the ones kept in ``state``."""
    if state.get(SETTINGS_STATE_KEY) == new_settings:
        return False
    logger.info("Indicator settings changed: %s", new_settings.model_dump_json())
    state[SETTINGS_STATE_KEY] = new_settings
    return True
