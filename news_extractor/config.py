"""
Settings loading.

Every ExtractionSettings field can be overridden with an environment variable
named NEWS_EXTRACTOR_<FIELD>, e.g. NEWS_EXTRACTOR_DESCRIPTION_LENGTH=300.
Scripts call load_dotenv() first, so a .env file works too.
"""

import os
from typing import Optional

from .schemas import ExtractionSettings

ENV_PREFIX = "NEWS_EXTRACTOR_"


def load_settings(overrides: Optional[dict] = None) -> ExtractionSettings:
    """
    Build settings from defaults, environment variables and explicit overrides
    (in increasing order of precedence).

    Raises:
        pydantic.ValidationError: if a value cannot be converted
    """
    values = {}
    for field_name in ExtractionSettings.model_fields:
        env_value = os.getenv(f"{ENV_PREFIX}{field_name.upper()}")
        if env_value is not None:
            values[field_name] = env_value

    if overrides:
        values.update({k: v for k, v in overrides.items() if v is not None})

    return ExtractionSettings(**values)
