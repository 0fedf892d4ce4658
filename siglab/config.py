"""
Configuration module for SigLab.

Centralizes all configuration with environment variable support
and validation.
"""

import os
from typing import Dict

from .models import Algorithm, DEFAULT_MESSAGE, SUPPORTED_KEY_BITS

# ============================================================
# Environment Configuration
# ============================================================

ENV = os.getenv("SIGLAB_ENV", "dev")  # dev|stage|prod

# Pause between pipeline stages (seconds). Pacing only; never changes an outcome.
STEP_DELAY = float(os.getenv("SIGLAB_STEP_DELAY", "0"))

# Scenario defaults for the HTTP service and the CLI
DEFAULT_SCENARIO_MESSAGE = os.getenv("SIGLAB_DEFAULT_MESSAGE", DEFAULT_MESSAGE)
DEFAULT_ALGORITHM = os.getenv("SIGLAB_DEFAULT_ALGORITHM", Algorithm.PSS.value)
DEFAULT_KEY_BITS = int(os.getenv("SIGLAB_DEFAULT_KEY_BITS", "2048"))

# Logging
LOG_LEVEL = os.getenv("SIGLAB_LOG_LEVEL", "WARNING")
LOG_JSON = os.getenv("SIGLAB_LOG_JSON", "true").lower() in ("1", "true", "yes")


# ============================================================
# Validation
# ============================================================

def validate_config() -> Dict[str, bool]:
    """
    Sanity-check the environment configuration.
    Returns dict of setting -> valid.
    """
    try:
        Algorithm.parse(DEFAULT_ALGORITHM)
        algorithm_ok = True
    except ValueError:
        algorithm_ok = False

    return {
        "env": ENV in ("dev", "stage", "prod"),
        "step_delay": STEP_DELAY >= 0,
        "default_algorithm": algorithm_ok,
        "default_key_bits": DEFAULT_KEY_BITS in SUPPORTED_KEY_BITS,
        "log_level": LOG_LEVEL.upper() in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
    }


# ============================================================
# Feature Flags
# ============================================================

def is_production() -> bool:
    """Check if running in production mode."""
    return ENV == "prod"


def is_debug() -> bool:
    """Check if debug mode is enabled."""
    return os.getenv("SIGLAB_DEBUG", "").lower() in ("1", "true", "yes")
