"""
Centralized constants for the emitter.

Defaults and environment variable names live here so the config model and the
emitter agree on them.
"""

# =============================================================================
# EMITTER DEFAULTS
# =============================================================================
# Whether listener failures are written to the diagnostic logger
DEFAULT_LOG_ERRORS = True

# Logger name used when no logger is injected
DEFAULT_LOGGER_NAME = "lifecycle_emitter"

# Wait indefinitely unless a positive timeout is given
DEFAULT_MAX_WAIT_MS = 0


# =============================================================================
# LOGGING
# =============================================================================
DEFAULT_LOG_LEVEL = "INFO"

DEFAULT_JSON_LOGS = False

LIBRARY_NAME = "lifecycle-emitter"

LIBRARY_VERSION = "0.1.0"


# =============================================================================
# ENVIRONMENT
# =============================================================================
ENV_LOG_ERRORS = "EMITTER_LOG_ERRORS"

ENV_LOG_LEVEL = "EMITTER_LOG_LEVEL"

ENV_JSON_LOGS = "EMITTER_JSON_LOGS"

# Values accepted as "true" for boolean environment variables
TRUTHY_VALUES = frozenset({"1", "true", "yes", "on"})
