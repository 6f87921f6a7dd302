"""
Environment loader — reads the service-binding variable at call time.

No caching: reads os.environ on every call so a rebound application sees
the new catalog without a restart. Parsing lives in catalog.py; this module
only turns "variable state" into text or a typed error.
"""

import os

from cf_services import tracing
from cf_services.config import VCAP_SERVICES
from cf_services.errors import EnvNotSetError, EnvNotUnicodeError


def load(var_name: str = VCAP_SERVICES) -> str:
    """Read an environment variable as UTF-8 text.

    Args:
        var_name: Environment variable name (default "VCAP_SERVICES").

    Returns:
        The variable's value. An empty value is returned unchanged.

    Raises:
        EnvNotSetError: If the variable is not set.
        EnvNotUnicodeError: If the value is not valid UTF-8. On POSIX,
            undecodable bytes surface as surrogate escapes in os.environ.
    """
    value = os.environ.get(var_name)
    if value is None:
        tracing.log_env_read(var_name, "missing")
        raise EnvNotSetError(var_name)

    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        tracing.log_env_read(var_name, "not_unicode")
        raise EnvNotUnicodeError(var_name) from e

    tracing.log_env_read(var_name, "loaded", length=len(value))
    return value
