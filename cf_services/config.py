"""
Library configuration — constants and environment-driven defaults.

Values are read once at import time. Entry points that read the service
catalog also accept an explicit variable name, so these are defaults only.
"""

import os

# Environment variable Cloud Foundry populates with the bound services
VCAP_SERVICES = "VCAP_SERVICES"

# Default level for setup_logging() when the caller passes none
LOG_LEVEL = os.environ.get("CF_SERVICES_LOG_LEVEL", "INFO")

# Name of the library logger
LOGGER_NAME = "cf_services"
