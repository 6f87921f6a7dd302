"""
cf_services — read the services bound to a Cloud Foundry application.

Retrieves and parses the VCAP_SERVICES environment variable into a
ServiceCatalog for easier consumption.

Usage:
    from cf_services import get_service_cred_from_env

    creds = get_service_cred_from_env("my-db")
    creds.uri           # "postgres://..."
    creds["port"]
"""

from cf_services.catalog import (
    Credentials,
    ServiceBinding,
    ServiceCatalog,
    get_all_credentials,
    get_binding,
    get_credentials,
    get_credentials_from_env,
    get_services_from_env,
    parse_catalog,
)
from cf_services.config import VCAP_SERVICES
from cf_services.env_loader import load
from cf_services.errors import (
    CFServicesError,
    EnvNotSetError,
    EnvNotUnicodeError,
    MalformedJSONError,
    MissingCredentialError,
    ServiceNotFoundError,
    ServicesEnvError,
)
from cf_services.tracing import setup_logging

# Names of the public API
get_service_credentials = get_credentials
get_all_service_credentials = get_all_credentials
get_service_cred_from_env = get_credentials_from_env

__all__ = [
    "VCAP_SERVICES",
    "CFServicesError",
    "Credentials",
    "EnvNotSetError",
    "EnvNotUnicodeError",
    "MalformedJSONError",
    "MissingCredentialError",
    "ServiceBinding",
    "ServiceCatalog",
    "ServiceNotFoundError",
    "ServicesEnvError",
    "get_all_credentials",
    "get_all_service_credentials",
    "get_binding",
    "get_credentials",
    "get_credentials_from_env",
    "get_service_cred_from_env",
    "get_service_credentials",
    "get_services_from_env",
    "load",
    "parse_catalog",
    "setup_logging",
]
