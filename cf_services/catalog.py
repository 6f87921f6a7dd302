"""
Service catalog parser — turns VCAP_SERVICES text into typed bindings.

Shape accepted:
    {
      "<service-name>": [
        {"name": "...", "label": "...", "credentials": {...}, ...},
        ...
      ],
      ...
    }

Unknown binding fields are ignored. Every service must carry at least one
binding, and every binding a credentials object; anything else is rejected
as MalformedJSONError with no partial result.

Credential lookup always uses the first binding under a name. Additional
bindings are kept and reachable through get_all_credentials().
"""

import copy
from collections.abc import Mapping
from typing import Annotated, Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from cf_services import tracing
from cf_services.config import VCAP_SERVICES
from cf_services.env_loader import load
from cf_services.errors import MalformedJSONError, MissingCredentialError, ServiceNotFoundError


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class ServiceBinding(BaseModel):
    """One bound instance of a service."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = ""
    label: str = ""
    instance_name: str = ""
    binding_name: str = ""
    plan: str = ""
    tags: Tuple[str, ...] = ()
    credentials: Dict[str, Any]

    @field_validator("name", "label", "instance_name", "binding_name", "plan", mode="before")
    @classmethod
    def _null_as_empty(cls, v):
        # The platform emits explicit nulls for unset metadata (e.g. binding_name)
        return "" if v is None else v

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags(cls, v):
        return () if v is None else v


def _credential_field(key: str, doc: str) -> property:
    return property(lambda self: self.get(key), doc=doc)


class Credentials(dict):
    """Owned copy of a binding's credentials mapping.

    Behaves as a plain dict. The well-known keys the platform brokers
    commonly emit are also exposed as read-only attributes, each None when
    the key is absent. Use require() when a missing key should fail.
    """

    uri = _credential_field("uri", "Connection URI.")
    jdbc_url = _credential_field("jdbcUrl", "JDBC connection URL.")
    api_uri = _credential_field("http_api_uri", "Management API URI.")
    license_key = _credential_field("licenseKey", "License key.")
    client_id = _credential_field("client_id", "OAuth2 client id.")
    client_secret = _credential_field("client_secret", "OAuth2 client secret.")
    access_token_uri = _credential_field("access_token_uri", "OAuth2 token endpoint.")
    hostname = _credential_field("hostname", "Service host.")
    username = _credential_field("username", "Service user.")
    password = _credential_field("password", "Service password.")
    port = _credential_field("port", "Service port.")
    name = _credential_field("name", "Service-side resource name (e.g. database).")

    def require(self, key: str) -> Any:
        """Return credentials[key], raising MissingCredentialError if absent."""
        try:
            return self[key]
        except KeyError:
            raise MissingCredentialError(key) from None

    def __repr__(self) -> str:
        return f"Credentials(keys={sorted(self.keys())})"


class ServiceCatalog(Mapping):
    """Read-only mapping of service name to its bindings (a non-empty tuple)."""

    def __init__(self, services: Optional[Mapping] = None):
        self._services: Dict[str, Tuple[ServiceBinding, ...]] = {}
        for name, bindings in (services or {}).items():
            bindings = tuple(bindings)
            if not bindings:
                raise ValueError(f"Service '{name}' has no bindings")
            self._services[name] = bindings

    def __getitem__(self, name: str) -> Tuple[ServiceBinding, ...]:
        return self._services[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._services)

    def __len__(self) -> int:
        return len(self._services)

    def __repr__(self) -> str:
        return f"ServiceCatalog({list(self._services.keys())})"


_CATALOG_ADAPTER = TypeAdapter(
    Dict[str, Annotated[List[ServiceBinding], Field(min_length=1)]]
)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def _describe(exc: ValidationError) -> List[str]:
    """Summarize validation errors by location and message, never by input value."""
    problems = []
    for err in exc.errors(include_input=False, include_url=False):
        loc = ".".join(str(part) for part in err.get("loc", ()))
        problems.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return problems


def parse_catalog(raw: Union[str, bytes], var_name: Optional[str] = None) -> ServiceCatalog:
    """Parse catalog JSON text into a ServiceCatalog.

    Args:
        raw: JSON text.
        var_name: Environment variable the text came from, used in the
            error message only.

    Raises:
        MalformedJSONError: if the text is not JSON or not catalog-shaped.
            The pydantic error is kept on .cause.
    """
    try:
        services = _CATALOG_ADAPTER.validate_json(raw)
    except ValidationError as exc:
        problems = _describe(exc)
        tracing.log_catalog_parse("rejected", errors=problems)
        # Chained tracebacks would echo input values, credentials included
        raise MalformedJSONError(cause=exc, errors=problems, var_name=var_name) from None

    catalog = ServiceCatalog(services)
    tracing.log_catalog_parse("parsed", services=list(catalog.keys()))
    return catalog


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------

def _bindings(catalog: Mapping, service_name: str) -> Sequence[ServiceBinding]:
    bindings = catalog.get(service_name)
    if not bindings:
        tracing.log_lookup(service_name, "missing")
        raise ServiceNotFoundError(service_name)
    tracing.log_lookup(service_name, "found", binding_count=len(bindings))
    return bindings


def get_binding(catalog: Mapping, service_name: str) -> ServiceBinding:
    """Return the primary (first) binding for service_name."""
    return _bindings(catalog, service_name)[0]


def get_credentials(catalog: Mapping, service_name: str) -> Credentials:
    """Return a copy of the first binding's credentials for service_name.

    Raises:
        ServiceNotFoundError: if service_name is not in the catalog.
    """
    binding = _bindings(catalog, service_name)[0]
    return Credentials(copy.deepcopy(binding.credentials))


def get_all_credentials(catalog: Mapping, service_name: str) -> List[Credentials]:
    """Return copies of every binding's credentials for service_name, in document order."""
    return [
        Credentials(copy.deepcopy(binding.credentials))
        for binding in _bindings(catalog, service_name)
    ]


# ---------------------------------------------------------------------------
# Environment entry points
# ---------------------------------------------------------------------------

def get_services_from_env(var_name: str = VCAP_SERVICES) -> ServiceCatalog:
    """Read and parse the service catalog from the environment.

    Raises:
        EnvNotSetError / EnvNotUnicodeError: variable unset or not text.
        MalformedJSONError: value is not a valid catalog.
    """
    return parse_catalog(load(var_name), var_name=var_name)


def get_credentials_from_env(service_name: str, var_name: str = VCAP_SERVICES) -> Credentials:
    """Load, parse and look up service_name in one step.

    The first failure short-circuits and propagates unchanged.
    """
    return get_credentials(get_services_from_env(var_name), service_name)
