"""
Exception taxonomy for service-binding lookups.

Every failure a caller can see derives from CFServicesError, so a single
except clause is enough to fall back to a default configuration. The
subclasses let callers tell "not configured", "malformed" and "not bound"
apart.
"""

from typing import List, Optional

from cf_services.config import VCAP_SERVICES


class CFServicesError(Exception):
    """Base class for all cf_services errors."""


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

class ServicesEnvError(CFServicesError):
    """The service-binding environment variable could not be read."""

    def __init__(self, var_name: str = VCAP_SERVICES):
        self.var_name = var_name
        super().__init__(self._message())

    def _message(self) -> str:
        return f"environment variable '{self.var_name}' could not be read"


class EnvNotSetError(ServicesEnvError):
    """Raised when the environment variable is not set."""

    def _message(self) -> str:
        return f"environment variable '{self.var_name}' is not set"


class EnvNotUnicodeError(ServicesEnvError):
    """Raised when the environment variable holds bytes that are not valid UTF-8."""

    def _message(self) -> str:
        return f"environment variable '{self.var_name}' is not valid unicode"


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

class MalformedJSONError(CFServicesError, ValueError):
    """Raised when the catalog text is not JSON or not shaped like a catalog.

    Attributes:
        var_name: Environment variable the text came from, if any.
        cause: The underlying validation error.
        errors: Human-readable problems, one per offending location.
    """

    def __init__(
        self,
        cause: Optional[Exception] = None,
        errors: Optional[List[str]] = None,
        var_name: Optional[str] = None,
    ):
        self.cause = cause
        self.errors = errors or []
        self.var_name = var_name
        source = f"environment variable '{var_name}'" if var_name else "service catalog"
        message = f"{source} is malformed"
        if self.errors:
            message += ": " + "; ".join(self.errors)
        super().__init__(message)


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------

class ServiceNotFoundError(CFServicesError, LookupError):
    """Raised when a service name is not bound to the application."""

    def __init__(self, service_name: str):
        self.service_name = service_name
        super().__init__(f"service '{service_name}' is not bound to the application")

    def __eq__(self, other):
        if not isinstance(other, ServiceNotFoundError):
            return NotImplemented
        return self.service_name == other.service_name

    def __hash__(self):
        return hash((type(self), self.service_name))


class MissingCredentialError(CFServicesError, KeyError):
    """Raised when a credentials object lacks a field the caller requires."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"credential '{self.key}' is not present"
