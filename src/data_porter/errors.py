from __future__ import annotations


class PorterError(RuntimeError):
    """Base exception for import pipeline failures."""


class ProviderNotFoundError(PorterError, LookupError):
    """No provider is registered or constructible under the requested name."""


class ObjectNotCreatedError(PorterError):
    """The internal provider factory does not know how to build the requested provider."""


class ForeignResourceError(PorterError):
    """Resource belongs to a different provider than the one resolved for it."""


class ConfigurationError(PorterError):
    """The pipeline was assembled in a way that cannot run safely."""


class CapabilityError(ConfigurationError):
    """A sync-only provider or transformer was used in the async pipeline."""


class DuplicateTransformerError(PorterError, ValueError):
    """The same transformer instance was added to one specification twice."""


class InvalidArgumentError(PorterError, ValueError):
    """A specification setting received a malformed value."""


class RecordImportError(PorterError):
    """The imported records do not satisfy the requested cardinality."""


class FetchError(PorterError):
    """Transport layer failure raised by a connector."""


class RecoverableFetchError(FetchError):
    """Transient transport failure (timeouts, connection errors); the fetch may be retried."""


class RateLimitedError(RecoverableFetchError):
    """Provider throttled the request (e.g., HTTP 429)."""
