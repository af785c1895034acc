"""Custom exceptions for the preference store."""


class InitializationError(Exception):
    """Raised when the store fails to initialize properly.

    This exception should be used when:
    - Required configuration parameters are missing
    - Configuration values are invalid or malformed
    - Configuration files cannot be parsed
    """

    pass


class MediumInitializationError(InitializationError):
    """Raised when the underlying key-value medium cannot be opened.

    The store keeps its handle unset after this error, so the next
    operation attempts to open the medium again.
    """

    pass


class ServiceNotRegisteredError(LookupError):
    """Raised when a capability is resolved before it was registered."""

    pass


class StoreClosedError(RuntimeError):
    """Raised when a preference store is used after it was closed."""

    pass


class RegistryShutdownError(RuntimeError):
    """Raised when a registry is used after shutdown()."""

    pass
