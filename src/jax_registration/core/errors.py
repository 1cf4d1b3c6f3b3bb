"""Exception types raised by jax_registration."""


class RegistrationError(Exception):
    """Root of all errors raised by this package."""


class InvalidArgumentError(RegistrationError, ValueError):
    """A parameter vector, point or dimension does not fit the receiving object."""


class UnsupportedOperationError(RegistrationError, NotImplementedError):
    """The requested capability (inverse, derivative) is not defined."""
