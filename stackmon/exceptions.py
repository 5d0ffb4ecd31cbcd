"""Exceptions raised by stackmon."""


class StackmonError(Exception):
    """Base class for stackmon errors."""


class RegistryError(StackmonError):
    """The tracked service list is invalid."""


class RuntimeUnavailableError(StackmonError):
    """The container runtime cannot be reached."""


class RuntimeQueryError(StackmonError):
    """A single list or inspect call against the runtime failed."""
