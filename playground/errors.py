"""Exception hierarchy for the playground."""


class PlaygroundError(Exception):
    """Base class for all playground errors."""


class InvalidVersionError(PlaygroundError, ValueError):
    """Input could not be normalized into a version identifier."""

    def __init__(self, raw):
        self.raw = raw
        super().__init__(f"Invalid version: {raw!r}")


class UnknownVersionError(PlaygroundError, KeyError):
    """The catalog was addressed with an identifier it was never seeded with."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(identifier)

    def __str__(self) -> str:
        return f"Unknown version: {self.identifier}"


class ProvisioningError(PlaygroundError):
    """A runtime binary could not be made present locally."""

    def __init__(self, identifier: str, reason: str):
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Could not provision {identifier}: {reason}")


class TypeDefinitionError(PlaygroundError):
    """Type definitions for a version could not be loaded."""


class PreferencesError(PlaygroundError):
    """The durable preferences store failed."""
