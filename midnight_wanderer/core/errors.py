class MidnightWandererError(Exception):
    """Base class for every error raised by the game."""


class ConfigurationError(MidnightWandererError):
    """Required configuration is missing or invalid."""


class NarrativeError(MidnightWandererError):
    """A generative backend failed to produce a usable turn."""


class TransportError(NarrativeError):
    """The backend could not be reached or answered with an API error."""


class MalformedResponse(NarrativeError):
    """The backend answered, but not with the JSON shape we asked for."""

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw


class ImageGenerationFailure(NarrativeError):
    """Scene illustration failed. Never fatal to a turn."""
