"""Exceptions raised by the codec, the Gemini clients and the processing flow."""


class PlantSuggestError(Exception):
    """Base exception for all plant suggestion failures."""
    pass


class ReadError(PlantSuggestError):
    """Raised when an uploaded file cannot be read as a supported image."""
    pass


class FormatError(PlantSuggestError):
    """Raised when a data URL cannot be split into media type and payload."""
    pass


class NoImageReturnedError(PlantSuggestError):
    """Raised when the edit model answers without any inline image part."""
    pass


class MalformedResponseError(PlantSuggestError):
    """Raised when the structured flora response is not valid JSON for the schema."""
    pass


class UpstreamError(PlantSuggestError):
    """Raised when the Gemini backend or its transport fails."""
    pass
