"""Error kinds raised by the generation flows."""


class StudioError(Exception):
    """Base class for every error a flow can surface."""


class InvalidInputError(StudioError):
    """A required field, or a required combination of fields, is missing or malformed."""


class SoftFieldError(StudioError):
    """An optional field is malformed. Callers drop the field and continue."""

    def __init__(self, field: str, value: str, reason: str):
        super().__init__(f"{field}: {reason} ({value!r})")
        self.field = field
        self.value = value


class ExternalCallError(StudioError):
    """The generation service rejected the call or could not be reached."""


class GenerationFailedError(StudioError):
    """The service answered but no usable output could be extracted."""
