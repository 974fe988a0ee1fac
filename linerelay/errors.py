"""Exceptions raised across the relay pipeline."""


class ConfigurationError(Exception):
    """A required credential or setting is missing at startup."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing required configuration: {', '.join(missing)}")


class MalformedBatch(Exception):
    """The webhook body does not decode to an event batch."""


class ProviderError(Exception):
    """The language backend failed to produce a completion."""

    def __init__(self, message: str, model: str = ""):
        self.model = model
        super().__init__(message)


class DeliveryError(Exception):
    """The messaging transport rejected or failed to deliver a reply."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
