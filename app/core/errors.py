class StartupError(RuntimeError):
    """Base class for failures that must abort application startup."""


class ConfigurationError(StartupError):
    pass


class TokenAcquisitionError(StartupError):
    """The token authority returned no access token.

    Signals misconfigured client credentials rather than a transient fault,
    so it is never retried.
    """


class SecretNotFoundError(StartupError):
    def __init__(self, name: str):
        super().__init__(f"Secret '{name}' has no value")
        self.name = name
