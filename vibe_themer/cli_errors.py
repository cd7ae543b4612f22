"""User-facing CLI error types with actionable messages."""


class CliUsageError(ValueError):
    """Base class for user-facing CLI configuration and usage errors."""


class MissingApiKeyError(CliUsageError):
    """Raised when API credentials are required but missing."""

    def __init__(self) -> None:
        super().__init__(
            "Missing API key. Set OPENAI_API_KEY, or pass --base-url to an endpoint "
            "that does not require OpenAI credentials."
        )


class InvalidConfigError(CliUsageError):
    """Raised when the YAML config file cannot be loaded."""

    def __init__(self, path: str, details: str) -> None:
        super().__init__(f"Invalid config file {path}: {details}")


class PromptLoadError(CliUsageError):
    """Raised when a prompt template cannot be loaded."""

    def __init__(self, details: str) -> None:
        super().__init__(f"Prompt configuration error: {details}")


class PayloadFileError(CliUsageError):
    """Raised when a cached theme payload file cannot be read or parsed."""

    def __init__(self, path: str, details: str) -> None:
        super().__init__(f"Cannot apply {path}: {details}")


class SaveThemeError(CliUsageError):
    """Raised when an applied theme cannot be written to the --save path."""

    def __init__(self, path: str, details: str) -> None:
        super().__init__(f"Cannot save theme to {path}: {details}")
