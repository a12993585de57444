class ProviderError(Exception):
    """Raised when an AI provider call fails."""


class ProviderNetworkError(ProviderError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""


class ProviderConfigurationError(ProviderError):
    """Raised when the selected provider is missing required configuration."""
