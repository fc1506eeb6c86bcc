"""Exception hierarchy for lunasdk.

The batched generation entry points never wrap provider exceptions: whatever a
provider model raises reaches the caller unchanged. The classes here are what
the bundled providers and helpers raise themselves.
"""


class LunaSDKError(Exception):
    """Base class for all lunasdk errors."""


class LoadSettingError(LunaSDKError):
    """A required setting (usually an API credential) could not be resolved."""

    def __init__(self, setting_name: str, environment_variable_name: str, description: str) -> None:
        self.setting_name = setting_name
        self.environment_variable_name = environment_variable_name
        self.description = description
        super().__init__(
            f"{description} is missing. Pass it using the '{setting_name}' parameter "
            f"or the {environment_variable_name} environment variable."
        )


class GenerationAbortedError(LunaSDKError):
    """The abort signal shared by a generation request was set."""


class ProviderAPIError(LunaSDKError):
    """A provider HTTP endpoint answered with a non-success status.

    Attributes:
        provider: Provider name (``"replicate"``, ``"stable-diffusion"``).
        status_code: HTTP status code of the response.
        body: Raw response text, as returned by the provider.
    """

    def __init__(self, provider: str, status_code: int, body: str) -> None:
        self.provider = provider
        self.status_code = status_code
        self.body = body
        super().__init__(f"{provider} API error! status: {status_code}, message: {body}")
