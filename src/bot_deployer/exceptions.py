"""
Errors raised while deploying a bot to AWS Lambda.
"""
from typing import Optional


class DeploymentError(Exception):
    """Base class for every failure that aborts a deployment."""


class ConfigurationError(DeploymentError):
    """A required static setting is missing."""


class PackagingError(DeploymentError):
    """The deployment archive could not be built."""


class LayerResolutionError(DeploymentError):
    """No usable version of the shared runtime layer was found."""


class DeploymentTimeoutError(DeploymentError):
    """The deployment-scoped deadline passed before the next remote call."""


class RemoteCallError(DeploymentError):
    """A call to the Lambda API failed."""

    def __init__(self, message: str, operation: Optional[str] = None, function_name: Optional[str] = None):
        super().__init__(message)
        self.operation = operation
        self.function_name = function_name
