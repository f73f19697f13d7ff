"""
Configuration for the Bot Deployer.
Holds the fixed Lambda settings and the static values read from the environment.
"""
import os
from dataclasses import dataclass
from typing import Optional

from bot_deployer.exceptions import ConfigurationError

LAMBDA_RUNTIME = 'nodejs16.x'

LAMBDA_HANDLER = 'index.handler'

# seconds
LAMBDA_TIMEOUT = 10

LAMBDA_PACKAGE_TYPE = 'Zip'

DEFAULT_REGION = 'us-east-1'

DEFAULT_FUNCTION_NAME_PREFIX = 'medplum-bot-lambda-'


@dataclass
class DeployerConfig:
    """
    Static settings shared by every deployment.

    Attributes:
        role_arn: ARN of the IAM execution role attached to bot functions
        layer_name: Name of the shared runtime layer attached to bot functions
        region_name: AWS region the functions are deployed to
        function_name_prefix: Prefix prepended to the bot ID to build the function name
    """
    role_arn: Optional[str] = None
    layer_name: Optional[str] = None
    region_name: str = DEFAULT_REGION
    function_name_prefix: str = DEFAULT_FUNCTION_NAME_PREFIX

    @classmethod
    def from_env(cls, **overrides: Optional[str]) -> "DeployerConfig":
        """
        Build a configuration from environment variables.

        Keyword arguments with a value other than None take precedence over the environment.
        """
        values = {
            'role_arn': os.environ.get('BOT_LAMBDA_ROLE_ARN'),
            'layer_name': os.environ.get('BOT_LAMBDA_LAYER_NAME'),
            'region_name': (
                os.environ.get('BOT_LAMBDA_REGION')
                or os.environ.get('AWS_DEFAULT_REGION')
                or DEFAULT_REGION
            ),
            'function_name_prefix': os.environ.get('BOT_LAMBDA_NAME_PREFIX') or DEFAULT_FUNCTION_NAME_PREFIX,
        }
        for key, value in overrides.items():
            if key not in values:
                raise TypeError(f"Unknown configuration option: {key}")
            if value is not None:
                values[key] = value
        return cls(**values)

    def validate(self) -> None:
        """Raise ConfigurationError if a required setting is missing."""
        if not self.role_arn:
            raise ConfigurationError("Bot Lambda role ARN is required (BOT_LAMBDA_ROLE_ARN)")
        if not self.layer_name:
            raise ConfigurationError("Bot Lambda layer name is required (BOT_LAMBDA_LAYER_NAME)")
