"""
Main deployment module for Bot Deployer.

This module provides the entry point for packaging bot code and deploying it
to an AWS Lambda function.
"""
import logging
import time
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from bot_deployer.config import DEFAULT_FUNCTION_NAME_PREFIX, DeployerConfig
from bot_deployer.exceptions import DeploymentError, RemoteCallError
from bot_deployer.lambda_func.function_deployer import LambdaFunctionDeployer
from bot_deployer.layers.layer_resolver import LayerResolver
from bot_deployer.packaging.archive import create_zip_file

logger = logging.getLogger(__name__)

# seconds
CONNECT_TIMEOUT = 10
READ_TIMEOUT = 60


def function_name_for_bot(bot_id: str, prefix: str = DEFAULT_FUNCTION_NAME_PREFIX) -> str:
    """
    Get the Lambda function name for a bot.

    The name only depends on the bot ID, so every deployment of a bot targets the same function.
    """
    if not bot_id:
        raise ValueError("Bot ID is required")
    return f"{prefix}{bot_id}"


class BotDeployer:
    """
    Main class for deploying bot code to AWS Lambda functions.

    This class integrates all components of the Bot Deployer system:
    - Packaging bot code with the handler wrapper
    - Resolving the shared runtime layer
    - Creating or updating the Lambda function
    """

    def __init__(self, config: Optional[DeployerConfig] = None, lambda_client: Optional[Any] = None):
        """
        Initialize the Bot Deployer.

        Args:
            config: Static deployer settings. If not provided, read from the environment.
            lambda_client: Lambda client to use. If not provided, one is created for the configured region.
        """
        self.config = config or DeployerConfig.from_env()
        self.lambda_client = lambda_client or boto3.client(
            'lambda',
            region_name=self.config.region_name,
            config=Config(connect_timeout=CONNECT_TIMEOUT, read_timeout=READ_TIMEOUT)
        )
        self.layer_resolver = LayerResolver(
            lambda_client=self.lambda_client,
            layer_name=self.config.layer_name
        )
        self.lambda_deployer = LambdaFunctionDeployer(
            lambda_client=self.lambda_client,
            role_arn=self.config.role_arn,
            layer_resolver=self.layer_resolver
        )

    def deploy(self, function_name: str, code: str, timeout: Optional[float] = None) -> Dict[str, str]:
        """
        Package bot code and deploy it to a Lambda function.

        Args:
            function_name: Name of the Lambda function
            code: Source code of the bot
            timeout: Optional number of seconds the whole deployment may take

        Returns:
            Dictionary containing deployment information (function_name, function_arn)

        Raises:
            ValueError: If required parameters are invalid
            DeploymentError: If any deployment step fails
        """
        if not function_name:
            raise ValueError("Function name is required")

        if code is None:
            raise ValueError("Bot code is required")

        deadline = time.monotonic() + timeout if timeout is not None else None

        logger.info(f"Deploying lambda function for bot: {function_name}")
        try:
            self.config.validate()

            zip_file = create_zip_file(code)
            logger.debug(f"Lambda function zip size: {len(zip_file)}")

            function_arn = self.lambda_deployer.deploy_function(
                function_name=function_name,
                zip_file=zip_file,
                deadline=deadline
            )
        except DeploymentError as e:
            logger.error(f"Deployment of Lambda function {function_name} failed: {e}")
            raise
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Deployment of Lambda function {function_name} failed: {e}")
            raise RemoteCallError(
                f"Failed to deploy Lambda function {function_name}: {e}",
                function_name=function_name
            ) from e

        return {
            "function_name": function_name,
            "function_arn": function_arn
        }

    def deploy_bot(self, bot_id: str, code: str, timeout: Optional[float] = None) -> Dict[str, str]:
        """
        Deploy bot code to the Lambda function derived from the bot ID.

        Args:
            bot_id: ID of the bot that owns the function
            code: Source code of the bot
            timeout: Optional number of seconds the whole deployment may take

        Returns:
            Dictionary containing deployment information (function_name, function_arn)
        """
        function_name = function_name_for_bot(bot_id, self.config.function_name_prefix)
        return self.deploy(function_name, code, timeout=timeout)
