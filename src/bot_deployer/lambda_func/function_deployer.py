"""
Lambda function deployer module.
Handles creating and updating the AWS Lambda function that runs a bot.
"""
import logging
import time
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from bot_deployer.config import LAMBDA_HANDLER, LAMBDA_PACKAGE_TYPE, LAMBDA_RUNTIME, LAMBDA_TIMEOUT
from bot_deployer.exceptions import DeploymentTimeoutError, RemoteCallError
from bot_deployer.layers.layer_resolver import LayerResolver

logger = logging.getLogger(__name__)

# seconds between waiter polls, and the time budgeted for each poll request
WAITER_DELAY = 1
WAITER_POLL_ALLOWANCE = 1


def check_deadline(deadline: Optional[float], step: str) -> None:
    """
    Abort the deployment if its deadline has passed.

    Args:
        deadline: Value of time.monotonic() after which the deployment is cancelled, or None
        step: Name of the step about to run, used in the error message
    """
    if deadline is not None and time.monotonic() >= deadline:
        raise DeploymentTimeoutError(f"Deployment deadline exceeded before {step}")


class LambdaFunctionDeployer:
    """
    Deploys bot archives to AWS Lambda functions.

    This class handles:
    - Checking whether the bot's Lambda function already exists
    - Creating new Lambda functions with the shared runtime layer
    - Reconciling runtime, handler and layer of existing functions
    - Publishing new code to existing functions
    """

    def __init__(
        self,
        lambda_client: Optional[Any] = None,
        role_arn: Optional[str] = None,
        layer_name: Optional[str] = None,
        layer_resolver: Optional[LayerResolver] = None,
        region_name: Optional[str] = None
    ):
        """
        Initialize the Lambda function deployer.

        Args:
            lambda_client: Lambda client to use. If not provided, one is created for region_name.
            role_arn: ARN of the IAM execution role for bot functions
            layer_name: Name of the shared runtime layer, used when no layer_resolver is given
            layer_resolver: Resolver for the shared runtime layer. Defaults to one sharing lambda_client.
            region_name: AWS region name. If not provided, uses the default region.
        """
        self.lambda_client = lambda_client or boto3.client('lambda', region_name=region_name)
        self.role_arn = role_arn
        self.layer_resolver = layer_resolver or LayerResolver(
            lambda_client=self.lambda_client,
            layer_name=layer_name
        )

    def function_exists(self, function_name: str) -> bool:
        """
        Check if a Lambda function exists.

        Any error from the lookup is treated as "does not exist", so a False result
        does not distinguish a missing function from a failed query.

        Args:
            function_name: Name of the Lambda function to check

        Returns:
            True if a function with exactly this name exists, False otherwise
        """
        try:
            response = self.lambda_client.get_function(FunctionName=function_name)
        except (ClientError, BotoCoreError) as e:
            logger.debug(f"Lambda function {function_name} lookup failed, treating as absent: {e}")
            return False

        configuration = response.get('Configuration') or {}
        return configuration.get('FunctionName') == function_name

    def _function_arn(self, response: Dict[str, Any], operation: str, function_name: str) -> str:
        function_arn = response.get('FunctionArn')
        if not function_arn:
            logger.error(f"Lambda {operation} response for {function_name} has no FunctionArn")
            raise RemoteCallError(
                f"Lambda {operation} response for {function_name} has no FunctionArn",
                operation=operation,
                function_name=function_name
            )
        return function_arn

    def _wait(self, waiter_name: str, function_name: str, deadline: Optional[float] = None) -> None:
        check_deadline(deadline, f"waiting for {waiter_name}")
        params: Dict[str, Any] = {'FunctionName': function_name}
        if deadline is not None:
            remaining = deadline - time.monotonic()
            max_attempts = int(remaining // (WAITER_DELAY + WAITER_POLL_ALLOWANCE))
            params['WaiterConfig'] = {'Delay': WAITER_DELAY, 'MaxAttempts': max(1, max_attempts)}

        try:
            waiter = self.lambda_client.get_waiter(waiter_name)
            waiter.wait(**params)
        except (ClientError, BotoCoreError) as e:
            if deadline is not None and time.monotonic() >= deadline:
                raise DeploymentTimeoutError(
                    f"Deployment deadline exceeded while waiting for {waiter_name}"
                ) from e
            logger.error(f"Error waiting for Lambda function {function_name} ({waiter_name}): {e}")
            raise RemoteCallError(
                f"Lambda function {function_name} did not reach the expected state: {e}",
                operation=waiter_name,
                function_name=function_name
            ) from e

    def create_function(self, function_name: str, zip_file: bytes, deadline: Optional[float] = None) -> str:
        """
        Create a new Lambda function from a bot archive.

        Args:
            function_name: Name of the Lambda function
            zip_file: Bytes of the bot archive
            deadline: Optional time.monotonic() deadline for the deployment

        Returns:
            ARN of the created Lambda function
        """
        check_deadline(deadline, "resolving layer version")
        layer_version = self.layer_resolver.get_latest_layer_version()

        check_deadline(deadline, "create_function")
        try:
            response = self.lambda_client.create_function(
                FunctionName=function_name,
                Role=self.role_arn,
                Runtime=LAMBDA_RUNTIME,
                Handler=LAMBDA_HANDLER,
                PackageType=LAMBDA_PACKAGE_TYPE,
                Layers=[layer_version],
                Code={
                    'ZipFile': zip_file
                },
                Publish=True,
                Timeout=LAMBDA_TIMEOUT,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error creating Lambda function {function_name}: {e}")
            raise RemoteCallError(
                f"Failed to create Lambda function {function_name}: {e}",
                operation='create_function',
                function_name=function_name
            ) from e

        function_arn = self._function_arn(response, 'create_function', function_name)
        logger.info(f"Created Lambda function: {function_arn}")

        self._wait('function_active', function_name, deadline)
        return function_arn

    def _configuration_matches(self, configuration: Dict[str, Any], layer_version: str) -> bool:
        layers = configuration.get('Layers') or []
        current_layer = layers[0].get('Arn') if layers else None
        return (
            configuration.get('Runtime') == LAMBDA_RUNTIME
            and configuration.get('Handler') == LAMBDA_HANDLER
            and current_layer == layer_version
        )

    def _update_function_configuration(
        self,
        function_name: str,
        layer_version: str,
        deadline: Optional[float] = None
    ) -> bool:
        """
        Bring runtime, handler and layer of a Lambda function to the desired values.

        The update call is skipped when the current configuration already matches.

        Args:
            function_name: Name of the Lambda function
            layer_version: ARN of the desired layer version
            deadline: Optional time.monotonic() deadline for the deployment

        Returns:
            True if the configuration was updated, False if it already matched
        """
        check_deadline(deadline, "get_function_configuration")
        try:
            configuration = self.lambda_client.get_function_configuration(FunctionName=function_name)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error reading Lambda function configuration for {function_name}: {e}")
            raise RemoteCallError(
                f"Failed to read configuration of Lambda function {function_name}: {e}",
                operation='get_function_configuration',
                function_name=function_name
            ) from e

        if self._configuration_matches(configuration, layer_version):
            logger.info(f"Lambda function {function_name} configuration is up to date")
            return False

        check_deadline(deadline, "update_function_configuration")
        try:
            self.lambda_client.update_function_configuration(
                FunctionName=function_name,
                Role=self.role_arn,
                Runtime=LAMBDA_RUNTIME,
                Handler=LAMBDA_HANDLER,
                Layers=[layer_version],
                Timeout=LAMBDA_TIMEOUT,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error updating Lambda function configuration for {function_name}: {e}")
            raise RemoteCallError(
                f"Failed to update configuration of Lambda function {function_name}: {e}",
                operation='update_function_configuration',
                function_name=function_name
            ) from e

        logger.info(f"Updated Lambda function configuration: {function_name}")

        # Code updates are rejected while a configuration update is in progress
        self._wait('function_updated', function_name, deadline)
        return True

    def _update_function_code(self, function_name: str, zip_file: bytes, deadline: Optional[float] = None) -> str:
        """
        Publish a new bot archive to an existing Lambda function.

        Args:
            function_name: Name of the Lambda function
            zip_file: Bytes of the bot archive
            deadline: Optional time.monotonic() deadline for the deployment

        Returns:
            ARN of the updated Lambda function
        """
        check_deadline(deadline, "update_function_code")
        try:
            response = self.lambda_client.update_function_code(
                FunctionName=function_name,
                ZipFile=zip_file,
                Publish=True
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error updating Lambda function code for {function_name}: {e}")
            raise RemoteCallError(
                f"Failed to update code of Lambda function {function_name}: {e}",
                operation='update_function_code',
                function_name=function_name
            ) from e

        function_arn = self._function_arn(response, 'update_function_code', function_name)
        logger.info(f"Updated Lambda function code: {function_arn}")

        self._wait('function_updated', function_name, deadline)
        return function_arn

    def update_function(self, function_name: str, zip_file: bytes, deadline: Optional[float] = None) -> str:
        """
        Update an existing Lambda function.

        The configuration is reconciled first, then the code is always republished.

        Args:
            function_name: Name of the Lambda function
            zip_file: Bytes of the bot archive
            deadline: Optional time.monotonic() deadline for the deployment

        Returns:
            ARN of the updated Lambda function
        """
        check_deadline(deadline, "resolving layer version")
        layer_version = self.layer_resolver.get_latest_layer_version()

        self._update_function_configuration(function_name, layer_version, deadline)
        return self._update_function_code(function_name, zip_file, deadline)

    def deploy_function(self, function_name: str, zip_file: bytes, deadline: Optional[float] = None) -> str:
        """
        Deploy a bot archive to a Lambda function.

        If the function doesn't exist, it will be created.
        If the function exists, it will be updated.

        Args:
            function_name: Name of the Lambda function
            zip_file: Bytes of the bot archive
            deadline: Optional time.monotonic() deadline for the deployment

        Returns:
            ARN of the deployed Lambda function
        """
        check_deadline(deadline, "get_function")
        if self.function_exists(function_name):
            logger.info(f"Lambda function {function_name} exists, updating it")
            return self.update_function(function_name, zip_file, deadline)

        logger.info(f"Lambda function {function_name} does not exist, creating it")
        return self.create_function(function_name, zip_file, deadline)
