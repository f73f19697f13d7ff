"""
Lambda layer resolver.
Finds the most recent version of the shared runtime layer used by bot functions.
"""
import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from bot_deployer.exceptions import LayerResolutionError

logger = logging.getLogger(__name__)


class LayerResolver:
    """
    Resolves the ARN of the latest published version of a Lambda layer.
    """

    def __init__(
        self,
        lambda_client: Optional[Any] = None,
        layer_name: Optional[str] = None,
        region_name: Optional[str] = None
    ):
        """
        Initialize the layer resolver.

        Args:
            lambda_client: Lambda client to use. If not provided, one is created for region_name.
            layer_name: Default layer name used when none is passed to get_latest_layer_version.
            region_name: AWS region name. If not provided, uses the default region.
        """
        self.lambda_client = lambda_client or boto3.client('lambda', region_name=region_name)
        self.layer_name = layer_name

    def get_latest_layer_version(self, layer_name: Optional[str] = None) -> str:
        """
        Get the most recent layer version ARN.

        Lambda lists layer versions newest first, so the first result is the latest version.

        Args:
            layer_name: Name of the layer. Defaults to the resolver's layer name.

        Returns:
            ARN of the most recent layer version

        Raises:
            LayerResolutionError: If the layer has no versions or the query fails
        """
        layer_name = layer_name or self.layer_name
        if not layer_name:
            raise LayerResolutionError("Layer name is required")

        try:
            response = self.lambda_client.list_layer_versions(
                LayerName=layer_name,
                MaxItems=1
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error listing versions of layer {layer_name}: {e}")
            raise LayerResolutionError(f"Failed to list versions of layer {layer_name}: {e}") from e

        layer_versions = response.get('LayerVersions') or []
        if not layer_versions or not layer_versions[0].get('LayerVersionArn'):
            logger.error(f"No published versions found for layer {layer_name}")
            raise LayerResolutionError(f"No published versions found for layer {layer_name}")

        layer_version_arn = layer_versions[0]['LayerVersionArn']
        logger.debug(f"Resolved layer {layer_name} to {layer_version_arn}")
        return layer_version_arn
