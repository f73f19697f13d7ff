"""
Unit tests for the Lambda layer resolver.
"""
import pytest
from unittest.mock import patch, MagicMock

from botocore.exceptions import EndpointConnectionError

from bot_deployer.exceptions import LayerResolutionError
from bot_deployer.layers.layer_resolver import LayerResolver
from conftest import LAYER_NAME, client_error


def test_get_latest_layer_version():
    """Test that the first listed layer version is returned."""
    mock_lambda_client = MagicMock()
    mock_lambda_client.list_layer_versions.return_value = {
        'LayerVersions': [
            {'LayerVersionArn': 'arn:aws:lambda:us-east-1:123456789012:layer:bot-runtime-layer:3', 'Version': 3},
            {'LayerVersionArn': 'arn:aws:lambda:us-east-1:123456789012:layer:bot-runtime-layer:2', 'Version': 2},
        ]
    }

    resolver = LayerResolver(lambda_client=mock_lambda_client, layer_name=LAYER_NAME)
    layer_version = resolver.get_latest_layer_version()

    mock_lambda_client.list_layer_versions.assert_called_once_with(LayerName=LAYER_NAME, MaxItems=1)
    assert layer_version == 'arn:aws:lambda:us-east-1:123456789012:layer:bot-runtime-layer:3'


def test_get_latest_layer_version_explicit_name():
    """Test that an explicit layer name overrides the default."""
    mock_lambda_client = MagicMock()
    mock_lambda_client.list_layer_versions.return_value = {
        'LayerVersions': [{'LayerVersionArn': 'arn:aws:lambda:us-east-1:123456789012:layer:other:1'}]
    }

    resolver = LayerResolver(lambda_client=mock_lambda_client, layer_name=LAYER_NAME)
    resolver.get_latest_layer_version('other')

    mock_lambda_client.list_layer_versions.assert_called_once_with(LayerName='other', MaxItems=1)


@pytest.mark.parametrize("response", [
    {'LayerVersions': []},
    {},
    {'LayerVersions': [{}]},
])
def test_get_latest_layer_version_empty(response):
    """Test that a layer without versions cannot be resolved."""
    mock_lambda_client = MagicMock()
    mock_lambda_client.list_layer_versions.return_value = response

    resolver = LayerResolver(lambda_client=mock_lambda_client, layer_name=LAYER_NAME)

    with pytest.raises(LayerResolutionError, match=LAYER_NAME):
        resolver.get_latest_layer_version()


@pytest.mark.parametrize("error", [
    client_error('ResourceNotFoundException', 'ListLayerVersions'),
    client_error('AccessDeniedException', 'ListLayerVersions'),
    EndpointConnectionError(endpoint_url='https://lambda.us-east-1.amazonaws.com'),
])
def test_get_latest_layer_version_query_fails(error):
    """Test that a failed query is reported as a layer resolution error."""
    mock_lambda_client = MagicMock()
    mock_lambda_client.list_layer_versions.side_effect = error

    resolver = LayerResolver(lambda_client=mock_lambda_client, layer_name=LAYER_NAME)

    with pytest.raises(LayerResolutionError) as exc_info:
        resolver.get_latest_layer_version()

    assert exc_info.value.__cause__ is error


def test_get_latest_layer_version_requires_name():
    """Test that a layer name is required."""
    mock_lambda_client = MagicMock()
    resolver = LayerResolver(lambda_client=mock_lambda_client)

    with pytest.raises(LayerResolutionError):
        resolver.get_latest_layer_version()

    mock_lambda_client.list_layer_versions.assert_not_called()


@patch('boto3.client')
def test_default_client(mock_boto3_client):
    """Test that a Lambda client is created when none is given."""
    resolver = LayerResolver(layer_name=LAYER_NAME, region_name='eu-west-1')

    mock_boto3_client.assert_called_once_with('lambda', region_name='eu-west-1')
    assert resolver.lambda_client is mock_boto3_client.return_value
