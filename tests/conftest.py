"""
Pytest configuration file for Bot Deployer tests.
"""
import json
import pytest
from unittest.mock import patch, MagicMock

import boto3
import moto
from botocore.exceptions import ClientError

from bot_deployer.config import DeployerConfig

ROLE_ARN = 'arn:aws:iam::123456789012:role/bot-lambda-role'
LAYER_NAME = 'bot-runtime-layer'
LAYER_VERSION_ARN = 'arn:aws:lambda:us-east-1:123456789012:layer:bot-runtime-layer:7'


def client_error(code: str, operation_name: str, message: str = 'error') -> ClientError:
    """Build a botocore ClientError with the given error code."""
    return ClientError({'Error': {'Code': code, 'Message': message}}, operation_name)


class FakeLambdaClient:
    """
    In-memory stand-in for a Lambda client.

    Keeps one configuration per function name and records every API call in order.
    """

    def __init__(self, layer_versions=None):
        self.functions = {}
        self.layer_versions = [LAYER_VERSION_ARN] if layer_versions is None else layer_versions
        self.calls = []
        self.waiter = MagicMock()

    def get_function(self, FunctionName):
        self.calls.append('get_function')
        if FunctionName not in self.functions:
            raise client_error('ResourceNotFoundException', 'GetFunction')
        return {'Configuration': dict(self.functions[FunctionName])}

    def get_function_configuration(self, FunctionName):
        self.calls.append('get_function_configuration')
        return dict(self.functions[FunctionName])

    def list_layer_versions(self, LayerName, MaxItems=None):
        self.calls.append('list_layer_versions')
        versions = [{'LayerVersionArn': arn} for arn in self.layer_versions]
        return {'LayerVersions': versions[:MaxItems]}

    def create_function(self, **params):
        self.calls.append('create_function')
        if params['FunctionName'] in self.functions:
            raise client_error('ResourceConflictException', 'CreateFunction', 'Function already exist')
        self.functions[params['FunctionName']] = {
            'FunctionName': params['FunctionName'],
            'Runtime': params['Runtime'],
            'Handler': params['Handler'],
            'Layers': [{'Arn': arn} for arn in params['Layers']],
        }
        return {'FunctionArn': self._arn(params['FunctionName'])}

    def update_function_configuration(self, **params):
        self.calls.append('update_function_configuration')
        self.functions[params['FunctionName']].update({
            'Runtime': params['Runtime'],
            'Handler': params['Handler'],
            'Layers': [{'Arn': arn} for arn in params['Layers']],
        })
        return {'FunctionArn': self._arn(params['FunctionName'])}

    def update_function_code(self, FunctionName, ZipFile, Publish):
        self.calls.append('update_function_code')
        return {'FunctionArn': self._arn(FunctionName)}

    def get_waiter(self, name):
        return self.waiter

    @staticmethod
    def _arn(function_name):
        return f'arn:aws:lambda:us-east-1:123456789012:function:{function_name}'


@pytest.fixture
def aws_credentials():
    """Mocked AWS Credentials for moto."""
    with patch.dict('os.environ', {
        'AWS_ACCESS_KEY_ID': 'testing',
        'AWS_SECRET_ACCESS_KEY': 'testing',
        'AWS_SECURITY_TOKEN': 'testing',
        'AWS_SESSION_TOKEN': 'testing',
        'AWS_DEFAULT_REGION': 'us-east-1',
    }):
        yield


@pytest.fixture
def mocked_aws(aws_credentials):
    """Single moto context shared by the AWS client fixtures of a test."""
    with moto.mock_aws():
        yield


@pytest.fixture
def lambda_client(mocked_aws):
    """Lambda client fixture."""
    return boto3.client('lambda')


@pytest.fixture
def iam_client(mocked_aws):
    """IAM client fixture."""
    return boto3.client('iam')


@pytest.fixture
def lambda_role(iam_client):
    """Create a Lambda execution role."""
    assume_role_policy = {
        "Version": "2012-10-17",
        "Statement": [
            {
                "Effect": "Allow",
                "Principal": {"Service": "lambda.amazonaws.com"},
                "Action": "sts:AssumeRole"
            }
        ]
    }

    response = iam_client.create_role(
        RoleName='bot-lambda-role',
        AssumeRolePolicyDocument=json.dumps(assume_role_policy)
    )
    return response['Role']['Arn']


@pytest.fixture
def fake_lambda_client():
    """In-memory Lambda client fixture."""
    return FakeLambdaClient()


@pytest.fixture
def deployer_config():
    """Complete deployer configuration."""
    return DeployerConfig(role_arn=ROLE_ARN, layer_name=LAYER_NAME)
