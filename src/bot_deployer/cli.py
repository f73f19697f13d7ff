#!/usr/bin/env python3
"""
Command-line interface for the Bot Deployer system.
"""
import argparse
import logging
import sys
from typing import List, Optional

from bot_deployer.config import DeployerConfig
from bot_deployer.exceptions import DeploymentError
from bot_deployer.main import BotDeployer, function_name_for_bot


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application."""
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Package bot code and deploy it to an AWS Lambda function"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Deploy command
    deploy_parser = subparsers.add_parser("deploy", help="Deploy bot code to a Lambda function")
    target = deploy_parser.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "--bot-id",
        help="ID of the bot; the function name is derived from it"
    )
    target.add_argument(
        "--function-name",
        help="Name of the Lambda function"
    )
    deploy_parser.add_argument(
        "--code-file",
        help="Path to the bot code (default: read from stdin)"
    )
    deploy_parser.add_argument(
        "--timeout",
        type=float,
        help="Maximum number of seconds the deployment may take"
    )

    # Static configuration overrides
    deploy_parser.add_argument(
        "--role-arn",
        help="ARN of the IAM execution role (default: $BOT_LAMBDA_ROLE_ARN)"
    )
    deploy_parser.add_argument(
        "--layer-name",
        help="Name of the shared runtime layer (default: $BOT_LAMBDA_LAYER_NAME)"
    )
    deploy_parser.add_argument(
        "--region",
        help="AWS region to use (default: $BOT_LAMBDA_REGION or us-east-1)"
    )
    deploy_parser.add_argument(
        "--name-prefix",
        help="Prefix for function names derived from bot IDs"
    )

    # General options
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    return parser.parse_args(args)


def read_code(code_file: Optional[str]) -> str:
    """Read bot code from a file, or from stdin when no file is given."""
    if code_file:
        with open(code_file, encoding="utf-8") as f:
            return f.read()
    return sys.stdin.read()


def deploy_command(args: argparse.Namespace) -> int:
    """Handle the deploy command."""
    logger = logging.getLogger("bot_deployer.cli")

    config = DeployerConfig.from_env(
        role_arn=args.role_arn,
        layer_name=args.layer_name,
        region_name=args.region,
        function_name_prefix=args.name_prefix
    )

    try:
        code = read_code(args.code_file)
    except OSError as e:
        logger.error(f"Failed to read bot code: {e}")
        return 1

    try:
        function_name = args.function_name or function_name_for_bot(args.bot_id, config.function_name_prefix)
        deployer = BotDeployer(config=config)
        result = deployer.deploy(function_name, code, timeout=args.timeout)
    except ValueError as e:
        logger.error(f"Validation error: {e}")
        return 1
    except DeploymentError as e:
        logger.error(f"Failed to deploy bot: {e}")
        return 1

    logger.info(f"Successfully deployed Lambda function: {result['function_arn']}")
    return 0


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parsed_args = parse_args(args)
    setup_logging(parsed_args.verbose)

    if parsed_args.command == "deploy":
        return deploy_command(parsed_args)
    else:
        print("No command specified. Use --help for usage information.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
