#!/usr/bin/env python3
"""
Example script for deploying bot code to AWS Lambda.
"""
import argparse
import logging
import sys

from bot_deployer.config import DeployerConfig
from bot_deployer.main import BotDeployer


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application."""
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()]
    )


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Example script for deploying bot code to AWS Lambda"
    )

    parser.add_argument(
        "--bot-id",
        required=True,
        help="ID of the bot to deploy"
    )
    parser.add_argument(
        "--code-file",
        required=True,
        help="Path to the bot code"
    )
    parser.add_argument(
        "--role-arn",
        help="ARN of the IAM execution role (default: $BOT_LAMBDA_ROLE_ARN)"
    )
    parser.add_argument(
        "--layer-name",
        help="Name of the shared runtime layer (default: $BOT_LAMBDA_LAYER_NAME)"
    )

    # General options
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    return parser.parse_args()


def main() -> int:
    """Main entry point for the example script."""
    args = parse_args()
    setup_logging(args.verbose)

    logger = logging.getLogger(__name__)
    logger.info("Starting example deployment")

    try:
        with open(args.code_file, encoding="utf-8") as f:
            code = f.read()

        config = DeployerConfig.from_env(role_arn=args.role_arn, layer_name=args.layer_name)
        deployer = BotDeployer(config=config)

        result = deployer.deploy_bot(args.bot_id, code, timeout=120)

        logger.info(f"Successfully deployed Lambda function: {result['function_arn']}")

        return 0

    except Exception as e:
        logger.error(f"Deployment failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
