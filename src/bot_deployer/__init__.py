"""
Bot Deployer - A system for deploying bot code to AWS Lambda functions.

This package packages user-supplied bot code with a handler wrapper and creates or
updates the bot's Lambda function so repeated deployments converge to the same state.
"""

__version__ = "0.1.0"
