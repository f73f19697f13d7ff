"""Packaging of bot code into deployable archives."""
