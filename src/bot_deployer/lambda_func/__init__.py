"""Lambda function reconciliation."""
