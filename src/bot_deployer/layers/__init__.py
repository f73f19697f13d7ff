"""Resolution of the shared runtime layer."""
