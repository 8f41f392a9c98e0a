"""Host-facing layer: error reporting, sessions and the interactive shell."""
