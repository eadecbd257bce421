"""Job Research Hub backend."""
