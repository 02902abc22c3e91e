"""text-relay command line interface."""
