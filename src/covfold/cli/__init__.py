from covfold.cli.exit_codes import EXIT_CONFIG, EXIT_GENERIC, EXIT_OK, EXIT_THRESHOLD
from covfold.cli.root import cli, create_app, main

__all__ = ["EXIT_CONFIG", "EXIT_GENERIC", "EXIT_OK", "EXIT_THRESHOLD", "cli", "create_app", "main"]
