"""CLI entry point."""

import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from common.logging_config import setup_logging
from cli.commands import get_engine, set_config
from cli.config import DEFAULT_CONFIG_PATH, Config
from cli.repl import repl_loop


def parse_args(argv: List[str]) -> Tuple[bool, Path]:
    """
    Extract the CLI flags.

    Supports ``--debug`` and ``--config <path>``; the config path may also
    come from the DFS_CLI_CONFIG env var.

    Returns:
        (debug, config_path)
    """
    debug = '--debug' in argv
    config_path = Path(os.getenv('DFS_CLI_CONFIG', str(DEFAULT_CONFIG_PATH)))

    if '--config' in argv:
        index = argv.index('--config')
        if index + 1 >= len(argv):
            raise SystemExit("Usage: replica-fs [--debug] [--config <path>]")
        config_path = Path(argv[index + 1])

    return debug, config_path


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for CLI."""
    debug, config_path = parse_args(sys.argv[1:] if argv is None else argv)
    log_level = 'DEBUG' if debug else os.getenv('LOG_LEVEL', 'WARNING')

    logger = setup_logging('cli', log_level=log_level)
    if debug:
        logger.info("Debug logging enabled")

    set_config(Config(config_path))

    logger.info("CLI starting...")
    try:
        repl_loop(get_engine())
    except Exception as e:
        logger.error(f"CLI error: {e}", exc_info=True)
        raise
    finally:
        logger.info("CLI exiting")


if __name__ == "__main__":
    main()
