# app.py
# Description: Entry point for the Freemind command line client
#
# Imports
import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional
#
# 3rd-Party Imports
from loguru import logger
from rich.console import Console
#
# Local Imports
from freemind_cli import __version__
from freemind_cli.Logging_Config import configure_application_logging
from freemind_cli.Registry.Local_State import LocalStateStore
from freemind_cli.Sync.Sync_Client import RegistrySyncEngine
from freemind_cli.UI.Console_Menu import ConsoleMenu, setup_config
from freemind_cli.config import (
    BASE_DATA_DIR_CLI, DEFAULT_CONFIG_PATH, AppConfig, load_app_config, load_settings, write_app_config,
)
from freemind_cli.freemind_api.client import FreemindAPIClient
#
########################################################################################################################
#
# Functions:

def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="freemind-cli",
        description="Command line client for the Freemind calendar registry.",
    )
    parser.add_argument("-c", "--config", action="store_true", help="Enter the configuration setup")
    parser.add_argument("--skip-config-load", action="store_true",
                        help="Skip loading and saving of the configuration file")
    parser.add_argument("--config-path", type=Path, default=DEFAULT_CONFIG_PATH,
                        help=f"Configuration file to use (default: {DEFAULT_CONFIG_PATH})")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def resolve_app_config(args: argparse.Namespace, console: Console) -> AppConfig:
    """Loads the configuration and runs the setup dialog when asked to or when nothing usable was found."""
    config = AppConfig.empty()
    if not args.skip_config_load:
        loaded = load_app_config(args.config_path)
        if loaded is not None:
            config = loaded

    if args.config or config.is_default() or config.is_empty():
        console.print("Config could not be read, found or was skipped.\nEntering Configuration Setup:")
        config = setup_config(config, console)
        if args.skip_config_load:
            console.print("Config is not saved because loading was skipped.")
        elif write_app_config(config, args.config_path):
            console.print("Success!\n")
        else:
            console.print("ATTENTION: Config could not be written! Proceeding with supplied config this time...")
    return config


async def run_client(config: AppConfig, console: Console) -> None:
    async with FreemindAPIClient.from_config(config) as client:
        engine = RegistrySyncEngine(LocalStateStore(), client)
        await ConsoleMenu(engine, console).run()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    console = Console()

    if args.skip_config_load:
        configure_application_logging({}, BASE_DATA_DIR_CLI / "freemind_cli.log", console=console)
    else:
        configure_application_logging(load_settings(args.config_path), console=console)
    logger.info(f"--- Freemind CLI {__version__} starting ---")

    config = resolve_app_config(args, console)
    try:
        asyncio.run(run_client(config, console))
    except KeyboardInterrupt:
        console.print("\nInterrupted, local changes were not synced.")
        return 130
    logger.info("--- Freemind CLI exited ---")
    return 0


if __name__ == "__main__":
    sys.exit(main())

#
# End of app.py
########################################################################################################################
