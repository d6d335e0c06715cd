# test_logging_config.py
#
# Imports
import io
import logging
import sys
import pytest
#
# Third-party imports
from loguru import logger
from rich.console import Console
from rich.logging import RichHandler
#
# Local imports
from freemind_cli.Logging_Config import configure_application_logging
from freemind_cli.app import build_arg_parser, resolve_app_config
from freemind_cli.config import AppConfig
#
############################################################################################################################
#
# Functions:

@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        if handler not in saved_handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(saved_level)
    logger.remove()
    logger.add(sys.stderr)


def test_loguru_messages_reach_the_log_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "freemind_cli.log"
    console = Console(file=io.StringIO())
    settings = {"logging": {"log_level": "ERROR", "file_log_level": "DEBUG"}}

    root = configure_application_logging(settings, log_file, console=console)
    logger.debug("allocating ids")
    for handler in root.handlers:
        handler.flush()

    assert log_file.exists()
    assert "allocating ids" in log_file.read_text(encoding="utf-8")
    assert root.level == logging.DEBUG
    assert "allocating ids" not in console.file.getvalue()


def test_repeated_configuration_does_not_stack_handlers(tmp_path, restore_root_logger):
    for _ in range(3):
        root = configure_application_logging({}, tmp_path / "app.log", console=Console(file=io.StringIO()))
    assert len(root.handlers) == 2
    assert sum(isinstance(handler, RichHandler) for handler in root.handlers) == 1
    assert logging.getLogger("httpx").level == logging.WARNING


# --- Entry point ---

def test_arg_parser_flags(tmp_path):
    args = build_arg_parser().parse_args(["-c", "--skip-config-load", "--config-path", str(tmp_path / "c.toml")])
    assert args.config is True
    assert args.skip_config_load is True
    assert args.config_path == tmp_path / "c.toml"


def test_skip_config_load_runs_setup_without_saving(mocker, tmp_path):
    config_path = tmp_path / "never-written.toml"
    entered = AppConfig(server_address="https://srv", username="u", secret="s")
    setup = mocker.patch("freemind_cli.app.setup_config", return_value=entered)
    write = mocker.patch("freemind_cli.app.write_app_config")

    args = build_arg_parser().parse_args(["--skip-config-load", "--config-path", str(config_path)])
    result = resolve_app_config(args, Console(file=io.StringIO()))

    assert result is entered
    assert setup.call_args.args[0].is_empty()
    write.assert_not_called()
    assert not config_path.exists()


def test_usable_config_skips_setup(mocker, tmp_path):
    stored = AppConfig(server_address="https://srv", username="u", secret="s")
    mocker.patch("freemind_cli.app.load_app_config", return_value=stored)
    setup = mocker.patch("freemind_cli.app.setup_config")

    args = build_arg_parser().parse_args(["--config-path", str(tmp_path / "c.toml")])
    assert resolve_app_config(args, Console(file=io.StringIO())) is stored
    setup.assert_not_called()

#
# End of test_logging_config.py
############################################################################################################################
