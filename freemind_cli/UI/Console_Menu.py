# Console_Menu.py
# Description: Interactive console menu, record table and configuration dialog
#
# Imports
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional, Tuple
#
# 3rd-Party Imports
from loguru import logger
from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table
#
# Local Imports
from freemind_cli.Constants import MAX_DUE_TIMESTAMP, MENU_RULE
from freemind_cli.config import AppConfig, AuthMethod
from freemind_cli.freemind_api.exceptions import FreemindError
from freemind_cli.Registry.Entry_Record import Record, format_due
from freemind_cli.Sync.Sync_Client import RegistrySyncEngine
#
########################################################################################################################
#
# Functions:

class AppCommand(str, Enum):
    LIST = "list"
    SYNC = "sync"
    FILTER = "filter"
    EDIT = "edit"
    ADD = "add"
    REMOVE = "remove"
    LIVE = "live"
    HELP = "help"
    QUIT = "quit"

    @classmethod
    def command_list(cls) -> Tuple["AppCommand", ...]:
        return tuple(cls)


def command_from_index(index: int) -> AppCommand:
    """Maps a menu position to its command. Positions outside the menu are a caller error."""
    commands = AppCommand.command_list()
    if not 0 <= index < len(commands):
        raise IndexError(f"No command at position {index}; expected 0..{len(commands) - 1}.")
    return commands[index]


def parse_due_input(text: str) -> Optional[int]:
    """
    Accepts a UNIX timestamp or an ISO date/time (local time). Empty input means no due date.

    Raises:
        ValueError: For unreadable input or a moment outside the unsigned 32-bit timestamp range.
    """
    text = text.strip()
    if not text:
        return None
    if text.isdigit():
        due = int(text)
    else:
        due = int(datetime.fromisoformat(text).timestamp())
    if not 0 <= due <= MAX_DUE_TIMESTAMP:
        raise ValueError(f"Due date {text!r} is outside the supported range.")
    return due


def build_records_table(records: Iterable[Record]) -> Table:
    table = Table("ID", "Title", "Description", "Due")
    for record in records:
        if record.removed:
            style = "italic red"
        elif record.id is None:
            style = "italic blue"
        else:
            style = None
        table.add_row(
            str(record.id) if record.id is not None else "None",
            record.title,
            record.description,
            format_due(record.due, local=True),
            style=style,
        )
    return table


def setup_config(previous: AppConfig, console: Optional[Console] = None) -> AppConfig:
    """Configuration setup dialog. Repeats until the user accepts what they entered."""
    console = console or Console()
    while True:
        console.print("\n   ### Config Setup: ###\n")
        server_address = Prompt.ask("URL of the server to connect to", default=previous.server_address,
                                    console=console)
        username = Prompt.ask("Your username", default=previous.username, console=console)
        auth_choice = Prompt.ask("How do you want to authenticate?",
                                 choices=[method.value for method in AuthMethod],
                                 default=AuthMethod.TOKEN.value, console=console)
        auth_method = AuthMethod(auth_choice)
        if auth_method is AuthMethod.PASSWORD:
            secret = Prompt.ask("Your Password", password=True, console=console)
        else:
            secret = Prompt.ask("Your API Token", console=console)

        config = AppConfig(
            server_address=server_address,
            username=username,
            secret=secret,
            auth_method=auth_method,
            timeout=previous.timeout,
        )
        console.print(f"\nDone! You entered the following config:\n\n{config}\n")
        if Confirm.ask("Do you want to accept this config?", console=console):
            return config
        previous = config


class ConsoleMenu:
    def __init__(self, engine: RegistrySyncEngine, console: Optional[Console] = None):
        self.engine = engine
        self.store = engine.store
        self.console = console or Console()

    async def run(self) -> None:
        while True:
            self.console.print(MENU_RULE)
            command = self.choose_command()
            self.console.print(MENU_RULE)
            if not await self.dispatch(command):
                break
        await self._offer_final_sync()
        self.console.print("Bye!")

    def choose_command(self) -> AppCommand:
        commands = AppCommand.command_list()
        for position, command in enumerate(commands):
            self.console.print(f"  [{position}] {command.value}")
        index = IntPrompt.ask(
            f"{self.store.modified_marker}>",
            choices=[str(position) for position in range(len(commands))],
            default=0,
            console=self.console,
        )
        return command_from_index(index)

    async def dispatch(self, command: AppCommand) -> bool:
        """Runs one command. Returns False when the menu should close."""
        logger.debug(f"Menu command: {command.value}")
        if command is AppCommand.QUIT:
            return False
        if command is AppCommand.LIST:
            self.console.print(build_records_table(self.store))
        elif command is AppCommand.SYNC:
            await self.sync_with_retry()
        elif command is AppCommand.FILTER:
            self.filter_records()
        elif command is AppCommand.EDIT:
            self.edit_record()
        elif command is AppCommand.ADD:
            self.store.push(self.add_dialog())
        elif command is AppCommand.REMOVE:
            self.remove_record()
        elif command is AppCommand.LIVE:
            await self.live_view()
        elif command is AppCommand.HELP:
            self.show_help()
        return True

    async def sync_with_retry(self) -> bool:
        while True:
            try:
                report = await self.engine.sync()
            except FreemindError as e:
                self.console.print(f"[red]Sync failed:[/red] {e}")
                if Confirm.ask("Do you want to retry?", default=False, console=self.console):
                    continue
                return False
            if report.degraded:
                self.console.print("[yellow]The server did not send a registry; nothing was synced.[/yellow]")
                return False
            self.console.print(f"Done! Uploaded: {report.uploaded}, new entries: {len(report.new_ids)}, "
                               f"fetched entries: {report.merged_count}")
            return True

    def filter_records(self) -> None:
        text = Prompt.ask("Search for", default="", console=self.console)
        self.console.print(build_records_table(self.store.filter(text)))

    def add_dialog(self) -> Optional[Record]:
        title = Prompt.ask("Title", console=self.console)
        description = Prompt.ask("Description", default="", console=self.console)
        due = self._ask_due(None)
        tags_text = Prompt.ask("Tags (comma separated)", default="", console=self.console)
        record = Record(
            title=title,
            description=description,
            due=due,
            tags=[tag.strip() for tag in tags_text.split(",") if tag.strip()],
        )
        self.console.print(f"\nYou are about to create the following new element:\n\n{record}")
        if Confirm.ask("Do you want to create this element?", console=self.console):
            return record
        return None

    def edit_record(self) -> None:
        entry_id = IntPrompt.ask("ID of the entry to edit", console=self.console)
        record = self.store.find(entry_id)
        if record is None:
            self.console.print(f"No entry with ID {entry_id}.")
            return
        title = Prompt.ask("Title", default=record.title, console=self.console)
        description = Prompt.ask("Description", default=record.description, console=self.console)
        due = self._ask_due(record.due)
        replacement = self.store.edit(entry_id, title=title, description=description, due=due)
        self.console.print(f"\nEntry will be updated on the next sync:\n\n{replacement}")

    def remove_record(self) -> None:
        entry_id = IntPrompt.ask("ID of the entry to remove", console=self.console)
        record = self.store.find(entry_id)
        if record is None:
            self.console.print(f"No entry with ID {entry_id}.")
            return
        if Confirm.ask(f"Remove '{record.title}'?", console=self.console):
            self.store.remove(entry_id)

    async def live_view(self) -> None:
        entry_id = IntPrompt.ask("ID of the entry to look up on the server", console=self.console)
        try:
            text = await self.engine.live_get_by_id(entry_id)
        except FreemindError as e:
            self.console.print(f"[red]Lookup failed:[/red] {e}")
            return
        self.console.print(text or "The server returned nothing for this entry.", markup=False)

    def show_help(self) -> None:
        self.console.print("This is the Freemind Command Line Client")
        self.console.print("You can perform different actions on your calendar and sync them")
        self.console.print("with the Freemind API")
        self.console.print("Entries in red are removed locally, entries in blue are not uploaded yet.")

    def _ask_due(self, current: Optional[int]) -> Optional[int]:
        default = str(current) if current is not None else ""
        while True:
            raw = Prompt.ask("Due (UNIX timestamp or YYYY-MM-DD HH:MM, empty for none)",
                             default=default, console=self.console)
            try:
                return parse_due_input(raw)
            except ValueError as e:
                self.console.print(f"Could not read '{raw}' as a due date: {e}", markup=False)

    async def _offer_final_sync(self) -> None:
        if self.store.synced:
            return
        if Confirm.ask("Attention: The current state seems to be unsynced with the server! "
                       "Do you want to sync now?", console=self.console):
            self.console.print("Syncing...")
            await self.sync_with_retry()
        else:
            self.console.print("Discarding Changes...")

#
# End of Console_Menu.py
########################################################################################################################
