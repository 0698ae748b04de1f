"""Interactive console session"""

import asyncio
from typing import Optional

from chat.orchestrator import ChatOrchestrator
from core.enums import MessageRole
from core.exceptions import CognisheetError
from core.models import ChatMessage
from grid.evaluator import resolve_cell
from grid.store import ensure_capacity, get_cell, set_cell
from storage.json_store import JsonSheetStore

from .render import render_message, render_sheet

HELP = """Commands:
  :set A1 <text>         write a cell (text starting with = is a formula)
  :get A1                show a cell's raw input and value
  :select A1:B3          select a range (:select all, :select none)
  :ref                   print the current range reference
  :show                  print the active sheet
  :sheets                list sheet tabs
  :sheet add [name] | use <id> | rename <id> <name> | remove <id>
  :import <file>         import a CSV / Excel file
  :apply                 write the last suggested formula into its cell
  :save [name] / :load [name]
  :clear                 clear the chat transcript
  :help / :quit
Anything else is sent to the assistant."""


class ConsoleSession:
    """Line-oriented REPL over one orchestrator"""

    def __init__(self, orchestrator: ChatOrchestrator, store: Optional[JsonSheetStore] = None):
        self.orchestrator = orchestrator
        self.store = store or JsonSheetStore()

    @property
    def workbook(self):
        return self.orchestrator.workbook

    async def run(self):
        print("Cognisheet - type :help for commands")
        print(render_sheet(self.workbook.active_sheet))
        while True:
            try:
                line = await asyncio.to_thread(input, "> ")
            except (EOFError, KeyboardInterrupt):
                print()
                break
            if not await self.handle_line(line):
                break

    async def handle_line(self, line: str) -> bool:
        """Run one input line; False ends the session"""
        line = line.strip()
        if not line:
            return True
        if not line.startswith(":"):
            reply = await self.orchestrator.send_message(line)
            if reply is not None:
                print(render_message(reply))
            return True

        parts = line[1:].split()
        if not parts:
            return True
        command, args = parts[0].lower(), parts[1:]

        if command in ("quit", "exit", "q"):
            return False
        try:
            self._run_command(command, args, line[1:])
        except CognisheetError as e:
            print(f"[✗] {e}")
        return True

    def _run_command(self, command: str, args: list[str], text: str):
        orchestrator = self.orchestrator
        sheet = self.workbook.active_sheet

        if command == "help":
            print(HELP)
        elif command == "set" and args:
            pieces = text.split(None, 2)
            raw = pieces[2] if len(pieces) > 2 else ""
            set_cell(sheet, args[0], {"raw": raw})
            ensure_capacity(sheet, args[0])
            print(f"{args[0].upper()} = {resolve_cell(sheet, args[0])}")
        elif command == "get" and args:
            raw = get_cell(sheet, args[0]).raw
            print(f"{args[0].upper()}: {raw!r} -> {resolve_cell(sheet, args[0])}")
        elif command == "select" and args:
            target = args[0].lower()
            if target == "all":
                orchestrator.select_all()
            elif target == "none":
                orchestrator.clear_selection()
            else:
                orchestrator.select_range(args[0])
            print(f"Selection: {orchestrator.selection or 'none'}")
        elif command == "ref":
            print(orchestrator.range_reference())
        elif command == "show":
            print(render_sheet(sheet, orchestrator.selection))
        elif command == "sheets":
            for tab in self.workbook.sheets:
                marker = "*" if tab.id == self.workbook.active_sheet_id else " "
                print(f" {marker} {tab.id}: {tab.name}")
        elif command == "sheet" and args:
            self._sheet_command(args[0].lower(), args[1:])
        elif command == "import" and args:
            print(render_message(orchestrator.import_file(args[0])))
        elif command == "apply":
            message = self._last_formula()
            if message is None:
                print("No formula suggestion to apply")
            else:
                print(f"Applied to {orchestrator.apply_formula(message)}")
        elif command == "save":
            print(f"Saved to {self.store.save_workbook(self.workbook, *args[:1])}")
        elif command == "load":
            orchestrator.workbook = self.store.load_workbook(*args[:1])
            orchestrator.clear_selection()
            print(render_sheet(orchestrator.workbook.active_sheet))
        elif command == "clear":
            orchestrator.clear()
            print("Chat cleared")
        else:
            print(f"Unknown command: {command} (:help lists commands)")

    def _sheet_command(self, action: str, args: list[str]):
        workbook = self.workbook
        if action == "add":
            tab = workbook.add_sheet(" ".join(args) or None)
            self.orchestrator.clear_selection()
            print(f"Added {tab.id}: {tab.name}")
        elif action == "use" and args:
            tab = self.orchestrator.switch_sheet(args[0])
            print(render_sheet(tab))
        elif action == "rename" and len(args) >= 2:
            tab = workbook.rename_sheet(args[0], " ".join(args[1:]))
            print(f"{tab.id}: {tab.name}")
        elif action == "remove" and args:
            if workbook.remove_sheet(args[0]):
                self.orchestrator.clear_selection()
                print(f"Removed {args[0]}")
            else:
                print("Cannot remove the last sheet")
        else:
            print("Usage: :sheet add [name] | use <id> | rename <id> <name> | remove <id>")

    def _last_formula(self) -> Optional[ChatMessage]:
        for message in reversed(self.orchestrator.transcript):
            if (
                message.role == MessageRole.ASSISTANT
                and message.attachments is not None
                and message.attachments.formula
            ):
                return message
        return None
