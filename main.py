"""Main entry point for Cognisheet"""

import asyncio
import argparse
import logging
from pathlib import Path

from chat.orchestrator import ChatOrchestrator
from core.exceptions import CognisheetError
from grid.store import Workbook
from storage.json_store import JsonSheetStore
from ui.session import ConsoleSession
from config import settings


def main():
    parser = argparse.ArgumentParser(
        description="Cognisheet - Spreadsheet with an AI chat assistant",
        epilog="Type :help inside the session for commands"
    )
    parser.add_argument("file", type=Path, nargs="?", help="CSV / Excel file to import")
    parser.add_argument(
        "--load",
        type=str,
        default=None,
        help="Saved workbook (JSON) to open"
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=Path(settings.DATA_DIR),
        help="Directory for saved workbooks"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=settings.LOG_LEVEL,
        help="Logging level"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    store = JsonSheetStore(args.data_dir / "sheets")

    try:
        workbook = store.load_workbook(args.load) if args.load else Workbook()
    except CognisheetError as e:
        print(f"Error: {e}")
        return 1

    orchestrator = ChatOrchestrator(workbook)

    if args.file is not None:
        if not args.file.exists():
            print(f"Error: File not found: {args.file}")
            return 1
        message = orchestrator.import_file(str(args.file))
        print(message.content)

    session = ConsoleSession(orchestrator, store)
    asyncio.run(session.run())
    return 0


if __name__ == "__main__":
    exit(main())
