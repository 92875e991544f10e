from __future__ import annotations

import argparse
import signal
from typing import Optional

from dotenv import load_dotenv

from patron_registry.adapters.console import PatronConsole
from patron_registry.config import Config
from patron_registry.errors import PatronRegistryError
from patron_registry.logger import configure_logging
from patron_registry.repositories.directory import PatronDirectory
from patron_registry.services.patron_service import PatronService


def _handle_sigint(signum, frame) -> None:
    print("\n[INTERRUPTED] patron-registry terminated by user (Ctrl+C).")
    raise SystemExit(130)  # 130 is the conventional exit code for SIGINT


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="patron-registry",
        description="Load, check and edit library patron files (ID-Name-Address-Fine).",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    show_p = sub.add_parser("show", help="Load a patron file and display it")
    show_p.add_argument("file", nargs="?", default=None, help="Patron file. Default: configured patrons file.")

    check_p = sub.add_parser("check", help="Report every line of a patron file that would be skipped")
    check_p.add_argument("file", help="Patron file to check")

    menu_p = sub.add_parser("menu", help="Interactive patron menu")
    menu_p.add_argument("--file", default=None, help="Patron file to load at start. Default: configured patrons file.")

    return parser


def run_menu(service: PatronService, ui: PatronConsole, start_file: Optional[str]) -> int:
    """Interactive Load/Add/Remove/Edit/Display/Save/Quit loop.

    Saving without naming a file writes back to the file last loaded or
    saved, starting with `start_file`.
    """
    start = str(start_file or service.active_file)
    try:
        ui.print_load_report(service.load(start, replace=True))
    except OSError as exc:
        ui.print_error(f"Could not read {start}: {exc}")
        service.current_file = start

    while True:
        choice = ui.menu_choice()
        try:
            if choice == "1":
                path = ui.ask("File to load", default=service.active_file)
                ui.print_load_report(service.load(path, replace=True))
                ui.print_patrons(service.list_patrons())

            elif choice == "2":
                patron = service.add_patron(
                    ui.ask("ID (7 digits)"),
                    ui.ask("Name"),
                    ui.ask("Address"),
                    ui.ask(f"Fine amount ({service.config.min_fine:.2f} - {service.config.max_fine:.2f})"),
                )
                ui.print_patron(patron, heading="Patron added")

            elif choice == "3":
                removed = service.remove_patron(ui.ask("ID of the patron to remove"))
                ui.print_patron(removed, heading="Removed")

            elif choice == "4":
                _edit_one(service, ui)

            elif choice == "5":
                ui.print_patrons(service.list_patrons())

            elif choice == "6":
                path = ui.ask("File to save to", default=service.active_file)
                count = service.save(path)
                ui.print_info(f"Saved {count} patrons to {path}.")

            elif choice == "7":
                if ui.confirm("Save changes before quitting?"):
                    count = service.save()
                    ui.print_info(f"Saved {count} patrons to {service.active_file}.")
                ui.print_info("Goodbye!")
                return 0

        except PatronRegistryError as exc:
            ui.print_error(str(exc))
        except OSError as exc:
            ui.print_error(f"File error: {exc}")


def _edit_one(service: PatronService, ui: PatronConsole) -> None:
    original_id = ui.ask("ID of the patron to edit")
    current = service.find_patron(original_id)
    if current is None:
        ui.print_error(f"no patron with ID {original_id} was found")
        return
    ui.print_patron(current, heading="Patron found")

    field = ui.edit_choice()
    if field == "1":
        updated = service.edit_patron(original_id, name=ui.ask("New name"))
    elif field == "2":
        updated = service.edit_patron(original_id, address=ui.ask("New address"))
    elif field == "3":
        updated = service.edit_patron(original_id, fine=ui.ask("New fine amount"))
    else:
        updated = service.edit_patron(original_id, patron_id=ui.ask("New ID (7 digits)"))
    ui.print_patron(updated, heading="Patron updated")


def main(argv: list[str] | None = None, ui: Optional[PatronConsole] = None) -> int:
    # Register Ctrl+C handler as early as possible
    signal.signal(signal.SIGINT, _handle_sigint)

    load_dotenv()

    args = _build_parser().parse_args(argv)
    ui = ui or PatronConsole()

    try:
        config = Config.from_env()
    except ValueError as exc:
        ui.print_error(f"Invalid configuration: {exc}")
        return 2

    configure_logging(
        level=config.log_level_value,
        log_to_file=config.log_to_file,
        log_dir=config.log_dir,
    )
    service = PatronService(PatronDirectory(), config)

    if args.command == "menu":
        return run_menu(service, ui, args.file)

    path = args.file or config.patrons_file
    try:
        report = service.load(path)
    except OSError as exc:
        ui.print_error(f"Could not read {path}: {exc}")
        return 2

    if args.command == "show":
        ui.print_patrons(service.list_patrons(), title=str(path))
        ui.print_load_report(report, show_skipped=False)
        return 0

    if args.command == "check":
        ui.print_load_report(report)
        return 1 if report.skipped else 0

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
