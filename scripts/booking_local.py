#!/usr/bin/env python3
"""
Interactive local appointment form harness (no HTTP server).

Usage:
  python3 scripts/booking_local.py [patient|employee]

What it does:
- Builds the same controller the API uses, wired to the configured clinic API
  (the in-memory mock unless CLINIC_API_BASE_URL is set)
- Lets you set fields step by step and prints the form after each change
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from clinic_booking.application.exceptions import UnknownFieldError
from clinic_booking.application.use_cases.cascading_selection import CascadingSelectionController
from clinic_booking.domain.entities.form_snapshot import FormSnapshot
from clinic_booking.wiring.dependencies import build_controller


def _print_header(kind: str) -> None:
    print("\nLocal Appointment Form")
    print("-" * 60)
    print(f"form: {kind}")
    print("Commands: set <field> <value>, clear <field>, submit, show, /new, /quit, /help")
    print("-" * 60)


def _print_snapshot(snapshot: FormSnapshot) -> None:
    print(f"\n--- Step {snapshot.current_step + 1} ---")
    for view in snapshot.fields:
        marker = "*" if view.required else " "
        state = "locked" if view.locked else view.status
        print(f"{marker} {view.name:<16} [{state}] {view.label}: {view.value if view.value is not None else ''}")
        for option in view.options:
            print(f"      {option.value}: {option.label}")
        if view.error:
            print(f"      ! {view.error}")
    if snapshot.general_error:
        print(f"\n!! {snapshot.general_error}")
    if snapshot.last_navigation:
        nav = snapshot.last_navigation
        print(f"\n-> {nav.route} {nav.params} {nav.flash or ''}")


def _parse_value(raw: str) -> object:
    return int(raw) if raw.isdigit() else raw


async def _prompt(text: str) -> str:
    return await asyncio.to_thread(input, text)


async def run(kind: str) -> None:
    controller: CascadingSelectionController = build_controller(kind)
    _print_header(kind)
    await controller.wait_idle()

    while True:
        try:
            line = (await _prompt("\n> ")).strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not line:
            continue

        cmd, _, rest = line.partition(" ")
        cmd = cmd.lower()
        if cmd in ("/quit", "/exit"):
            print("Bye!")
            return
        if cmd == "/help":
            print("Commands:")
            print("  set <field> <value> -> set a field (e.g. set date 2025-01-10)")
            print("  clear <field>       -> empty a field and everything after it")
            print("  submit              -> submit the form")
            print("  show                -> print the form")
            print("  /new                -> start over")
            print("  /quit               -> exit")
            continue
        if cmd == "/new":
            controller.reset()
            await controller.wait_idle()
            print("Form reset.")
            continue
        if cmd == "show":
            _print_snapshot(controller.snapshot())
            continue
        if cmd == "submit":
            await controller.wait_idle()
            outcome = await controller.submit()
            print(f"submit: {outcome.status}")
            _print_snapshot(controller.snapshot())
            continue
        if cmd in ("set", "clear"):
            name, _, raw = rest.strip().partition(" ")
            value = None if cmd == "clear" else _parse_value(raw.strip())
            try:
                accepted = controller.set_field(name, value)
            except UnknownFieldError as e:
                print(f"ERROR: {e}")
                continue
            if not accepted:
                print(f"'{name}' is locked until the earlier steps are filled.")
                continue
            await controller.wait_idle()
            _print_snapshot(controller.snapshot())
            continue

        print("Unknown command, try /help")


def main() -> None:
    kind = sys.argv[1] if len(sys.argv) > 1 else "patient"
    asyncio.run(run(kind))


if __name__ == "__main__":
    main()
