"""Tezos device session.

Builds HIDLink -> Agent -> TezosTerminal -> TezosRunner, applies the
initial settings, then runs the script file and/or the prompt with the
device connected.
"""

from __future__ import annotations

import logging

from tzledger.app.tezos.runner import TezosRunner
from tzledger.core.base import Agent
from tzledger.core.device import HIDLink
from tzledger.core.tezos import TezosTerminal

lg = logging.getLogger(__name__)


def session(
    file: str | None = None,
    interactive: bool = False,
    legacy: bool = False,
    settings: dict[str, str] | None = None,
) -> bool:
    """Open a Tezos device session. Returns False if any step failed."""
    terminal = TezosTerminal(Agent(HIDLink()))
    runner = TezosRunner(terminal, legacy=legacy)

    # settings are validated before the device is touched
    if settings:
        args = " ".join(f'{k}="{v}"' for k, v in settings.items())
        if not runner.execute(f"set {args}"):
            return False

    try:
        terminal.connect()
    except Exception as exc:
        terminal.on_error(exc)
        return False
    try:
        ok = runner.run_file(file) if file else True
        if interactive or not file:
            runner.run_interactive()
        return ok
    except Exception as exc:
        terminal.on_error(exc)
        return False
    finally:
        terminal.disconnect()
