"""Tezos application runner.

Extends the base Runner with the default derivation path, curve and app
generation used by the signing and key commands. Combines the session
commands (connect/disconnect/apdu) with the Tezos command modules.
"""

from __future__ import annotations

from tzledger.app.generic.commands import COMMAND_MODULES as GENERIC_MODULES
from tzledger.app.generic.runner import Runner
from tzledger.app.tezos.commands import COMMAND_MODULES as TEZOS_MODULES
from tzledger.app.tezos.deviceinfo import TezosDeviceInfo
from tzledger.core.tezos import Curve, Generation, TezosTerminal
from tzledger.core.tezos.messages import DEFAULT_PATH


class TezosRunner(Runner):
    """Runner for the Tezos application."""

    def __init__(self, terminal: TezosTerminal, legacy: bool = False) -> None:
        super().__init__(terminal, GENERIC_MODULES + TEZOS_MODULES)
        self._info = TezosDeviceInfo()
        self._path = DEFAULT_PATH
        self._curve = Curve.ED25519
        self._generation = Generation.LEGACY if legacy else Generation.MODERN
