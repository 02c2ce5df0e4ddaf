"""Tezos wallet and baking commands.

``address`` and ``sign`` follow the runner generation (``set legacy=``);
the other commands use the current instruction set only.
"""

from __future__ import annotations

import logging

from tzledger.app.tezos.commands.state import check, parse_flag, resolve_key
from tzledger.core.tezos import (
    AuthorizeBakingMessage,
    DeauthorizeBakingMessage,
    Generation,
    GetAddressMessage,
    GetAppInfoMessage,
    GetVersionMessage,
    LegacyGetPublicKeyMessage,
    LegacySignMessage,
    MessageKind,
    QueryAuthKeyMessage,
    SignBakerMessage,
    SignMessage,
)

lg = logging.getLogger(__name__)

# Commands that receive raw string kwargs (no auto-conversion).
_raw_commands: set[str] = {"address", "sign", "sign_baker", "authorize"}


def cmd_version(runner) -> bool:
    """Read the application version."""
    result = runner._terminal.send(GetVersionMessage())
    if not check("GET VERSION", result):
        return False
    runner._info.version = f"{result.major}.{result.minor}.{result.patch}"
    lg.info(
        "version %s%s, locked=%s, target %s",
        runner._info.version, " (test mode)" if result.test_mode else "",
        result.device_locked, result.target_id,
    )
    return True


def cmd_app_info(runner) -> bool:
    """Read name, version and flags of the running application."""
    result = runner._terminal.send(GetAppInfoMessage())
    if not check("APP INFO", result):
        return False
    runner._info.app_name = result.app_name
    runner._info.app_version = result.app_version
    runner._info.flags = result.flags_value
    lg.info("%s %s flags=%02X", result.app_name, result.app_version, result.flags_value)
    return True


def cmd_address(runner, *, path: str = "", curve: str = "", show: str = "false") -> bool:
    """Read the public key and address (show=true to confirm on device)."""
    path, crv = resolve_key(runner, path, curve)
    if runner._generation is Generation.LEGACY:
        msg = LegacyGetPublicKeyMessage(path=path, curve=crv, prompt=parse_flag(show))
    else:
        msg = GetAddressMessage(path=path, curve=crv, show=parse_flag(show))
    result = runner._terminal.send(msg)
    if not check("GET ADDRESS", result):
        return False
    runner._info.public_key = result.public_key
    runner._info.address = result.address
    lg.info("%s %s", result.address, result.public_key.hex())
    return True


def _sign(runner, msg, label: str) -> bool:
    result = runner._terminal.send(msg)
    if not check(label, result):
        return False
    if result.signature is None:
        lg.error("%s returned no signature", label)
        return False
    runner._info.signature = result.signature
    if result.hash:
        lg.info("hash      %s", result.hash.hex())
    lg.info("signature %s", result.signature.hex())
    return True


def cmd_sign(runner, *, data: str, kind: str = "operation", path: str = "",
             curve: str = "") -> bool:
    """Sign a message (data=HEX, kind=operation|michelson|delegation|...)."""
    path, crv = resolve_key(runner, path, curve)
    message = bytes.fromhex(data)
    if runner._generation is Generation.LEGACY:
        msg = LegacySignMessage(message=message, path=path, curve=crv, kind=MessageKind(kind))
    else:
        msg = SignMessage(message=message, path=path, curve=crv, kind=MessageKind(kind))
    return _sign(runner, msg, "SIGN")


def cmd_sign_baker(runner, *, data: str, kind: str = "endorsement", path: str = "",
                   curve: str = "") -> bool:
    """Sign a block, endorsement or delegation with the baking key."""
    path, crv = resolve_key(runner, path, curve)
    msg = SignBakerMessage(
        message=bytes.fromhex(data), path=path, curve=crv, kind=MessageKind(kind),
    )
    return _sign(runner, msg, "BAKER SIGN")


def cmd_authorize(runner, *, path: str = "", curve: str = "") -> bool:
    """Authorize a key for baking (confirmed on the device)."""
    path, crv = resolve_key(runner, path, curve)
    result = runner._terminal.send(AuthorizeBakingMessage(path=path, curve=crv))
    if not check("AUTHORIZE BAKING", result):
        return False
    runner._info.authorized_path = path
    lg.info("authorized %s (%s)", result.address, path)
    return True


def cmd_deauthorize(runner) -> bool:
    """Remove the baking authorization."""
    result = runner._terminal.send(DeauthorizeBakingMessage())
    if not check("DEAUTHORIZE BAKING", result):
        return False
    runner._info.authorized_path = ""
    return True


def cmd_query_auth_key(runner, *, confirm: bool = False) -> bool:
    """Read which key is authorized for baking."""
    result = runner._terminal.send(QueryAuthKeyMessage(confirm=bool(confirm)))
    if not check("QUERY AUTH KEY", result):
        return False
    runner._info.authorized_path = result.path
    lg.info("authorized key: %s %s", result.curve.name if result.curve is not None else "?", result.path)
    return True
