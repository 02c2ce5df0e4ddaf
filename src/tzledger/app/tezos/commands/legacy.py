"""Commands of the legacy instruction set."""

from __future__ import annotations

import logging

from tzledger.app.tezos.commands.state import check, parse_flag, resolve_key
from tzledger.core.tezos import (
    LegacyAuthorizeBakingMessage,
    LegacyDeauthorizeBakingMessage,
    LegacyGetGitMessage,
    LegacyGetPublicKeyMessage,
    LegacyGetVersionMessage,
    LegacyGetWatermarkMessage,
    LegacyHMACMessage,
    LegacyQueryAuthKeyMessage,
    LegacyResetWatermarkMessage,
    LegacySetupMessage,
    LegacySignMessage,
    MessageKind,
)
from tzledger.core.tezos.messages import SIGN_WITH_HASH

lg = logging.getLogger(__name__)

# Commands that receive raw string kwargs (no auto-conversion).
_raw_commands: set[str] = {"public_key", "legacy_authorize", "setup", "hmac", "legacy_sign"}


def cmd_legacy_version(runner) -> bool:
    """Read the legacy version and app variant."""
    result = runner._terminal.send(LegacyGetVersionMessage())
    if not check("LEGACY VERSION", result):
        return False
    runner._info.version = f"{result.major}.{result.minor}.{result.patch}"
    runner._info.baking = result.baking
    lg.info("version %s %s", runner._info.version, "baking" if result.baking else "wallet")
    return True


def cmd_git(runner) -> bool:
    """Read the commit the application was built from."""
    result = runner._terminal.send(LegacyGetGitMessage())
    if not check("GIT", result):
        return False
    runner._info.commit_hash = result.commit_hash
    lg.info("git %s", result.commit_hash)
    return True


def cmd_public_key(runner, *, path: str = "", curve: str = "", prompt: str = "false") -> bool:
    """Read a public key (prompt=true to confirm on device)."""
    path, crv = resolve_key(runner, path, curve)
    result = runner._terminal.send(
        LegacyGetPublicKeyMessage(path=path, curve=crv, prompt=parse_flag(prompt))
    )
    if not check("PUBLIC KEY", result):
        return False
    runner._info.public_key = result.public_key
    runner._info.address = result.address
    lg.info("%s %s", result.address, result.public_key.hex())
    return True


def cmd_legacy_authorize(runner, *, path: str = "", curve: str = "") -> bool:
    """Authorize a key for baking through the legacy instruction."""
    path, crv = resolve_key(runner, path, curve)
    result = runner._terminal.send(LegacyAuthorizeBakingMessage(path=path, curve=crv))
    if not check("LEGACY AUTHORIZE BAKING", result):
        return False
    runner._info.authorized_path = path
    lg.info("authorized %s (%s)", result.address, path)
    return True


def cmd_legacy_deauthorize(runner) -> bool:
    """Remove the baking authorization through the legacy instruction."""
    result = runner._terminal.send(LegacyDeauthorizeBakingMessage())
    if not check("LEGACY DEAUTHORIZE", result):
        return False
    runner._info.authorized_path = ""
    return True


def cmd_legacy_query_auth_key(runner, *, confirm: bool = False, with_curve: bool = True) -> bool:
    """Read the authorized baking key (with_curve=false for the path-only reply)."""
    result = runner._terminal.send(
        LegacyQueryAuthKeyMessage(confirm=bool(confirm), with_curve=bool(with_curve))
    )
    if not check("LEGACY QUERY AUTH KEY", result):
        return False
    runner._info.authorized_path = result.path
    curve = result.curve.name if result.curve is not None else "-"
    lg.info("authorized key: %s %s", curve, result.path)
    return True

def cmd_reset_watermark(runner, *, level: int) -> bool:
    """Reset the main high watermark to level."""
    result = runner._terminal.send(LegacyResetWatermarkMessage(level=level))
    return check("RESET", result)


def cmd_watermark(runner, *, all: bool = False) -> bool:
    """Read the main high watermark (all=true for main, test and chain id)."""
    result = runner._terminal.send(LegacyGetWatermarkMessage(all=bool(all)))
    if not check("QUERY HWM", result):
        return False
    runner._info.watermarks = {"main": result.main, "test": result.test, "chain_id": result.chain_id}
    lg.info("main=%s test=%s chain_id=%s", result.main, result.test, result.chain_id)
    return True


def cmd_setup(runner, *, main: str, test: str, chain_id: str, path: str = "",
              curve: str = "") -> bool:
    """Set up baking with initial watermarks (main, test, chain_id)."""
    path, crv = resolve_key(runner, path, curve)
    msg = LegacySetupMessage(
        main=int(main, 0), test=int(test, 0), chain_id=int(chain_id, 0), path=path, curve=crv,
    )
    result = runner._terminal.send(msg)
    if not check("SETUP", result):
        return False
    runner._info.authorized_path = path
    runner._info.public_key = result.public_key
    runner._info.address = result.address
    lg.info("baking set up for %s", result.address)
    return True


def cmd_hmac(runner, *, data: str, path: str = "", curve: str = "") -> bool:
    """HMAC data (hex) with a key derived from path."""
    path, crv = resolve_key(runner, path, curve)
    result = runner._terminal.send(
        LegacyHMACMessage(message=bytes.fromhex(data), path=path, curve=crv)
    )
    if not check("HMAC", result):
        return False
    lg.info("hmac %s", result.hmac.hex())
    return True


def cmd_legacy_sign(runner, *, data: str, kind: str = "operation",
                    variant: str = SIGN_WITH_HASH, path: str = "", curve: str = "") -> bool:
    """Sign with a legacy instruction (variant=sign|with_hash|unsafe)."""
    path, crv = resolve_key(runner, path, curve)
    result = runner._terminal.send(LegacySignMessage(
        message=bytes.fromhex(data), path=path, curve=crv, kind=MessageKind(kind),
        variant=variant,
    ))
    if not check("LEGACY SIGN", result):
        return False
    if result.signature is None:
        lg.error("LEGACY SIGN returned no signature")
        return False
    runner._info.signature = result.signature
    lg.info("signature %s", result.signature.hex())
    return True
