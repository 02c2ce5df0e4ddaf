import logging
import sys

import click

from tzledger.core.device.logging import PROTOCOL, TRACE

lg = logging.getLogger(__name__)


def _parse_settings(ctx, param, values) -> dict[str, str]:
    settings = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got '{item}'")
        settings[key] = value
    return settings


@click.command()
@click.option("-v", "--verbose", is_flag=True, help="TRACE level (raw HID reports and APDUs).")
@click.option("-f", "--file", "file", type=click.Path(exists=True, dir_okay=False),
              help="Run commands from a script file.")
@click.option("-i", "--interactive", is_flag=True,
              help="Open the prompt (after the script, when one is given).")
@click.option("--legacy", is_flag=True,
              help="Start with the legacy instruction set for address and sign.")
@click.option("-o", "--set", "settings", multiple=True, callback=_parse_settings,
              metavar="KEY=VALUE",
              help="Initial setting such as path=... or curve=secp256k1 (repeatable).")
def tzledger(verbose, file, interactive, legacy, settings):
    """Talk to the Tezos application on a Ledger device."""
    logging.basicConfig(
        level=TRACE if verbose else PROTOCOL,
        format="%(levelname)-8s %(name)s: %(message)s",
    )

    from tzledger.app.main import main
    if not main(file=file, interactive=interactive, legacy=legacy, settings=settings):
        sys.exit(1)
