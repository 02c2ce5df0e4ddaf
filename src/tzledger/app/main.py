import logging
from importlib.metadata import PackageNotFoundError, version

from tzledger.app import tezos

lg = logging.getLogger(__name__)


def main(
    file: str | None = None,
    interactive: bool = False,
    legacy: bool = False,
    settings: dict[str, str] | None = None,
) -> bool:
    try:
        lg.debug("tzledger %s", version("tzledger"))
    except PackageNotFoundError:
        lg.debug("tzledger (not installed)")
    return tezos.session(file=file, interactive=interactive, legacy=legacy,
                         settings=settings or {})
