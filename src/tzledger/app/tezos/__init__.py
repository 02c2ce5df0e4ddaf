from tzledger.app.tezos.runner import TezosRunner
from tzledger.app.tezos.session import session

__all__ = ["TezosRunner", "session"]
