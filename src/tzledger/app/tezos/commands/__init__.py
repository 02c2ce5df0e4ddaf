from tzledger.app.tezos.commands import legacy, state, wallet

COMMAND_MODULES = [state, wallet, legacy]
