from tzledger.app.generic.commands import session

COMMAND_MODULES = [session]
