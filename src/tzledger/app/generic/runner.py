"""Runner: holds session state and dispatches commands."""

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable
from functools import partial
from types import ModuleType

try:
    import readline
except ImportError:
    readline = None  # type: ignore[assignment]

from tzledger.app.generic.deviceinfo import DeviceInfo
from tzledger.core.device import TransportError

lg = logging.getLogger(__name__)

EXIT_COMMANDS = frozenset({"quit", "exit"})


class ExitRequested(Exception):
    """Raised by quit/exit."""


class BreakRequested(Exception):
    """Raised when a 'break' command is encountered in a script."""


def _parse_value(s: str) -> int | str | bool:
    """Parse a command argument value.

    Returns bool for yes/no literals, int for decimal or 0x-prefixed hex,
    otherwise the raw string.
    """
    low = s.lower()
    if low in ("true", "yes"):
        return True
    if low in ("false", "no"):
        return False
    try:
        return int(s, 0)
    except ValueError:
        return s


def _split(line: str) -> list[str]:
    # apostrophes mark hardened path indices, so only double quotes group
    lexer = shlex.shlex(line, posix=True)
    lexer.whitespace_split = True
    lexer.quotes = '"'
    lexer.commenters = ""
    return list(lexer)


def parse_command(line: str) -> tuple[str, dict[str, str]] | None:
    """Parse a command line into (name, raw_kwargs).

    Returns None for blank/comment lines. Values are kept as raw strings;
    the caller decides how to convert them. A bare word is a true flag.
    """
    stripped = line.split("#", 1)[0].strip()
    if not stripped:
        return None
    parts = _split(stripped)
    name = parts[0]
    kwargs: dict[str, str] = {}
    for part in parts[1:]:
        if "=" in part:
            k, v = part.split("=", 1)
            kwargs[k] = v
        else:
            kwargs[part] = "true"
    return name, kwargs


class Runner:
    """Holds session state and dispatches commands."""

    prompt = "tzledger> "
    break_prompt = "tzledger (break)> "

    def __init__(self, terminal, command_modules: list[ModuleType]) -> None:
        self._terminal = terminal
        self._info = DeviceInfo()
        self._stop_on_error = True
        self._matches: list[str] = []

        self._commands: dict[str, Callable[..., bool]] = {}
        self._descriptions: dict[str, str] = {}
        self._params: dict[str, list[str]] = {}
        self._raw_commands: set[str] = {"set"}
        self._settings: dict[str, Callable[[Runner, str], None]] = {
            "log": self._set_log,
            "stop_on_error": self._set_stop_on_error,
        }
        for mod in command_modules:
            for name in dir(mod):
                if not name.startswith("cmd_"):
                    continue
                func = getattr(mod, name)
                self._register(name[4:], partial(func, self), func)
                params = [p for p in inspect.signature(func).parameters if p != "runner"]
                if params:
                    self._params[name[4:]] = params
            self._raw_commands |= getattr(mod, "_raw_commands", set())
            self._settings.update(getattr(mod, "_settings", {}))

        for attr in dir(self):
            if attr.startswith("cmd_"):
                method = getattr(self, attr)
                self._register(attr[4:], method, method)

    def _register(self, name: str, command: Callable[..., bool], source: Callable) -> None:
        self._commands[name] = command
        self._descriptions[name] = (source.__doc__ or "").split("\n")[0].strip()

    # --- Settings ---
    # Handlers raise ValueError on a bad value; execute() reports it.

    def _set_log(self, _runner, value: str) -> None:
        name = value.upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f"unknown log level: {value}")
        logging.getLogger().setLevel(level)
        lg.info("log = %s", name)

    def _set_stop_on_error(self, _runner, value: str) -> None:
        self._stop_on_error = value.lower() in ("true", "yes", "1")
        lg.info("stop_on_error = %s", self._stop_on_error)

    # --- Commands ---

    def cmd_help(self, command: str = "") -> bool:
        """List commands, or the parameters of one command."""
        if command:
            if command not in self._descriptions:
                lg.error("unknown command: %s", command)
                return False
            params = " ".join(f"{p}=" for p in self._params.get(command, []))
            lg.info("%s %s\n  %s", command, params, self._descriptions[command])
            return True
        width = max(map(len, self._descriptions), default=0) + 2
        lg.info("Commands:\n%s", "\n".join(
            f"  {name.ljust(width)}{self._descriptions[name]}"
            for name in sorted(self._descriptions)
        ))
        return True

    def cmd_set(self, **kwargs: str) -> bool:
        """Change settings: log, stop_on_error, and those of the loaded command sets."""
        unknown = sorted(set(kwargs) - set(self._settings))
        for key in unknown:
            lg.warning("unknown setting: %s", key)
        for key, value in kwargs.items():
            if key not in unknown:
                self._settings[key](self, value)
        return not unknown

    # --- Execution ---

    def _convert(self, name: str, raw_kwargs: dict[str, str]) -> dict[str, object]:
        if name in self._raw_commands:
            return dict(raw_kwargs)
        return {k: _parse_value(v) for k, v in raw_kwargs.items()}

    def execute(self, line: str) -> bool:
        """Parse and execute one command line. Returns True on success.

        Raises ExitRequested for quit/exit and BreakRequested for break;
        every other failure is logged and reported as False.
        """
        parsed = parse_command(line)
        if parsed is None:
            return True
        name, raw_kwargs = parsed
        if name in EXIT_COMMANDS:
            raise ExitRequested(name)
        if name == "break":
            raise BreakRequested
        cmd = self._commands.get(name)
        if cmd is None:
            lg.error("unknown command: %s", name)
            return False
        try:
            return bool(cmd(**self._convert(name, raw_kwargs)))
        except TypeError as exc:
            lg.error("bad arguments for '%s': %s", name, exc)
        except TransportError as exc:
            lg.error("device link failed during '%s': %s", name, exc)
        except Exception as exc:
            lg.error("command '%s' failed: %s", name, exc)
        return False

    def _candidates(self, parts: list[str], at_word_start: bool) -> list[str]:
        if not parts or (len(parts) == 1 and not at_word_start):
            return sorted(self._commands) + sorted(EXIT_COMMANDS)
        keys = self._settings if parts[0] == "set" else self._params.get(parts[0], [])
        used = {p.split("=", 1)[0] for p in parts[1:]}
        return [k + "=" for k in keys if k not in used]

    def _complete(self, text: str, state: int) -> str | None:
        """Readline completer for command, parameter and setting names."""
        if state == 0:
            buf = readline.get_line_buffer()
            options = self._candidates(buf.split(), buf.endswith(" "))
            self._matches = [o for o in options if o.startswith(text)]
        if state < len(self._matches):
            return self._matches[state]
        return None

    def _repl(self, prompt: str, leave_on: frozenset[str] = EXIT_COMMANDS) -> str | None:
        """Read and execute lines until one of ``leave_on`` is typed.

        Returns that command, "quit" when an exit command ends the REPL,
        or None on EOF/Ctrl-C.
        """
        if readline is not None:
            readline.set_completer(self._complete)
            readline.set_completer_delims(" ")
            readline.parse_and_bind("tab: complete")
        while True:
            try:
                line = input(prompt)
            except (EOFError, KeyboardInterrupt):
                print()
                return None
            parsed = parse_command(line)
            name = parsed[0] if parsed else None
            if name in leave_on:
                return name
            try:
                self.execute(line)
            except ExitRequested:
                return "quit"
            except BreakRequested:
                lg.warning("already in a break")

    def run_file(self, path: str) -> bool:
        """Execute a script file. Returns True if every line succeeded.

        'break' opens a nested REPL; 'continue' resumes the script and any
        exit command abandons it. With stop_on_error the first failing line
        ends the run.
        """
        with open(path) as f:
            lines = f.read().splitlines()
        ok_all = True
        for lineno, line in enumerate(lines, 1):
            try:
                ok = self.execute(line)
            except ExitRequested:
                break
            except BreakRequested:
                lg.info("break at line %d, type 'continue' to resume", lineno)
                if self._repl(self.break_prompt, EXIT_COMMANDS | {"continue"}) != "continue":
                    return False
                continue
            if ok:
                continue
            ok_all = False
            if self._stop_on_error:
                lg.error("stopped at line %d: %s", lineno, line.strip())
                return False
        return ok_all

    def run_interactive(self) -> None:
        lg.info("interactive mode, type 'help' for commands, 'quit' to exit")
        self._repl(self.prompt)
