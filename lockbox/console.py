import sys
from getpass import getpass

from .errors import EndOfInput


class Console:
    """Input source, output sink and hidden prompt used by commands and the REPL."""

    def __init__(self, stdin=None, stdout=None, prompt_secret=None):
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.prompt_secret = prompt_secret or getpass

    def print(self, message: str = ""):
        self.stdout.write(f"{message}\n")
        self.stdout.flush()

    def error(self, err):
        self.print(f"Error: {err}")

    def readline(self, prompt: str = "") -> str | None:
        """Read one line without its newline, or None at end of input."""
        if prompt:
            self.stdout.write(prompt)
            self.stdout.flush()
        line = self.stdin.readline()
        if line == "":
            return None
        return line.rstrip("\r\n")

    def secret(self, label: str) -> str:
        try:
            return self.prompt_secret(f"Enter {label}: ")
        except EOFError:
            raise EndOfInput() from None
