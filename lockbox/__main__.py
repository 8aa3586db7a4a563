"""
lockbox: a local password vault with a command line and an interactive shell.

Storage is a SQLite file; passwords are encrypted with Fernet under a key
derived from the master password (PBKDF2).
Commands:
    add, generate, list, remove, show, update-master, repl
Usage examples:
    python -m lockbox add --service github --username alice --generate --symbols
    python -m lockbox generate --length 24 --count 3
    python -m lockbox list --reveal
    python -m lockbox show --service github --username alice
    python -m lockbox remove --service github --username alice
    python -m lockbox update-master
    python -m lockbox repl --file-name ./vault.db
"""
import sys

from .cli import run
from .logging_config import setup_logging


def main(argv=None) -> int:
    setup_logging()
    try:
        return run(argv)
    except KeyboardInterrupt:
        print("\nAborted by user.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
