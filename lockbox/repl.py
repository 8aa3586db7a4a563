"""
Interactive session over the same actions as the command line.

The loop is a small state machine: each turn prints the menu, reads one
selection and either runs an action (back to MENU) or stops (EXITED).
End of input anywhere counts as "exit".
"""
import logging
from enum import Enum

from . import actions
from . import password as pw
from .console import Console
from .errors import EndOfInput, LockboxError, ValidationError
from .vault import Vault

logger = logging.getLogger(__name__)

MENU = [
    ("add", "add password"),
    ("generate", "generate random password"),
    ("list", "list passwords"),
    ("remove", "remove password"),
    ("show", "show password"),
    ("update master", "update master password"),
    ("exit", "exit"),
]


class State(Enum):
    MENU = "menu"
    EXITED = "exited"


def menu_line() -> str:
    return " ".join(f"[{i}] {label}" for i, (_, label) in enumerate(MENU, start=1))


def parse_selection(line: str) -> str | None:
    choice = " ".join(line.strip().lower().replace("-", " ").replace("_", " ").split())
    if choice.isdecimal():
        index = int(choice)
        if 1 <= index <= len(MENU):
            return MENU[index - 1][0]
        return None
    for name, label in MENU:
        if choice in (name, label):
            return name
    return None


class Session:
    """Vault path plus the handle, opened on first use and kept until exit."""

    def __init__(self, console: Console, path: str):
        self.console = console
        self.path = path
        self.vault: Vault | None = None

    def ensure_vault(self) -> Vault:
        if self.vault is None:
            master = self.console.secret("master password")
            self.vault = Vault.open(self.path, master)
        return self.vault

    def close(self):
        if self.vault is not None:
            self.vault.close()
            self.vault = None

    def ask(self, prompt: str) -> str:
        line = self.console.readline(prompt)
        if line is None:
            raise EndOfInput()
        return line.strip()

    def ask_required(self, prompt: str) -> str:
        value = self.ask(prompt)
        if not value:
            raise ValidationError(f"{prompt.rstrip(': ')} is required.")
        return value

    def ask_bool(self, prompt: str, default: bool) -> bool:
        hint = "[Y/n]" if default else "[y/N]"
        answer = self.ask(f"{prompt} {hint}: ").lower()
        if not answer:
            return default
        if answer in ("y", "yes"):
            return True
        if answer in ("n", "no"):
            return False
        raise ValidationError(f"Expected y or n, got '{answer}'.")

    def ask_int(self, prompt: str, default: int) -> int:
        answer = self.ask(f"{prompt} [{default}]: ")
        if not answer:
            return default
        try:
            value = int(answer)
        except ValueError:
            raise ValidationError(f"'{answer}' is not a number.")
        if value < 1:
            raise ValidationError(f"{prompt} must be a positive integer.")
        return value

    def ask_policy(self, with_count: bool) -> pw.PasswordPolicy:
        defaults = pw.PasswordPolicy()
        return pw.PasswordPolicy(
            length=self.ask_int("Length", defaults.length),
            symbols=self.ask_bool("Include symbols?", defaults.symbols),
            uppercase=self.ask_bool("Include uppercase?", defaults.uppercase),
            lowercase=self.ask_bool("Include lowercase?", defaults.lowercase),
            numbers=self.ask_bool("Include numbers?", defaults.numbers),
            count=self.ask_int("Count", defaults.count) if with_count else 1,
        )


def _add(session: Session):
    vault = session.ensure_vault()
    service = session.ask_required("Service: ")
    username = session.ask("Username (optional): ") or None
    generate = session.ask_bool("Generate password?", False)
    if generate:
        policy = session.ask_policy(with_count=False)
        password = None
    else:
        policy = None
        password = session.console.secret("password")
    actions.add_password(vault, service, username, password, generate=generate, policy=policy)
    session.console.print("Password added successfully")


def _generate(session: Session):
    policy = session.ask_policy(with_count=True)
    passwords = actions.generate_password(session.console, policy)
    if len(passwords) == 1:
        session.console.print("Random password generated.")
    else:
        session.console.print(f"{len(passwords)} random passwords generated.")


def _list(session: Session):
    vault = session.ensure_vault()
    show = session.ask_bool("Show passwords?", False)
    actions.list_passwords(session.console, vault, show_passwords=show)


def _remove(session: Session):
    vault = session.ensure_vault()
    service = session.ask_required("Service: ")
    username = session.ask("Username (optional): ") or None
    actions.remove_password(vault, service, username)
    session.console.print("Password deleted")


def _show(session: Session):
    vault = session.ensure_vault()
    service = session.ask_required("Service: ")
    username = session.ask("Username (optional): ") or None
    secret = actions.show_password(vault, service, username)
    session.console.print(f"Password: {secret}")


def _update_master(session: Session):
    vault = session.ensure_vault()
    new_master = session.console.secret("new master password")
    actions.update_master_password(vault, new_master)
    session.console.print("Master password updated successfully")


HANDLERS = {
    "add": _add,
    "generate": _generate,
    "list": _list,
    "remove": _remove,
    "show": _show,
    "update master": _update_master,
}


def step(session: Session) -> State:
    console = session.console
    console.print(menu_line())
    line = console.readline("> ")
    if line is None:
        return State.EXITED

    selection = parse_selection(line)
    if selection is None:
        console.error(f"Invalid selection '{line.strip()}'. Choose 1-{len(MENU)}.")
        return State.MENU
    if selection == "exit":
        return State.EXITED

    try:
        HANDLERS[selection](session)
    except EndOfInput:
        return State.EXITED
    except LockboxError as e:
        logger.info("repl %s failed with %s", selection, type(e).__name__)
        console.error(e)
    return State.MENU


def run_repl(console: Console, path: str):
    session = Session(console, path)
    console.print("Welcome to LOCKBOX!")
    state = State.MENU
    try:
        while state is not State.EXITED:
            state = step(session)
    finally:
        session.close()
    console.print("Bye.")
