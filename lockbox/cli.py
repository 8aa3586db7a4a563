import argparse
import logging

from . import actions
from . import config
from . import password as pw
from . import __version__
from .console import Console
from .errors import LockboxError
from .repl import run_repl
from .vault import Vault

logger = logging.getLogger(__name__)


def positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid positive integer: '{value}'")
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer: '{value}'")
    return n


def policy_from_args(args, count: int = 1) -> pw.PasswordPolicy:
    return pw.PasswordPolicy(length=args.length,
                             symbols=args.symbols,
                             uppercase=args.uppercase,
                             lowercase=args.lowercase,
                             numbers=args.numbers,
                             count=count)


def open_vault(args, console: Console, master: str | None = None) -> Vault:
    path = config.resolve_vault_path(args.file_name)
    master = master or args.master or console.secret("master password")
    return Vault.open(path, master)


def cmd_add(args, console):
    policy = policy_from_args(args)
    if args.generate:
        policy.validate()
    with open_vault(args, console) as vault:
        actions.add_password(vault, args.service, args.username, args.password,
                             generate=args.generate, policy=policy)
    console.print("Password added successfully")


def cmd_generate(args, console):
    passwords = actions.generate_password(console, policy_from_args(args, count=args.count))
    if len(passwords) == 1:
        console.print("Random password generated.")
    else:
        console.print(f"{len(passwords)} random passwords generated.")


def cmd_list(args, console):
    with open_vault(args, console) as vault:
        actions.list_passwords(console, vault, show_passwords=args.show_passwords)


def cmd_remove(args, console):
    with open_vault(args, console) as vault:
        actions.remove_password(vault, args.service, args.username)
    console.print("Password deleted")


def cmd_show(args, console):
    with open_vault(args, console) as vault:
        secret = actions.show_password(vault, args.service, args.username)
    console.print(f"Password: {secret}")


def cmd_update_master(args, console):
    master = args.master or console.secret("master password")
    new_master = args.new_master or console.secret("new master password")
    with open_vault(args, console, master=master) as vault:
        actions.update_master_password(vault, new_master)
    console.print("Master password updated successfully")


def cmd_repl(args, console):
    run_repl(console, config.resolve_vault_path(args.file_name))


def _add_vault_options(s, master: bool = True):
    s.add_argument("-f", "--file-name", help=f"Vault file (or set LOCKBOX_FILE). Default: {config.DEFAULT_FILE_NAME}")
    if master:
        s.add_argument("-m", "--master", help="Master password (prompted with hidden input if omitted)")


def _add_class_options(s, symbols_short: bool):
    s.add_argument("-l", "--length", type=positive_int, default=16)
    if symbols_short:
        s.add_argument("-s", "--symbols", action="store_true", help="Include symbols")
        s.add_argument("-U", "--uppercase", action=argparse.BooleanOptionalAction, default=True)
        s.add_argument("-u", "--lowercase", action=argparse.BooleanOptionalAction, default=True)
        s.add_argument("-n", "--numbers", action=argparse.BooleanOptionalAction, default=True)
    else:
        s.add_argument("--symbols", action="store_true", help="Include symbols")
        s.add_argument("--uppercase", action=argparse.BooleanOptionalAction, default=True)
        s.add_argument("--lowercase", action=argparse.BooleanOptionalAction, default=True)
        s.add_argument("--numbers", action=argparse.BooleanOptionalAction, default=True)


def _add_entry_options(s):
    s.add_argument("-s", "--service", required=True)
    s.add_argument("-u", "--username", "--user", dest="username")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lockbox", description="Local password vault")
    parser.add_argument("--version", action="version", version=f"lockbox {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    # add
    s = sub.add_parser("add", help="Add a password (encrypts and saves)")
    _add_entry_options(s)
    s.add_argument("-p", "--password")
    s.add_argument("-g", "--generate", action="store_true", help="Auto-generate password")
    _add_class_options(s, symbols_short=False)
    _add_vault_options(s)
    s.set_defaults(func=cmd_add)

    # generate
    s = sub.add_parser(
        "generate",
        help="Generate a random password "
             "[default: length=16, symbols=false, uppercase=true, lowercase=true, numbers=true, count=1]")
    _add_class_options(s, symbols_short=True)
    s.add_argument("-c", "--count", type=positive_int, default=1)
    s.set_defaults(func=cmd_generate)

    # list
    s = sub.add_parser("list", help="List saved passwords")
    s.add_argument("-s", "--show-passwords", "--show", "--reveal", dest="show_passwords",
                   action="store_true", help="Reveal passwords instead of masking them")
    _add_vault_options(s)
    s.set_defaults(func=cmd_list)

    # remove
    s = sub.add_parser("remove", help="Remove a saved password")
    _add_entry_options(s)
    _add_vault_options(s)
    s.set_defaults(func=cmd_remove)

    # show
    s = sub.add_parser("show", help="Decrypt and show a saved password")
    _add_entry_options(s)
    _add_vault_options(s)
    s.set_defaults(func=cmd_show)

    # update-master
    s = sub.add_parser("update-master", help="Re-encrypt the vault under a new master password")
    s.add_argument("-n", "--new-master", help="New master password (prompted if omitted)")
    _add_vault_options(s)
    s.set_defaults(func=cmd_update_master)

    # repl
    s = sub.add_parser("repl", help="Interactive session")
    _add_vault_options(s, master=False)
    s.set_defaults(func=cmd_repl)

    return parser


def dispatch(args, console: Console) -> int:
    """Run one parsed command. Every LockboxError is rendered, never raised."""
    try:
        args.func(args, console)
    except LockboxError as e:
        logger.info("%s failed with %s", args.command, type(e).__name__)
        console.error(e)
        return 1
    return 0


def run(argv=None, console: Console | None = None) -> int:
    args = build_parser().parse_args(argv)
    return dispatch(args, console or Console())
