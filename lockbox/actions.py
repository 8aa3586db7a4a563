"""
One function per use case. Inputs are already resolved: the vault is open and
every secret has been read, so these can be called directly from tests.
"""
import logging
from dataclasses import replace

from . import password as pw
from .console import Console
from .errors import ValidationError
from .vault import Record, Vault

logger = logging.getLogger(__name__)

MASK = "********"


def add_password(vault: Vault, service: str, username: str | None = None,
                 password: str | None = None, generate: bool = False,
                 policy: pw.PasswordPolicy | None = None) -> str:
    if not service:
        raise ValidationError("Service name is required.")
    if generate:
        # exactly one password, whatever count the policy carries
        password = pw.generate_password(replace(policy or pw.PasswordPolicy(), count=1))
    elif not password:
        raise ValidationError("Provide a password or use --generate.")
    vault.insert_record(service, username, password)
    return password


def list_passwords(console: Console, vault: Vault, show_passwords: bool = False) -> list[Record]:
    records = vault.list_records()
    if not records:
        console.print("No passwords saved yet.")
    for r in records:
        secret = r.password if show_passwords else MASK
        console.print(f"Service: {r.service}, Username: {r.username}, Password: {secret}")
    return records


def remove_password(vault: Vault, service: str, username: str | None = None):
    vault.delete_record(service, username)


def show_password(vault: Vault, service: str, username: str | None = None) -> str:
    return vault.find_record(service, username).password


def update_master_password(vault: Vault, new_master: str):
    if not new_master:
        raise ValidationError("New master password cannot be empty.")
    vault.rekey(new_master)


def generate_password(console: Console, policy: pw.PasswordPolicy) -> list[str]:
    passwords = pw.generate_passwords(policy)
    for p in passwords:
        console.print(p)
    logger.debug("Generated %d password(s) of length %d", len(passwords), policy.length)
    return passwords
