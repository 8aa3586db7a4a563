"""
Shared fixtures: fast key derivation, temporary vaults and a scripted console.
"""

from __future__ import annotations

import io

import pytest

from lockbox import crypto
from lockbox.console import Console
from lockbox.vault import Vault

MASTER = "test_master_password"


class ScriptedSecrets:
    """Stands in for getpass: returns queued answers (raising queued exceptions) and records the prompts."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        if not self.answers:
            raise AssertionError(f"unexpected secret prompt: {prompt!r}")
        answer = self.answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer


@pytest.fixture(autouse=True)
def fast_kdf(monkeypatch):
    monkeypatch.setattr(crypto, "DEFAULT_KDF_ITERS", 1_000)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ["LOCKBOX_FILE", "LOCKBOX_LOG_LEVEL", "LOCKBOX_LOG_FILE"]:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def vault_path(tmp_path):
    return str(tmp_path / "vault.db")


@pytest.fixture
def vault(vault_path):
    v = Vault.open(vault_path, MASTER)
    yield v
    v.close()


@pytest.fixture
def make_console():
    def _make(stdin: str = "", secrets=()):
        prompt = ScriptedSecrets(*secrets)
        console = Console(stdin=io.StringIO(stdin), stdout=io.StringIO(), prompt_secret=prompt)
        return console, prompt
    return _make
