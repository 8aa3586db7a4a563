"""Tests for lockbox.actions: the use cases, called with an open vault."""

import string

import pytest

from lockbox import actions
from lockbox.errors import GenerationError, NotFoundError, ValidationError
from lockbox.password import PasswordPolicy


class TestAdd:
    def test_add_then_show(self, vault):
        actions.add_password(vault, "github", "alice", "secret")
        assert actions.show_password(vault, "github", "alice") == "secret"

    def test_add_requires_password_or_generate(self, vault):
        with pytest.raises(ValidationError):
            actions.add_password(vault, "github", "alice")
        assert vault.list_records() == []

    def test_add_requires_service(self, vault):
        with pytest.raises(ValidationError):
            actions.add_password(vault, "", "alice", "secret")

    def test_add_generated_uses_policy(self, vault):
        policy = PasswordPolicy(length=24, uppercase=False, lowercase=False)
        stored = actions.add_password(vault, "github", "alice", generate=True, policy=policy)
        assert len(stored) == 24
        assert stored.isdigit()
        assert actions.show_password(vault, "github", "alice") == stored

    def test_add_generated_ignores_count(self, vault):
        stored = actions.add_password(vault, "github", "alice", generate=True,
                                      policy=PasswordPolicy(count=5))
        assert len(stored) == 16

    def test_generate_flag_wins_over_literal(self, vault):
        stored = actions.add_password(vault, "github", "alice", "literal", generate=True)
        assert stored != "literal"

    def test_add_generated_empty_alphabet(self, vault):
        policy = PasswordPolicy(uppercase=False, lowercase=False, numbers=False)
        with pytest.raises(GenerationError):
            actions.add_password(vault, "github", "alice", generate=True, policy=policy)
        assert vault.list_records() == []


class TestListShowRemove:
    def test_list_masks_by_default(self, vault, make_console):
        console, _ = make_console()
        actions.add_password(vault, "github", "alice", "secret")
        actions.list_passwords(console, vault)
        out = console.stdout.getvalue()
        assert "Service: github, Username: alice, Password: ********" in out
        assert "secret" not in out

    def test_list_reveals(self, vault, make_console):
        console, _ = make_console()
        actions.add_password(vault, "github", "alice", "secret")
        records = actions.list_passwords(console, vault, show_passwords=True)
        assert "Service: github, Username: alice, Password: secret" in console.stdout.getvalue()
        assert len(records) == 1

    def test_list_empty(self, vault, make_console):
        console, _ = make_console()
        assert actions.list_passwords(console, vault) == []
        assert "No passwords saved yet." in console.stdout.getvalue()

    def test_remove_then_show(self, vault):
        actions.add_password(vault, "github", "alice", "secret")
        actions.remove_password(vault, "github", "alice")
        with pytest.raises(NotFoundError):
            actions.show_password(vault, "github", "alice")

    def test_remove_missing(self, vault):
        actions.add_password(vault, "github", "alice", "secret")
        with pytest.raises(NotFoundError) as exc:
            actions.remove_password(vault, "gitlab", "alice")
        assert "gitlab" in str(exc.value)
        assert len(vault.list_records()) == 1


class TestUpdateMaster:
    def test_empty_new_master(self, vault):
        with pytest.raises(ValidationError):
            actions.update_master_password(vault, "")

    def test_records_survive(self, vault):
        actions.add_password(vault, "github", "alice", "secret")
        actions.update_master_password(vault, "another_master")
        assert actions.show_password(vault, "github", "alice") == "secret"


class TestGenerate:
    def test_writes_one_per_line(self, make_console):
        console, _ = make_console()
        policy = PasswordPolicy(length=12, symbols=True, count=3)
        passwords = actions.generate_password(console, policy)
        lines = console.stdout.getvalue().splitlines()
        assert lines == passwords
        assert len(lines) == 3
        assert all(len(p) == 12 for p in lines)

    def test_only_requested_classes(self, make_console):
        console, _ = make_console()
        policy = PasswordPolicy(length=30, numbers=False, uppercase=False, count=2)
        for p in actions.generate_password(console, policy):
            assert set(p) <= set(string.ascii_lowercase)

    def test_empty_alphabet(self, make_console):
        console, _ = make_console()
        policy = PasswordPolicy(uppercase=False, lowercase=False, numbers=False)
        with pytest.raises(GenerationError):
            actions.generate_password(console, policy)
        assert console.stdout.getvalue() == ""
