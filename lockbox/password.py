import secrets, string
from dataclasses import dataclass

from .errors import GenerationError

SYMBOLS = "!@#$%^&*()-_=+[]{};:,.?/\\|"


@dataclass(frozen=True)
class PasswordPolicy:
    length: int = 16
    symbols: bool = False
    uppercase: bool = True
    lowercase: bool = True
    numbers: bool = True
    count: int = 1

    def classes(self) -> list[str]:
        pools = []
        if self.lowercase: pools.append(string.ascii_lowercase)
        if self.uppercase: pools.append(string.ascii_uppercase)
        if self.numbers: pools.append(string.digits)
        if self.symbols: pools.append(SYMBOLS)
        return pools

    def validate(self):
        if self.length < 1:
            raise GenerationError("Password length must be a positive integer.")
        if self.count < 1:
            raise GenerationError("Password count must be a positive integer.")
        pools = self.classes()
        if not pools:
            raise GenerationError(
                "At least one of symbols, uppercase, lowercase or numbers must be enabled."
            )
        if self.length < len(pools):
            raise GenerationError(
                f"Password length {self.length} is too short for {len(pools)} character classes."
            )


def generate_password(policy: PasswordPolicy = PasswordPolicy()) -> str:
    """Return one password with at least one character from each enabled class."""
    policy.validate()
    pools = policy.classes()
    alphabet = "".join(pools)

    parts = [secrets.choice(pool) for pool in pools]
    while len(parts) < policy.length:
        parts.append(secrets.choice(alphabet))
    secrets.SystemRandom().shuffle(parts)
    return "".join(parts)


def generate_passwords(policy: PasswordPolicy = PasswordPolicy()) -> list[str]:
    policy.validate()
    return [generate_password(policy) for _ in range(policy.count)]
