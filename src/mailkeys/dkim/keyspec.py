"""Key parameters and the artifact file set derived from them."""

import re
import socket
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from mailkeys.common.errors import ValidationError

DEFAULT_KEY_SIZE = 2048
DEFAULT_SELECTOR = "mail"
RSA_KEY_SIZES = (1024, 2048, 4096)

_LABEL_RE = re.compile(r"^[^\s/\"';{}]+$")


class KeyType(str, Enum):
    """Supported DKIM key algorithms."""

    RSA = "rsa"
    ED25519 = "ed25519"


def default_domain() -> str:
    """Base domain of this host (FQDN without its first label)."""
    fqdn = socket.getfqdn()
    _, dot, rest = fqdn.partition(".")
    return rest if dot and rest else fqdn


@dataclass(frozen=True)
class KeySpec:
    """Validated parameters of one DKIM key."""

    key_type: KeyType = KeyType.RSA
    key_size: int = DEFAULT_KEY_SIZE
    selector: str = DEFAULT_SELECTOR
    domain: str = ""
    force_overwrite: bool = False

    def __post_init__(self) -> None:
        try:
            key_type = KeyType(self.key_type)
        except ValueError:
            raise ValidationError(
                f"Unknown key type '{self.key_type}' (expected rsa or ed25519)"
            ) from None
        object.__setattr__(self, "key_type", key_type)

        if key_type is KeyType.ED25519 and self.key_size != DEFAULT_KEY_SIZE:
            raise ValidationError("A key size cannot be chosen for ed25519 keys")
        if key_type is KeyType.RSA and self.key_size not in RSA_KEY_SIZES:
            sizes = ", ".join(str(size) for size in RSA_KEY_SIZES)
            raise ValidationError(f"Invalid RSA key size {self.key_size} (expected one of {sizes})")

        for name in ("selector", "domain"):
            value = getattr(self, name)
            if not value:
                raise ValidationError(f"A {name} is required")
            if not _LABEL_RE.match(value):
                raise ValidationError(f"Invalid {name}: {value!r}")

    @property
    def stem(self) -> str:
        """File name stem shared by all artifacts of this key."""
        parts = [self.key_type.value]
        if self.key_type is KeyType.RSA:
            parts.append(str(self.key_size))
        parts.extend([self.selector, self.domain])
        return "-".join(parts)

    @property
    def record_name(self) -> str:
        """DNS name the public key is published under."""
        return f"{self.selector}._domainkey.{self.domain}"


@dataclass(frozen=True)
class KeyArtifactSet:
    """Files making up one key on disk."""

    public_key_path: Path
    public_key_dns_path: Path
    private_key_path: Path

    @classmethod
    def for_spec(cls, spec: KeySpec, key_dir: Path) -> "KeyArtifactSet":
        return cls(
            public_key_path=key_dir / f"{spec.stem}.public.txt",
            public_key_dns_path=key_dir / f"{spec.stem}.public.dns.txt",
            private_key_path=key_dir / f"{spec.stem}.private.txt",
        )

    @property
    def key_dir(self) -> Path:
        return self.private_key_path.parent

    def paths(self) -> tuple[Path, Path, Path]:
        return (self.public_key_path, self.public_key_dns_path, self.private_key_path)

    def existing(self) -> list[Path]:
        """Artifact files currently present."""
        return [path for path in self.paths() if path.exists()]
