"""Tests for key parameters and artifact naming."""

from pathlib import Path
from unittest.mock import patch

import pytest

from mailkeys.common.errors import ValidationError
from mailkeys.dkim.keyspec import KeyArtifactSet, KeySpec, KeyType, default_domain


class TestKeySpecValidation:
    """Test validation of key parameters."""

    def test_defaults(self):
        """Test the default key is a 2048-bit RSA key for selector mail."""
        spec = KeySpec(domain="example.com")

        assert spec.key_type is KeyType.RSA
        assert spec.key_size == 2048
        assert spec.selector == "mail"
        assert spec.force_overwrite is False

    def test_key_type_from_string(self):
        """Test key type strings are converted to the enum."""
        spec = KeySpec(key_type="ed25519", domain="example.com")

        assert spec.key_type is KeyType.ED25519

    def test_unknown_key_type(self):
        """Test an unknown key type is rejected."""
        with pytest.raises(ValidationError, match="Unknown key type"):
            KeySpec(key_type="dsa", domain="example.com")

    @pytest.mark.parametrize("size", [1024, 4096, 512])
    def test_ed25519_rejects_key_size(self, size):
        """Test ed25519 only accepts the default size sentinel."""
        with pytest.raises(ValidationError, match="ed25519"):
            KeySpec(key_type="ed25519", key_size=size, domain="example.com")

    def test_invalid_rsa_key_size(self):
        """Test RSA sizes outside the supported set are rejected."""
        with pytest.raises(ValidationError, match="RSA key size"):
            KeySpec(key_size=3000, domain="example.com")

    def test_missing_domain(self):
        """Test an empty domain is rejected."""
        with pytest.raises(ValidationError, match="domain is required"):
            KeySpec(domain="")

    @pytest.mark.parametrize("selector", ["bad selector", "a/b", 'q"uote'])
    def test_invalid_selector(self, selector):
        """Test selectors that cannot be used in file names or configs."""
        with pytest.raises(ValidationError, match="Invalid selector"):
            KeySpec(selector=selector, domain="example.com")

    def test_validation_touches_no_files(self, tmp_path):
        """Test validation fails before any directory is created."""
        with pytest.raises(ValidationError):
            KeySpec(key_type="ed25519", key_size=4096, domain="example.com")

        assert list(tmp_path.iterdir()) == []


class TestArtifactNaming:
    """Test artifact paths derived from a spec."""

    def test_rsa_names_include_size(self):
        """Test RSA artifacts carry type, size, selector and domain."""
        spec = KeySpec(key_size=4096, selector="s1", domain="example.com")
        artifacts = KeyArtifactSet.for_spec(spec, Path("/keys"))

        assert artifacts.public_key_path == Path("/keys/rsa-4096-s1-example.com.public.txt")
        assert artifacts.public_key_dns_path == Path("/keys/rsa-4096-s1-example.com.public.dns.txt")
        assert artifacts.private_key_path == Path("/keys/rsa-4096-s1-example.com.private.txt")

    def test_ed25519_names_omit_size(self):
        """Test ed25519 artifacts have no size component."""
        spec = KeySpec(key_type="ed25519", domain="example.org")
        artifacts = KeyArtifactSet.for_spec(spec, Path("/keys"))

        assert artifacts.private_key_path.name == "ed25519-mail-example.org.private.txt"

    def test_paths_are_deterministic(self):
        """Test identical inputs resolve to identical paths."""
        first = KeyArtifactSet.for_spec(KeySpec(domain="example.com"), Path("/keys"))
        second = KeyArtifactSet.for_spec(KeySpec(domain="example.com"), Path("/keys"))

        assert first == second
        assert first.key_dir == Path("/keys")

    def test_record_name(self):
        """Test the DNS name of the key."""
        spec = KeySpec(selector="2024", domain="example.com")

        assert spec.record_name == "2024._domainkey.example.com"


class TestDefaultDomain:
    """Test host domain detection."""

    def test_strips_host_label(self):
        with patch("mailkeys.dkim.keyspec.socket.getfqdn", return_value="mail.example.com"):
            assert default_domain() == "example.com"

    def test_bare_hostname(self):
        with patch("mailkeys.dkim.keyspec.socket.getfqdn", return_value="localhost"):
            assert default_domain() == "localhost"
