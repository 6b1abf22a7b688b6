"""Tests for service restarts and the permission audit."""

from mailkeys.common.errors import ErrorCode
from mailkeys.dkim.audit import PermissionAuditor
from mailkeys.dkim.keyspec import KeyArtifactSet
from mailkeys.dkim.reload import ServiceReloader


class TestServiceReloader:
    """Test best-effort restarts."""

    def test_restart_command(self, settings, fake_runner):
        reloader = ServiceReloader(settings, fake_runner)

        assert reloader.reload() is True
        assert fake_runner.calls == [(["supervisorctl", "restart", "rspamd"], None)]

    def test_failure_returns_false(self, settings, fake_runner):
        fake_runner.restart_returncode = 7
        reloader = ServiceReloader(settings, fake_runner)

        assert reloader.reload() is False

    def test_missing_supervisor_returns_false(self, settings, fake_runner):
        fake_runner.missing_programs.add("supervisorctl")
        reloader = ServiceReloader(settings, fake_runner)

        assert reloader.reload() is False

    def test_custom_service_name(self, settings, fake_runner):
        settings = settings.model_copy(update={"service_name": "rspamd-proxy"})
        ServiceReloader(settings, fake_runner).reload()

        assert fake_runner.calls[0][0] == ["supervisorctl", "restart", "rspamd-proxy"]


class TestPermissionAuditor:
    """Test the advisory read check."""

    def test_no_advisories_when_readable(self, settings, fake_runner, rsa_spec):
        artifacts = KeyArtifactSet.for_spec(rsa_spec, settings.key_dir)

        advisories = PermissionAuditor(settings, fake_runner).audit(artifacts)

        assert advisories == []
        assert [argv[0] for argv, _ in fake_runner.calls] == ["ls", "cat"]

    def test_each_failure_is_one_advisory(self, settings, fake_runner, rsa_spec):
        fake_runner.audit_returncode = 1
        artifacts = KeyArtifactSet.for_spec(rsa_spec, settings.key_dir)

        advisories = PermissionAuditor(settings, fake_runner).audit(artifacts)

        assert len(advisories) == 2
        assert {a.code for a in advisories} == {ErrorCode.PERMISSION_AUDIT}
        assert "_rspamd" in advisories[0].message

    def test_checks_run_as_service_user(self, settings, fake_runner, rsa_spec):
        settings = settings.model_copy(update={"run_as_service_user": True})
        artifacts = KeyArtifactSet.for_spec(rsa_spec, settings.key_dir)

        PermissionAuditor(settings, fake_runner).audit(artifacts)

        assert {user for _, user in fake_runner.calls} == {"_rspamd"}

    def test_unrunnable_check_is_advisory(self, settings, fake_runner, rsa_spec):
        fake_runner.missing_programs.add("ls")
        artifacts = KeyArtifactSet.for_spec(rsa_spec, settings.key_dir)

        advisories = PermissionAuditor(settings, fake_runner).audit(artifacts)

        assert len(advisories) == 1
