"""Tests for the pre-flight checks run before destroy deletes anything."""

import pytest

from envteardown.state.models import IAAS, State
from envteardown.teardown.destroy import DestroyStatus
from envteardown.teardown.guard import (
    DestroyFlags,
    TerraformVersionError,
    is_confirmation,
    parse_flags,
)
from envteardown.utils.errors import CredentialError, FlagError, StateError, TeardownError

from fakes import Fakes


class TestParseFlags:
    """Test suite for destroy flag parsing."""

    def test_no_flags(self):
        assert parse_flags([]) == DestroyFlags(skip_if_missing=False, no_confirm=False)

    @pytest.mark.parametrize("flag", ["--no-confirm", "-no-confirm", "-n", "--n"])
    def test_no_confirm_spellings(self, flag):
        assert parse_flags([flag]).no_confirm is True

    @pytest.mark.parametrize("flag", ["--skip-if-missing", "-skip-if-missing"])
    def test_skip_if_missing_spellings(self, flag):
        assert parse_flags([flag]).skip_if_missing is True

    def test_both_flags(self):
        flags = parse_flags(["--skip-if-missing", "-n"])
        assert flags.skip_if_missing and flags.no_confirm

    def test_unknown_flag(self):
        with pytest.raises(FlagError) as exc_info:
            parse_flags(["--invalid-flag"])
        assert str(exc_info.value) == "flag provided but not defined: -invalid-flag"

    def test_unknown_single_dash_flag(self):
        with pytest.raises(FlagError) as exc_info:
            parse_flags(["-invalid-flag"])
        assert str(exc_info.value) == "flag provided but not defined: -invalid-flag"

    def test_unexpected_argument(self):
        with pytest.raises(FlagError):
            parse_flags(["some-argument"])


class TestConfirmation:
    """Test suite for the confirmation answer check."""

    @pytest.mark.parametrize("answer", ["yes", "y", "YES", "Yes", "Y", " y\n"])
    def test_accepted(self, answer):
        assert is_confirmation(answer)

    @pytest.mark.parametrize("answer", ["no", "n", "", "yess", "sure"])
    def test_declined(self, answer):
        assert not is_confirmation(answer)


class TestGuardStage:
    """Test suite for the guard stage as run by Destroy.execute."""

    def test_invalid_flag_fails_before_any_collaborator(self, fakes, destroy, aws):
        with pytest.raises(FlagError, match="flag provided but not defined: -invalid-flag"):
            destroy.execute(["--invalid-flag"], aws)

        assert fakes.events == []

    def test_skip_if_missing_with_empty_state(self, fakes, destroy):
        result = destroy.execute(["--skip-if-missing"], State())

        assert result.status == DestroyStatus.SKIPPED
        assert fakes.reporter.steps == [
            "state file not found, and --skip-if-missing flag provided, exiting"
        ]
        assert fakes.events.names() == ["reporter.step"]

    def test_skip_if_missing_ignored_when_state_present(self, fakes, destroy, aws):
        result = destroy.execute(["--skip-if-missing", "--no-confirm"], aws)

        assert result.status == DestroyStatus.COMPLETED
        assert "state_validator.validate" in fakes.events.names()

    def test_empty_state_without_skip_goes_to_validator(self, fakes, destroy):
        fakes.state_validator.error = StateError("state file not found")

        with pytest.raises(StateError, match="state file not found"):
            destroy.execute([], State())

        assert fakes.reporter.prompts == []

    def test_validator_error_propagates_unchanged(self, fakes, destroy, aws):
        error = StateError("bad state")
        fakes.state_validator.error = error

        with pytest.raises(StateError) as exc_info:
            destroy.execute([], aws)

        assert exc_info.value is error
        assert fakes.destructive_calls() == []

    def test_prompts_with_env_id(self, fakes, destroy, aws):
        destroy.execute([], aws)

        assert fakes.reporter.prompts == [
            'Are you sure you want to delete infrastructure for "some-env-id"? '
            "This operation cannot be undone!"
        ]

    @pytest.mark.parametrize("answer", ["no", "n", "", "maybe"])
    def test_declined_confirmation_exits(self, aws, answer):
        fakes = Fakes(answer=answer)

        result = fakes.build().execute([], aws)

        assert result.status == DestroyStatus.CANCELLED
        assert fakes.reporter.steps == ["exiting"]
        assert fakes.destructive_calls() == []
        assert fakes.state_store.saves == []
        assert fakes.terraform_executor.version_calls == 0

    @pytest.mark.parametrize("answer", ["yes", "y", "YES"])
    def test_accepted_confirmation_proceeds(self, aws, answer):
        fakes = Fakes(answer=answer)

        result = fakes.build().execute([], aws)

        assert result.status == DestroyStatus.COMPLETED

    @pytest.mark.parametrize("flag", ["--no-confirm", "-n"])
    def test_no_confirm_skips_prompt(self, fakes, destroy, aws, flag):
        destroy.execute([flag], aws)

        assert fakes.reporter.prompts == []

    def test_terraform_version_too_old(self, fakes, destroy, aws):
        fakes.terraform_executor.version_value = "0.8.4"

        with pytest.raises(TerraformVersionError) as exc_info:
            destroy.execute(["-n"], aws)

        assert str(exc_info.value) == "Terraform version must be at least v0.8.5"
        assert fakes.credential_validator.aws_calls == []
        assert fakes.destructive_calls() == []

    @pytest.mark.parametrize("version", ["0.8.5", "0.8.7", "0.10.0", "1.5.7"])
    def test_terraform_version_accepted(self, fakes, destroy, aws, version):
        fakes.terraform_executor.version_value = version

        result = destroy.execute(["-n"], aws)

        assert result.status == DestroyStatus.COMPLETED

    def test_unparseable_terraform_version(self, fakes, destroy, aws):
        fakes.terraform_executor.version_value = "unknown"

        with pytest.raises(TeardownError):
            destroy.execute(["-n"], aws)

        assert fakes.destructive_calls() == []

    def test_version_checked_after_confirmation(self, fakes, destroy, aws):
        destroy.execute([], aws)

        names = fakes.events.names()
        assert names.index("reporter.prompt") < names.index("terraform_executor.version")

    def test_aws_credentials_validated(self, fakes, destroy, aws):
        destroy.execute(["-n"], aws)

        assert fakes.credential_validator.aws_calls == [aws.aws]
        assert fakes.credential_validator.gcp_calls == []

    def test_gcp_credentials_validated(self, fakes, destroy, gcp):
        destroy.execute(["-n"], gcp)

        assert fakes.credential_validator.gcp_calls == [gcp.gcp]
        assert fakes.credential_validator.aws_calls == []

    def test_unset_provider_skips_credential_validation(self, fakes, destroy):
        state = State(env_id="some-env-id")

        destroy.execute(["-n"], state)

        assert state.iaas == IAAS.UNSET
        assert fakes.credential_validator.aws_calls == []
        assert fakes.credential_validator.gcp_calls == []

    def test_credential_error_stops_before_deletion(self, fakes, destroy, aws):
        fakes.credential_validator.error = CredentialError("failed to validate")

        with pytest.raises(CredentialError, match="failed to validate"):
            destroy.execute(["-n"], aws)

        assert fakes.destructive_calls() == []
        assert fakes.state_store.saves == []
