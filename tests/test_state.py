"""Tests for the state model, state file persistence and checkpoints."""

import json

import pytest

from envteardown.state.checkpoint import CheckpointWriter
from envteardown.state.manager import STATE_FILENAME, StateManager
from envteardown.state.models import IAAS, STATE_VERSION, BOSHState, State
from envteardown.state.validator import StateFileValidator
from envteardown.utils.errors import StateError

from fakes import Events, FakeStateStore, aws_state, gcp_state


class TestStateModel:
    """Test suite for State."""

    def test_default_state_is_empty(self):
        state = State()

        assert state.is_empty()
        assert state.version == STATE_VERSION
        assert state.iaas == IAAS.UNSET

    def test_version_alone_is_still_empty(self):
        assert State(version=1).is_empty()

    def test_env_id_makes_state_non_empty(self):
        assert not State(env_id="some-env-id").is_empty()

    def test_bosh_is_empty(self):
        assert BOSHState().is_empty()
        assert not BOSHState(director_name="some-director").is_empty()
        assert not BOSHState(state={"current_vm_cid": "x"}).is_empty()

    def test_snapshot_is_deep(self):
        state = aws_state()

        snapshot = state.snapshot()
        state.bosh.state["current_vm_cid"] = "changed"

        assert snapshot.bosh.state == {"current_vm_cid": "some-vm-cid"}

    def test_round_trip_through_dict(self):
        state = gcp_state()

        assert State.from_dict(state.to_dict()) == state

    def test_iaas_serialised_as_string(self):
        assert aws_state().to_dict()["iaas"] == "aws"

    def test_unknown_field_rejected(self):
        with pytest.raises(Exception):
            State.from_dict({"version": 3, "surprise": True})


class TestStateManager:
    """Test suite for StateManager."""

    def test_load_missing_file_returns_empty_state(self, tmp_path):
        manager = StateManager(str(tmp_path))

        assert manager.load().is_empty()
        assert not manager.exists()

    def test_save_and_load(self, tmp_path):
        manager = StateManager(str(tmp_path))
        state = aws_state()

        manager.save(state)

        assert (tmp_path / STATE_FILENAME).exists()
        assert manager.load() == state

    def test_save_leaves_no_temp_file(self, tmp_path):
        StateManager(str(tmp_path)).save(aws_state())

        assert [p.name for p in tmp_path.iterdir()] == [STATE_FILENAME]

    def test_saving_empty_state_removes_file(self, tmp_path):
        manager = StateManager(str(tmp_path))
        manager.save(aws_state())

        manager.save(State())

        assert not manager.exists()

    def test_saving_empty_state_without_file(self, tmp_path):
        manager = StateManager(str(tmp_path))

        manager.save(State())

        assert not manager.exists()

    def test_corrupt_json(self, tmp_path):
        (tmp_path / STATE_FILENAME).write_text("{not json")

        with pytest.raises(StateError, match="Failed to parse state file"):
            StateManager(str(tmp_path)).load()

    def test_schema_error(self, tmp_path):
        (tmp_path / STATE_FILENAME).write_text(json.dumps({"version": 3, "iaas": "azure"}))

        with pytest.raises(StateError, match="Invalid state file"):
            StateManager(str(tmp_path)).load()


class TestStateFileValidator:
    """Test suite for StateFileValidator."""

    def test_missing_file(self, tmp_path):
        validator = StateFileValidator(StateManager(str(tmp_path)))

        with pytest.raises(StateError, match="ensure you're running this command in the proper state directory"):
            validator.validate(State())

    def test_unsupported_version(self, tmp_path):
        manager = StateManager(str(tmp_path))
        manager.save(aws_state())

        with pytest.raises(StateError, match="not supported"):
            StateFileValidator(manager).validate(aws_state(version=2))

    def test_valid(self, tmp_path):
        manager = StateManager(str(tmp_path))
        state = aws_state()
        manager.save(state)

        StateFileValidator(manager).validate(state)


class TestCheckpointWriter:
    """Test suite for CheckpointWriter."""

    def test_saves_snapshot_and_counts(self):
        store = FakeStateStore(Events())
        writer = CheckpointWriter(store)
        state = aws_state()

        writer.checkpoint(state, "director deletion")

        assert writer.count == 1
        assert store.saves == [state]
        assert store.saves[0] is not state

    def test_save_failure_raised_and_not_counted(self):
        store = FakeStateStore(Events())
        store.errors[0] = StateError("disk full")
        writer = CheckpointWriter(store)

        with pytest.raises(StateError, match="disk full"):
            writer.checkpoint(aws_state())

        assert writer.count == 0
