"""Recording fakes for the teardown collaborators."""

from typing import List, Optional

from envteardown.state.models import (
    IAAS,
    AWSState,
    BOSHState,
    GCPState,
    KeyPair,
    StackState,
    State,
)
from envteardown.teardown.base import (
    BOSHManager,
    CertificateDeleter,
    CredentialValidator,
    InfrastructureManager,
    KeyPairDeleter,
    NetworkSafetyChecker,
    Reporter,
    Stack,
    StackManager,
    StateStore,
    StateValidator,
    TerraformExecutor,
    TerraformOutputProvider,
    TerraformOutputs,
)
from envteardown.teardown.destroy import Destroy


class Events(list):
    """Shared, ordered record of every collaborator call."""

    def names(self) -> List[str]:
        return [name for name, _ in self]


class FakeReporter(Reporter):
    def __init__(self, events: Events, answer: str = "yes"):
        self.events = events
        self.answer = answer
        self.prompts: List[str] = []
        self.steps: List[str] = []
        self.notes: List[str] = []

    def prompt(self, message: str) -> str:
        self.events.append(("reporter.prompt", message))
        self.prompts.append(message)
        return self.answer

    def step(self, message: str) -> None:
        self.events.append(("reporter.step", message))
        self.steps.append(message)

    def note(self, message: str) -> None:
        self.events.append(("reporter.note", message))
        self.notes.append(message)


class FakeStateStore(StateStore):
    """Records saved snapshots; ``errors`` maps a save index (0-based) to an exception."""

    def __init__(self, events: Events):
        self.events = events
        self.saves: List[State] = []
        self.errors = {}
        self.calls = 0

    def save(self, state: State) -> None:
        index = self.calls
        self.calls += 1
        self.events.append(("state_store.save", state))
        if index in self.errors:
            raise self.errors[index]
        self.saves.append(state)


class FakeStateValidator(StateValidator):
    def __init__(self, events: Events):
        self.events = events
        self.calls: List[State] = []
        self.error: Optional[Exception] = None

    def validate(self, state: State) -> None:
        self.events.append(("state_validator.validate", state))
        self.calls.append(state.snapshot())
        if self.error:
            raise self.error


class FakeCredentialValidator(CredentialValidator):
    def __init__(self, events: Events):
        self.events = events
        self.aws_calls: List[AWSState] = []
        self.gcp_calls: List[GCPState] = []
        self.error: Optional[Exception] = None

    def validate_aws(self, credentials: AWSState) -> None:
        self.events.append(("credential_validator.validate_aws", credentials))
        self.aws_calls.append(credentials)
        if self.error:
            raise self.error

    def validate_gcp(self, credentials: GCPState) -> None:
        self.events.append(("credential_validator.validate_gcp", credentials))
        self.gcp_calls.append(credentials)
        if self.error:
            raise self.error


class FakeTerraformExecutor(TerraformExecutor):
    def __init__(self, events: Events):
        self.events = events
        self.version_value = "0.8.7"
        self.version_calls = 0
        self.destroy_calls: List[dict] = []
        self.destroy_result = ""
        self.destroy_error: Optional[Exception] = None

    def version(self) -> str:
        self.events.append(("terraform_executor.version", None))
        self.version_calls += 1
        return self.version_value

    def destroy(self, credentials, env_id, project_id, zone, region, tf_state, template) -> str:
        call = dict(credentials=credentials, env_id=env_id, project_id=project_id,
                    zone=zone, region=region, tf_state=tf_state, template=template)
        self.events.append(("terraform_executor.destroy", call))
        self.destroy_calls.append(call)
        if self.destroy_error:
            raise self.destroy_error
        return self.destroy_result


class FakeTerraformOutputProvider(TerraformOutputProvider):
    def __init__(self, events: Events):
        self.events = events
        self.outputs = TerraformOutputs(network_name="some-network-name")
        self.calls: List[State] = []
        self.error: Optional[Exception] = None

    def get(self, state: State) -> TerraformOutputs:
        self.events.append(("terraform_output_provider.get", state))
        self.calls.append(state.snapshot())
        if self.error:
            raise self.error
        return self.outputs


class FakeBOSHManager(BOSHManager):
    def __init__(self, events: Events):
        self.events = events
        self.calls: List[State] = []
        self.error: Optional[Exception] = None

    def delete(self, state: State) -> None:
        self.events.append(("bosh_manager.delete", state))
        self.calls.append(state.snapshot())
        if self.error:
            raise self.error


class FakeStackManager(StackManager):
    def __init__(self, events: Events):
        self.events = events
        self.stack = Stack(name="some-stack-name", status="CREATE_COMPLETE",
                           outputs={"VPCID": "some-vpc-id"})
        self.calls: List[str] = []
        self.error: Optional[Exception] = None

    def describe(self, stack_name: str) -> Stack:
        self.events.append(("stack_manager.describe", stack_name))
        self.calls.append(stack_name)
        if self.error:
            raise self.error
        return self.stack


class _FakeDeleter:
    event = ""

    def __init__(self, events: Events):
        self.events = events
        self.calls: List[str] = []
        self.error: Optional[Exception] = None

    def _record(self, value: str) -> None:
        self.events.append((self.event, value))
        self.calls.append(value)
        if self.error:
            raise self.error


class FakeInfrastructureManager(_FakeDeleter, InfrastructureManager):
    event = "infrastructure_manager.delete"

    def delete(self, stack_name: str) -> None:
        self._record(stack_name)


class FakeCertificateDeleter(_FakeDeleter, CertificateDeleter):
    event = "certificate_deleter.delete"

    def delete(self, certificate_name: str) -> None:
        self._record(certificate_name)


class FakeKeyPairDeleter(_FakeDeleter, KeyPairDeleter):
    def __init__(self, events: Events, event: str):
        super().__init__(events)
        self.event = event

    def delete(self, identifier: str) -> None:
        self._record(identifier)


class FakeNetworkChecker(_FakeDeleter, NetworkSafetyChecker):
    def __init__(self, events: Events, event: str):
        super().__init__(events)
        self.event = event

    def validate_safe_to_delete(self, identifier: str) -> None:
        self._record(identifier)


class Fakes:
    """All collaborators of Destroy, sharing one event log."""

    def __init__(self, answer: str = "yes"):
        self.events = Events()
        self.reporter = FakeReporter(self.events, answer)
        self.state_store = FakeStateStore(self.events)
        self.state_validator = FakeStateValidator(self.events)
        self.credential_validator = FakeCredentialValidator(self.events)
        self.terraform_executor = FakeTerraformExecutor(self.events)
        self.terraform_output_provider = FakeTerraformOutputProvider(self.events)
        self.bosh_manager = FakeBOSHManager(self.events)
        self.stack_manager = FakeStackManager(self.events)
        self.infrastructure_manager = FakeInfrastructureManager(self.events)
        self.vpc_status_checker = FakeNetworkChecker(self.events, "vpc_status_checker.validate_safe_to_delete")
        self.certificate_deleter = FakeCertificateDeleter(self.events)
        self.aws_key_pair_deleter = FakeKeyPairDeleter(self.events, "aws_key_pair_deleter.delete")
        self.network_instances_checker = FakeNetworkChecker(
            self.events, "network_instances_checker.validate_safe_to_delete")
        self.gcp_key_pair_deleter = FakeKeyPairDeleter(self.events, "gcp_key_pair_deleter.delete")

    def build(self) -> Destroy:
        return Destroy(
            credential_validator=self.credential_validator,
            reporter=self.reporter,
            state_store=self.state_store,
            state_validator=self.state_validator,
            terraform_executor=self.terraform_executor,
            bosh_manager=self.bosh_manager,
            stack_manager=self.stack_manager,
            infrastructure_manager=self.infrastructure_manager,
            vpc_status_checker=self.vpc_status_checker,
            certificate_deleter=self.certificate_deleter,
            aws_key_pair_deleter=self.aws_key_pair_deleter,
            terraform_output_provider=self.terraform_output_provider,
            network_instances_checker=self.network_instances_checker,
            gcp_key_pair_deleter=self.gcp_key_pair_deleter,
        )

    def destructive_calls(self) -> List[str]:
        destructive = {
            "bosh_manager.delete",
            "infrastructure_manager.delete",
            "certificate_deleter.delete",
            "aws_key_pair_deleter.delete",
            "gcp_key_pair_deleter.delete",
            "terraform_executor.destroy",
        }
        return [name for name in self.events.names() if name in destructive]


def director() -> BOSHState:
    return BOSHState(
        director_name="some-director",
        director_username="some-director-username",
        director_password="some-director-password",
        director_address="https://10.0.0.6:25555",
        director_ssl_certificate="some-certificate",
        director_ssl_private_key="some-private-key",
        credentials={"admin_password": "some-director-password"},
        state={"current_vm_cid": "some-vm-cid"},
        manifest="name: bosh",
    )


def aws_state(**overrides) -> State:
    state = State(
        iaas=IAAS.AWS,
        env_id="some-env-id",
        aws=AWSState(access_key_id="some-access-key-id",
                     secret_access_key="some-secret-access-key",
                     region="some-aws-region"),
        key_pair=KeyPair(name="some-ec2-key-pair-name",
                         private_key="some-private-key",
                         public_key="some-public-key"),
        bosh=director(),
        stack=StackState(name="some-stack-name", lb_type="cf",
                         certificate_name="some-certificate-name"),
    )
    for key, value in overrides.items():
        setattr(state, key, value)
    return state


def gcp_state(**overrides) -> State:
    state = State(
        iaas=IAAS.GCP,
        env_id="some-env-id",
        gcp=GCPState(service_account_key='{"client_email": "sa@example.com"}',
                     project_id="some-project-id",
                     zone="some-zone",
                     region="some-region"),
        key_pair=KeyPair(private_key="some-private-key",
                         public_key="some-public-key"),
        bosh=director(),
        tf_state="some-tf-state",
    )
    for key, value in overrides.items():
        setattr(state, key, value)
    return state
