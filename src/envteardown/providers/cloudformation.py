"""CloudFormation stack lookup and deletion."""

from botocore.exceptions import ClientError, WaiterError

from envteardown.teardown.base import InfrastructureManager, Stack, StackManager, StackNotFound
from envteardown.utils.aws_client import AWSClientManager
from envteardown.utils.errors import ErrorContext, ProvisioningError, error_handler
from envteardown.utils.logging import get_logger

logger = get_logger(__name__)

DELETE_COMPLETE = "DELETE_COMPLETE"


def _is_missing_stack(error: ClientError) -> bool:
    err = error.response.get("Error", {})
    return err.get("Code") == "ValidationError" and "does not exist" in err.get("Message", "")


class CloudFormationStackManager(StackManager):
    """Describes stacks; deleted or unknown stacks raise StackNotFound."""

    def __init__(self, client_manager: AWSClientManager):
        self.client_manager = client_manager

    def describe(self, stack_name: str) -> Stack:
        cfn = self.client_manager.get_client("cloudformation")
        try:
            response = cfn.describe_stacks(StackName=stack_name)
        except ClientError as e:
            if _is_missing_stack(e):
                raise StackNotFound(stack_name) from e
            raise error_handler.handle_exception(
                e,
                ErrorContext(
                    resource_id=stack_name,
                    resource_type="stack",
                    aws_service="cloudformation",
                    aws_operation="describe_stacks",
                ),
            ) from e

        stacks = response.get("Stacks", [])
        if not stacks or stacks[0].get("StackStatus") == DELETE_COMPLETE:
            raise StackNotFound(stack_name)

        stack = stacks[0]
        outputs = {
            output["OutputKey"]: output.get("OutputValue", "")
            for output in stack.get("Outputs", [])
        }
        return Stack(name=stack["StackName"], status=stack.get("StackStatus", ""), outputs=outputs)


class CloudFormationInfrastructureManager(InfrastructureManager):
    """Deletes a stack and blocks until CloudFormation reports it gone."""

    def __init__(self, client_manager: AWSClientManager, delay: int = 15, max_attempts: int = 240):
        self.client_manager = client_manager
        self.delay = delay
        self.max_attempts = max_attempts

    def delete(self, stack_name: str) -> None:
        """
        Delete the stack and wait for DELETE_COMPLETE.

        Raises:
            ProvisioningError: if the deletion fails or does not finish in time
            TeardownError: if CloudFormation rejects the request
        """
        cfn = self.client_manager.get_client("cloudformation")
        context = ErrorContext(
            resource_id=stack_name,
            resource_type="stack",
            aws_service="cloudformation",
            aws_operation="delete_stack",
        )

        try:
            cfn.delete_stack(StackName=stack_name)
        except ClientError as e:
            raise error_handler.handle_exception(e, context) from e

        logger.info(f"Waiting for stack {stack_name} to be deleted")
        try:
            cfn.get_waiter("stack_delete_complete").wait(
                StackName=stack_name,
                WaiterConfig={"Delay": self.delay, "MaxAttempts": self.max_attempts},
            )
        except WaiterError as e:
            raise ProvisioningError(
                f"stack {stack_name} was not deleted: {e}",
                context=context,
                cause=e,
                suggestions=[
                    "Check the stack events in the CloudFormation console",
                    "Re-run destroy once the blocking resources are removed",
                ],
            ) from e

        logger.info(f"Stack {stack_name} deleted")
