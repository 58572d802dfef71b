"""Unit tests for the Handler pipeline.

Tests cover:
- Stage order (before -> validate -> access -> process -> after)
- Short-circuit on the first Failure
- Plain hook values wrapped into Success
- Parameter validation (opt-in, normalized params)
- Role-list authorization without an ACL adapter
- ACL authorization memoized on the descriptor
- Adapter errors propagate unchanged
"""

import pytest

from command_dispatch import (
    CommandDescriptor,
    DispatchError,
    ErrorCode,
    ExecutionContext,
    Failure,
    Handler,
    HandlerGroup,
    Success,
)
from command_dispatch.infrastructure.authorization import InMemoryAccessControl
from tests.utils.handlers import FailingAccessControl, HelloGroup, SayHello, WhoAmI


class RecordingHandler(Handler):
    """Records the order stages run in."""

    params_constraints = {"name": {"presence": True}}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = []

    async def before(self):
        self.calls.append("before")
        return await super().before()

    async def validate_params(self):
        self.calls.append("validate_params")
        return await super().validate_params()

    async def check_access(self):
        self.calls.append("check_access")
        return await super().check_access()

    async def process(self, command):
        self.calls.append("process")
        return f"processed {self.params['name']}"

    async def after(self, result):
        self.calls.append("after")
        return result.upper()


class RejectingBefore(Handler):
    async def before(self):
        return Failure(error="not ready")

    async def process(self, command):
        raise AssertionError("process must not run")


def descriptor_context(caller=None, **changes):
    fields = {
        "command": "hello.say_hello",
        "group_name": "hello",
        "handler_name": "say_hello",
        "group_class": HelloGroup,
    }
    fields.update(changes)
    return ExecutionContext(caller=caller, command=CommandDescriptor(**fields))


@pytest.mark.unit
class TestHandlerPipeline:
    """Test stage ordering and short-circuiting."""

    async def test_stages_run_in_order(self, mock_logger, validator):
        handler = RecordingHandler(
            {"role": "ADMIN"}, {"name": "x"}, logger=mock_logger, validator=validator
        )

        result = await handler.execute()

        assert result == Success(value="PROCESSED X")
        assert handler.calls == [
            "before",
            "validate_params",
            "check_access",
            "process",
            "after",
        ]

    async def test_validation_failure_short_circuits(self, mock_logger, validator):
        handler = RecordingHandler(None, {}, logger=mock_logger, validator=validator)

        result = await handler.execute()

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INVALID_PARAMS
        assert handler.calls == ["before", "validate_params"]
        mock_logger.info.assert_any_call(
            "params_validation_failed", handler="RecordingHandler"
        )

    async def test_before_failure_short_circuits(self, mock_logger, validator):
        handler = RejectingBefore(logger=mock_logger, validator=validator)

        assert await handler.execute() == Failure(error="not ready")

    async def test_default_handler_returns_true(self, mock_logger, validator):
        handler = Handler(logger=mock_logger, validator=validator)

        assert await handler.execute() == Success(value=True)

    async def test_execute_arguments_replace_constructor_ones(
        self, mock_logger, validator
    ):
        handler = SayHello(
            {"role": "GUEST"}, {"user_name": "A"}, logger=mock_logger, validator=validator
        )

        result = await handler.execute({"role": "ADMIN"}, {"user_name": "B"})

        assert result == Success(value="Hello B. You have administrator rights.")

    async def test_exceptions_from_process_propagate(self, mock_logger, validator):
        class Broken(Handler):
            async def process(self, command):
                raise KeyError("missing")

        with pytest.raises(KeyError):
            await Broken(logger=mock_logger, validator=validator).execute()


@pytest.mark.unit
class TestHandlerValidation:
    """Test validate_params()."""

    async def test_no_constraints_skips_validator(self, mock_logger):
        class NoRules(Handler):
            pass

        handler = NoRules(params={"anything": 1}, logger=mock_logger, validator=None)
        handler.validator = None

        assert await handler.validate_params() == Success(value=True)

    async def test_normalized_params_replace_input(self, mock_logger, validator):
        class Typed(Handler):
            params_constraints = {"age": {"type": "integer"}}

        handler = Typed(
            params={"age": 3, "extra": "kept"}, logger=mock_logger, validator=validator
        )

        assert await handler.validate_params() == Success(value=True)
        assert handler.params == {"age": 3, "extra": "kept"}

    async def test_plain_false_from_override_fails(self, mock_logger, validator):
        class Rejecting(Handler):
            async def validate_params(self):
                return False

            async def process(self, command):
                raise AssertionError("process must not run")

        result = await Rejecting(logger=mock_logger, validator=validator).execute()

        assert result == Failure(
            error=DispatchError(
                code=ErrorCode.INVALID_PARAMS,
                message="Please send valid parameters.",
            )
        )

    async def test_plain_true_from_override_passes(self, mock_logger, validator):
        class Accepting(Handler):
            async def validate_params(self):
                return True

        result = await Accepting(logger=mock_logger, validator=validator).execute()

        assert result == Success(value=True)

    async def test_format_option_is_honored(self, mock_logger, validator):
        handler = SayHello(
            params={},
            options={"validator_format": "flat"},
            logger=mock_logger,
            validator=validator,
        )

        result = await handler.execute()

        assert result == Failure(error=["user_name can't be blank"])

    async def test_custom_error_formatter(self, mock_logger, validator):
        def formatter(code, message=None, details=None):
            return (code.value, details)

        handler = SayHello(
            params={},
            options={"error_formatter": formatter},
            logger=mock_logger,
            validator=validator,
        )

        result = await handler.execute()

        assert result == Failure(
            error=("INVALID_PARAMS", {"user_name": "user_name can't be blank"})
        )


@pytest.mark.unit
class TestHandlerRoleLists:
    """Test static allow/deny lists (no ACL adapter)."""

    async def test_no_lists_allows_everyone(self, mock_logger, validator):
        handler = WhoAmI(logger=mock_logger, validator=validator)

        assert await handler.execute() == Success(value="UNAUTHORIZED")

    async def test_allow_list_denies_other_roles(self, mock_logger, validator):
        class AdminOnly(WhoAmI):
            allow_roles = ("ADMIN",)

        result = await AdminOnly(
            {"role": "GUEST"}, logger=mock_logger, validator=validator
        ).execute()

        assert result == Failure(
            error=DispatchError(
                code=ErrorCode.ACCESS_DENIED,
                message="This action not allowed for role GUEST.",
                details={"currentRole": "GUEST", "allowRoles": ["ADMIN"]},
            )
        )
        mock_logger.info.assert_any_call("access_denied", role="GUEST")

    async def test_allow_list_admits_listed_role(self, mock_logger, validator):
        class AdminOnly(WhoAmI):
            allow_roles = ("ADMIN",)

        result = await AdminOnly(
            {"role": "ADMIN"}, logger=mock_logger, validator=validator
        ).execute()

        assert result == Success(value="ADMIN")

    async def test_deny_list(self, mock_logger, validator):
        class NoGuests(WhoAmI):
            deny_roles = ("GUEST",)

        denied = await NoGuests(
            {"role": "GUEST"}, logger=mock_logger, validator=validator
        ).execute()
        allowed = await NoGuests(
            {"role": "USER"}, logger=mock_logger, validator=validator
        ).execute()

        assert denied.error.details == {"currentRole": "GUEST", "denyRoles": ["GUEST"]}
        assert allowed == Success(value="USER")

    async def test_allow_list_wins_over_deny_list(self, mock_logger, validator):
        class Both(WhoAmI):
            allow_roles = ("ADMIN",)
            deny_roles = ("ADMIN",)

        result = await Both({"role": "ADMIN"}, logger=mock_logger, validator=validator).execute()

        assert result == Success(value="ADMIN")

    async def test_options_override_class_lists(self, mock_logger, validator):
        class AdminOnly(WhoAmI):
            allow_roles = ("ADMIN",)

        result = await AdminOnly(
            {"role": "GUEST"},
            options={"allow_roles": ["GUEST"]},
            logger=mock_logger,
            validator=validator,
        ).execute()

        assert result == Success(value="GUEST")

    async def test_group_lists_apply_when_handler_declares_none(
        self, mock_logger, validator
    ):
        class Locked(HandlerGroup):
            deny_roles = ("GUEST",)

        group = Locked(logger=mock_logger, validator=validator)
        handler = WhoAmI(
            {"role": "GUEST"}, group=group, logger=mock_logger, validator=validator
        )

        result = await handler.execute()

        assert result.error.code == ErrorCode.ACCESS_DENIED

    async def test_default_role_used_without_caller_role(self, mock_logger, validator):
        class GuestsOnly(WhoAmI):
            allow_roles = ("GUEST",)

        result = await GuestsOnly(
            {}, options={"default_role": "GUEST"}, logger=mock_logger, validator=validator
        ).execute()

        assert result == Success(value="GUEST")

    async def test_custom_role_lookup(self, mock_logger, validator):
        handler = WhoAmI(
            {"claims": {"r": "AUDITOR"}},
            options={"role_lookup": lambda caller: caller["claims"]["r"]},
            logger=mock_logger,
            validator=validator,
        )

        assert await handler.execute() == Success(value="AUDITOR")


@pytest.mark.unit
class TestHandlerAcl:
    """Test ACL-based authorization."""

    async def test_allowed_role_reaches_process_with_descriptor(
        self, mock_logger, validator
    ):
        acl = InMemoryAccessControl()
        acl.allow("USER", "hello", "say_hello")
        context = descriptor_context({"role": "USER"})

        class Capture(Handler):
            async def process(self, command):
                return command

        result = await Capture(
            context, options={"acl": acl}, logger=mock_logger, validator=validator
        ).execute()

        assert result == Success(value=context.command)
        assert context.command.is_allowed is True
        assert acl.queries == [("USER", "hello", "say_hello")]

    async def test_denied_role_gets_command_details(self, mock_logger, validator):
        acl = InMemoryAccessControl()
        context = descriptor_context({"role": "GUEST"})

        result = await WhoAmI(
            context, options={"acl": acl}, logger=mock_logger, validator=validator
        ).execute()

        assert result.error.code == ErrorCode.ACCESS_DENIED
        assert result.error.message == "This action not allowed for role GUEST."
        assert result.error.details == {
            "currentRole": "GUEST",
            "command": context.command.to_dict(),
        }
        assert context.command.is_allowed is False

    async def test_decision_is_memoized(self, mock_logger, validator):
        acl = InMemoryAccessControl()
        acl.allow("ADMIN")
        context = descriptor_context({"role": "ADMIN"})
        handler = WhoAmI(context, options={"acl": acl}, logger=mock_logger, validator=validator)

        await handler.check_access()
        await handler.check_access()

        assert len(acl.queries) == 1

    async def test_recorded_denial_is_not_requeried(self, mock_logger, validator):
        acl = InMemoryAccessControl()
        context = descriptor_context({"role": "GUEST"})
        handler = WhoAmI(context, options={"acl": acl}, logger=mock_logger, validator=validator)

        first = await handler.check_access()
        second = await handler.check_access()

        assert isinstance(first, Failure)
        assert isinstance(second, Failure)
        assert len(acl.queries) == 1

    async def test_acl_ignores_role_lists(self, mock_logger, validator):
        acl = InMemoryAccessControl()
        acl.allow("GUEST")

        class NoGuests(WhoAmI):
            deny_roles = ("GUEST",)

        result = await NoGuests(
            descriptor_context({"role": "GUEST"}),
            options={"acl": acl},
            logger=mock_logger,
            validator=validator,
        ).execute()

        assert result == Success(value="GUEST")

    async def test_no_descriptor_skips_acl(self, mock_logger, validator):
        acl = InMemoryAccessControl()

        result = await WhoAmI(
            {"role": "GUEST"}, options={"acl": acl}, logger=mock_logger, validator=validator
        ).execute()

        assert result == Success(value="GUEST")
        assert acl.queries == []

    async def test_adapter_error_propagates(self, mock_logger, validator):
        acl = FailingAccessControl()
        context = descriptor_context({"role": "ADMIN"})

        with pytest.raises(ConnectionError, match="policy store unreachable"):
            await WhoAmI(
                context, options={"acl": acl}, logger=mock_logger, validator=validator
            ).execute()

        assert context.command.is_allowed is None
        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args.args == ("access_check_error",)
