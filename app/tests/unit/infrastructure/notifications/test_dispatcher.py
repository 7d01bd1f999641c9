"""Unit tests for NotificationDispatcher.

Tests cover:
- Ordered provider fallback per channel
- Stop at first success (no duplicate sends)
- Partial failure across channels
- Audit and error sink entries
- ChannelExhaustedError from notify()
"""

from datetime import datetime

import pytest
from unittest.mock import MagicMock

from infrastructure.notifications.dispatcher import (
    AUDIT_EVENT,
    NO_PROVIDER_AVAILABLE,
    NotificationDispatcher,
)
from infrastructure.notifications.exceptions import ChannelExhaustedError
from infrastructure.notifications.models import Channel
from infrastructure.notifications.providers.base import NotificationProvider
from infrastructure.operations import OperationResult

PROVIDER_FAILED = "notification_provider_failed"


@pytest.fixture
def dispatcher_factory(error_logger, audit_logger):
    """Build a dispatcher wired to the mock sinks."""

    def _factory(*providers):
        return NotificationDispatcher(
            providers=list(providers),
            error_logger=error_logger,
            audit_logger=audit_logger,
        )

    return _factory


@pytest.mark.unit
class TestNotificationDispatcherInitialization:
    """Tests for dispatcher initialization."""

    def test_providers_stored_as_tuple(self, provider_factory, dispatcher_factory):
        ses = provider_factory("ses", ["email"])
        dispatcher = dispatcher_factory(ses)

        assert dispatcher.providers == (ses,)

    def test_default_sinks_are_structlog_loggers(self, provider_factory):
        dispatcher = NotificationDispatcher(providers=[provider_factory()])

        assert dispatcher.logger is not None
        assert dispatcher.audit_logger is not None
        assert dispatcher.logger is not dispatcher.audit_logger

    def test_get_available_channels(self, provider_factory, dispatcher_factory):
        dispatcher = dispatcher_factory(
            provider_factory("sns", ["sms"]),
            provider_factory("ses", ["email"]),
        )

        assert dispatcher.get_available_channels() == [Channel.EMAIL, Channel.SMS]

    def test_get_available_channels_empty(self, dispatcher_factory):
        assert dispatcher_factory().get_available_channels() == []

    def test_get_providers_for(self, provider_factory, dispatcher_factory):
        sns = provider_factory("sns", ["sms"])
        twilio = provider_factory("twilio", ["sms"])
        dispatcher = dispatcher_factory(provider_factory("ses", ["email"]), sns, twilio)

        assert dispatcher.get_providers_for("sms") == [sns, twilio]


@pytest.mark.unit
class TestNotificationDispatcherDispatch:
    """Tests for dispatch() and the fallback algorithm."""

    def test_healthy_end_to_end(
        self,
        provider_factory,
        dispatcher_factory,
        message_factory,
        error_logger,
        audit_logger,
        calls_for,
    ):
        """Both channels sent, two audit entries and no error entries."""
        dispatcher = dispatcher_factory(
            provider_factory("ses", ["email"]),
            provider_factory("sns", ["sms"]),
        )

        outcome = dispatcher.dispatch(message_factory())

        assert outcome.is_success
        assert outcome["email"].provider_used == "ses"
        assert outcome["sms"].provider_used == "sns"
        assert len(calls_for(audit_logger, "info", AUDIT_EVENT)) == 2
        assert calls_for(error_logger, "error", PROVIDER_FAILED) == []

    def test_outcomes_follow_channel_order(
        self, provider_factory, dispatcher_factory, message_factory
    ):
        dispatcher = dispatcher_factory(
            provider_factory("ses", ["email"]),
            provider_factory("sns", ["sms"]),
        )
        message = message_factory(
            to={"sms": "+12025550123", "email": "user@example.com"}
        )

        outcome = dispatcher.dispatch(message)

        assert list(outcome.outcomes) == [Channel.SMS, Channel.EMAIL]

    def test_fallback_to_second_provider(
        self,
        provider_factory,
        dispatcher_factory,
        message_factory,
        error_logger,
        audit_logger,
        calls_for,
    ):
        """First provider fails, second succeeds: one audit and one error entry."""
        sns = provider_factory(
            "sns", ["sms"], results=[OperationResult.transient_error("throttled")]
        )
        twilio = provider_factory("twilio", ["sms"])
        dispatcher = dispatcher_factory(sns, twilio)

        outcome = dispatcher.dispatch(message_factory(to={"sms": "+12025550123"}))

        assert outcome["sms"].sent
        assert outcome["sms"].provider_used == "twilio"
        assert [a.provider for a in outcome["sms"].attempts] == ["sns", "twilio"]
        assert [a.success for a in outcome["sms"].attempts] == [False, True]

        audits = calls_for(audit_logger, "info", AUDIT_EVENT)
        errors = calls_for(error_logger, "error", PROVIDER_FAILED)
        assert len(audits) == 1
        assert audits[0].kwargs["provider"] == "twilio"
        assert len(errors) == 1
        assert errors[0].kwargs["channel"] == "sms"
        assert errors[0].kwargs["provider"] == "sns"
        assert errors[0].kwargs["error"] == "throttled"
        assert errors[0].kwargs["retryable"] is True

    def test_error_entry_marks_permanent_and_raised_failures(
        self,
        provider_factory,
        dispatcher_factory,
        message_factory,
        error_logger,
        calls_for,
    ):
        sns = provider_factory(
            "sns", ["sms"], results=[OperationResult.permanent_error("bad number")]
        )
        twilio = provider_factory("twilio", ["sms"], results=[RuntimeError("boom")])
        dispatcher = dispatcher_factory(sns, twilio)

        dispatcher.dispatch(message_factory(to={"sms": "+12025550123"}))

        errors = calls_for(error_logger, "error", PROVIDER_FAILED)
        assert [e.kwargs["retryable"] for e in errors] == [False, None]

    def test_no_provider_called_after_success(
        self, provider_factory, dispatcher_factory, message_factory
    ):
        first = provider_factory("sns", ["sms"])
        second = provider_factory("twilio", ["sms"])
        third = provider_factory("backup", ["sms"])
        dispatcher = dispatcher_factory(first, second, third)

        outcome = dispatcher.dispatch(message_factory(to={"sms": "+12025550123"}))

        assert outcome["sms"].provider_used == "sns"
        assert len(first.sent) == 1
        assert second.sent == []
        assert third.sent == []

    def test_third_provider_not_called_after_second_succeeds(
        self, provider_factory, dispatcher_factory, message_factory
    ):
        first = provider_factory("a", ["sms"], results=[RuntimeError("down")])
        second = provider_factory("b", ["sms"])
        third = provider_factory("c", ["sms"])
        dispatcher = dispatcher_factory(first, second, third)

        outcome = dispatcher.dispatch(message_factory(to={"sms": "+12025550123"}))

        assert outcome["sms"].provider_used == "b"
        assert third.sent == []

    def test_unsupported_providers_skipped(
        self, provider_factory, dispatcher_factory, message_factory
    ):
        ses = provider_factory("ses", ["email"])
        sns = provider_factory("sns", ["sms"])
        dispatcher = dispatcher_factory(ses, sns)

        dispatcher.dispatch(message_factory(to={"sms": "+12025550123"}))

        assert ses.sent == []
        assert len(sns.sent) == 1

    def test_partial_failure_across_channels(
        self,
        provider_factory,
        dispatcher_factory,
        message_factory,
        error_logger,
        calls_for,
    ):
        """Email provider succeeds, SMS provider fails."""
        dispatcher = dispatcher_factory(
            provider_factory("ses", ["email"]),
            provider_factory(
                "sns", ["sms"], results=[OperationResult.permanent_error("bad number")]
            ),
        )

        outcome = dispatcher.dispatch(message_factory())

        assert outcome.is_partial
        assert outcome.sent_channels == [Channel.EMAIL]
        assert outcome.failed_channels == [Channel.SMS]
        assert outcome["sms"].error == "bad number"
        errors = calls_for(error_logger, "error", PROVIDER_FAILED)
        assert [e.kwargs["channel"] for e in errors] == ["sms"]

    def test_error_text_includes_error_code(
        self, provider_factory, dispatcher_factory, message_factory
    ):
        dispatcher = dispatcher_factory(
            provider_factory(
                "sns",
                ["sms"],
                results=[
                    OperationResult.transient_error(
                        "Rate exceeded", error_code="RATE_LIMITED"
                    )
                ],
            ),
        )

        outcome = dispatcher.dispatch(message_factory(to={"sms": "+12025550123"}))

        assert outcome["sms"].error == "RATE_LIMITED: Rate exceeded"

    def test_raised_exception_is_failed_attempt(
        self, provider_factory, dispatcher_factory, message_factory
    ):
        dispatcher = dispatcher_factory(
            provider_factory("sns", ["sms"], results=[RuntimeError("socket closed")]),
        )

        outcome = dispatcher.dispatch(message_factory(to={"sms": "+12025550123"}))

        assert not outcome["sms"].sent
        assert outcome["sms"].error == "RuntimeError: socket closed"

    def test_last_error_wins(
        self, provider_factory, dispatcher_factory, message_factory
    ):
        dispatcher = dispatcher_factory(
            provider_factory(
                "sns", ["sms"], results=[OperationResult.transient_error("first")]
            ),
            provider_factory(
                "twilio", ["sms"], results=[OperationResult.transient_error("second")]
            ),
        )

        outcome = dispatcher.dispatch(message_factory(to={"sms": "+12025550123"}))

        assert outcome["sms"].error == "second"

    def test_no_capable_provider(
        self,
        provider_factory,
        dispatcher_factory,
        message_factory,
        error_logger,
        calls_for,
    ):
        dispatcher = dispatcher_factory(provider_factory("ses", ["email"]))

        outcome = dispatcher.dispatch(message_factory(to={"sms": "+12025550123"}))

        assert not outcome["sms"].sent
        assert outcome["sms"].error == NO_PROVIDER_AVAILABLE
        assert outcome["sms"].attempts == []
        assert calls_for(error_logger, "error", PROVIDER_FAILED) == []
        assert len(calls_for(error_logger, "warning", "notification_no_provider")) == 1

    def test_audit_entry_fields(
        self,
        provider_factory,
        dispatcher_factory,
        message_factory,
        audit_logger,
        calls_for,
    ):
        dispatcher = dispatcher_factory(provider_factory("ses", ["email"]))
        message = message_factory(user_id="user-42", to={"email": "a@example.com"})

        dispatcher.dispatch(message)

        (entry,) = calls_for(audit_logger, "info", AUDIT_EVENT)
        assert entry.kwargs["user_id"] == "user-42"
        assert entry.kwargs["channel"] == "email"
        assert entry.kwargs["recipient"] == "a@example.com"
        assert entry.kwargs["provider"] == "ses"
        assert entry.kwargs["message_id"] == message.message_id
        assert datetime.fromisoformat(entry.kwargs["sent_at"]).tzinfo is not None

    def test_dispatch_never_raises(
        self, provider_factory, dispatcher_factory, message_factory
    ):
        dispatcher = dispatcher_factory(
            provider_factory("ses", ["email"], results=[RuntimeError("boom")]),
        )

        outcome = dispatcher.dispatch(message_factory(to={"email": "a@example.com"}))

        assert outcome.failed_channels == [Channel.EMAIL]

    def test_same_message_passed_to_every_provider(
        self, provider_factory, dispatcher_factory, message_factory
    ):
        first = provider_factory("sns", ["sms"], results=[RuntimeError("down")])
        second = provider_factory("twilio", ["sms"])
        dispatcher = dispatcher_factory(first, second)
        message = message_factory(to={"sms": "+12025550123"})

        dispatcher.dispatch(message)

        assert first.sent[0] is message
        assert second.sent[0] is message

    def test_provider_cannot_rewrite_recipients(
        self,
        provider_factory,
        dispatcher_factory,
        message_factory,
        audit_logger,
        calls_for,
    ):
        class RecipientRewritingProvider(NotificationProvider):
            provider_id = "ses"

            def supports(self, channel):
                return channel == "email"

            def send(self, message):
                message.to[Channel.SMS] = "+19999999999"
                return OperationResult.success()

        tampering = RecipientRewritingProvider()
        sms = provider_factory("sns", ["sms"])
        dispatcher = dispatcher_factory(tampering, sms)
        message = message_factory()

        outcome = dispatcher.dispatch(message)

        assert outcome.failed_channels == [Channel.EMAIL]
        assert "TypeError" in outcome["email"].error
        assert sms.sent[0].to[Channel.SMS] == "+12025550123"
        (entry,) = calls_for(audit_logger, "info", AUDIT_EVENT)
        assert entry.kwargs["recipient"] == "+12025550123"


@pytest.mark.unit
class TestNotificationDispatcherNotify:
    """Tests for notify() exception semantics."""

    def test_returns_outcome_when_all_sent(
        self, provider_factory, dispatcher_factory, message_factory
    ):
        dispatcher = dispatcher_factory(
            provider_factory("ses", ["email"]),
            provider_factory("sns", ["sms"]),
        )

        outcome = dispatcher.notify(message_factory())

        assert outcome.is_success

    def test_sms_provider_throws(
        self,
        provider_factory,
        dispatcher_factory,
        message_factory,
        audit_logger,
        calls_for,
    ):
        """Email delivered, SMS exhausted: error names sms and keeps the cause."""
        cause = ConnectionError("gateway unreachable")
        dispatcher = dispatcher_factory(
            provider_factory("ses", ["email"]),
            provider_factory("sns", ["sms"], results=[cause]),
        )

        with pytest.raises(ChannelExhaustedError) as exc_info:
            dispatcher.notify(message_factory())

        error = exc_info.value
        assert error.channel is Channel.SMS
        assert "sms" in str(error)
        assert error.__cause__ is cause
        assert error.outcome.sent_channels == [Channel.EMAIL]
        assert error.is_partial
        audits = calls_for(audit_logger, "info", AUDIT_EVENT)
        assert [a.kwargs["channel"] for a in audits] == ["email"]

    def test_all_channels_attempted_before_raising(
        self, provider_factory, dispatcher_factory, message_factory
    ):
        ses = provider_factory("ses", ["email"], results=[RuntimeError("down")])
        sns = provider_factory("sns", ["sms"])
        dispatcher = dispatcher_factory(ses, sns)

        with pytest.raises(ChannelExhaustedError) as exc_info:
            dispatcher.notify(message_factory())

        assert exc_info.value.channel is Channel.EMAIL
        assert len(sns.sent) == 1
        assert exc_info.value.outcome.sent_channels == [Channel.SMS]

    def test_names_first_failed_channel_and_lists_all(
        self, provider_factory, dispatcher_factory, message_factory
    ):
        dispatcher = dispatcher_factory(
            provider_factory("ses", ["email"], results=[RuntimeError("a")]),
            provider_factory("sns", ["sms"], results=[RuntimeError("b")]),
        )

        with pytest.raises(ChannelExhaustedError) as exc_info:
            dispatcher.notify(message_factory())

        error = exc_info.value
        assert error.channel is Channel.EMAIL
        assert error.failed_channels == [Channel.EMAIL, Channel.SMS]
        assert "also failed: sms" in str(error)
        assert not error.is_partial

    def test_no_cause_for_result_failures(
        self, provider_factory, dispatcher_factory, message_factory
    ):
        dispatcher = dispatcher_factory(
            provider_factory(
                "sns", ["sms"], results=[OperationResult.permanent_error("rejected")]
            ),
        )

        with pytest.raises(ChannelExhaustedError) as exc_info:
            dispatcher.notify(message_factory(to={"sms": "+12025550123"}))

        assert exc_info.value.__cause__ is None
        assert exc_info.value.last_error == "rejected"

    def test_no_provider_available_raises(
        self, provider_factory, dispatcher_factory, message_factory
    ):
        dispatcher = dispatcher_factory(provider_factory("ses", ["email"]))

        with pytest.raises(ChannelExhaustedError, match=NO_PROVIDER_AVAILABLE):
            dispatcher.notify(message_factory(to={"sms": "+12025550123"}))

    def test_exhaustion_logged(
        self,
        provider_factory,
        dispatcher_factory,
        message_factory,
        error_logger,
        calls_for,
    ):
        dispatcher = dispatcher_factory(
            provider_factory("sns", ["sms"], results=[RuntimeError("down")]),
        )

        with pytest.raises(ChannelExhaustedError):
            dispatcher.notify(message_factory(to={"sms": "+12025550123"}))

        (entry,) = calls_for(error_logger, "error", "notification_channel_exhausted")
        assert entry.kwargs["channel"] == "sms"
        assert entry.kwargs["failed_channels"] == ["sms"]

    def test_provider_exception_does_not_escape_as_itself(
        self, provider_factory, dispatcher_factory, message_factory
    ):
        provider = MagicMock()
        provider.provider_id = "mock"
        provider.supports.return_value = True
        provider.send.side_effect = KeyError("missing")
        dispatcher = dispatcher_factory(provider)

        with pytest.raises(ChannelExhaustedError) as exc_info:
            dispatcher.notify(message_factory(to={"email": "a@example.com"}))

        assert isinstance(exc_info.value.__cause__, KeyError)
