"""
Tests for isolated hook invocation.
"""
import logging

from actionpack.hooks import invoke_hook


class TestInvokeHook:
    """A hook failure must never escape."""

    def test_unset_hook(self):
        assert invoke_hook(None, 1, 2) is False

    def test_hook_called_with_args(self):
        calls = []

        assert invoke_hook(lambda *args: calls.append(args), "payload", len) is True
        assert calls == [("payload", len)]

    def test_exception_logged_not_raised(self, caplog):
        def broken(payload):
            raise KeyError(payload)

        with caplog.at_level(logging.ERROR, logger="actionpack.hooks"):
            ok = invoke_hook(broken, "x", name="on_start", action_type="LOAD", transaction="t-9")

        assert ok is False
        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert "on_start hook raised for action LOAD" in record.getMessage()
        assert record.transaction == "t-9"
        assert record.subsystem == "hooks"
        assert record.exc_info[0] is KeyError
