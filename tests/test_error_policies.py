"""
Tests for listener error policies and the dispatch depth guard.
"""

import logging
from unittest.mock import Mock

import pytest

from dazzlebind import (
    BindingConfig,
    CollectErrorsPolicy,
    Context,
    ContinueOnErrorsPolicy,
    DispatchDepthError,
    FailFastPolicy,
    ThresholdPolicy,
)

from conftest import Player, Stats


def broken_listener(value):
    raise ValueError(f"cannot display {value}")


class TestFailFastPolicy:
    """Test the default policy."""

    def test_is_default(self, ctx):
        assert isinstance(ctx.error_policy, FailFastPolicy)

    def test_listener_error_reaches_writer(self, ctx, player):
        ctx.register_listener("Health", broken_listener)

        with pytest.raises(ValueError, match="cannot display 7"):
            ctx.set_value("Health", 7)

        # The write itself happened before dispatch
        assert player.Health == 7
        assert ctx.get_value("Health") == 7

    def test_later_listeners_skipped(self, ctx):
        later = Mock()
        ctx.register_listener("Health", broken_listener)
        ctx.register_listener("Health", later)

        with pytest.raises(ValueError):
            ctx.set_value("Health", 7)

        later.assert_not_called()

    def test_children_rebind_despite_listener_error(self, ctx):
        """Descendants follow the new parent value even when a listener raises."""
        child = Mock()
        ctx.register_listener("stats.health", child)
        ctx.register_listener("stats", broken_listener)

        with pytest.raises(ValueError):
            ctx.set_value("stats", None)

        assert ctx.get_value("stats") is None
        assert ctx.get_value("stats.health") is None
        child.assert_called_once_with(None)


class TestContinueOnErrorsPolicy:
    """Test logging and continuing."""

    def test_dispatch_continues(self, player, caplog):
        policy = ContinueOnErrorsPolicy()
        ctx = Context(player, error_policy=policy)
        later, child = Mock(), Mock()
        ctx.register_listener("stats", broken_listener)
        ctx.register_listener("stats", later)
        ctx.register_listener("stats.health", child)

        with caplog.at_level(logging.WARNING, logger="dazzlebind"):
            ctx.set_value("stats", Stats(health=1))

        later.assert_called_once()
        child.assert_called_once_with(1)
        assert "broken_listener" in caplog.text
        assert "'stats'" in caplog.text

    def test_statistics(self, player):
        policy = ContinueOnErrorsPolicy(verbose=False)
        ctx = Context(player, error_policy=policy)
        ctx.register_listener("Health", broken_listener)
        ctx.register_listener("level", broken_listener)

        ctx.set_value("Health", 1)
        ctx.set_value("Health", 2)
        ctx.set_value("level", 3)

        stats = policy.get_statistics()
        assert stats['total_errors'] == 3
        assert stats['failing_paths'] == 2
        assert stats['errors'][0]['error_type'] == "ValueError"
        assert stats['errors'][0]['path'] == "Health"

    def test_silent_when_not_verbose(self, player, caplog):
        ctx = Context(player, error_policy=ContinueOnErrorsPolicy(verbose=False))
        ctx.register_listener("Health", broken_listener)

        with caplog.at_level(logging.WARNING, logger="dazzlebind"):
            ctx.set_value("Health", 1)

        assert caplog.text == ""


class TestCollectErrorsPolicy:
    def test_collects_silently(self, player, caplog):
        policy = CollectErrorsPolicy()
        ctx = Context(player, error_policy=policy)
        ctx.register_listener("Health", broken_listener)

        with caplog.at_level(logging.WARNING, logger="dazzlebind"):
            ctx.set_value("Health", 1)

        assert len(policy.errors) == 1
        assert policy.errors[0]['error_message'] == "cannot display 1"
        assert caplog.text == ""


class TestThresholdPolicy:
    def test_tolerates_up_to_threshold(self, player):
        policy = ThresholdPolicy(max_errors=2, verbose=False)
        ctx = Context(player, error_policy=policy)
        ctx.register_listener("Health", broken_listener)

        ctx.set_value("Health", 1)
        ctx.set_value("Health", 2)

        with pytest.raises(RuntimeError, match="threshold exceeded") as exc_info:
            ctx.set_value("Health", 3)

        assert isinstance(exc_info.value.__cause__, ValueError)
        assert policy.error_count == 3


class TestStructuralErrorsBypassPolicy:
    """Binding errors raised inside listeners always propagate."""

    def test_invalid_path_inside_listener(self, player):
        ctx = Context(player, error_policy=CollectErrorsPolicy())
        ctx.register_listener("Health", lambda v: ctx.get_value("mana"))

        with pytest.raises(LookupError):
            ctx.set_value("Health", 1)

        assert ctx.error_policy.errors == []


class TestDispatchDepth:
    """Test the guard against runaway notification loops."""

    def test_feedback_loop_raises(self, player):
        ctx = Context(player, config=BindingConfig(max_dispatch_depth=5))
        ctx.register_listener("Health", lambda v: ctx.set_value("Health", v + 1))

        with pytest.raises(DispatchDepthError):
            ctx.set_value("Health", 0)

    def test_depth_error_is_recursion_error(self, player):
        ctx = Context(player, config=BindingConfig(max_dispatch_depth=3))
        ctx.register_listener("Health", lambda v: ctx.set_value("Health", v + 1))

        with pytest.raises(RecursionError):
            ctx.set_value("Health", 0)

    def test_context_usable_after_depth_error(self, player):
        ctx = Context(player, config=BindingConfig(max_dispatch_depth=3))

        def looping(value):
            ctx.set_value("Health", value + 1)

        ctx.register_listener("Health", looping)

        with pytest.raises(DispatchDepthError):
            ctx.set_value("Health", 0)

        ctx.remove_listener("Health", looping)
        cb = Mock()
        ctx.register_listener("Health", cb)
        ctx.set_value("Health", 100)
        cb.assert_called_once_with(100)

    def test_deep_but_finite_cascade_is_allowed(self):
        ctx = Context(Player(), config=BindingConfig(max_dispatch_depth=3))
        cb = Mock()
        ctx.register_listener("stats.health", cb)

        ctx.set_value("#", Player())

        # Equal health on the new stats object, so the leaf stays quiet
        cb.assert_not_called()
        replacement = Player()
        replacement.stats = Stats(health=1)
        ctx.set_value("#", replacement)
        cb.assert_called_once_with(1)
