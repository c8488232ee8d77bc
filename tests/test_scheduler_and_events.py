import pytest
from conftest import FakeClock

from tic_tac_toe_duel.events import EventBus, GameDrawn, GameRestarted, MoveApplied
from tic_tac_toe_duel.scheduler import Scheduler


class TestScheduler:
    """Deferred callbacks driven by run_pending()."""

    def test_task_runs_only_when_due(self, clock: FakeClock, scheduler: Scheduler) -> None:
        calls: list[str] = []
        scheduler.call_later(1.0, lambda: calls.append("a"))

        assert scheduler.run_pending() == 0
        clock.advance(0.99)
        assert scheduler.run_pending() == 0
        clock.advance(0.01)
        assert scheduler.run_pending() == 1
        assert calls == ["a"]
        assert not scheduler.has_pending()

    def test_tasks_run_in_due_order(self, clock: FakeClock, scheduler: Scheduler) -> None:
        calls: list[str] = []
        scheduler.call_later(0.4, lambda: calls.append("late"))
        scheduler.call_later(0.2, lambda: calls.append("early"))
        scheduler.call_later(0.2, lambda: calls.append("early-second"))

        clock.advance(1.0)
        scheduler.run_pending()
        assert calls == ["early", "early-second", "late"]

    def test_cancelled_task_never_runs(self, clock: FakeClock, scheduler: Scheduler) -> None:
        calls: list[str] = []
        task = scheduler.call_later(0.5, lambda: calls.append("a"))
        task.cancel()

        assert task.cancelled
        assert not scheduler.has_pending()
        clock.advance(1.0)
        assert scheduler.run_pending() == 0
        assert calls == []

    def test_cancel_after_run_is_ignored(self, clock: FakeClock, scheduler: Scheduler) -> None:
        task = scheduler.call_later(0.0, lambda: None)
        scheduler.run_pending()
        task.cancel()
        assert not task.cancelled

    def test_cancel_all(self, clock: FakeClock, scheduler: Scheduler) -> None:
        calls: list[str] = []
        scheduler.call_later(0.1, lambda: calls.append("a"))
        scheduler.call_later(0.2, lambda: calls.append("b"))
        scheduler.cancel_all()
        clock.advance(1.0)
        assert scheduler.run_pending() == 0
        assert calls == []

    def test_task_scheduled_while_running_waits_for_next_pass(self, scheduler: Scheduler) -> None:
        calls: list[str] = []
        scheduler.call_later(0.0, lambda: scheduler.call_later(0.0, lambda: calls.append("inner")))

        assert scheduler.run_pending() == 1
        assert calls == []
        assert scheduler.has_pending()

        assert scheduler.run_pending() == 1
        assert calls == ["inner"]

    def test_callback_can_cancel_a_task_due_in_the_same_pass(self, clock: FakeClock, scheduler: Scheduler) -> None:
        calls: list[str] = []
        second = scheduler.call_later(0.2, lambda: calls.append("second"))
        scheduler.call_later(0.1, second.cancel)

        clock.advance(1.0)
        assert scheduler.run_pending() == 1
        assert calls == []

    def test_negative_delay_is_rejected(self, scheduler: Scheduler) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            scheduler.call_later(-1.0, lambda: None)


class TestEventBus:
    """Synchronous publish/subscribe."""

    def test_handlers_receive_only_their_type(self, event_bus: EventBus) -> None:
        received: list[object] = []
        event_bus.subscribe(MoveApplied, received.append)

        event_bus.publish(MoveApplied("X", 4))
        event_bus.publish(GameDrawn())

        assert received == [MoveApplied("X", 4)]

    def test_handlers_run_in_subscription_order(self, event_bus: EventBus) -> None:
        order: list[str] = []
        event_bus.subscribe(GameRestarted, lambda _e: order.append("first"))
        event_bus.subscribe(GameRestarted, lambda _e: order.append("second"))
        event_bus.publish(GameRestarted())
        assert order == ["first", "second"]

    def test_unsubscribe(self, event_bus: EventBus) -> None:
        received: list[object] = []
        event_bus.subscribe(GameDrawn, received.append)
        event_bus.unsubscribe(GameDrawn, received.append)
        event_bus.unsubscribe(GameDrawn, received.append)  # Unknown handler is ignored
        event_bus.publish(GameDrawn())
        assert received == []

    def test_close_drops_all_handlers(self, event_bus: EventBus) -> None:
        received: list[object] = []
        event_bus.subscribe(GameDrawn, received.append)
        event_bus.close()
        event_bus.publish(GameDrawn())
        assert received == []
