"""
Unit tests for PhaseScheduler.
Tests countdown sequencing, phase opening and cancellation on room close.
"""

import pytest
from unittest.mock import Mock

from src.core.game_phases import GamePhase
from src.room_registry import RoomRegistry
from src.services.phase_scheduler import PhaseScheduler, CountdownHandle
from tests.helpers.socket_mocks import ImmediateTaskRunner, DeferredTaskRunner


def broadcast_calls(broadcast_service):
    """Names of broadcast methods called, with their positional args, in call order."""
    return [(name, args) for name, args, _ in broadcast_service.method_calls]


class TestCountdown:

    def setup_method(self):
        self.broadcast_service = Mock()
        self.registry = RoomRegistry()
        self.code = self.registry.create_room('Host', 'sid-host').room.code
        self.registry.join_room(self.code, 'Bob', 'sid-b')
        self.registry.join_room(self.code, 'Carol', 'sid-c')
        self.registry.start_game(self.code, 'sid-host')

    def test_countdown_sequence_then_drawing_phase(self):
        runner = ImmediateTaskRunner()
        scheduler = PhaseScheduler(self.broadcast_service, self.registry, runner)

        assert scheduler.start_countdown(self.code) is True

        assert broadcast_calls(self.broadcast_service) == [
            ('broadcast_game_starting', (self.code, 3)),
            ('broadcast_countdown_update', (self.code, 3)),
            ('broadcast_countdown_update', (self.code, 2)),
            ('broadcast_countdown_update', (self.code, 1)),
            ('broadcast_phase_update', (self.code, 'drawing', 90)),
        ]
        assert runner.sleeps == [1.0, 1.0, 1.0]
        assert self.registry.get_room_snapshot(self.code).game_state == GamePhase.DRAWING

    def test_drawing_duration_comes_from_settings(self):
        settings = Mock(start_countdown_seconds=2, countdown_tick_seconds=0.5, drawing_phase_duration=45)
        runner = ImmediateTaskRunner()
        scheduler = PhaseScheduler(self.broadcast_service, self.registry, runner, settings)

        scheduler.start_countdown(self.code)

        self.broadcast_service.broadcast_game_starting.assert_called_once_with(self.code, 2)
        self.broadcast_service.broadcast_phase_update.assert_called_once_with(self.code, 'drawing', 45)
        assert runner.sleeps == [0.5, 0.5]
        assert not scheduler.has_active_countdown(self.code)

    def test_second_countdown_is_refused_while_running(self):
        runner = DeferredTaskRunner()
        scheduler = PhaseScheduler(self.broadcast_service, self.registry, runner)

        assert scheduler.start_countdown(self.code) is True
        assert scheduler.start_countdown(self.code) is False

        runner.run_all()

        phase_updates = [c for c in self.broadcast_service.method_calls if c[0] == 'broadcast_phase_update']
        assert len(phase_updates) == 1
        assert self.broadcast_service.broadcast_game_starting.call_count == 1

    def test_cancel_before_first_tick_emits_nothing_more(self):
        runner = DeferredTaskRunner()
        scheduler = PhaseScheduler(self.broadcast_service, self.registry, runner)
        scheduler.start_countdown(self.code)

        assert scheduler.cancel(self.code) is True
        runner.run_all()

        self.broadcast_service.broadcast_countdown_update.assert_not_called()
        self.broadcast_service.broadcast_phase_update.assert_not_called()
        assert self.registry.get_room_snapshot(self.code).game_state == GamePhase.STARTING

    def test_room_closing_mid_countdown_stops_it(self):
        runner = DeferredTaskRunner()
        scheduler = PhaseScheduler(self.broadcast_service, self.registry, runner)
        scheduler.start_countdown(self.code)

        def everyone_leaves(seconds):
            for sid in ['sid-host', 'sid-b', 'sid-c']:
                self.registry.remove_player(sid)
        runner.sleep_hook = everyone_leaves

        runner.run_all()

        self.broadcast_service.broadcast_countdown_update.assert_called_once_with(self.code, 3)
        self.broadcast_service.broadcast_phase_update.assert_not_called()
        assert not scheduler.has_active_countdown(self.code)

    def test_room_close_cancels_handle_synchronously(self):
        scheduler = PhaseScheduler(self.broadcast_service, self.registry, DeferredTaskRunner())
        scheduler.start_countdown(self.code)
        handle = scheduler._countdowns[self.code]

        for sid in ['sid-host', 'sid-b', 'sid-c']:
            self.registry.remove_player(sid)

        assert handle.cancelled
        assert not scheduler.has_active_countdown(self.code)

    def test_countdown_survives_non_empty_departures(self):
        runner = DeferredTaskRunner()
        scheduler = PhaseScheduler(self.broadcast_service, self.registry, runner)
        scheduler.start_countdown(self.code)
        self.registry.remove_player('sid-host')

        runner.run_all()

        self.broadcast_service.broadcast_phase_update.assert_called_once_with(self.code, 'drawing', 90)

    def test_stop_cancels_everything(self):
        scheduler = PhaseScheduler(self.broadcast_service, self.registry, DeferredTaskRunner())
        scheduler.start_countdown(self.code)

        scheduler.stop()

        assert not scheduler.has_active_countdown(self.code)

    def test_cancel_unknown_room(self):
        scheduler = PhaseScheduler(self.broadcast_service, self.registry, DeferredTaskRunner())
        assert scheduler.cancel('ZZZZZZ') is False

    def test_failed_countdown_returns_room_to_waiting(self):
        self.broadcast_service.broadcast_countdown_update.side_effect = RuntimeError('socket gone')
        scheduler = PhaseScheduler(self.broadcast_service, self.registry, ImmediateTaskRunner())

        scheduler.start_countdown(self.code)

        assert not scheduler.has_active_countdown(self.code)
        assert self.registry.get_room_snapshot(self.code).game_state == GamePhase.WAITING
        self.broadcast_service.broadcast_phase_update.assert_not_called()

        self.broadcast_service.broadcast_countdown_update.side_effect = None
        assert self.registry.start_game(self.code, 'sid-host') is True
        assert scheduler.start_countdown(self.code) is True
        assert self.registry.get_room_snapshot(self.code).game_state == GamePhase.DRAWING


class TestCountdownHandle:

    def test_cancel(self):
        handle = CountdownHandle('ABCDEF')
        assert handle.cancelled is False

        handle.cancel()

        assert handle.cancelled is True
