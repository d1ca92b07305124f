"""Tests for retrykit.connectivity module."""

from retrykit.connectivity import (
    ConnectivityMonitor,
    ConnectivitySource,
    ConnectivityState,
    ConnectivityTransition,
    ManualConnectivitySource,
    get_connectivity_monitor,
    reset_connectivity_monitor,
)


class UnknownSource(ManualConnectivitySource):
    """Source whose status cannot be determined."""

    def is_online(self):
        return None


class BrokenSource(ManualConnectivitySource):
    def is_online(self):
        raise RuntimeError("status probe failed")


class TestManualConnectivitySource:
    """Tests for ManualConnectivitySource."""

    def test_satisfies_protocol(self):
        assert isinstance(ManualConnectivitySource(), ConnectivitySource)

    def test_emits_signals(self, source):
        seen: list[str] = []
        source.add_listener("offline", lambda: seen.append("offline"))
        source.add_listener("online", lambda: seen.append("online"))

        source.go_offline()
        source.go_online()

        assert seen == ["offline", "online"]
        assert source.is_online() is True

    def test_remove_unknown_handler_is_ignored(self, source):
        source.remove_listener("online", lambda: None)
        assert source.listener_count("online") == 0


class TestInitialState:
    """Tests for the monitor's initial state."""

    def test_starts_online(self, source):
        monitor = ConnectivityMonitor(source)
        assert monitor.state == ConnectivityState(is_online=True, was_offline=False)

    def test_starts_offline_when_host_is_offline(self):
        monitor = ConnectivityMonitor(ManualConnectivitySource(online=False))
        assert monitor.is_online is False
        assert monitor.was_offline is False

    def test_undeterminable_status_defaults_online(self):
        assert ConnectivityMonitor(UnknownSource()).is_online is True

    def test_failing_status_probe_defaults_online(self):
        assert ConnectivityMonitor(BrokenSource()).is_online is True

    def test_subscribes_to_both_signals(self, source):
        ConnectivityMonitor(source)
        assert source.listener_count("offline") == 1
        assert source.listener_count("online") == 1


class TestTransitions:
    """Tests for offline/online transitions."""

    def test_offline_sets_was_offline(self, source):
        monitor = ConnectivityMonitor(source)

        source.go_offline()

        assert monitor.is_online is False
        assert monitor.was_offline is True

    def test_online_after_offline_consumes_flag(self, source):
        monitor = ConnectivityMonitor(source)
        source.go_offline()

        source.go_online()

        assert monitor.state == ConnectivityState(is_online=True, was_offline=False)

    def test_recovered_flag_is_observable(self, source):
        """Test listeners see the recovery before the flag resets."""
        monitor = ConnectivityMonitor(source)
        transitions: list[ConnectivityTransition] = []
        monitor.subscribe(transitions.append)

        source.go_offline()
        source.go_online()

        assert len(transitions) == 2
        lost, back = transitions
        assert lost.went_offline and not lost.recovered
        assert lost.current.was_offline is True
        assert back.recovered and not back.went_offline
        assert back.previous.was_offline is True
        assert back.current.was_offline is False

    def test_duplicate_signals_are_ignored(self, source):
        monitor = ConnectivityMonitor(source)
        transitions: list[ConnectivityTransition] = []
        monitor.subscribe(transitions.append)

        source.go_offline()
        source.go_offline()
        source.go_online()
        source.go_online()

        assert len(transitions) == 2

    def test_online_without_prior_offline_is_not_recovery(self):
        source = ManualConnectivitySource(online=False)
        monitor = ConnectivityMonitor(source)
        transitions: list[ConnectivityTransition] = []
        monitor.subscribe(transitions.append)

        source.go_online()

        assert monitor.is_online is True
        assert len(transitions) == 1
        assert not transitions[0].recovered

    def test_unsubscribe(self, source):
        monitor = ConnectivityMonitor(source)
        transitions: list[ConnectivityTransition] = []
        unsubscribe = monitor.subscribe(transitions.append)

        unsubscribe()
        unsubscribe()
        source.go_offline()

        assert transitions == []
        assert monitor.listener_count == 0

    def test_failing_listener_does_not_block_others(self, source):
        monitor = ConnectivityMonitor(source)
        transitions: list[ConnectivityTransition] = []

        def broken(transition):
            raise RuntimeError("listener bug")

        monitor.subscribe(broken)
        monitor.subscribe(transitions.append)
        source.go_offline()

        assert len(transitions) == 1
        assert monitor.is_online is False


class TestTeardown:
    """Tests for close()."""

    def test_close_unsubscribes_from_source(self, source):
        monitor = ConnectivityMonitor(source)

        monitor.close()

        assert monitor.closed
        assert source.listener_count("offline") == 0
        assert source.listener_count("online") == 0

    def test_closed_monitor_ignores_signals(self, source):
        monitor = ConnectivityMonitor(source)
        monitor.close()
        monitor.close()

        source.go_offline()

        assert monitor.is_online is True

    def test_context_manager(self, source):
        with ConnectivityMonitor(source) as monitor:
            source.go_offline()
            assert monitor.was_offline
        assert source.listener_count("offline") == 0


class TestDefaultMonitor:
    """Tests for the process-wide monitor."""

    def test_single_instance(self, source):
        first = get_connectivity_monitor(source)
        assert get_connectivity_monitor() is first
        assert first.source is source

    def test_reset_closes_instance(self, source):
        first = get_connectivity_monitor(source)

        reset_connectivity_monitor()

        assert first.closed
        assert get_connectivity_monitor() is not first

    def test_recreated_after_close(self):
        first = get_connectivity_monitor()
        first.close()
        assert get_connectivity_monitor() is not first
