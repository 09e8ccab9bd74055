import random
import pytest
from entities.event import Event, EventType
from entities.station import Station, StationState, InvariantViolation
from utils.ieee_802_11 import DcfTiming

TIMING = DcfTiming()


def make_station(cw_min=32, cw_max=512, use_rts_cts=False, seed=1):
    return Station(0, cw_min, cw_max, use_rts_cts=use_rts_cts, timing=TIMING, rng=random.Random(seed))


def test_new_station():
    station = make_station()
    assert station.state is StationState.BACKOFF
    assert 0 <= station.backoff_counter < 32
    assert station.contention_window == 32
    assert station.get_stats() == (0, 0, 0)
    assert not station.transmitting


def test_invalid_windows():
    with pytest.raises(ValueError):
        Station(0, 0, 32)
    with pytest.raises(ValueError):
        Station(0, 64, 32)


def test_decrement_counts_down_one_slot():
    station = make_station()
    station.backoff_counter = 2
    event = station.decrement_backoff(10)
    assert event == Event(EventType.DECREMENT_BACKOFF, 0, 10 + TIMING.slot)
    assert station.backoff_counter == 1
    assert station.state is StationState.BACKOFF


def test_exhausted_backoff_starts_transmission():
    station = make_station()
    station.backoff_counter = 0
    event = station.decrement_backoff(10)
    assert event == Event(EventType.START_TRANSMIT, 0, 10 + TIMING.propagation_delay)
    assert station.state is StationState.IN_TRANSMIT


def test_decrement_is_ignored_while_waiting_channel():
    station = make_station()
    station.backoff_counter = 5
    station.state = StationState.WAIT_CHANNEL
    assert station.decrement_backoff(10) is None
    assert station.backoff_counter == 5


def test_decrement_while_in_transmit_is_a_violation():
    station = make_station()
    station.backoff_counter = 0
    station.decrement_backoff(10)
    with pytest.raises(InvariantViolation) as info:
        station.decrement_backoff(11)
    assert info.value.station_id == 0
    assert info.value.operation == 'decrement_backoff'


def test_start_transmit_basic_and_rts_cts():
    for use_rts_cts, duration in ((False, TIMING.data_frame), (True, TIMING.rts_frame)):
        station = make_station(use_rts_cts=use_rts_cts)
        station.backoff_counter = 0
        station.decrement_backoff(10)
        event = station.start_transmit(11)
        assert event == Event(EventType.END_TRANSMIT, 0, 11 + duration)
        assert station.transmitting


def test_start_transmit_with_pending_backoff_is_a_violation():
    station = make_station()
    station.backoff_counter = 3
    station.state = StationState.IN_TRANSMIT
    with pytest.raises(InvariantViolation) as info:
        station.start_transmit(10)
    assert info.value.operation == 'start_transmit'
    assert not station.transmitting


def test_start_transmit_outside_in_transmit_is_a_violation():
    station = make_station()
    station.backoff_counter = 0
    with pytest.raises(InvariantViolation):
        station.start_transmit(10)


def test_success_resets_contention_window():
    station = make_station()
    station.contention_window = 128
    station.state = StationState.IN_TRANSMIT
    station.end_transmit(True)

    assert station.get_stats() == (1, 0, TIMING.payload_bits)
    assert station.contention_window == 32
    assert 0 <= station.backoff_counter < 32
    assert station.state is StationState.WAIT_CHANNEL


def test_failure_doubles_contention_window_up_to_cw_max():
    station = make_station(cw_min=32, cw_max=128)
    windows = []
    for _ in range(4):
        station.end_transmit(False)
        windows.append(station.contention_window)
        assert 0 <= station.backoff_counter < station.contention_window

    assert windows == [64, 128, 128, 128]
    assert station.get_stats() == (0, 4, 0)


def test_channel_occupied_freezes_backoff():
    station = make_station()
    station.backoff_counter = 7
    assert station.notify_channel(10, occupied=True) is None
    assert station.state is StationState.WAIT_CHANNEL
    assert station.backoff_counter == 7


@pytest.mark.parametrize('round_succeeded, use_rts_cts', [(True, False), (False, False), (True, True), (False, True)])
def test_channel_free_resumes_backoff_after_deferral(round_succeeded, use_rts_cts):
    station = make_station()
    station.state = StationState.WAIT_CHANNEL
    event = station.notify_channel(100, occupied=False, round_succeeded=round_succeeded, use_rts_cts=use_rts_cts)
    assert event == Event(EventType.DECREMENT_BACKOFF, 0, 100 + TIMING.deferral(round_succeeded, use_rts_cts))
    assert station.state is StationState.BACKOFF


def test_notifications_without_transition():
    station = make_station()
    assert station.notify_channel(10, occupied=False, round_succeeded=True) is None
    assert station.state is StationState.BACKOFF

    station.state = StationState.IN_TRANSMIT
    assert station.notify_channel(10, occupied=True) is None
    assert station.notify_channel(10, occupied=False) is None
    assert station.state is StationState.IN_TRANSMIT


def test_same_seed_draws_same_backoffs():
    first, second = make_station(seed=5), make_station(seed=5)
    for _ in range(10):
        first.end_transmit(False)
        second.end_transmit(False)
        assert first.backoff_counter == second.backoff_counter


def test_tick_issued_before_freeze_is_stale():
    station = make_station()
    station.backoff_counter = 5
    stale = station.decrement_backoff(0)
    assert station.backoff_counter == 4

    station.notify_channel(10, occupied=True)
    resumed = station.notify_channel(20, occupied=False, round_succeeded=False)
    assert resumed.epoch == stale.epoch + 1

    # the channel freed up before the old tick arrived, it must not count down
    assert station.decrement_backoff(stale.time, stale.epoch) is None
    assert station.backoff_counter == 4

    event = station.decrement_backoff(resumed.time, resumed.epoch)
    assert station.backoff_counter == 3
    assert event.epoch == resumed.epoch
