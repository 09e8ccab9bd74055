import logging
import random
from enum import Enum
from entities.event import Event, EventType
from utils import config

# config logging
logging.basicConfig(filename='running_log.log',
                    filemode='w',  # there are two modes: 'a' and 'w'
                    format='%(asctime)s - %(levelname)s - %(message)s',
                    level=config.LOGGING_LEVEL
                    )


class StationState(Enum):
    BACKOFF = 'Backoff'
    WAIT_CHANNEL = 'Wait Channel'
    IN_TRANSMIT = 'In TX'

    def __str__(self):
        return self.value


class InvariantViolation(Exception):
    """A station handler was called in a state the DCF model never produces"""

    def __init__(self, station_id, operation, message):
        super().__init__('station %s, %s: %s' % (station_id, operation, message))
        self.station_id = station_id
        self.operation = operation


class Station:
    """
    Saturated 802.11 station running the DCF

    The station always has a packet to send. It counts its backoff down slot by slot while the channel is idle, freezes
    the counter while the channel is occupied, and transmits when the counter is exhausted. After every transmission
    the contention window is reset (success) or doubled (failure) and a new backoff is drawn.

    The state machine is:
        Backoff --(counter exhausted)--> InTransmit --(transmission ends)--> WaitChannel --(channel free)--> Backoff
        Backoff --(channel occupied)--> WaitChannel

    Handlers never touch other stations or the channel, they only return the next event (or None) and the scheduler
    takes care of the rest.

    Attributes:
        identifier: used to uniquely represent a station
        cw_min: minimum contention window
        cw_max: maximum contention window
        contention_window: current contention window
        use_rts_cts: access mode, selects the duration of the exposed transmission
        backoff_counter: remaining backoff slots
        state: current state of the DCF state machine
        transmitting: True between an accepted transmit-start and the matching transmit-end
        epoch: incremented whenever the backoff is frozen, every DecrementBackoff carries the epoch it was issued in
        timing: DcfTiming used to date the returned events
        rng: random source for the backoff draws
        success_count: number of transmissions that did not collide
        fail_count: number of transmissions that collided
        transmitted_bits: payload delivered successfully
    """

    def __init__(self, station_id, cw_min, cw_max, use_rts_cts=False, timing=None, rng=None):
        if cw_min < 1:
            raise ValueError('cw_min must be at least 1')
        if cw_max < cw_min:
            raise ValueError('cw_max must not be smaller than cw_min')

        self.identifier = station_id
        self.cw_min = cw_min
        self.cw_max = cw_max
        self.contention_window = cw_min
        self.use_rts_cts = use_rts_cts
        self.timing = timing if timing is not None else config.TIMING
        self.rng = rng if rng is not None else random.Random()

        self.backoff_counter = self.rng.randrange(cw_min)
        self.state = StationState.BACKOFF
        self.transmitting = False
        self.epoch = 0

        self.success_count = 0
        self.fail_count = 0
        self.transmitted_bits = 0

        logging.debug('Station: %s created with backoff: %s', self.identifier, self.backoff_counter)

    @property
    def samples(self):
        return self.success_count + self.fail_count

    def get_stats(self):
        return self.success_count, self.fail_count, self.transmitted_bits

    def decrement_backoff(self, now, epoch=None):
        """
        One backoff slot has elapsed
        :param now: current simulation time
        :param epoch: epoch carried by the tick, None to skip the check
        :return: the next DecrementBackoff, or the StartTransmit once the counter is exhausted, or None when frozen
        """

        if epoch is not None and epoch != self.epoch:
            # tick issued before the last freeze
            return None

        if self.state is StationState.BACKOFF:
            if self.backoff_counter > 0:
                self.backoff_counter -= 1
                return Event(EventType.DECREMENT_BACKOFF, self.identifier, now + self.timing.slot, self.epoch)
            else:
                # the transmission becomes visible after the propagation delay, other stations whose counter runs
                # out within this window will collide with us
                self.state = StationState.IN_TRANSMIT
                return Event(EventType.START_TRANSMIT, self.identifier, now + self.timing.propagation_delay)
        elif self.state is StationState.WAIT_CHANNEL:
            # backoff is frozen while the channel is busy, the stale tick is dropped
            return None
        elif self.state is StationState.IN_TRANSMIT:
            raise InvariantViolation(self.identifier, 'decrement_backoff', 'station is in transmission')
        else:
            raise AssertionError('unhandled state %s' % self.state)

    def start_transmit(self, now):
        """
        The transmission starts on the channel
        :param now: current simulation time
        :return: the EndTransmit event of this transmission
        """

        if self.backoff_counter != 0:
            raise InvariantViolation(self.identifier, 'start_transmit',
                                     'backoff was not 0: %s' % self.backoff_counter)

        if self.state is not StationState.IN_TRANSMIT:
            raise InvariantViolation(self.identifier, 'start_transmit', 'station was not In TX: %s' % self.state)

        self.transmitting = True
        duration = self.timing.transmit_duration(self.use_rts_cts)
        return Event(EventType.END_TRANSMIT, self.identifier, now + duration)

    def end_transmit(self, success):
        """
        Collect statistics when the transmission ends
        :param success: whether the busy period carried no other transmission
        :return: none
        """

        if success:
            self.success_count += 1
            self.transmitted_bits += self.timing.payload_bits
            self.contention_window = self.cw_min
        else:
            self.fail_count += 1
            self.contention_window = min(self.contention_window * 2, self.cw_max)

        self.backoff_counter = self.rng.randrange(self.contention_window)
        self.state = StationState.WAIT_CHANNEL
        self.transmitting = False

    def notify_channel(self, now, occupied, round_succeeded=False, use_rts_cts=False):
        """
        The scheduler tells every station when the channel becomes occupied or free
        :param now: current simulation time
        :param occupied: True when a transmission has started, False when the busy period is over
        :param round_succeeded: outcome of the busy period that just ended (only meaningful when the channel is free)
        :param use_rts_cts: access mode, selects the deferral
        :return: a DecrementBackoff when the station resumes its backoff, otherwise None
        """

        if occupied and self.state is StationState.BACKOFF:
            # freeze the backoff, the pending tick belongs to the old epoch
            self.state = StationState.WAIT_CHANNEL
            self.epoch += 1
            return None
        elif not occupied and self.state is StationState.WAIT_CHANNEL:
            # wait for the rest of the exchange (or only DIFS after a collision) before counting down again
            self.state = StationState.BACKOFF
            deferral = self.timing.deferral(round_succeeded, use_rts_cts)
            return Event(EventType.DECREMENT_BACKOFF, self.identifier, now + deferral, self.epoch)
        else:
            return None

    def __repr__(self):
        return 'Station(%s, state=%s, backoff=%s, cw=%s)' % (self.identifier, self.state, self.backoff_counter,
                                                            self.contention_window)
