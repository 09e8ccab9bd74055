import random
import logging
import simpy
from collections import Counter
from entities.event import Event, EventType
from entities.station import Station, InvariantViolation
from phy.channel import Channel
from utils import config

# config logging
logging.basicConfig(filename='running_log.log',
                    filemode='w',  # there are two modes: 'a' and 'w'
                    format='%(asctime)s - %(levelname)s - %(message)s',
                    level=config.LOGGING_LEVEL
                    )


class Scheduler:
    """
    Discrete-event scheduler of the DCF simulation

    The pending events live in a simpy environment. Its queue is a binary heap ordered by (time, priority, insertion
    id), all our events share the same priority, so events with the same time are dispatched in the order in which they
    were scheduled. This keeps runs reproducible.

    The scheduler is the only place where stations interact: it owns the channel, routes every event to the station it
    addresses and fans out channel-occupancy notifications to all stations when a transmission starts or when the
    busy period is over.

    Attributes:
        env: simulation environment created by simpy, used as the event queue and the clock
        use_rts_cts: access mode
        timing: DcfTiming shared by all stations
        sample_threshold: the run stops once a station has more samples than this
        stations: a list, contains all stations in the simulation
        channel: the shared channel, keeps track of the current busy period
        violations: InvariantViolation raised by the stations so far, the corresponding events were dropped
        event_counts: number of dispatched events per (EventType, station identifier)
        stopped: set when enough samples have been collected
        exhausted: set when the event queue ran dry, which means the model is broken
    """

    def __init__(self,
                 station_count,
                 use_rts_cts=config.USE_RTS_CTS,
                 cw_min=config.CW_MIN,
                 cw_max=config.CW_MAX,
                 timing=None,
                 seed=None,
                 sample_threshold=config.SAMPLE_THRESHOLD,
                 start_time=config.START_TIME):

        if station_count < 1:
            raise ValueError('At least one station is required')

        self.env = simpy.Environment()
        self.use_rts_cts = use_rts_cts
        self.timing = timing if timing is not None else config.TIMING
        self.sample_threshold = sample_threshold

        self.channel = Channel()
        self.violations = []
        self.event_counts = Counter()
        self.pending_events = 0
        self.stopped = False
        self.exhausted = False

        self.stations = []
        for i in range(station_count):
            rng = random.Random(seed + i) if seed is not None else random.Random()
            station = Station(i, cw_min, cw_max, use_rts_cts=use_rts_cts, timing=self.timing, rng=rng)
            self.stations.append(station)
            self.schedule(Event(EventType.DECREMENT_BACKOFF, station.identifier, start_time))

        logging.info('Scheduler created with %s stations, cw_min: %s, cw_max: %s, RTS/CTS: %s',
                     station_count, cw_min, cw_max, use_rts_cts)

    @property
    def now(self):
        return self.env.now

    @property
    def active_transmitters(self):
        return self.channel.active_transmitters

    @property
    def round_is_collision_free(self):
        return self.channel.collision_free

    @property
    def rounds(self):
        return Counter(self.channel.rounds)

    def schedule(self, event):
        """
        Add an event to the queue
        :param event: the event, it must not be dated before the current time
        :return: none
        """

        if event.time < self.env.now:
            raise ValueError('Cannot schedule %s in the past (now: %s)' % (event, self.env.now))

        timeout = self.env.timeout(event.time - self.env.now, value=event)
        timeout.callbacks.append(self._dispatch)
        self.pending_events += 1

    def step(self):
        """
        Dispatch the earliest pending event
        :return: False when the simulation cannot or should not go on, True otherwise
        """

        if self.env.peek() == simpy.core.Infinity:
            logging.error('No more events in the queue at: %s', self.env.now)
            self.exhausted = True
            return False

        if self.stopped:
            logging.info('Enough stats collected at: %s', self.env.now)
            return False

        self.env.step()
        return True

    def pending(self):
        # events still in the simpy queue, in no particular order
        return [timeout.value for _, _, _, timeout in self.env._queue]

    def statistics(self):
        return [station.get_stats() for station in self.stations]

    def transmitting_stations(self):
        return sum(1 for station in self.stations if station.transmitting)

    def stations_in_state(self, state):
        return sum(1 for station in self.stations if station.state is state)

    def _dispatch(self, timeout):
        event = timeout.value
        self.pending_events -= 1
        self.event_counts[(event.kind, event.station_id)] += 1
        station = self.stations[event.station_id]

        logging.debug('At time: %s, dispatch %s', self.env.now, event)

        if event.kind is EventType.DECREMENT_BACKOFF:
            next_event = self._call(station.decrement_backoff, event.time, event.epoch)
            if next_event is not None:
                self.schedule(next_event)

        elif event.kind is EventType.START_TRANSMIT:
            next_event = self._call(station.start_transmit, event.time)
            if next_event is None:
                return

            self.channel.start_transmission()
            if not self.channel.collision_free:
                logging.debug('At time: %s, collision caused by station: %s', event.time, station.identifier)
            self.schedule(next_event)

            for other in self.stations:
                other.notify_channel(event.time, occupied=True)

        elif event.kind is EventType.END_TRANSMIT:
            success = self.channel.collision_free
            station.end_transmit(success)

            _, channel_free = self.channel.end_transmission()
            if channel_free:
                for other in self.stations:
                    next_event = other.notify_channel(event.time, occupied=False, round_succeeded=success,
                                                      use_rts_cts=self.use_rts_cts)
                    if next_event is not None:
                        self.schedule(next_event)

            if station.samples > self.sample_threshold:
                logging.info('Station: %s collected %s samples at: %s', station.identifier, station.samples,
                             event.time)
                self.stopped = True

        else:
            raise AssertionError('unhandled event kind %s' % event.kind)

    def _call(self, handler, now, *args):
        try:
            return handler(now, *args)
        except InvariantViolation as e:
            logging.error('ERROR at time: %s, %s', now, e)
            self.violations.append(e)
            return None

