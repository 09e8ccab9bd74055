import logging
from utils import config

# config logging
logging.basicConfig(filename='running_log.log',
                    filemode='w',  # there are two modes: 'a' and 'w'
                    format='%(asctime)s - %(levelname)s - %(message)s',
                    level=config.LOGGING_LEVEL
                    )


class Channel:
    """
    Shared wireless channel

    The channel only keeps track of the current busy period ("round"): how many stations are transmitting and whether
    more than one transmission has started since the channel became busy. A round succeeds iff exactly one
    transmission took place in it, otherwise every participant fails.

    Attributes:
        active_transmitters: number of stations currently transmitting
        collision_free: False as soon as a second transmission overlaps the current busy period
        rounds: number of finished busy periods, split into successful ones and collisions
    """

    def __init__(self):
        self.active_transmitters = 0
        self.collision_free = True
        self.rounds = {'success': 0, 'collision': 0}

    def is_busy(self):
        return self.active_transmitters > 0

    def start_transmission(self):
        if self.active_transmitters > 0:
            self.collision_free = False  # collision occurs
        self.active_transmitters += 1

    def end_transmission(self):
        """
        Release the channel for one transmitter
        :return: (outcome of the round, whether the busy period is over)
        """

        if self.active_transmitters == 0:
            raise RuntimeError('No transmission is in progress')

        success = self.collision_free
        self.active_transmitters -= 1
        if self.active_transmitters > 0:
            return success, False

        # the busy period has ended, get ready for the next one
        self.rounds['success' if success else 'collision'] += 1
        self.collision_free = True
        logging.debug('Busy period ended, success: %s', success)
        return success, True
