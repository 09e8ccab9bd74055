import logging
from utils import config

# config logging
logging.basicConfig(filename='running_log.log',
                    filemode='w',  # there are two modes: 'a' and 'w'
                    format='%(asctime)s - %(levelname)s - %(message)s',
                    level=config.LOGGING_LEVEL
                    )


class SolverNotConverged(RuntimeError):
    def __init__(self, iterations, p, tao):
        super().__init__('Fixed point not reached after %s iterations (p: %s, tao: %s)' % (iterations, p, tao))
        self.iterations = iterations
        self.p = p
        self.tao = tao


class TheoreticalSolver:
    """
    Bianchi's fixed-point model of the saturated DCF

    Two unknowns are coupled:
        tao = 2 / (1 + W + p * W * (1 - (2p)^m) / (1 - 2p))   (per-slot transmission probability of a station)
        p = 1 - (1 - tao)^(n - 1)                             (probability that a transmission collides)
    where n is the number of stations, W the minimum contention window and m the maximum backoff stage. The system is
    solved by damped fixed-point iteration on p, starting from p = 0.5. Without damping the iteration oscillates
    between two values once n reaches about 30 stations (W = 32, m = 4). At p = 0.5 the fraction above is a removable
    singularity whose limit is m, so it is substituted directly. The returned success probability is (1 - tao)^(n - 1)
    for the returned tao, so the pair is consistent and a single station succeeds with probability 1.

    Attributes:
        tolerance: iteration stops once two successive estimates of p differ by less than this
        max_iterations: the solver gives up with SolverNotConverged after this many iterations
        relaxation: weight of the previous estimate when computing the next one (0 means no damping)

    References:
        [1] G. Bianchi, "Performance Analysis of the IEEE 802.11 Distributed Coordination Function," IEEE Journal on
            Selected Areas in Communications, vol. 18, no. 3, pp. 535-547, 2000.
    """

    def __init__(self,
                 tolerance=config.SOLVER_TOLERANCE,
                 max_iterations=config.SOLVER_MAX_ITERATIONS,
                 relaxation=config.SOLVER_RELAXATION):
        if tolerance <= 0:
            raise ValueError('tolerance must be positive')
        if max_iterations < 1:
            raise ValueError('max_iterations must be at least 1')
        if not 0 <= relaxation < 1:
            raise ValueError('relaxation must be in [0, 1)')

        self.tolerance = tolerance
        self.max_iterations = max_iterations
        self.relaxation = relaxation

    @staticmethod
    def denominator(p, cw_min, max_backoff_stage):
        if p == 0.5:
            return 1.0 + cw_min + max_backoff_stage * cw_min * 0.5

        growth = (1.0 - (2.0 * p) ** max_backoff_stage) / (1.0 - 2.0 * p)
        return 1.0 + cw_min + p * cw_min * growth

    def calculate(self, station_count, cw_min, max_backoff_stage):
        """
        Solve the fixed point
        :param station_count: number of contending stations
        :param cw_min: minimum contention window
        :param max_backoff_stage: number of doublings before the contention window saturates
        :return: (tao, success probability of a transmission)
        """

        if station_count < 1:
            raise ValueError('At least one station is required')
        if cw_min < 1:
            raise ValueError('cw_min must be at least 1')
        if max_backoff_stage < 0:
            raise ValueError('max_backoff_stage must not be negative')

        p_current = 0.5
        tao = 0.0
        for iteration in range(1, self.max_iterations + 1):
            tao = 2.0 / self.denominator(p_current, cw_min, max_backoff_stage)
            p_success = (1.0 - tao) ** (station_count - 1)
            p_next = (1.0 - self.relaxation) * (1.0 - p_success) + self.relaxation * p_current

            p_diff = abs(p_next - p_current)
            p_current = p_next
            if p_diff < self.tolerance:
                logging.info('Theoretical calculation converged after %s iterations: p_success: %s, tao: %s',
                             iteration, p_success, tao)
                return tao, p_success

        raise SolverNotConverged(self.max_iterations, p_current, tao)

    @staticmethod
    def saturation_throughput(station_count, tao, timing=None, use_rts_cts=False):
        """
        Bianchi's saturation throughput for a given per-slot transmission probability
        :param station_count: number of contending stations
        :param tao: per-slot transmission probability of one station
        :param timing: DcfTiming of the simulated system
        :param use_rts_cts: access mode
        :return: throughput in bits per microsecond (Mbit/s)
        """

        timing = timing if timing is not None else config.TIMING
        p_idle = (1.0 - tao) ** station_count
        p_tr = 1.0 - p_idle  # at least one transmission in the slot
        if p_tr == 0.0:
            return 0.0
        p_s = station_count * tao * (1.0 - tao) ** (station_count - 1) / p_tr  # exactly one, given at least one

        duration = timing.transmit_duration(use_rts_cts) + timing.propagation_delay
        t_s = duration + timing.success_deferral(use_rts_cts)
        t_c = duration + timing.collision_deferral(use_rts_cts)

        slot_length = p_idle * timing.slot + p_tr * p_s * t_s + p_tr * (1.0 - p_s) * t_c
        return p_s * p_tr * timing.payload_bits / slot_length


def calculate(station_count, cw_min, max_backoff_stage):
    return TheoreticalSolver().calculate(station_count, cw_min, max_backoff_stage)
