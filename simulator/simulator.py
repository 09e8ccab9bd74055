import logging
from simulator.scheduler import Scheduler
from simulator.metrics import Metrics
from utils import config
from utils.theoretical import TheoreticalSolver

# config logging
logging.basicConfig(filename='running_log.log',
                    filemode='w',  # there are two modes: 'a' and 'w'
                    format='%(asctime)s - %(levelname)s - %(message)s',
                    level=config.LOGGING_LEVEL
                    )


def backoff_stages(cw_min, cw_max):
    # number of doublings after which the contention window stops growing
    stage = 0
    window = cw_min
    while window < cw_max:
        window *= 2
        stage += 1
    return stage


class Simulator:
    """
    Description:
        drives one run of the DCF simulation and compares it with the theoretical model

    Attributes:
        scheduler: the discrete-event scheduler that contains all stations
        metrics: used to summarize the statistics collected by the stations
        solver: Bianchi fixed-point solver used as a sanity check
        progress_interval: the simulated time is logged every time it advances by this much (us)
        progress_reports: number of progress lines logged so far
    """

    def __init__(self,
                 seed,
                 n_stations,
                 use_rts_cts=config.USE_RTS_CTS,
                 cw_min=config.CW_MIN,
                 cw_max=config.CW_MAX,
                 timing=None,
                 sample_threshold=config.SAMPLE_THRESHOLD,
                 progress_interval=config.PROGRESS_INTERVAL,
                 solver=None):

        self.n_stations = n_stations
        self.use_rts_cts = use_rts_cts
        self.cw_min = cw_min
        self.cw_max = cw_max
        self.progress_interval = progress_interval
        self.progress_reports = 0

        self.scheduler = Scheduler(n_stations, use_rts_cts=use_rts_cts, cw_min=cw_min, cw_max=cw_max, timing=timing,
                                   seed=seed, sample_threshold=sample_threshold)
        self.metrics = Metrics(self.scheduler)
        self.solver = solver if solver is not None else TheoreticalSolver()

    def run(self):
        """
        Step the scheduler until it stops
        :return: number of dispatched events
        """

        dispatched = 0
        next_report = self.progress_interval
        while self.scheduler.step():
            dispatched += 1
            if self.scheduler.now >= next_report:
                logging.info('At time: %s s, %s events dispatched', self.scheduler.now / 1e6, dispatched)
                self.progress_reports += 1
                # a single event may jump over several intervals
                while next_report <= self.scheduler.now:
                    next_report += self.progress_interval

        if self.scheduler.exhausted:
            logging.error('Simulation halted: event queue exhausted before enough samples were collected')

        return dispatched

    def theoretical(self):
        max_backoff_stage = backoff_stages(self.cw_min, self.cw_max)
        return self.solver.calculate(self.n_stations, self.cw_min, max_backoff_stage)

    def theoretical_throughput(self):
        tao, _ = self.theoretical()
        return self.solver.saturation_throughput(self.n_stations, tao, self.scheduler.timing, self.use_rts_cts)


def sweep(station_counts,
          seed=config.SEED,
          use_rts_cts=config.USE_RTS_CTS,
          cw_min=config.CW_MIN,
          cw_max=config.CW_MAX,
          timing=None,
          sample_threshold=config.SWEEP_SAMPLE_THRESHOLD):
    """
    Run one simulation per number of stations
    :param station_counts: numbers of stations to simulate
    :return: a list of dictionaries, one per simulation
    """

    rows = []
    for n_stations in station_counts:
        sim = Simulator(seed=seed, n_stations=n_stations, use_rts_cts=use_rts_cts, cw_min=cw_min, cw_max=cw_max,
                        timing=timing, sample_threshold=sample_threshold)
        sim.run()
        tao, p_success = sim.theoretical()

        rows.append({'n_stations': n_stations,
                     'simulated_success': sim.metrics.pooled_success_probability(),
                     'theoretical_success': p_success,
                     'simulated_throughput': sim.metrics.throughput(),
                     'theoretical_throughput': sim.solver.saturation_throughput(n_stations, tao,
                                                                                sim.scheduler.timing,
                                                                                use_rts_cts)})
        logging.info('Sweep point: %s', rows[-1])

    return rows
