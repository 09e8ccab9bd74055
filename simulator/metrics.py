import numpy as np


class Metrics:
    """
    Tools for statistics of the DCF performance

    1. Success probability: for each station, the ratio of transmissions that did not collide to all the transmissions
       it attempted. The pooled value divides the total successes by the total attempts of all stations
    2. Throughput: payload delivered by all stations divided by the elapsed simulation time. Times are in microseconds,
       so bits per microsecond is directly Mbit/s
    3. Collision ratio: share of the busy periods that ended in a collision

    Stations that never finished a transmission have an undefined success probability (NaN).
    """

    def __init__(self, scheduler):
        self.scheduler = scheduler

    def success_counts(self):
        return np.array([station.success_count for station in self.scheduler.stations])

    def fail_counts(self):
        return np.array([station.fail_count for station in self.scheduler.stations])

    def success_probabilities(self):
        success = self.success_counts().astype(float)
        attempts = success + self.fail_counts()
        with np.errstate(invalid='ignore', divide='ignore'):
            return np.where(attempts > 0, success / attempts, np.nan)

    def pooled_success_probability(self):
        attempts = self.success_counts().sum() + self.fail_counts().sum()
        if attempts == 0:
            return float('nan')
        return float(self.success_counts().sum() / attempts)

    def throughput(self):
        elapsed = self.scheduler.now
        if elapsed == 0:
            return 0.0
        transmitted_bits = sum(station.transmitted_bits for station in self.scheduler.stations)
        return transmitted_bits / elapsed

    def collision_ratio(self):
        rounds = self.scheduler.rounds
        total = rounds['success'] + rounds['collision']
        if total == 0:
            return float('nan')
        return rounds['collision'] / total

    def print_metrics(self):
        print('*******************Simulation results*******************')
        for station, probability in zip(self.scheduler.stations, self.success_probabilities()):
            print('Station: ', station.identifier, ' prob success: ', probability,
                  ' (', station.success_count, ' success, ', station.fail_count, ' fail)')

        print('Average success probability is: ', np.nanmean(self.success_probabilities()))
        print('Pooled success probability is: ', self.pooled_success_probability())
        print('Aggregate throughput is: ', self.throughput(), 'Mbps')
        print('Collision ratio of busy periods is: ', self.collision_ratio())
        print('Simulated time is: ', self.scheduler.now / 1e6, ' s')
        if self.scheduler.violations:
            print('Invariant violations: ', len(self.scheduler.violations))
        print('*******************Simulation results*******************')
