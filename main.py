from utils import config
from simulator.simulator import Simulator, sweep
from drawing.sweep_plot import sweep_plot

"""
  ____    ____   _____
 |  _ \  / ___| |  ___|
 | | | || |     | |_
 | |_| || |___  |  _|
 |____/  \____| |_|

"""

if __name__ == "__main__":
    print('... DCF simulator is started ...')

    sim = Simulator(seed=config.SEED, n_stations=config.NUMBER_OF_STATIONS, use_rts_cts=config.USE_RTS_CTS,
                    cw_min=config.CW_MIN, cw_max=config.CW_MAX)

    tao, p_success = sim.theoretical()
    print('Theoretical calculations: p_success: ', p_success, ', tao: ', tao)
    print('Theoretical throughput: ', sim.theoretical_throughput(), 'Mbps')

    sim.run()
    sim.metrics.print_metrics()

    if config.PLOT_SWEEP:
        sweep_plot(sweep(config.SWEEP_STATION_COUNTS))
