import matplotlib.pyplot as plt
import numpy as np


# compare the simulated and theoretical results of a sweep over the number of stations
def sweep_plot(rows, show=True):
    n_stations = np.array([row['n_stations'] for row in rows])

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(10, 4))

    ax1.plot(n_stations, [row['simulated_success'] for row in rows], marker='o', color='orangered',
             label='Simulation')
    ax1.plot(n_stations, [row['theoretical_success'] for row in rows], linestyle='dashed', color='cornflowerblue',
             label='Bianchi model')
    ax1.set_ylim(0, 1)
    ax1.set_xlabel("Number of stations")
    ax1.set_ylabel("Success probability")
    ax1.legend()

    ax2.plot(n_stations, [row['simulated_throughput'] for row in rows], marker='o', color='orangered',
             label='Simulation')
    ax2.plot(n_stations, [row['theoretical_throughput'] for row in rows], linestyle='dashed', color='cornflowerblue',
             label='Bianchi model')
    ax2.set_ylim(bottom=0)
    ax2.set_xlabel("Number of stations")
    ax2.set_ylabel("Throughput (Mbps)")
    ax2.legend()

    fig.tight_layout()
    if show:
        plt.show()

    return fig
