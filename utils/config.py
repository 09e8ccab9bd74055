import logging
from utils.ieee_802_11 import IEEE_802_11, DcfTiming

IEEE_802_11 = IEEE_802_11().fhss

# --------------------- simulation parameters --------------------- #
NUMBER_OF_STATIONS = 10  # number of saturated stations sharing the channel
SAMPLE_THRESHOLD = 10000  # stop once one station has collected more samples than this
SEED = 2025  # station i draws its backoffs from random.Random(SEED + i)
START_TIME = 1  # us, time of the first backoff tick of every station
PROGRESS_INTERVAL = 1 * 1e6  # us, the simulation progress is logged every 1s of simulated time
LOGGING_LEVEL = logging.INFO  # whether to print the detail information during simulation

# --------------------- mac layer parameters --------------------- #
CW_MIN = 32
MAX_BACKOFF_STAGE = 4  # number of doublings before the contention window saturates
CW_MAX = CW_MIN * (2 ** MAX_BACKOFF_STAGE)
USE_RTS_CTS = False

# ------------------ physical layer parameters ------------------- #
TIMING = DcfTiming.from_profile(IEEE_802_11)
SLOT_DURATION = TIMING.slot
SIFS_DURATION = TIMING.sifs
DIFS_DURATION = TIMING.difs
PROPAGATION_DELAY = TIMING.propagation_delay
DATA_PACKET_PAYLOAD_LENGTH = TIMING.payload_bits

# ---------------------- theoretical model ----------------------- #
SOLVER_TOLERANCE = 1e-4
SOLVER_MAX_ITERATIONS = 10000
SOLVER_RELAXATION = 0.5  # weight of the previous estimate, plain iteration oscillates from about 30 stations on

# ----------------------------- sweep ----------------------------- #
PLOT_SWEEP = False  # run a sweep over SWEEP_STATION_COUNTS after the main run and plot it
SWEEP_STATION_COUNTS = [5, 10, 20, 30, 40, 50]
SWEEP_SAMPLE_THRESHOLD = 2000
