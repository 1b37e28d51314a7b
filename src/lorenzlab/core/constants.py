"""Project-wide defaults for the Lorenz explorer."""

LORENZ_SIGMA = 10.0
LORENZ_BETA = 8.0 / 3.0
LORENZ_RHO = 28.0

DEFAULT_N_TRAJECTORIES = 10
DEFAULT_MAX_TIME = 4.0
DEFAULT_DENSITY = 250  # samples per unit of time
DEFAULT_SEED = 0

IC_LOW = -15.0
IC_HIGH = 15.0
IC_STRATEGY = "uniform"
PERTURB_SCALE = 1e-3

SOLVER_METHOD = "RK45"
SOLVER_METHODS = ("RK45", "RK23", "DOP853", "Radau", "BDF", "LSODA")
SOLVER_RTOL = 1e-6
SOLVER_ATOL = 1e-9

VIEW_ELEV = 30.0
VIEW_AZIM = 0.0
XLIM = (-25.0, 25.0)
YLIM = (-35.0, 35.0)
ZLIM = (5.0, 55.0)
COLORMAP = "viridis"
LINE_WIDTH = 1.0
HIST_BINS = 10

VERSION = "1"
ENCODING = "utf-8"
