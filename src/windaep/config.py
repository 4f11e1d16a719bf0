from dataclasses import dataclass

import numpy as np

@dataclass(frozen=True)
class MetMast:
    key: str
    name: str
    heights: tuple[int, ...]
    time_zone: str
    variable_template: str = "ws{height}"

    def variable(self, height: int) -> str:
        return self.variable_template.format(height=height)

@dataclass(frozen=True)
class Turbine:
    key: str
    name: str
    rated_power_mw: float
    rotor_diameter_m: float
    power_curve_url: str

# Met masts (NetCDF files downloaded by hand from the DTU wind data portal)
MASTS = {
    # Risø met mast, DTU Risø Campus, Denmark. 1995-2007, cups at 44/77/125 m.
    # https://gitlab.windenergy.dtu.dk/fair-data/winddata-revamp/winddata-documentation/-/blob/master/risoe_m.md
    "risoe_m": MetMast(
        key="risoe_m",
        name="Risø met mast (DTU Risø Campus)",
        heights=(44, 77, 125),
        time_zone="Europe/Copenhagen",
    ),
}

ACTIVE_MAST_KEY = "risoe_m"
ACTIVE_MAST = MASTS[ACTIVE_MAST_KEY]

# Reference turbines (power curves from NREL turbine-models)
TURBINES = {
    "nrel_3.3mw_148": Turbine(
        key="nrel_3.3mw_148",
        name="NREL Wind Turbine - 3.3 MW with 148m rotor diameter",
        rated_power_mw=3.3,
        rotor_diameter_m=148.0,
        power_curve_url="https://raw.githubusercontent.com/NREL/turbine-models/master/Onshore/2023NREL_Bespoke_3.3MW_148.csv",
    ),
}

ACTIVE_TURBINE_KEY = "nrel_3.3mw_148"
ACTIVE_TURBINE = TURBINES[ACTIVE_TURBINE_KEY]

# One complete year of 10 minute records at the top anemometer
DEFAULT_YEAR = 1997
DEFAULT_HEIGHT = 125
SAMPLES_PER_HOUR = 6

# Empirical distribution and KDE
BIN_WIDTH = 0.5     # m/s
KDE_WIDTH = 0.5     # m/s, kernel window (std = width / 4)

# Fine CDF grid used for the KS tests
KS_GRID_START = 0.0
KS_GRID_STOP = 26.5
KS_GRID_STEP = 0.1
KS_KDE_WIDTH = 0.1

# Loess hyper-parameter grid for the power curve model
LOESS_DEGREES = (0, 1, 2)
LOESS_SPANS = tuple(
    np.round(np.concatenate([np.arange(0.05, 0.1001, 0.01), np.arange(0.15, 0.5001, 0.05)]), 2).tolist()
)

# Output layout
DATA_LAKE = "data_lake"
VIZ_DIR = "viz"
FINAL_FIGSIZE = (16 / 1.25, 9 / 1.25)  # inches
FINAL_DPI = 300

LOGGING_CONFIG = {
    "level": "INFO",
    "format": "%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    "datefmt": "%Y-%m-%d %H:%M:%S",
}
