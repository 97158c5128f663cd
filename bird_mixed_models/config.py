"""
Project configuration settings.

Edit the variables in this module to point to your data directories or
set the environment variables below (a `.env` file in the project root
is picked up when python-dotenv is installed).  Keeping configuration
in one place makes it easy to override default behaviour without
modifying individual modules.
"""

from __future__ import annotations

from pathlib import Path
import os

try:  # optional dotenv load
    from dotenv import load_dotenv  # type: ignore
    load_dotenv()
except ImportError:
    pass

# Base directory for storing input and output data.
BASE_DIR: Path = Path(__file__).resolve().parents[1]

###############################################################################
# Directory paths
###############################################################################

DATA_DIR: Path = Path(os.getenv("BIRD_MODELS_DATA_DIR", BASE_DIR / "data"))

# Morphology measurements and the course schedule live here
RAW_DATA_DIR: Path = DATA_DIR / "raw"

# The prepared observation table (with derived columns) is written here
PROCESSED_DATA_DIR: Path = DATA_DIR / "processed"

# Model summaries, diagnostics tables and figures
RESULTS_DIR: Path = Path(os.getenv("BIRD_MODELS_RESULTS_DIR", BASE_DIR / "results"))

# Create directories if they do not already exist
for _dir in (RAW_DATA_DIR, PROCESSED_DATA_DIR, RESULTS_DIR):
    _dir.mkdir(parents=True, exist_ok=True)

###############################################################################
# File names
###############################################################################

MORPHOLOGY_FILE: str = "bird_morphology.csv"
SCHEDULE_FILE: str = "schedule.xlsx"
PREPARED_FILE: str = "bird_morphology_prepared.csv"

###############################################################################
# Columns
###############################################################################

TAXON_COL: str = "taxon"
WING_COL: str = "wing_length"
BEAK_COL: str = "beak_height"

# Source column names (as exported from the morphology database) mapped to
# the canonical names used throughout the package.
SOURCE_COLUMNS: dict[str, str] = {
    "Family": TAXON_COL,
    "Wing.Length": WING_COL,
    "Beak.Depth": BEAK_COL,
}

LOG_WING_COL: str = "log_wing_length"
LOG_BEAK_COL: str = "log_beak_height"
CENTERED_WING_COL: str = "c_log_wing_length"
TAXON_MEAN_COL: str = "taxon_mean_c_log_wing_length"
TAXON_COUNT_COL: str = "taxon_n"

###############################################################################
# Modelling defaults
###############################################################################

# Taxa with fewer observations than this are kept but flagged in the log;
# their variance contributions are poorly determined.
MIN_GROUP_SIZE: int = 3

# Optimiser handed to statsmodels' MixedLM.fit.  A single name means a single
# optimisation pass; a fit that does not converge is reported, not retried.
OPTIMIZER: str = "lbfgs"

###############################################################################
# Plotting
###############################################################################

FIGURE_DPI: int = 150

# Upper bound on the number of taxon panels in a facet figure
MAX_FACETS: int = 16
