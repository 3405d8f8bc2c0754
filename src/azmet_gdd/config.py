from pathlib import Path

# Paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "data"
OUTPUT_DIR = PROJECT_ROOT / "output"
STATION_LIST_CSV = DATA_DIR / "azmet_station_list_active.csv"

# AZMET raw daily files, one per station-year: <base><stn_no:02d><yy><suffix>
AZMET_BASE_URL = "http://ag.arizona.edu/azmet/data/"
AZMET_FILE_SUFFIX = "rd.txt"
REQUEST_TIMEOUT_S = 60

# Files up to and including this year use the 1987-2002 column layout
LEGACY_ERA_LAST_YEAR = 2002

# Column layout of 2003-present files (http://ag.arizona.edu/azmet/raw2003.htm).
# Soil temperature depths changed in 1999; legacy soil columns reuse these names.
RAW_COLUMNS = [
    "year", "doy", "stn_no", "Tmax", "Tmin", "Tmean",
    "RHmax", "RHmin", "RHmean", "VPDmean", "SORADtot", "PRCtot",
    "4STmax", "4STmin", "4STmean", "20STmax", "20STmin", "20STmean",
    "WSmean", "WVmag", "WVdir", "Wdirstd", "WSmax", "HU8555", "ETref",
    "ETrefPM", "AVPmean", "DPTmean",
]
LEGACY_COLUMN_COUNT = 25

# "No data" markers used in AZMET files
MISSING_SENTINELS = [999, 999.9, 9999]

# Degree-day defaults (degrees C, day of year)
T_BASE = 10.0
DOY_START = 1

# Station name -> (year, last day-of-year with usable data). Rows after that
# day are dropped for the rest of that year.
# Yuma South has no entries from 2013-06-08 through 2013-09-10.
KNOWN_DATA_GAPS = {
    "Yuma South": (2013, 158),
}

# Chart styling
COLOR_PAST_YEARS = "#cccccc"    # gray80
COLOR_CURRENT_YEAR = "#006400"  # dark green
COLOR_CLIMATOLOGY = "#666666"   # gray40
TEXT_COLOR = "#404040"
CLIMATOLOGY_LABEL = "climatology"
MONTH_START_DOYS = [1, 32, 60, 91, 121, 152, 182, 213, 244, 274, 305, 335]
MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
                "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

# Chart Studio (hosted plotly) export
CHART_STUDIO_PREFIX = "AZMET-GDD/trace"
