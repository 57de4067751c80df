"""
Shared fixtures and sample EPW builders.
"""

from typing import Iterable, List, Optional

import pytest

from epwdata.fields import COLUMN_NAMES
from epwdata.utils import days_in_month

LOCATION = "LOCATION,SANTIAGO,-,CHL,IWEC Data,855740,-33.38,-70.78,-4.0,476.0"

DESIGN_CONDITIONS = (
    "DESIGN CONDITIONS,1,Climate Design Data 2009 ASHRAE Handbook,,Heating,7,-1.1,0,"
    "-2.7,3.2,4.1,-1.4,3.6,4.4,8.3,9.6,6.5,10.7,0.9,30,Cooling,1,17.2,31.8,18,30.7,"
    "17.8,29.7,17.5,19.5,29,18.8,28.4,18.3,27.9,5.7,200,15.8,11.9,23.8,14.9,11.2,23,"
    "14.1,10.6,22,57.5,29.2,55.3,28.4,53.3,28,1149,Extremes,8.4,7.4,6.5,27.1,-3.5,"
    "34.5,1.3,1.1,-4.4,35.3,-5.2,35.9,-5.9,36.6,-6.8,37.4"
)

TYPICAL_EXTREME_PERIODS = (
    "TYPICAL/EXTREME PERIODS,6,"
    "Summer - Week Nearest Max Temperature For Period,Extreme,1/20,1/26,"
    "Summer - Week Nearest Average Temperature For Period,Typical,12/ 8,12/14,"
    "Winter - Week Nearest Min Temperature For Period,Extreme,7/27,8/ 2,"
    "Winter - Week Nearest Average Temperature For Period,Typical,8/10,8/16,"
    "Autumn - Week Nearest Average Temperature For Period,Typical,4/12,4/18,"
    "Spring - Week Nearest Average Temperature For Period,Typical,10/27,11/ 2"
)

GROUND_TEMPERATURES = (
    "GROUND TEMPERATURES,3,"
    ".5,,,,18.03,20.05,20.54,19.99,17.11,13.95,11.03,8.95,8.41,9.49,11.96,15.03,"
    "2,,,,16.15,18.06,18.93,18.92,17.37,15.20,12.89,10.95,9.98,10.23,11.65,13.77,"
    "4,,,,14.90,16.39,17.29,17.55,16.95,15.67,14.11,12.60,11.61,11.40,12.03,13.28"
)

HOLIDAYS = "HOLIDAYS/DAYLIGHT SAVINGS,No,0,0,0"
HOLIDAYS_LEAP = "HOLIDAYS/DAYLIGHT SAVINGS,Yes,0,0,0"

COMMENTS_1 = (
    'COMMENTS 1,"IWEC- WMO#855740 - South America -- Original Source Data (c) 2001 '
    "American Society of Heating, Refrigerating and Air-Conditioning Engineers "
    '(ASHRAE), Inc., Atlanta, GA, USA.  www.ashrae.org"'
)

COMMENTS_2 = (
    "COMMENTS 2, -- Ground temps produced with a standard soil diffusivity of "
    "2.3225760E-03 {m**2/day}"
)

DATA_PERIODS = "DATA PERIODS,1,1,Data,Sunday, 1/ 1,12/31"

SAMPLE_DATA_LINES = [
    "1987,1,1,1,60,C9C9C9C9*0?9?9?9?9?9?9?9A7A7B8B8A7*0*0E8*0*0,16.7,9.6,63,95600,0,1415,326,0,0,0,0,0,0,0,150,1.5,0,0,9.9,77777,9,999999999,0,0.2680,0,88,0.000,0.0,0.0",
    "1987,1,1,2,60,C9C9C9C9*0?9?9?9?9?9?9?9A7A7A7A7A7A7*0E8*0*0,15.1,8.4,64,95700,0,1415,317,0,0,0,0,0,0,0,0,0.0,0,0,15.0,22000,9,999999999,0,0.2680,0,88,0.000,0.0,0.0",
    "1987,1,1,3,60,C9C9C9C9*0?9?9?9?9?9?9?9A7A7B8B8A7*0*0E8*0*0,13.8,7.6,66,95700,0,1415,311,0,0,0,0,0,0,0,0,0.0,0,0,9.9,22000,9,999999999,0,0.2680,0,88,0.000,0.0,0.0",
    "1987,1,1,4,60,C9C9C9C9*0?9?9?9?9?9?9?9A7A7B8B8A7*0*0E8*0*0,12.7,7.3,70,95700,0,1415,306,0,0,0,0,0,0,0,0,0.0,0,0,9.9,22000,9,999999999,0,0.2680,0,88,0.000,0.0,0.0",
]

_TEMPLATE = SAMPLE_DATA_LINES[0].split(",")


def make_data_line(
    month: int = 1,
    day: int = 1,
    hour: int = 1,
    minute: int = 60,
    year: int = 1987,
    **overrides: object,
) -> str:
    """One data line based on the Santiago sample, with fields replaced by name."""
    fields = list(_TEMPLATE)
    fields[0:5] = [str(year), str(month), str(day), str(hour), str(minute)]
    for name, value in overrides.items():
        fields[COLUMN_NAMES.index(name)] = str(value)
    return ",".join(fields)


def year_of_lines(leap: bool = False, year: Optional[int] = None) -> List[str]:
    """An hourly data line for every hour of a year."""
    if year is None:
        year = 2020 if leap else 1987
    lines = []
    for month in range(1, 13):
        for day in range(1, days_in_month(month, leap) + 1):
            for hour in range(1, 25):
                lines.append(make_data_line(month, day, hour, year=year))
    return lines


def build_epw(
    data_lines: Iterable[str],
    holidays: str = HOLIDAYS,
    data_periods: str = DATA_PERIODS,
    ground_temperatures: str = GROUND_TEMPERATURES,
    newline: str = "\n",
) -> str:
    """Assemble a complete EPW file from the sample headers and data lines."""
    lines = [
        LOCATION,
        DESIGN_CONDITIONS,
        TYPICAL_EXTREME_PERIODS,
        ground_temperatures,
        holidays,
        COMMENTS_1,
        COMMENTS_2,
        data_periods,
        *data_lines,
    ]
    return newline.join(lines) + newline


@pytest.fixture
def sample_epw():
    """The four-record Santiago sample."""
    return build_epw(SAMPLE_DATA_LINES)


@pytest.fixture(scope="session")
def full_year_lines():
    """8760 hourly data lines for a non-leap year."""
    return year_of_lines()


@pytest.fixture
def full_year_epw(full_year_lines):
    """A complete, consistent hourly EPW file."""
    return build_epw(full_year_lines)
