"""Shared fixtures: the regional production table in long format."""
from io import StringIO

import pandas as pd
import pytest

# eu/juice and us/juice rows carry no data
LONG_TABLE = """
reg prod   var        value
us  banana production 10
us  banana transfCoef 0.6
us  banana trValues   2
us  apples production 7
us  apples transfCoef 0.7
us  apples trValues   5
us  juice  production missing
us  juice  transfCoef missing
us  juice  trValues   missing
eu  banana production 5
eu  banana transfCoef 0.7
eu  banana trValues   1
eu  apples production 8
eu  apples transfCoef 0.8
eu  apples trValues   4
eu  juice  production missing
eu  juice  transfCoef missing
eu  juice  trValues   missing
"""


@pytest.fixture
def df():
    return pd.read_csv(StringIO(LONG_TABLE), sep=r"\s+", na_values=["missing"])
