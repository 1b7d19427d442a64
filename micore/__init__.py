# -*- coding: utf-8 -*-

"""Top-level package for micore."""

__version__ = "0.2.0"

from .config import RetrievalConfig
from .grid import grid_index, unique_values
from .akima import akima, akima_with_slope
from .lut import LookupTable, LUTError
from .data import read_lut, write_lut, write_results
from .estimator import estimate_reflectances
from .retrieval import RetrievalResult, RetrievalStatus, retrieve
