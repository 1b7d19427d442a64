"""Reading lookup-table files and writing retrieval results."""
import logging
from pathlib import Path

import numpy as np

from .lut import LookupTable, LUTError

logger = logging.getLogger(__name__)

RECORD_LENGTH = 4  # tau, cder, ref1, ref2


def read_lut(path, dtype=np.float32, surface_albedo=0.0):
    """Read a binary lookup table.

    The file is a sequence of fixed-size records, each holding four 4-byte
    floats ``(tau, cder, ref1, ref2)``. Records are read until end-of-file;
    an incomplete trailing record is ignored.

    Parameters
    ----------
    path : str or Path
        LUT file.
    dtype : numpy dtype
        Element type of the records (native byte order by default).
    surface_albedo : float
        Added to both reflectance columns.

    Returns
    -------
    LookupTable
    """
    path = Path(path)
    raw = np.fromfile(path, dtype=dtype)
    nrec = raw.size // RECORD_LENGTH
    if nrec == 0:
        raise LUTError(f"No complete LUT records in {path}")
    if raw.size % RECORD_LENGTH:
        logger.warning(
            "Ignoring %d trailing values in %s", raw.size % RECORD_LENGTH, path
        )
    rows = raw[: nrec * RECORD_LENGTH].reshape(nrec, RECORD_LENGTH)
    logger.info("Read %d LUT records from %s", nrec, path)

    lut = LookupTable(rows.astype(np.float64))
    if surface_albedo:
        lut = lut.with_surface_albedo(surface_albedo)
    return lut


def write_lut(path, rows, dtype=np.float32):
    """Write table rows in the binary record format read by `read_lut`."""
    if isinstance(rows, LookupTable):
        rows = rows.rows
    rows = np.asarray(rows, dtype=dtype)
    if rows.ndim != 2 or rows.shape[1] != RECORD_LENGTH:
        raise ValueError(f"LUT rows must have shape (n, 4), got {rows.shape}")
    rows.tofile(Path(path))


def format_results(result):
    """Result lines as written by `write_results`."""
    return [
        f"TAU:  {result.tau:.8g}",
        f"CDER: {result.cder:.8g}",
        f"COST: {result.cost:.8g}",
    ]


def write_results(path, result):
    """Write the retrieved tau, cder and final cost to a text file."""
    with open(path, "w") as f:
        f.write("\n".join(format_results(result)) + "\n")
