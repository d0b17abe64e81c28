"""
Saving and loading of quantum objects and numerical trajectories.
"""

__all__ = ['file_data_store', 'file_data_read', 'qsave', 'qload']

import pickle
from pathlib import Path

import numpy as np

from qmaster.logging_utils import get_logger

logger = get_logger(__name__)

_number_formats = {
    ('real', 'decimal'): "%.12f",
    ('real', 'exp'): "%.12e",
    ('complex', 'decimal'): "%.12f%+.12fj",
    ('complex', 'exp'): "%.12e%+.12ej",
}


def file_data_store(filename, data, numtype="complex", numformat="decimal",
                    sep=","):
    """Stores a matrix of data to a file to be read by an external program.

    Parameters
    ----------
    filename : str or path-like
        Name of data file to be stored, including extension.
    data: array_like
        Data to be written to file. One dimensional data (e.g. a list of
        expectation values) is written as a single column.
    numtype : str {'complex, 'real'}
        Type of numerical data.
    numformat : str {'decimal','exp'}
        Format for written data.
    sep : str
        Single-character field seperator.  Usually a tab, space, comma,
        or semicolon.
    """
    if (numtype, numformat) not in _number_formats:
        raise ValueError("Unknown numtype %r or numformat %r"
                         % (numtype, numformat))
    data = np.asarray(data)
    if data.ndim == 1:
        data = data[:, np.newaxis]
    elif data.ndim != 2:
        raise ValueError("Data must be one or two dimensional")
    fmt = _number_formats[(numtype, numformat)]

    with open(filename, "w") as fp:
        for row in data:
            if numtype == "complex":
                items = [fmt % (np.real(x), np.imag(x)) for x in row]
            else:
                items = [fmt % np.real(x) for x in row]
            fp.write(sep.join(items) + "\n")
    logger.debug("Stored %s data of shape %s in %s", numtype, data.shape,
                 filename)


def _detect_separator(line):
    for sep in (",", ";"):
        if sep in line:
            return sep
    return None  # any whitespace


def file_data_read(filename, sep=None):
    """Retrieves an array of data from the requested file.

    Parameters
    ----------
    filename : str or path-like
        Name of file containing reqested data.
    sep : str
        Seperator used to store data. Detected from the first line when not
        given.

    Returns
    -------
    data : array_like
        Data from selected file, complex if any entry has an imaginary part.
    """
    with open(filename, "r") as fp:
        lines = [line.strip() for line in fp if line.strip()]
    if not lines:
        return np.zeros((0, 0))
    if sep is None:
        sep = _detect_separator(lines[0])
    elif not sep.strip():
        sep = None

    rows = [[token.strip() for token in line.split(sep) if token.strip()]
            for line in lines]
    is_complex = any("j" in token for row in rows for token in row)
    convert = complex if is_complex else float
    return np.array([[convert(token) for token in row] for row in rows])


def _qu_path(name):
    return Path(str(name) + ".qu")


def qsave(data, name='qmasterdata'):
    """
    Saves given data to file named 'filename.qu' in current directory.

    Parameters
    ----------
    data : instance/array_like
        Input Python object to be stored, e.g. a :class:`qmaster.Qobj` or a
        :class:`qmaster.solver.Result`.
    name : str or path-like
        Name of output data file. ``.qu`` is always appended.
    """
    path = _qu_path(name)
    with open(path, "wb") as fileObject:
        pickle.dump(data, fileObject, protocol=pickle.HIGHEST_PROTOCOL)
    logger.debug("Saved %s to %s", type(data).__name__, path)


def qload(name):
    """
    Loads data file from file named 'filename.qu' in current directory.

    Parameters
    ----------
    name : str or path-like
        Name of data file to be loaded, as given to :func:`qsave`.

    Returns
    -------
    qobject : instance / array_like
        Object retrieved from requested file.
    """
    path = _qu_path(name)
    if not path.exists() and str(name).endswith(".qu"):
        path = Path(name)
    with open(path, "rb") as fileObject:
        out = pickle.load(fileObject)
    return out
