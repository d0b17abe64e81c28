"""
This module contains settings for logging, sparse storage, parallel maps and
numerical tolerances used throughout qmaster.
"""
import os
import platform

import numpy as np

__all__ = ['settings']


def _blas_info():
    config = np.__config__
    if hasattr(config, 'blas_ilp64_opt_info'):
        blas_info = config.blas_ilp64_opt_info
    elif hasattr(config, 'blas_opt_info'):
        blas_info = config.blas_opt_info
    else:
        blas_info = {}

    def _in_libaries(name):
        return any(name in lib for lib in blas_info.get('libraries', []))

    if getattr(config, 'mkl_info', False) or _in_libaries("mkl"):
        blas = 'INTEL MKL'
    elif getattr(config, 'openblas_info', False) or _in_libaries('openblas'):
        blas = 'OPENBLAS'
    elif '-Wl,Accelerate' in blas_info.get('extra_link_args', []):
        blas = 'Accelerate'
    else:
        blas = 'Generic'
    return blas


def available_cpu_count() -> int:
    """
    Get the number of cpus available to qmaster.
    """
    import multiprocessing
    num_cpu = 0

    if 'QMASTER_NUM_PROCESSES' in os.environ:
        # We consider QMASTER_NUM_PROCESSES=0 as unset.
        num_cpu = int(os.environ['QMASTER_NUM_PROCESSES'])

    if num_cpu == 0 and 'SLURM_CPUS_PER_TASK' in os.environ:
        num_cpu = int(os.environ['SLURM_CPUS_PER_TASK'])

    if num_cpu == 0 and hasattr(os, 'sched_getaffinity'):
        num_cpu = len(os.sched_getaffinity(0))

    if num_cpu == 0:
        try:
            num_cpu = multiprocessing.cpu_count()
        except NotImplementedError:
            pass

    return num_cpu or 1


def _get_environment_bool(var, default=False):
    """
    Get a boolean value from the environment variable `var`.  The false-y
    values are '0', 'false', 'none' and empty string, insensitive to case.
    """
    from_env = os.environ.get(var)
    if from_env is None:
        return default
    return from_env.lower() not in {'0', 'false', 'none', ''}


_LOG_HANDLERS = ('default', 'basic', 'stream', 'null')


class Settings:
    """
    qmaster's settings.

    Attributes
    ----------
    atol : float
        Absolute tolerance used when comparing and tidying quantum objects.
    auto_tidyup : bool
        Remove elements smaller than ``atol`` after arithmetic.
    sparse_threshold : int
        Matrices with more rows than this are stored sparse by default.
    """
    def __init__(self):
        self._debug = _get_environment_bool('QMASTER_DEBUG')
        self._log_handler = os.environ.get('QMASTER_LOG_HANDLER', 'default')
        self.atol = 1e-12
        self.auto_tidyup = True
        self.sparse_threshold = 100

    @property
    def debug(self) -> bool:
        """ Whether debug logging is switched on. """
        return self._debug

    @debug.setter
    def debug(self, value: bool) -> None:
        self._debug = bool(value)

    @property
    def log_handler(self) -> str:
        """
        Policy used by :func:`qmaster.logging_utils.get_logger`, one of
        'default', 'basic', 'stream' or 'null'.
        """
        return self._log_handler

    @log_handler.setter
    def log_handler(self, value: str) -> None:
        if value not in _LOG_HANDLERS:
            raise ValueError("log_handler must be one of "
                             + ", ".join(_LOG_HANDLERS))
        self._log_handler = value

    @property
    def ipython(self) -> bool:
        """ Whether qmaster is running in ipython. """
        try:
            __IPYTHON__
            return True
        except NameError:
            return False

    @property
    def eigh_unsafe(self) -> bool:
        """
        Whether `eigh` call is reliable.
        Some implementation of blas have some issues on some OS.
        """
        from packaging import version as pac_version
        import scipy
        is_old_scipy = (
            pac_version.parse(scipy.__version__) < pac_version.parse("1.5")
        )
        return (
            # macOS OpenBLAS eigh is unstable
            (_blas_info() == "OPENBLAS" and platform.system() == 'Darwin')
            # The combination of scipy<1.5 and MKL gives wrong results when
            # calling eigh for big matrices.
            or (is_old_scipy and (_blas_info() == 'INTEL MKL'))
        )

    @property
    def num_cpus(self) -> int:
        """
        Number of cpu detected.
        """
        if 'QMASTER_NUM_PROCESSES' in os.environ:
            num_cpus = int(os.environ['QMASTER_NUM_PROCESSES'])
        else:
            num_cpus = available_cpu_count()
            os.environ['QMASTER_NUM_PROCESSES'] = str(num_cpus)
        return num_cpus

    def __str__(self) -> str:
        lines = ["qmaster settings:"]
        for attr in self.__dir__():
            if not attr.startswith('_'):
                lines.append(f"    {attr}: {self.__getattribute__(attr)}")
        return '\n'.join(lines)

    def __repr__(self) -> str:
        return self.__str__()


settings = Settings()
