"""
Command line output of information on qmaster and dependencies.
"""
__all__ = ['about']

import sys
import os
import platform
import inspect

import numpy
import scipy

import qmaster
from qmaster.settings import settings, _blas_info


def about():
    """
    About box for qmaster. Gives version numbers for qmaster, NumPy, SciPy,
    Matplotlib and the platform it runs on.
    """
    print("")
    print("qmaster: Lindblad master equations of truncated Fock spaces")
    print("")
    print("qmaster Version:    %s" % qmaster.__version__)
    print("Numpy Version:      %s" % numpy.__version__)
    print("Scipy Version:      %s" % scipy.__version__)
    try:
        import matplotlib
        matplotlib_ver = matplotlib.__version__
    except ImportError:
        matplotlib_ver = 'None'
    print("Matplotlib Version: %s" % matplotlib_ver)
    print("Python Version:     %d.%d.%d" % sys.version_info[0:3])
    print("Number of CPUs:     %s" % settings.num_cpus)
    print("BLAS Info:          %s" % _blas_info())
    print("Platform Info:      %s (%s)" % (platform.system(),
                                           platform.machine()))
    install_path = os.path.dirname(inspect.getsourcefile(qmaster))
    print("Installation path:  %s" % install_path)
    print()


if __name__ == "__main__":
    about()
