import warnings

import qmaster.settings
from qmaster.settings import settings
import qmaster.version
from qmaster.version import version as __version__

# -----------------------------------------------------------------------------
# Check that import modules are compatible with requested configuration
#

# Check for Matplotlib
try:
    import matplotlib
except ImportError:
    warnings.warn("matplotlib not found: Graphics will not work.")
else:
    del matplotlib


# -----------------------------------------------------------------------------
# Load modules
#

from qmaster.exceptions import *
from qmaster.dimensions import *
from qmaster.qobj import *
from qmaster.operators import *
from qmaster.states import *
from qmaster.tensor import *
from qmaster.superoperator import *
from qmaster.expect import *
from qmaster.solver import *
from qmaster.mesolve import *
from qmaster.steadystate import *
from qmaster.parallel import *
from qmaster.ui.progressbar import *
from qmaster.models.optomechanics import *

# utilities
from qmaster.fileio import *
from qmaster.about import *

# -----------------------------------------------------------------------------
# Clean name space
#
del warnings
