"""
Progress reporting for solvers and parameter sweeps.
"""
from qmaster.ui.progressbar import *
