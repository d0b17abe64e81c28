"""
Physical models assembled from the qmaster building blocks.
"""
from qmaster.models.optomechanics import *
