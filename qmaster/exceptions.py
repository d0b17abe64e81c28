"""
Exception classes raised by qmaster.
"""

__all__ = ['QmasterError', 'DimensionMismatch', 'InvalidParameter',
           'NumericalInstability', 'IntegratorException',
           'SteadyStateNotFound']


class QmasterError(Exception):
    """Base class for all qmaster exceptions"""

    def __init__(self, msg):
        super().__init__(msg)
        self.message = msg

    def __str__(self):
        return str(self.message)


class DimensionMismatch(QmasterError, ValueError):
    """
    Operators, states or superoperators with inconsistent dimensions were
    combined.
    """


class InvalidParameter(QmasterError, ValueError):
    """
    A parameter is outside its allowed domain: a negative rate, a time grid
    that is not strictly increasing, a non-Hermitian Hamiltonian, ...
    """


class NumericalInstability(QmasterError):
    """
    The trace or positivity of a density matrix drifted beyond tolerance
    during integration.
    """


class IntegratorException(NumericalInstability):
    """
    The ODE integrator could not advance the state with the given options,
    e.g. the step budget ``nsteps`` was exhausted or the step size became too
    small.
    """


class SteadyStateNotFound(QmasterError):
    """
    No physically valid steady state was found within tolerance and
    iteration budget.
    """
