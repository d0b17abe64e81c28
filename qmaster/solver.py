# This file is part of qmaster, built on QuTiP: Quantum Toolbox in Python.
#
#    Copyright (c) 2011 and later, Paul D. Nation and Robert J. Johansson.
#    All rights reserved.
#
#    Redistribution and use in source and binary forms, with or without
#    modification, are permitted provided that the following conditions are
#    met:
#
#    1. Redistributions of source code must retain the above copyright notice,
#       this list of conditions and the following disclaimer.
#
#    2. Redistributions in binary form must reproduce the above copyright
#       notice, this list of conditions and the following disclaimer in the
#       documentation and/or other materials provided with the distribution.
#
#    3. Neither the name of the QuTiP: Quantum Toolbox in Python nor the names
#       of its contributors may be used to endorse or promote products derived
#       from this software without specific prior written permission.
#
#    THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS
#    "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT
#    LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A
#    PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT
#    HOLDER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL,
#    SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT
#    LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE,
#    DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY
#    THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT
#    (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE
#    OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
###############################################################################
"""
Options, results and input checks shared by the qmaster solvers.
"""

__all__ = ['Options', 'Result', 'ExpectOps']

import numpy as np

from qmaster.qobj import Qobj, _hermitian_defect
from qmaster.expect import expect
from qmaster.version import version as __version__
from qmaster.exceptions import DimensionMismatch, InvalidParameter


class Options():
    """
    Class of options for :func:`qmaster.mesolve`. Options can be specified
    either as arguments to the constructor::

        opts = Options(atol=1e-10, ...)

    or by changing the class attributes after creation::

        opts = Options()
        opts.nsteps = 20000

    Attributes
    ----------

    atol : float {1e-8}
        Absolute tolerance.
    rtol : float {1e-8}
        Relative tolerance.
    method : str {'dopri5', 'dop853'}
        Explicit Runge-Kutta integrator of ``scipy.integrate.ode``.
    nsteps : int {10000}
        Max. number of internal steps between two output times.
    first_step : float {0}
        Size of initial step (0 = automatic).
    max_step : float {0}
        Maximum step size (0 = automatic).
    store_final_state : bool {True}
        Whether or not to store the final state of the evolution in the
        result class.
    store_states : bool {False}
        Whether or not to store the density matrices in the result class,
        even if expectation value operators are given. If no expectation
        values are requested, states are stored anyway.
    trace_tol : float {1e-6}
        Largest accepted drift of the trace of a stored state away from
        the initial trace.
    positivity_tol : float {1e-6}
        Most negative accepted eigenvalue of a stored state.
    check_positivity : bool {True}
        Diagonalize every stored state to verify positivity.
    herm_tol : float {1e-10}
        Largest accepted ``max|H - H.dag()|`` of the Hamiltonian.
    """

    def __init__(self, atol=1e-8, rtol=1e-8, method='dopri5', nsteps=10000,
                 first_step=0, max_step=0, store_final_state=True,
                 store_states=False, trace_tol=1e-6, positivity_tol=1e-6,
                 check_positivity=True, herm_tol=1e-10):
        # Absolute tolerance
        self.atol = atol
        # Relative tolerance
        self.rtol = rtol
        # Integration method, 'dopri5' or 'dop853'
        self.method = method
        # Max. number of internal steps/call
        self.nsteps = nsteps
        # Size of initial step (0 = determined by solver)
        self.first_step = first_step
        # Max step size (0 = determined by solver)
        self.max_step = max_step
        # store final state?
        self.store_final_state = store_final_state
        # store states even if expectation operators are given?
        self.store_states = store_states
        # physicality checks on the integrated states
        self.trace_tol = trace_tol
        self.positivity_tol = positivity_tol
        self.check_positivity = check_positivity
        self.herm_tol = herm_tol

    def __str__(self):
        s = "Options:\n"
        s += "-----------\n"
        for key in sorted(vars(self)):
            s += "%s: %s\n" % (key, getattr(self, key))
        return s

    def __repr__(self):
        return self.__str__()


class Result():
    """Class for storing simulation results from the solvers.

    Attributes
    ----------

    solver : str
        Which solver was used, e.g. 'mesolve'.
    times : list/array
        Times at which simulation data was collected.
    expect : list/array/dict
        Expectation values (if requested) for simulation. A dict keyed like
        ``e_ops`` if those were given as a dict.
    states : array
        Density matrices evaluated at ``times``.
    final_state : :class:`qmaster.Qobj`
        State at the last time of ``times``.
    num_expect : int
        Number of expectation value operators in simulation.
    num_collapse : int
        Number of collapse operators in simualation.
    stats : dict
        Integrator name, number of right-hand side evaluations, run time.
    """
    def __init__(self):
        self.solver = None
        self.times = None
        self.states = []
        self.expect = []
        self.final_state = None
        self.num_expect = 0
        self.num_collapse = 0
        self.stats = {}

    def trajectory(self):
        """Iterate over ``(t, rho)`` pairs of the stored states."""
        if not self.states:
            raise ValueError("No states were stored; use "
                             "Options(store_states=True)")
        return zip(self.times, self.states)

    def __str__(self):
        s = "Result object "
        if self.solver:
            s += "with " + self.solver + " data.\n"
        else:
            s += "missing solver information.\n"
        s += "-" * (len(s) - 1) + "\n"
        if self.states is not None and len(self.states) > 0:
            s += "states = True\n"
        if self.expect is not None and len(self.expect) > 0:
            s += "expect = True\nnum_expect = " + str(self.num_expect) + ", "
        s += "num_collapse = " + str(self.num_collapse)
        return s

    def __repr__(self):
        return self.__str__()

    def __getstate__(self):
        # defines what happens when Result object gets pickled
        state = dict(self.__dict__)
        state['qmaster_version'] = __version__[:5]
        return state

    def __setstate__(self, state):
        # defines what happens when loading a pickled Result
        state.pop('qmaster_version', None)
        self.__dict__.update(state)


class ExpectOps:
    """
    Evaluates and collects the requested expectation values along a
    trajectory.

    ``e_ops`` may be a single operator, a list of operators and callables
    ``f(t, rho)``, or a dict of those.
    """

    def __init__(self, e_ops, ntimes):
        if e_ops is None:
            e_ops = []
        if isinstance(e_ops, Qobj) or callable(e_ops):
            e_ops = [e_ops]
        if isinstance(e_ops, dict):
            self.keys = list(e_ops.keys())
            e_ops = [e_ops[key] for key in self.keys]
        else:
            self.keys = None
        self.e_ops = list(e_ops)
        self.num = len(self.e_ops)
        self.raw = []
        for op in self.e_ops:
            if isinstance(op, Qobj):
                if not op.isoper:
                    raise TypeError("Expectation operators must be "
                                    "operators")
                dtype = float if op.isherm else complex
            elif callable(op):
                dtype = complex
            else:
                raise TypeError("e_ops must be operators or callables")
            self.raw.append(np.zeros(ntimes, dtype=dtype))

    def check_dims(self, dims):
        for op in self.e_ops:
            if isinstance(op, Qobj) and op.dims != dims:
                raise DimensionMismatch("Expectation operator dims %s do not "
                                        "match state dims %s"
                                        % (op.dims, dims))

    def step(self, idx, t, rho):
        for m, op in enumerate(self.e_ops):
            if isinstance(op, Qobj):
                self.raw[m][idx] = expect(op, rho)
            else:
                self.raw[m][idx] = op(t, rho)

    def finish(self):
        out = []
        for values in self.raw:
            if np.iscomplexobj(values) and \
                    np.all(np.abs(values.imag) == 0):
                values = values.real
            out.append(values)
        if self.keys is not None:
            return dict(zip(self.keys, out))
        return out


def _check_tlist(tlist):
    tlist = np.asarray(tlist, dtype=float)
    if tlist.ndim != 1 or tlist.size == 0:
        raise InvalidParameter("tlist must be a non-empty one dimensional "
                               "sequence of times")
    if not np.all(np.isfinite(tlist)):
        raise InvalidParameter("tlist must only contain finite times")
    if tlist.size > 1 and np.any(np.diff(tlist) <= 0):
        raise InvalidParameter("tlist must be strictly increasing")
    return tlist


def _check_hamiltonian(H, herm_tol):
    if not isinstance(H, Qobj):
        raise TypeError("The Hamiltonian must be a Qobj")
    if not H.isoper:
        raise TypeError("The Hamiltonian must be an operator, not %s"
                        % H.type)
    defect = _hermitian_defect(H.data)
    if defect > herm_tol:
        raise InvalidParameter("The Hamiltonian is not Hermitian: "
                               "max|H - H.dag()| = %g" % defect)
    return H


def _check_initial_state(rho0, options):
    if not isinstance(rho0, Qobj):
        raise TypeError("The initial state must be a Qobj")
    if rho0.isket:
        rho0 = rho0.proj()
    elif not rho0.isoper:
        raise TypeError("The initial state must be a ket or a density "
                        "matrix, not %s" % rho0.type)
    defect = _hermitian_defect(rho0.data)
    if defect > options.herm_tol:
        raise InvalidParameter("The initial density matrix is not "
                               "Hermitian: max|rho - rho.dag()| = %g"
                               % defect)
    trace = np.real(rho0.tr())
    if abs(trace - 1) > options.trace_tol:
        raise InvalidParameter("The initial density matrix has trace %.10g, "
                               "expected 1 (tolerance %g)"
                               % (trace, options.trace_tol))
    return rho0


def _check_dims(H, rho0, c_ops):
    if rho0.dims != H.dims:
        raise DimensionMismatch("Initial state dims %s do not match the "
                                "Hamiltonian dims %s" % (rho0.dims, H.dims))
    for c in c_ops:
        if c.dims != H.dims:
            raise DimensionMismatch("Collapse operator dims %s do not match "
                                    "the Hamiltonian dims %s"
                                    % (c.dims, H.dims))
