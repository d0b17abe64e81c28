"""
This module provides solvers for the Lindblad master equation.
"""

__all__ = ['mesolve']

import time

import numpy as np
import scipy.integrate

from qmaster.qobj import Qobj
from qmaster.superoperator import liouvillian, collapse_operators, vec2mat
from qmaster.solver import (Options, Result, ExpectOps, _check_tlist,
                            _check_hamiltonian, _check_initial_state,
                            _check_dims)
from qmaster.ui.progressbar import make_progress_bar
from qmaster.exceptions import IntegratorException, NumericalInstability
from qmaster.logging_utils import get_logger

logger = get_logger(__name__)

_integrators = ('dopri5', 'dop853')

_failure_messages = {
    -1: 'input is not consistent',
    -2: 'larger nsteps is needed, Try to increase the nsteps '
        'of the Options',
    -3: 'step size becomes too small. Try increasing tolerance',
    -4: 'problem is probably stiff (interrupted)',
}


def mesolve(H, rho0, tlist, c_ops=None, e_ops=None, options=None,
            progress_bar=None):
    """
    Master equation evolution of a density matrix for a given Hamiltonian
    and set of jump channels.

    Evolve the density matrix (`rho0`) according to the Lindblad master
    equation

    .. math::

        \\frac{d\\rho}{dt} = -i[H, \\rho] + \\sum_k \\gamma_k \\left(
        J_k \\rho J_k^\\dagger
        - \\frac{1}{2}\\{J_k^\\dagger J_k, \\rho\\}\\right)

    The equation is integrated in its vectorized (column-stacked) form
    ``d vec(rho)/dt = L vec(rho)`` with an adaptive explicit Runge-Kutta
    method.

    **Jump channels**

    Each entry of `c_ops` is either a pair ``(J, rate)`` or an operator
    ``C`` that already contains the square root of its rate. A rate of zero
    switches the channel off; a negative rate raises
    :class:`qmaster.exceptions.InvalidParameter`.

    **Expectation values**

    `e_ops` is a list (or dict) of operators and callables ``f(t, rho)``.
    Their values at the times in `tlist` are returned in ``result.expect``.
    When no `e_ops` are given the density matrices are stored in
    ``result.states`` instead.

    Parameters
    ----------

    H : :class:`qmaster.Qobj`
        Hermitian system Hamiltonian.

    rho0 : :class:`qmaster.Qobj`
        initial density matrix or state vector (ket).

    tlist : *list* / *array*
        strictly increasing list of times for :math:`t`.

    c_ops : list
        list of ``(J, rate)`` pairs or collapse operators.

    e_ops : list / dict / :class:`qmaster.Qobj` / callback function
        operators for which to evaluate expectation values.

    options : :class:`qmaster.solver.Options`
        with options for the ODE solver.

    progress_bar : bool, str or :class:`qmaster.ui.BaseProgressBar`
        Optional progress bar, updated once per output time.

    Returns
    -------
    result: :class:`qmaster.solver.Result`

        An instance of the class :class:`qmaster.solver.Result`, which
        contains the times, the expectation values, the stored density
        matrices, the final state and integrator statistics.

    Raises
    ------
    InvalidParameter
        Negative rate, non Hermitian `H`, an initial state that is not a
        unit-trace Hermitian matrix, or bad `tlist`.
    DimensionMismatch
        `H`, `rho0`, jump and expectation operators disagree on dims.
    IntegratorException
        The integrator failed, e.g. the step budget was exhausted.
    NumericalInstability
        Trace or positivity of a stored state drifted beyond tolerance.
    """
    if options is None:
        options = Options()
    if options.method not in _integrators:
        raise ValueError("Unknown integration method %r, expected one of %s"
                         % (options.method, _integrators))

    tlist = _check_tlist(tlist)
    H = _check_hamiltonian(H, options.herm_tol)
    rho0 = _check_initial_state(rho0, options)
    c_list = collapse_operators(c_ops)
    _check_dims(H, rho0, c_list)

    e_ops = ExpectOps(e_ops, len(tlist))
    e_ops.check_dims(rho0.dims)

    L = liouvillian(H, c_list)
    logger.debug("mesolve: %d jump channels, Liouvillian of shape %s with "
                 "%s stored elements", len(c_list), L.shape,
                 L.data.nnz if L.issparse else L.data.size)

    output = _generic_ode_solve(L, rho0, tlist, e_ops, options,
                                make_progress_bar(progress_bar, len(tlist)))
    output.num_collapse = len(c_list)
    return output


def _physical_state(data, dims, trace0, t, opt):
    """
    Hermitian part of an integrated density matrix, checked for trace
    conservation and positivity.
    """
    data = 0.5 * (data + data.conj().T)
    trace = np.real(np.trace(data))
    if abs(trace - trace0) > opt.trace_tol:
        raise NumericalInstability(
            "Trace of the density matrix drifted to %.10g at t = %g "
            "(tolerance %g)" % (trace, t, opt.trace_tol))
    if opt.check_positivity:
        min_eig = np.linalg.eigvalsh(data)[0]
        if min_eig < -opt.positivity_tol:
            raise NumericalInstability(
                "Density matrix lost positivity at t = %g: minimum "
                "eigenvalue %.3g (tolerance %g)"
                % (t, min_eig, opt.positivity_tol))
    return Qobj(data, dims=dims, isherm=True)


def _generic_ode_solve(L, rho0, tlist, e_ops, opt, progress_bar):
    """
    Internal function for solving ME.
    Calculate the required expectation values at each time step.
    """
    n_tsteps = len(tlist)
    output = Result()
    output.solver = "mesolve"
    output.times = tlist
    output.num_expect = e_ops.num
    size = rho0.shape[0]
    dims = rho0.dims
    store_states = opt.store_states or e_ops.num == 0

    L_data = L.data if L.issparse else np.asarray(L.data)
    nfev = [0]

    def rhs(t, y):
        # the state is integrated as real and imaginary parts
        nfev[0] += 1
        return (L_data @ y.view(complex)).view(np.float64)

    initial_vector = rho0.full().ravel('F')
    trace0 = np.real(np.trace(rho0.full()))

    r = scipy.integrate.ode(rhs)
    r.set_integrator(opt.method, atol=opt.atol, rtol=opt.rtol,
                     nsteps=opt.nsteps, first_step=opt.first_step,
                     max_step=opt.max_step)
    r.set_initial_value(initial_vector.view(np.float64), tlist[0])

    t_start = time.time()
    rho_t = None
    progress_bar.start(n_tsteps)
    for t_idx, t in enumerate(tlist):
        if t_idx > 0:
            r.integrate(t)
            if not r.successful():
                code = r.get_return_code()
                raise IntegratorException(
                    "ODE integration error at t = %g: %s" %
                    (r.t, _failure_messages.get(code, "return code %s"
                                                % code)))

        cdata = vec2mat(r.y.view(complex), (size, size))
        rho_t = _physical_state(cdata, dims, trace0, t, opt)

        if store_states:
            output.states.append(rho_t)
        e_ops.step(t_idx, t, rho_t)
        progress_bar.update(t_idx + 1)

    progress_bar.finished()
    output.expect = e_ops.finish()

    if opt.store_final_state:
        output.final_state = rho_t

    output.stats = {
        'method': opt.method,
        'num_rhs': nfev[0],
        'run_time': time.time() - t_start,
    }
    logger.debug("mesolve: %d output times, %d rhs evaluations in %.3fs",
                 n_tsteps, nfev[0], output.stats['run_time'])
    return output
