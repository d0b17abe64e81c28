"""
Module contains functions for solving for the steady state density matrix of
open quantum systems defined by a Liouvillian or Hamiltonian and a list of
collapse operators.
"""

__all__ = ['steadystate']

import time

import numpy as np
import scipy.linalg as la
import scipy.sparse as sp
from scipy.sparse.linalg import eigs, spsolve, ArpackNoConvergence, \
    ArpackError

from qmaster.qobj import Qobj, isoper, issuper
from qmaster.superoperator import liouvillian, collapse_operators, \
    vec2mat, mat2vec
from qmaster.exceptions import InvalidParameter, SteadyStateNotFound
from qmaster.settings import settings
from qmaster.logging_utils import get_logger

logger = get_logger(__name__)


def _empty_info_dict():
    def_info = {'method': None, 'eigenvalue': None,
                'residual_norm': None, 'solution_time': None}

    return def_info


def _default_steadystate_args():
    def_args = {'sparse': True, 'sigma': 1e-15, 'k': 1, 'which': 'LM',
                'tol': 1e-12, 'maxiter': 1000, 'weight': None,
                'eig_tol': 1e-6, 'herm_tol': 1e-6, 'psd_tol': 1e-8,
                'return_info': False}
    return def_args


def steadystate(A, c_op_list=(), method='eigen', **kwargs):
    """
    Calculates the steady state for quantum evolution subject to the supplied
    Hamiltonian or Liouvillian operator and (if given a Hamiltonian) a list of
    collapse operators.

    The steady state is the trace-one density matrix spanning the null space
    of the Liouvillian, :math:`\\mathcal{L}\\rho_{ss} = 0`.

    Parameters
    ----------
    A : :class:`qmaster.Qobj`
        A Hamiltonian or Liouvillian operator.

    c_op_list : list
        A list of collapse operators ``sqrt(rate) * J`` or ``(J, rate)``
        pairs.

    method : str {'eigen', 'direct', 'svd'}
        The allowed methods are

        - 'eigen'
          Eigenvector of the Liouvillian whose eigenvalue is closest to
          zero, found with ARPACK in shift-invert mode (or with a dense
          diagonalization when ``sparse=False``).
        - 'direct'
          LU decomposition of the Liouvillian with the trace condition
          replacing the first equation.
        - 'svd'
          Null space of the dense Liouvillian from a singular value
          decomposition.

    sparse : bool, optional, default=True
        Solve for the steady state using sparse algorithms.

    sigma : float, optional, default=1e-15
        Shift of the ARPACK shift-invert mode. ``None`` (with
        ``which='SM'``) searches the smallest magnitude eigenvalue
        directly, which may fail to converge.

    k : int, optional, default=1
        Number of eigenvalues computed by ARPACK.

    which : str, optional, default='LM'
        Which eigenvalues ARPACK returns (in shift-invert mode 'LM' are those
        closest to `sigma`).

    tol : float, optional, default=1e-12
        Tolerance of ARPACK.

    maxiter : int, optional, default=1000
        Maximum number of Arnoldi iterations.

    weight : float, optional
        Weight of the trace condition of the 'direct' method. Defaults to
        the mean absolute value of the stored elements of the Liouvillian.

    eig_tol : float, optional, default=1e-6
        Largest accepted eigenvalue (and residual) relative to the Frobenius
        norm of the Liouvillian.

    herm_tol : float, optional, default=1e-6
        Largest accepted ``max|rho - rho.dag()|`` of the trace-normalized
        solution.

    psd_tol : float, optional, default=1e-8
        Most negative accepted eigenvalue of the solution.

    return_info : bool, optional, default=False
        Return a dictionary of solver-specific infomation about the
        solution and how it was obtained.

    Returns
    -------
    dm : qobj
        Steady state density matrix.
    info : dict, optional
        Dictionary containing solver-specific information about the solution.

    Raises
    ------
    InvalidParameter
        A Hamiltonian was given without collapse operators.
    SteadyStateNotFound
        No physical steady state passed the checks above.
    """
    ss_args = _default_steadystate_args()
    ss_args['method'] = method
    for key in kwargs.keys():
        if key in ss_args.keys():
            ss_args[key] = kwargs[key]
        else:
            raise TypeError(
                "Invalid keyword argument '"+key+"' passed to steadystate.")
    ss_args['info'] = _empty_info_dict()
    ss_args['info']['method'] = method

    # Create & check Liouvillian
    A = _steadystate_setup(A, c_op_list)

    # Set weight parameter to avg abs val in L if not set explicitly
    if ss_args['weight'] is None:
        data = sp.csr_matrix(A.data)
        ss_args['weight'] = np.mean(np.abs(data.data)) if data.nnz else 1.0

    if ss_args['method'] == 'eigen':
        if ss_args['sparse']:
            data, eigval = _steadystate_eigen(A, ss_args)
        else:
            data, eigval = _steadystate_eigen_dense(A, ss_args)
    elif ss_args['method'] == 'direct':
        if ss_args['sparse']:
            data, eigval = _steadystate_direct_sparse(A, ss_args)
        else:
            data, eigval = _steadystate_direct_dense(A, ss_args)
    elif ss_args['method'] == 'svd':
        data, eigval = _steadystate_svd_dense(A, ss_args)
    else:
        raise ValueError('Invalid method argument for steadystate.')

    rhoss = _steadystate_validate(A, data, eigval, ss_args)
    if ss_args['return_info']:
        return rhoss, ss_args['info']
    return rhoss


def _steadystate_setup(A, c_op_list):
    """Build Liouvillian (if necessary) and check input.
    """
    if isoper(A):
        c_ops = collapse_operators(c_op_list)
        if len(c_ops) > 0:
            return liouvillian(A, c_ops)

        raise InvalidParameter('Cannot calculate the steady state for a ' +
                               'non-dissipative system ' +
                               '(no collapse operators given)')
    elif issuper(A):
        return A
    else:
        raise TypeError('Solving for steady states requires ' +
                        'Liouvillian (super) operators')


def _steadystate_eigen(L, ss_args):
    """
    Internal function for solving the steady state problem by
    finding the eigenvector corresponding to the zero eigenvalue
    of the Liouvillian using ARPACK.
    """
    if settings.debug:
        logger.debug('Starting Eigen solver.')

    L = sp.csc_matrix(L.data)
    _eigen_start = time.time()
    try:
        eigval, eigvec = eigs(L, k=ss_args['k'], sigma=ss_args['sigma'],
                              tol=ss_args['tol'], which=ss_args['which'],
                              maxiter=ss_args['maxiter'])
    except ArpackNoConvergence as err:
        raise SteadyStateNotFound("ARPACK did not converge: %s" % err)
    except (ArpackError, RuntimeError) as err:
        raise SteadyStateNotFound("Eigenvalue solver failed: %s" % err)
    _eigen_end = time.time()
    ss_args['info']['solution_time'] = _eigen_end - _eigen_start

    idx = np.argmin(np.abs(eigval))
    return vec2mat(eigvec[:, idx]), eigval[idx]


def _steadystate_eigen_dense(L, ss_args):
    """
    Eigenvector of the dense Liouvillian with the eigenvalue of smallest
    magnitude.
    """
    if settings.debug:
        logger.debug('Starting dense Eigen solver.')

    _eigen_start = time.time()
    try:
        eigval, eigvec = np.linalg.eig(L.full())
    except np.linalg.LinAlgError as err:
        raise SteadyStateNotFound("Eigenvalue solver failed: %s" % err)
    _eigen_end = time.time()
    ss_args['info']['solution_time'] = _eigen_end - _eigen_start

    idx = np.argmin(np.abs(eigval))
    return vec2mat(eigvec[:, idx]), eigval[idx]


def _trace_row(n, weight, shape):
    # diagonal elements of rho sit at i + n*i in the column-stacked vector
    cols = np.arange(n) * (n + 1)
    return sp.csr_matrix((np.full(n, weight, dtype=complex),
                          (np.zeros(n, dtype=int), cols)), shape=shape)


def _steadystate_direct_sparse(L, ss_args):
    """
    Direct solver that uses scipy sparse matrices.
    """
    if settings.debug:
        logger.debug('Starting direct LU solver.')

    n = int(np.sqrt(L.shape[0]))
    b = np.zeros(n ** 2, dtype=complex)
    b[0] = ss_args['weight']

    L = sp.csr_matrix(L.data) + _trace_row(n, ss_args['weight'], L.shape)
    _direct_start = time.time()
    v = spsolve(L.tocsc(), b)
    _direct_end = time.time()
    ss_args['info']['solution_time'] = _direct_end - _direct_start
    if not np.all(np.isfinite(v)):
        raise SteadyStateNotFound("LU factorization of the Liouvillian is "
                                  "singular")
    return vec2mat(v), None


def _steadystate_direct_dense(L, ss_args):
    """
    Direct solver that uses numpy arrays. Suitable for small systems with few
    states.
    """
    if settings.debug:
        logger.debug('Starting direct dense solver.')

    n = int(np.sqrt(L.shape[0]))
    b = np.zeros(n ** 2, dtype=complex)
    b[0] = ss_args['weight']

    L = L.full()
    L[0, :] += np.diag(ss_args['weight']*np.ones(n)).reshape(n ** 2)
    _dense_start = time.time()
    try:
        v = np.linalg.solve(L, b)
    except np.linalg.LinAlgError as err:
        raise SteadyStateNotFound("Dense solve failed: %s" % err)
    _dense_end = time.time()
    ss_args['info']['solution_time'] = _dense_end - _dense_start
    return vec2mat(v), None


def _steadystate_svd_dense(L, ss_args):
    """
    Find the steady state of an open quantum system by solving for the
    nullspace of the Liouvillian.
    """
    if settings.debug:
        logger.debug('Starting SVD solver.')
    _svd_start = time.time()
    try:
        u, s, vh = la.svd(L.full(), full_matrices=False)
    except la.LinAlgError as err:
        raise SteadyStateNotFound("SVD failed: %s" % err)
    _svd_end = time.time()
    ss_args['info']['solution_time'] = _svd_end - _svd_start
    return vec2mat(vh[-1].conj()), s[-1]


def _steadystate_validate(L, data, eigval, ss_args):
    """
    Normalize a candidate null vector to unit trace and check that it is a
    physical state.
    """
    info = ss_args['info']
    L_data = sp.csr_matrix(L.data)
    L_norm = np.sqrt(np.sum(np.abs(L_data.data) ** 2))
    bound = ss_args['eig_tol'] * L_norm
    info['eigenvalue'] = eigval

    if eigval is not None and abs(eigval) > bound:
        raise SteadyStateNotFound(
            "Smallest eigenvalue %s of the Liouvillian is not zero "
            "(tolerance %g)" % (eigval, bound))

    data = np.asarray(data, dtype=complex)
    trace = np.trace(data)
    if abs(trace) <= 1e-14 * max(np.max(np.abs(data)), 1e-300):
        raise SteadyStateNotFound("The null vector of the Liouvillian has "
                                  "vanishing trace")
    rho = data / trace

    defect = np.max(np.abs(rho - rho.conj().T))
    if defect > ss_args['herm_tol']:
        raise SteadyStateNotFound("Steady state is not Hermitian: "
                                  "max|rho - rho.dag()| = %g" % defect)
    rho = 0.5 * (rho + rho.conj().T)

    residual = np.linalg.norm(L_data @ mat2vec(rho).ravel())
    info['residual_norm'] = residual
    if residual > bound:
        raise SteadyStateNotFound("Steady state residual %g exceeds "
                                  "tolerance %g" % (residual, bound))

    min_eig = np.linalg.eigvalsh(rho)[0]
    if min_eig < -ss_args['psd_tol']:
        raise SteadyStateNotFound("Steady state is not positive: minimum "
                                  "eigenvalue %g" % min_eig)

    logger.debug("steadystate (%s): residual %.3g, trace-normalized in "
                 "%.3fs", info['method'], residual, info['solution_time'])
    return Qobj(rho, dims=L.dims[0], isherm=True)
