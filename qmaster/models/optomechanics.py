"""
A driven cavity mode coupled to a mechanical oscillator by radiation
pressure, and the sideband-cooling workflows built on it.

The cavity (photon) mode is the first factor of the composite basis, the
mechanical (phonon) mode the second.
"""

__all__ = ['OptomechanicalParameters', 'OptomechanicalSystem',
           'optomechanical_hamiltonian', 'sideband_cooling',
           'steady_state_occupations', 'detuning_scan']

import numbers
from dataclasses import dataclass, replace

import numpy as np

from qmaster.qobj import Qobj, _hermitian_defect
from qmaster.dimensions import Basis
from qmaster.operators import destroy, num
from qmaster.states import basis
from qmaster.tensor import expand_operator
from qmaster.expect import expect
from qmaster.mesolve import mesolve
from qmaster.steadystate import steadystate
from qmaster.parallel import serial_map, parallel_map
from qmaster.exceptions import DimensionMismatch, InvalidParameter
from qmaster.logging_utils import get_logger

logger = get_logger(__name__)

HERMITICITY_TOL = 1e-10


@dataclass(frozen=True)
class OptomechanicalParameters:
    """
    Physical parameters and Fock-space truncations of an optomechanical
    cavity. All frequencies and rates are in the same (arbitrary) units.

    Attributes
    ----------
    omega_m : float
        Mechanical frequency.
    delta : float
        Detuning of the drive from the cavity resonance.
    g : float
        Single-photon optomechanical coupling.
    eta : float
        Drive strength.
    kappa : float
        Cavity decay rate.
    damping : float
        Mechanical damping rate ``c`` towards the thermal bath.
    n_th : float
        Mean phonon number of the mechanical bath.
    n_cav, n_mech : int
        Number of Fock states kept for the cavity and the mechanics.
    """
    omega_m: float = 10.0
    delta: float = -10.0
    g: float = 1.0
    eta: float = 2.0
    kappa: float = 1.0
    damping: float = 0.0
    n_th: float = 0.0
    n_cav: int = 5
    n_mech: int = 11

    def __post_init__(self):
        for name in ('omega_m', 'delta', 'g', 'eta'):
            _check_real(name, getattr(self, name))
        for name in ('kappa', 'damping', 'n_th'):
            value = getattr(self, name)
            _check_real(name, value)
            if value < 0:
                raise InvalidParameter("%s must be non-negative, got %g"
                                       % (name, value))
        for name in ('n_cav', 'n_mech'):
            value = getattr(self, name)
            if not isinstance(value, numbers.Integral) \
                    or isinstance(value, bool) or value < 1:
                raise InvalidParameter("%s must be a positive integer, not "
                                       "%r" % (name, value))

    def replace(self, **changes):
        """Copy of the parameters with some fields changed."""
        return replace(self, **changes)


def _check_real(name, value):
    if not isinstance(value, numbers.Real) or isinstance(value, bool) \
            or not np.isfinite(value):
        raise InvalidParameter("%s must be a finite real number, not %r"
                               % (name, value))


def optomechanical_hamiltonian(params, a, b):
    """
    Hamiltonian of the driven optomechanical cavity in the frame rotating
    with the drive,

    .. math::

        H = -\\Delta a^\\dagger a + \\omega_m b^\\dagger b
            - g (b^\\dagger + b) a^\\dagger a + \\eta (a + a^\\dagger)

    Parameters
    ----------
    params : :class:`OptomechanicalParameters`
    a, b : :class:`qmaster.Qobj`
        Cavity and mechanical lowering operators on the composite basis.

    Returns
    -------
    H : :class:`qmaster.Qobj`
        Hermitian Hamiltonian.
    """
    if not isinstance(a, Qobj) or not isinstance(b, Qobj) \
            or not (a.isoper and b.isoper):
        raise TypeError("a and b must be quantum operators")
    if a.dims != b.dims:
        raise DimensionMismatch("Cavity and mechanical operators act on "
                                "different spaces: %s and %s"
                                % (a.dims, b.dims))
    ad = a.dag()
    bd = b.dag()
    n_a = ad * a
    H = (-params.delta * n_a + params.omega_m * (bd * b)
         - params.g * ((bd + b) * n_a) + params.eta * (a + ad))
    defect = _hermitian_defect(H.data)
    if defect > HERMITICITY_TOL:
        raise InvalidParameter("Optomechanical Hamiltonian is not "
                               "Hermitian: max|H - H.dag()| = %g" % defect)
    H.isherm = True
    return H


class OptomechanicalSystem:
    """
    Operators, Hamiltonian and jump channels of an optomechanical cavity.

    Parameters
    ----------
    params : :class:`OptomechanicalParameters`

    Attributes
    ----------
    basis : :class:`qmaster.CompositeBasis`
        Cavity x mechanics Fock basis.
    a, b : :class:`qmaster.Qobj`
        Lowering operators of the cavity and the mechanics, lifted to the
        composite basis.
    num_a, num_b : :class:`qmaster.Qobj`
        Photon and phonon number operators on the composite basis.
    """

    def __init__(self, params):
        if not isinstance(params, OptomechanicalParameters):
            raise TypeError("params must be OptomechanicalParameters")
        self.params = params
        self.basis = Basis(params.n_cav, label='cavity') * \
            Basis(params.n_mech, label='mechanics')
        dims = self.basis.dims
        self.a = expand_operator(destroy(params.n_cav), dims, 0)
        self.b = expand_operator(destroy(params.n_mech), dims, 1)
        self.num_a = expand_operator(num(params.n_cav), dims, 0)
        self.num_b = expand_operator(num(params.n_mech), dims, 1)

    def __repr__(self):
        return "OptomechanicalSystem(%r)" % (self.params,)

    def hamiltonian(self):
        return optomechanical_hamiltonian(self.params, self.a, self.b)

    def jump_operators(self):
        """
        Jump channels as ``(J, rate)`` pairs: cavity decay ``(a, kappa)`` and,
        for a damped mechanical mode, ``(b, c/2 (n_th + 1))`` and
        ``(b.dag(), c/2 n_th)``.
        """
        p = self.params
        channels = [(self.a, p.kappa)]
        if p.damping > 0:
            channels.append((self.b, p.damping / 2 * (p.n_th + 1)))
            channels.append((self.b.dag(), p.damping / 2 * p.n_th))
        return channels

    def collapse_operators(self):
        """Jump channels as collapse operators ``sqrt(rate) J``."""
        return [J * np.sqrt(rate) for J, rate in self.jump_operators()
                if rate > 0]

    def initial_state(self, n_photons=0, n_phonons=0):
        """Density matrix of the Fock state ``|n_photons>|n_phonons>``."""
        return basis(self.basis, [n_photons, n_phonons]).proj()

    def evolve(self, tlist, rho0=None, e_ops=None, options=None,
               progress_bar=None):
        """
        Integrate the master equation from `rho0` (default: cavity vacuum
        with two phonons). Unless `e_ops` are given the photon and phonon
        numbers are recorded.
        """
        if rho0 is None:
            rho0 = self.initial_state(0, 2)
        if e_ops is None:
            e_ops = [self.num_a, self.num_b]
        return mesolve(self.hamiltonian(), rho0, tlist,
                       c_ops=self.jump_operators(), e_ops=e_ops,
                       options=options, progress_bar=progress_bar)

    def steadystate(self, method='eigen', **kwargs):
        return steadystate(self.hamiltonian(), self.collapse_operators(),
                           method=method, **kwargs)


def sideband_cooling(params, tlist, n_photons=0, n_phonons=2, options=None,
                     progress_bar=None):
    """
    Time evolution of the photon and phonon numbers starting from the Fock
    state ``|n_photons>|n_phonons>``.

    Returns
    -------
    result : :class:`qmaster.solver.Result`
        ``result.expect[0]`` holds ``<a.dag() a>(t)`` and ``result.expect[1]``
        holds ``<b.dag() b>(t)``.
    """
    system = OptomechanicalSystem(params)
    rho0 = system.initial_state(n_photons, n_phonons)
    return system.evolve(tlist, rho0, options=options,
                         progress_bar=progress_bar)


def steady_state_occupations(params, method='eigen', **kwargs):
    """
    Steady-state photon and phonon numbers, evaluated on the reduced density
    matrices of the cavity and the mechanics.

    Returns
    -------
    n_a, n_b : float
    """
    system = OptomechanicalSystem(params)
    rho_ss = system.steadystate(method=method, **kwargs)
    n_a = expect(num(params.n_cav), rho_ss.ptrace(0))
    n_b = expect(num(params.n_mech), rho_ss.ptrace(1))
    return n_a, n_b


def _occupations_at_detuning(delta, params, method):
    return steady_state_occupations(params.replace(delta=delta),
                                    method=method)


def detuning_scan(params, detunings, parallel=False, method='eigen',
                  progress_bar=None, num_cpus=None):
    """
    Steady-state photon and phonon numbers as a function of the detuning.

    Every detuning is an independent steady-state problem; with
    ``parallel=True`` they are distributed over processes with
    :func:`qmaster.parallel.parallel_map`.

    Returns
    -------
    n_a, n_b : array
        Occupations aligned with `detunings`.
    """
    detunings = [float(delta) for delta in detunings]
    logger.debug("detuning_scan over %d detunings (parallel=%s)",
                 len(detunings), parallel)
    if parallel:
        results = parallel_map(_occupations_at_detuning, detunings,
                               task_args=(params, method),
                               progress_bar=progress_bar, num_cpus=num_cpus)
    else:
        results = serial_map(_occupations_at_detuning, detunings,
                             task_args=(params, method),
                             progress_bar=progress_bar)
    n_a = np.array([result[0] for result in results])
    n_b = np.array([result[1] for result in results])
    return n_a, n_b
