import numpy as np
import pytest
from numpy.testing import assert_allclose

from qmaster import (
    OptomechanicalParameters, OptomechanicalSystem,
    optomechanical_hamiltonian, sideband_cooling, steady_state_occupations,
    detuning_scan, basis, destroy, qeye, tensor, expect, Options,
    DimensionMismatch, InvalidParameter,
)

# cooling scenario of a cavity red detuned by one mechanical frequency
SCENARIO_A = OptomechanicalParameters()
# the same cavity with the mechanics coupled to a warm bath
SCENARIO_B = SCENARIO_A.replace(damping=0.03, n_th=2.0)


class TestParameters:
    def test_defaults(self):
        p = OptomechanicalParameters()
        assert (p.omega_m, p.delta, p.g, p.eta, p.kappa) == \
            (10.0, -10.0, 1.0, 2.0, 1.0)
        assert (p.damping, p.n_th) == (0.0, 0.0)
        assert (p.n_cav, p.n_mech) == (5, 11)

    def test_replace(self):
        p = SCENARIO_A.replace(delta=-8.5)
        assert p.delta == -8.5
        assert SCENARIO_A.delta == -10.0
        assert p.omega_m == SCENARIO_A.omega_m

    def test_frozen(self):
        with pytest.raises(AttributeError):
            SCENARIO_A.g = 2.0

    @pytest.mark.parametrize("changes", [
        pytest.param({"kappa": -1.0}, id="negative kappa"),
        pytest.param({"damping": -0.1}, id="negative damping"),
        pytest.param({"n_th": -1.0}, id="negative n_th"),
        pytest.param({"g": np.nan}, id="nan coupling"),
        pytest.param({"eta": 1j}, id="complex drive"),
        pytest.param({"n_cav": 0}, id="empty cavity space"),
        pytest.param({"n_mech": 2.5}, id="fractional truncation"),
        pytest.param({"n_mech": True}, id="boolean truncation"),
    ])
    def test_invalid(self, changes):
        with pytest.raises(InvalidParameter):
            OptomechanicalParameters(**changes)
        with pytest.raises(InvalidParameter):
            SCENARIO_A.replace(**changes)


class TestSystem:
    def setup_method(self):
        self.system = OptomechanicalSystem(SCENARIO_A)

    def test_operators(self):
        s = self.system
        assert s.basis.dims == [5, 11]
        assert s.a.dims == [[5, 11], [5, 11]]
        assert s.a == tensor(destroy(5), qeye(11))
        assert s.b == tensor(qeye(5), destroy(11))
        assert s.a * s.b == s.b * s.a
        assert s.num_a == s.a.dag() * s.a
        assert s.num_b == s.b.dag() * s.b

    def test_hamiltonian_hermitian(self):
        H = self.system.hamiltonian()
        assert H.isherm
        assert_allclose(H.full(), H.full().conj().T, atol=1e-12)

    def test_hamiltonian_elements(self):
        p = SCENARIO_A
        H = self.system.hamiltonian().full()
        # |n_a, n_b> sits at index n_a * 11 + n_b
        assert H[13, 13] == pytest.approx(-p.delta + 2 * p.omega_m)
        assert H[0, 11] == pytest.approx(p.eta)
        assert H[14, 13] == pytest.approx(-p.g * np.sqrt(3))
        assert H[2, 2] == pytest.approx(2 * p.omega_m)

    def test_hamiltonian_errors(self):
        a = self.system.a
        with pytest.raises(DimensionMismatch):
            optomechanical_hamiltonian(SCENARIO_A, a, destroy(11))
        with pytest.raises(TypeError):
            optomechanical_hamiltonian(SCENARIO_A, a, a.full())

    def test_jump_operators(self):
        channels = self.system.jump_operators()
        assert len(channels) == 1
        assert channels[0][0] == self.system.a
        assert channels[0][1] == SCENARIO_A.kappa

        system = OptomechanicalSystem(SCENARIO_B)
        (_, kappa), (b, down), (bd, up) = system.jump_operators()
        assert kappa == SCENARIO_B.kappa
        assert b == system.b
        assert bd == system.b.dag()
        assert down == pytest.approx(0.03 / 2 * 3)
        assert up == pytest.approx(0.03 / 2 * 2)
        assert len(system.collapse_operators()) == 3

    def test_cold_bath_drops_heating(self):
        system = OptomechanicalSystem(SCENARIO_A.replace(damping=0.1))
        assert len(system.jump_operators()) == 3
        assert len(system.collapse_operators()) == 2

    def test_initial_state(self):
        rho0 = self.system.initial_state(0, 2)
        assert rho0 == basis([5, 11], [0, 2]).proj()
        assert expect(self.system.num_b, rho0) == pytest.approx(2)
        with pytest.raises(InvalidParameter):
            self.system.initial_state(5, 0)

    def test_requires_parameters(self):
        with pytest.raises(TypeError):
            OptomechanicalSystem({"g": 1.0})


class TestSidebandCooling:
    tlist = np.linspace(0, 50, 251)

    @pytest.fixture(scope="class")
    def cooling_a(self):
        return sideband_cooling(SCENARIO_A, self.tlist)

    def test_initial_values(self, cooling_a):
        assert cooling_a.expect[0][0] == pytest.approx(0, abs=1e-12)
        assert cooling_a.expect[1][0] == pytest.approx(2)

    def test_phonons_are_cooled(self, cooling_a):
        """
        <b.dag() b> decays from 2 towards the cooling limit. A single step
        may rise by at most 1e-3, the size of the radiation pressure ripple
        riding on the decay.
        """
        n_b = cooling_a.expect[1]
        assert n_b[-1] < 0.1
        assert np.all(np.diff(n_b) < 1e-3)
        assert np.all(np.diff(n_b[:126:25]) < 0)

    def test_photons_bounded(self, cooling_a):
        n_a = cooling_a.expect[0]
        assert np.all(n_a >= -1e-8)
        assert np.all(n_a < 1)

    def test_approaches_steady_state(self, cooling_a):
        n_a, n_b = steady_state_occupations(SCENARIO_A)
        assert cooling_a.expect[1][-1] == pytest.approx(n_b, abs=5e-3)
        assert cooling_a.expect[0][-1] == pytest.approx(n_a, abs=5e-3)

    def test_custom_e_ops(self):
        system = OptomechanicalSystem(SCENARIO_A)
        tlist = np.linspace(0, 1, 11)
        result = system.evolve(tlist, e_ops={'x': system.b + system.b.dag()},
                               options=Options(store_states=True))
        assert set(result.expect) == {'x'}
        assert len(result.states) == len(tlist)
        assert result.states[0] == system.initial_state(0, 2)


class TestSteadyState:
    def test_cold_mechanics(self):
        n_a, n_b = steady_state_occupations(SCENARIO_A)
        assert 0 < n_a < 0.1
        assert 0 <= n_b < 0.01

    def test_warm_bath_heats(self):
        _, n_b_a = steady_state_occupations(SCENARIO_A)
        _, n_b_b = steady_state_occupations(SCENARIO_B)
        assert n_b_b > n_b_a
        assert n_b_b < SCENARIO_B.n_th

    def test_direct_agrees_with_eigen(self):
        ref = steady_state_occupations(SCENARIO_B)
        out = steady_state_occupations(SCENARIO_B, method="direct")
        assert_allclose(out, ref, atol=1e-6)

    def test_system_steadystate(self):
        system = OptomechanicalSystem(SCENARIO_B)
        rho_ss = system.steadystate()
        assert rho_ss.dims == [[5, 11], [5, 11]]
        assert rho_ss.tr() == pytest.approx(1)
        n_b = expect(system.num_b, rho_ss)
        assert n_b == pytest.approx(steady_state_occupations(SCENARIO_B)[1],
                                    abs=1e-8)


class TestDetuningScan:
    detunings = [-13.0, -11.5, -10.0, -8.5, -7.0]

    def test_resonant_cooling(self):
        "Phonons are coldest when the drive is one mechanical frequency red"
        n_a, n_b = detuning_scan(SCENARIO_B, self.detunings)
        assert n_a.shape == n_b.shape == (5,)
        assert np.argmin(n_b) == 2
        assert np.all(n_b > 0)

    @pytest.mark.slow
    def test_parallel_matches_serial(self):
        serial = detuning_scan(SCENARIO_B, self.detunings)
        parallel = detuning_scan(SCENARIO_B, self.detunings, parallel=True,
                                 num_cpus=2)
        assert_allclose(parallel[0], serial[0], atol=1e-8)
        assert_allclose(parallel[1], serial[1], atol=1e-8)
