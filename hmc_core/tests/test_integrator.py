"""
Test suite for the leapfrog integrator and unit metric Hamiltonian.

Compares the integrator against its analytical solution for a simple
harmonic oscillator.
"""
import numpy as np

from hmc_core.datatypes import PhaseSpacePoint
from hmc_core.hamiltonian import UnitMetricHamiltonian
from hmc_core.integrator import Leapfrog
from hmc_core.model import gaussian_model
from hmc_core.rng import create_rng


# ============================================================================
# Analytical Solutions
# ============================================================================

def leapfrog_analytic(x: np.ndarray, tau: float) -> np.ndarray:
    """
    Analytical p-first leapfrog step for simple harmonic oscillator, x = [q, p]
    """
    LF_step = np.array([
        [1 - tau**2/2, tau],
        [-tau + tau**3/4, 1 - tau**2/2]
    ])
    return LF_step @ x


def make_point(x0: np.ndarray, hamiltonian) -> PhaseSpacePoint:
    z = PhaseSpacePoint(1)
    z.q[:] = x0[:1]
    z.p[:] = x0[1:]
    hamiltonian.init(z)
    return z


# ============================================================================
# Tests
# ============================================================================

def test_leapfrog():
    """Test leapfrog integrator against analytical solution"""
    tau = 0.1
    hamiltonian = UnitMetricHamiltonian(gaussian_model(dim=1))
    x0 = create_rng(1).standard_normal(2)
    z = make_point(x0, hamiltonian)

    Leapfrog().evolve(z, hamiltonian, tau)
    x_lf = np.concatenate([z.q, z.p])
    x_analytic = leapfrog_analytic(x0, tau)

    print(f"Leapfrog (numerical): {x_lf}")
    print(f"Leapfrog (analytic) : {x_analytic}")
    assert np.allclose(x_lf, x_analytic, atol=1e-10), "Leapfrog test failed!"
    # Potential and gradient follow the new position
    assert np.isclose(z.V, 0.5 * z.q[0] ** 2)
    assert np.allclose(z.g, z.q)


def test_energy_conservation():
    """Leapfrog energy error stays bounded over many steps"""
    tau = 0.1
    N = 100
    hamiltonian = UnitMetricHamiltonian(gaussian_model(dim=1))
    x0 = create_rng(42).standard_normal(2)
    z = make_point(x0, hamiltonian)
    H0 = hamiltonian.H(z)

    integrator = Leapfrog()
    for _ in range(N):
        integrator.evolve(z, hamiltonian, tau)

    error_lf = abs(hamiltonian.H(z) - H0)
    print(f"After {N} steps (tau={tau}): energy error {error_lf:.2e}")
    assert error_lf < 1e-2


def test_unit_metric():
    hamiltonian = UnitMetricHamiltonian(gaussian_model(dim=3))
    z = PhaseSpacePoint(3)
    z.q[:] = [1.0, -2.0, 0.5]
    hamiltonian.init(z)
    hamiltonian.sample_p(z, create_rng(0))

    assert np.isclose(hamiltonian.T(z), 0.5 * np.dot(z.p, z.p))
    assert np.isclose(hamiltonian.H(z), hamiltonian.T(z) + 0.5 * np.dot(z.q, z.q))
    assert np.array_equal(hamiltonian.dtau_dp(z), z.p)
    assert np.allclose(hamiltonian.dphi_dq(z), z.q)

    lines = []
    hamiltonian.write_metric(lines.append)
    assert lines == ["No free parameters for unit metric"]


def test_phase_space_point_copy():
    z = PhaseSpacePoint(2)
    z.q[:] = [1.0, 2.0]
    z.V = 3.0
    w = z.copy()
    z.q[0] = -1.0

    assert w.q[0] == 1.0
    assert w.V == 3.0
    assert w.dim == 2
