"""
Description:
    Numerical integrators for Hamiltonian dynamics.
    USE THE CORRECT ENVIRONMENT:  HMC-Research

Author: John Gallagher
Created: 2026-02-16
Last Modified: 2026-10-19
Version: 0.2

Integrators update a PhaseSpacePoint in place and keep its potential and
gradient in sync with the new position.
"""
from abc import ABC, abstractmethod

from .datatypes import PhaseSpacePoint
from .hamiltonian import Hamiltonian

class Integrator(ABC):
    @abstractmethod
    def evolve(self, z: PhaseSpacePoint, hamiltonian: Hamiltonian, τ: float) -> None:
        """Advance z by one step of size τ"""

class Leapfrog(Integrator):
    """
    Single lf integration step.

    Does p-first

    note: the position update refreshes V and g through the hamiltonian
    """
    def begin_update_p(self, z: PhaseSpacePoint, hamiltonian: Hamiltonian, τ: float) -> None:
        z.p -= τ * hamiltonian.dphi_dq(z)

    def update_q(self, z: PhaseSpacePoint, hamiltonian: Hamiltonian, τ: float) -> None:
        z.q += τ * hamiltonian.dtau_dp(z)
        hamiltonian.update_potential_gradient(z)

    def end_update_p(self, z: PhaseSpacePoint, hamiltonian: Hamiltonian, τ: float) -> None:
        z.p -= τ * hamiltonian.dphi_dq(z)

    def evolve(self, z: PhaseSpacePoint, hamiltonian: Hamiltonian, τ: float) -> None:
        # Half step momentum
        self.begin_update_p(z, hamiltonian, 0.5 * τ)
        # Full step position
        self.update_q(z, hamiltonian, τ)
        # Half step momentum
        self.end_update_p(z, hamiltonian, 0.5 * τ)
