"""
Description:
    Hamiltonian structures over a mutable phase space point.
    USE THE CORRECT ENVIRONMENT:  HMC-Research

Author: John Gallagher
Created: 2026-02-16
Last Modified: 2026-10-19
Version: 0.2
"""
from abc import ABC, abstractmethod
import numpy as np

from .datatypes import PhaseSpacePoint, Writer

class Hamiltonian(ABC):
    """
    Hamiltonian(q,p) = V(q) + T(q,p)
        V(q) = -log π(q), cached on the point with its gradient
        T(q,p) = kinetic energy, set by the metric
    """
    def __init__(self, model):
        self.model = model

    @abstractmethod
    def T(self, z: PhaseSpacePoint) -> float:
        """Kinetic energy"""

    @abstractmethod
    def dtau_dq(self, z: PhaseSpacePoint) -> np.ndarray:
        """∂T/∂q"""

    @abstractmethod
    def dtau_dp(self, z: PhaseSpacePoint) -> np.ndarray:
        """∂T/∂p"""

    @abstractmethod
    def sample_p(self, z: PhaseSpacePoint, rng: np.random.Generator) -> None:
        """Draw fresh momentum into z.p"""

    @abstractmethod
    def write_metric(self, writer: Writer) -> None:
        ...

    def V(self, z: PhaseSpacePoint) -> float:
        return z.V

    def H(self, z: PhaseSpacePoint) -> float:
        """total energy H(q,p) = V(q) + T(q,p)"""
        return self.T(z) + self.V(z)

    def dphi_dq(self, z: PhaseSpacePoint) -> np.ndarray:
        """∂H/∂q for a position-independent metric"""
        return z.g + self.dtau_dq(z)

    def update_potential_gradient(self, z: PhaseSpacePoint) -> None:
        """Evaluate the model at z.q, refreshing V and g in place"""
        lp, grad = self.model.log_prob_grad(z.q)
        z.V = -lp
        z.g[:] = -grad

    def init(self, z: PhaseSpacePoint) -> None:
        self.update_potential_gradient(z)

class UnitMetricHamiltonian(Hamiltonian):
    """
    Identity mass matrix:
        T(p) = 0.5 * p.T @ p
    """
    def T(self, z: PhaseSpacePoint) -> float:
        return 0.5 * float(np.dot(z.p, z.p))

    def dtau_dq(self, z: PhaseSpacePoint) -> np.ndarray:
        return np.zeros_like(z.q)

    def dtau_dp(self, z: PhaseSpacePoint) -> np.ndarray:
        return z.p

    def sample_p(self, z: PhaseSpacePoint, rng: np.random.Generator) -> None:
        z.p[:] = rng.standard_normal(z.dim)

    def write_metric(self, writer: Writer) -> None:
        writer("No free parameters for unit metric")
