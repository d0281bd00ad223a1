"""
Description:
    Core data structures for the HMC sampler base.
    USE THE CORRECT ENVIRONMENT:  HMC-Research

Author: John Gallagher
Created: 2026-02-16
Last Modified: 2026-10-19
Version: 0.2

All modules import from here to ensure type consistency and avoid indexing bugs.
"""
from typing import NamedTuple, Callable, List, Sequence, Union
import numpy as np

class PhaseSpacePoint:
    """
    Mutable phase space state (q, p) with the cached potential and its gradient.

    g holds dV/dq, i.e. the negated gradient of the log density.
    Updated in place by seeding and by every Hamiltonian evaluation.
    """
    def __init__(self, n: int):
        self.q = np.zeros(n) # position
        self.p = np.zeros(n) # momentum
        self.g = np.zeros(n) # gradient of V at q
        self.V = 0.0 # potential energy, -log π(q)

    @property
    def dim(self) -> int:
        """Dimension of configuration space"""
        return self.q.shape[0]

    def copy(self) -> "PhaseSpacePoint":
        z = PhaseSpacePoint(self.dim)
        z.assign(self)
        return z

    def assign(self, other: "PhaseSpacePoint") -> None:
        """Copy another point's state into this one without rebinding arrays"""
        self.q[:] = other.q
        self.p[:] = other.p
        self.g[:] = other.g
        self.V = other.V

    def get_param_names(self) -> List[str]:
        """Names of the per-iteration diagnostics, momentum then gradient"""
        return ([f"p_{i}" for i in range(1, self.dim + 1)]
                + [f"g_{i}" for i in range(1, self.dim + 1)])

    def get_params(self) -> List[float]:
        return [float(v) for v in self.p] + [float(v) for v in self.g]

    def __repr__(self) -> str:
        return f"PhaseSpacePoint(q={self.q}, p={self.p}, g={self.g}, V={self.V})"

class StepSizeConfig(NamedTuple):
    """Step size configuration, replaced wholesale when a mutator accepts a value"""
    nominal: float = 0.1 # nominal step size
    jitter: float = 0.0 # relative jitter in [0, 1)
    current: float = 0.1 # step size used by the present transition

class Sample(NamedTuple):
    """MCMC sample passed into and out of a transition"""
    cont_params: np.ndarray
    log_prob: float
    accept_stat: float

class GradientComparison(NamedTuple):
    """Analytic vs finite difference gradient for one parameter"""
    index: int
    value: float # position component
    model: float # analytic gradient
    finite_diff: float
    error: float # |model - finite_diff|

class GradientReport(NamedTuple):
    log_prob: float
    comparisons: List[GradientComparison]
    num_failed: int

# Type aliases for clarity
Vector = Union[np.ndarray, Sequence[float]]
Writer = Callable[..., None]
LogDensity = Callable[..., float]
