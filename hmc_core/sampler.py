"""
Description:
    Abstract base for Hamiltonian Monte Carlo samplers.
    USE THE CORRECT ENVIRONMENT:  HMC-Research

Author: John Gallagher
Created: 2026-02-16
Last Modified: 2026-10-19
Version: 0.2

BaseHMC owns the phase space point, the step size configuration and the
chain's generator. Concrete samplers (static HMC, NUTS, ...) only supply
transition(); everything they need from the current state is kept here.
"""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional
import numpy as np

from .datatypes import PhaseSpacePoint, StepSizeConfig, Sample, Vector, Writer
from .errors import EvaluationError, SamplerError
from .hamiltonian import Hamiltonian, UnitMetricHamiltonian
from .integrator import Integrator, Leapfrog
from .writers import BufferWriter

logger = logging.getLogger(__name__)

# init_stepsize targets this one-step acceptance ratio
TARGET_ACCEPT = 0.8
MAX_STEPSIZE = 1e7

class BaseHMC(ABC):
    """
    Shared state machine for HMC samplers.

    Unseeded after construction, seeded once seed() has been called. Only
    transition() on a seeded sampler has a defined numerical result.

    Args:
        model: Model providing num_params_r() and log_prob_grad()
        rng: Generator already advanced to this chain's stream
        hamiltonian: Hamiltonian capability, unit metric if omitted
        integrator: Integrator capability, leapfrog if omitted
    """
    name = "Base HMC"

    def __init__(
        self,
        model,
        rng: np.random.Generator,
        hamiltonian: Optional[Hamiltonian] = None,
        integrator: Optional[Integrator] = None
    ):
        self.model = model
        self.rng = rng
        self.z = PhaseSpacePoint(model.num_params_r())
        self.hamiltonian = hamiltonian if hamiltonian is not None else UnitMetricHamiltonian(model)
        self.integrator = integrator if integrator is not None else Leapfrog()
        self.stepsize = StepSizeConfig()
        self._seeded = False
        self._info = BufferWriter()
        self._err = BufferWriter()

    @property
    def is_seeded(self) -> bool:
        return self._seeded

    def seed(self, q: Vector) -> None:
        """Overwrite the position; V and g stay stale until the next evaluation"""
        q = np.asarray(q, dtype=float)
        if q.shape != self.z.q.shape:
            raise ValueError(
                f"seed has shape {q.shape}, sampler expects {self.z.q.shape}"
            )
        self.z.q[:] = q
        self._seeded = True
        logger.debug("%s seeded at %s", self.name, self.z.q)

    def init_hamiltonian(self) -> None:
        """Evaluate the model at the current position"""
        self.hamiltonian.init(self.z)
        if not (np.isfinite(self.z.V) and np.all(np.isfinite(self.z.g))):
            msg = f"Log density or gradient is not finite at {self.z.q}"
            self._err(msg)
            raise EvaluationError(msg)

    def _one_step_delta_H(self, z_init: PhaseSpacePoint) -> float:
        self.z.assign(z_init)
        self.hamiltonian.sample_p(self.z, self.rng)
        self.hamiltonian.init(self.z)
        H0 = self.hamiltonian.H(self.z)
        self.integrator.evolve(self.z, self.hamiltonian, self.stepsize.nominal)
        h = self.hamiltonian.H(self.z)
        if np.isnan(h):
            h = np.inf
        return H0 - h

    def init_stepsize(self) -> float:
        """
        Heuristic starting step size.

        Doubles (or halves) the nominal step size until a single integrator
        step from fresh momentum crosses an acceptance ratio of 0.8. The
        phase space point is restored afterwards.

        Returns:
            The resulting nominal step size

        Raises:
            SamplerError: the step size diverges (improper posterior) or
                underflows to zero
        """
        nominal = self.stepsize.nominal
        # Extreme step sizes can loop forever
        if nominal == 0 or nominal > MAX_STEPSIZE or np.isnan(nominal):
            return nominal

        z_init = self.z.copy()
        log_target = np.log(TARGET_ACCEPT)
        direction = 1 if self._one_step_delta_H(z_init) > log_target else -1

        while True:
            delta_H = self._one_step_delta_H(z_init)
            if direction == 1 and not delta_H > log_target:
                break
            if direction == -1 and not delta_H < log_target:
                break
            nominal = 2 * nominal if direction == 1 else 0.5 * nominal
            self.stepsize = self.stepsize._replace(nominal=nominal)

            if nominal > MAX_STEPSIZE:
                self.z.assign(z_init)
                raise SamplerError("Posterior is improper. Please check your model.")
            if nominal == 0:
                self.z.assign(z_init)
                raise SamplerError(
                    "No acceptably small step size could be found. "
                    "Perhaps the posterior is not continuous?"
                )

        self.z.assign(z_init)
        self._info(f"Step size initialized to {nominal:g}")
        logger.info("%s step size initialized to %g", self.name, nominal)
        return nominal

    # Step size configuration

    def set_nominal_stepsize(self, value: float) -> float:
        """Accept only positive values; anything else leaves the step size as is"""
        if value > 0:
            self.stepsize = self.stepsize._replace(nominal=float(value))
        return self.stepsize.nominal

    def get_nominal_stepsize(self) -> float:
        return self.stepsize.nominal

    def set_stepsize_jitter(self, value: float) -> float:
        """Accept only values in [0, 1); anything else leaves the jitter as is"""
        if 0 <= value < 1:
            self.stepsize = self.stepsize._replace(jitter=float(value))
        return self.stepsize.jitter

    def get_stepsize_jitter(self) -> float:
        return self.stepsize.jitter

    def sample_stepsize(self) -> float:
        """Draw the step size for the next transition around the nominal value"""
        current = self.stepsize.nominal
        if self.stepsize.jitter:
            current *= 1.0 + self.stepsize.jitter * (2.0 * self.rng.uniform() - 1.0)
        self.stepsize = self.stepsize._replace(current=current)
        return current

    def get_current_stepsize(self) -> float:
        return self.stepsize.current

    # Diagnostic output

    def write_sampler_stepsize(self, writer: Writer) -> None:
        writer(f"Step size = {self.get_nominal_stepsize():g}")

    def write_sampler_metric(self, writer: Writer) -> None:
        self.hamiltonian.write_metric(writer)

    def write_sampler_state(self, writer: Writer) -> None:
        self.write_sampler_stepsize(writer)
        self.write_sampler_metric(writer)

    def get_sampler_diagnostic_names(self) -> List[str]:
        return self.z.get_param_names()

    def get_sampler_diagnostics(self) -> List[float]:
        return self.z.get_params()

    def get_sampler_param_names(self) -> List[str]:
        """Names of sampler-specific tunables; none for the base"""
        return []

    def get_sampler_params(self) -> List[float]:
        return []

    def flush_info_buffer(self) -> str:
        return self._info.flush()

    def flush_err_buffer(self) -> str:
        return self._err.flush()

    @abstractmethod
    def transition(self, sample: Sample) -> Sample:
        """
        One Markov transition from sample.

        Args:
            sample: Current sample; its cont_params are the starting position

        Returns:
            New Sample(cont_params, log_prob, accept_stat)
        """
