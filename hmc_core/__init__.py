"""
Description:
    Shared foundation for gradient-based MCMC: the abstract HMC sampler base,
    chain-aware random streams, initialization contexts and the gradient
    diagnostic.
    USE THE CORRECT ENVIRONMENT:  HMC-Research

Author: John Gallagher
Created: 2026-10-19
Last Modified: 2026-10-19
Version: 0.2
"""
from .context import ChainedContext, ExplicitContext, InitContext, RandomContext, randomized_context
from .datatypes import GradientComparison, GradientReport, PhaseSpacePoint, Sample, StepSizeConfig
from .diagnose import DiagnoseConfig, check_gradients, diagnose, finite_diff_grad
from .errors import EvaluationError, HMCError, InitializationError, SamplerError
from .hamiltonian import Hamiltonian, UnitMetricHamiltonian
from .integrator import Integrator, Leapfrog
from .model import JaxModel, Model, ParamSpec, gaussian_model
from .rng import DISCARD_STRIDE, advance_stream, create_rng
from .sampler import BaseHMC
from .writers import BufferWriter, LoggerWriter, StreamWriter

__version__ = "0.2.0"

__all__ = [
    "BaseHMC",
    "PhaseSpacePoint",
    "StepSizeConfig",
    "Sample",
    "GradientComparison",
    "GradientReport",
    "Hamiltonian",
    "UnitMetricHamiltonian",
    "Integrator",
    "Leapfrog",
    "Model",
    "JaxModel",
    "ParamSpec",
    "gaussian_model",
    "InitContext",
    "ExplicitContext",
    "RandomContext",
    "ChainedContext",
    "randomized_context",
    "DISCARD_STRIDE",
    "advance_stream",
    "create_rng",
    "DiagnoseConfig",
    "check_gradients",
    "diagnose",
    "finite_diff_grad",
    "HMCError",
    "InitializationError",
    "EvaluationError",
    "SamplerError",
    "StreamWriter",
    "LoggerWriter",
    "BufferWriter",
]
