"""
Description:
    Exceptions raised by the sampler base and the gradient diagnostic.
    USE THE CORRECT ENVIRONMENT:  HMC-Research

Author: John Gallagher
Created: 2026-10-19
Last Modified: 2026-10-19
Version: 0.2

Step size rejections and gradient mismatches are not errors and never raise.
"""

class HMCError(Exception):
    """Base class for hmc_core failures"""

class InitializationError(HMCError, ValueError):
    """An init context cannot supply a usable value for a model parameter"""

class EvaluationError(HMCError, RuntimeError):
    """The model produced a non-finite log density or gradient"""

class SamplerError(HMCError, RuntimeError):
    """Sampler configuration cannot be completed, e.g. no usable step size"""
