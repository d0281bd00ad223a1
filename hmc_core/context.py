"""
Description:
    Initialization contexts: where a parameter's starting value comes from.
    USE THE CORRECT ENVIRONMENT:  HMC-Research

Author: John Gallagher
Created: 2026-10-19
Last Modified: 2026-10-19
Version: 0.2

Contexts resolve values by parameter name. ChainedContext tries its contexts
in order, so layering an ExplicitContext over a RandomContext lets explicit
values always win while random draws only fill the gaps.
"""
import logging
from abc import ABC, abstractmethod
from typing import Mapping, Optional, Union
import numpy as np

from .datatypes import Vector

logger = logging.getLogger(__name__)

class InitContext(ABC):
    """Resolves the initial value of a named parameter"""
    @abstractmethod
    def contains(self, name: str) -> bool:
        ...

    @abstractmethod
    def resolve(self, name: str) -> np.ndarray:
        """Value for name; KeyError if the context has none"""

class ExplicitContext(InitContext):
    """Caller-supplied values, possibly for only some parameters"""
    def __init__(self, values: Optional[Mapping[str, Vector]] = None):
        self._values = {k: np.asarray(v, dtype=float) for k, v in (values or {}).items()}

    def contains(self, name: str) -> bool:
        return name in self._values

    def resolve(self, name: str) -> np.ndarray:
        return self._values[name]

class RandomContext(InitContext):
    """
    Uniform draws in [-init_radius, init_radius] for every continuous parameter.

    All draws happen at construction in the model's canonical order, one per
    scalar, so the values are fixed by (seed, chain) whatever the caller
    supplies explicitly.
    """
    def __init__(self, model, rng: np.random.Generator, init_radius: float):
        if init_radius < 0:
            raise ValueError(f"init_radius must be >= 0, got {init_radius}")
        self.init_radius = init_radius
        self._values = {}
        for spec in model.param_specs():
            draws = rng.uniform(-init_radius, init_radius, size=spec.size)
            self._values[spec.name] = draws.reshape(spec.shape)
        logger.debug("drew random inits for %d parameter blocks within radius %g",
                     len(self._values), init_radius)

    def contains(self, name: str) -> bool:
        return name in self._values

    def resolve(self, name: str) -> np.ndarray:
        return self._values[name]

class ChainedContext(InitContext):
    """Ordered resolver chain; the first context holding a name answers"""
    def __init__(self, *contexts: InitContext):
        self.contexts = list(contexts)

    def contains(self, name: str) -> bool:
        return any(c.contains(name) for c in self.contexts)

    def resolve(self, name: str) -> np.ndarray:
        for c in self.contexts:
            if c.contains(name):
                return c.resolve(name)
        raise KeyError(name)

def randomized_context(
        model,
        rng: np.random.Generator,
        init_radius: float,
        explicit: Union[InitContext, Mapping[str, Vector], None] = None
) -> ChainedContext:
    """
    Explicit values layered over random draws.

    Args:
        model: Model whose parameters are drawn
        rng: Generator already advanced to the chain's stream
        init_radius: Half-width of the uniform draw; 0 gives zeros
        explicit: Caller-supplied context or mapping, may be partial

    Returns:
        ChainedContext resolving explicit values first
    """
    if explicit is None:
        explicit = ExplicitContext()
    elif not isinstance(explicit, InitContext):
        explicit = ExplicitContext(explicit)
    return ChainedContext(explicit, RandomContext(model, rng, init_radius))
