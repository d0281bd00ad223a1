"""
Description:
    Model capability consumed by the samplers and the gradient diagnostic,
    plus a JAX-backed implementation and target generators.
    USE THE CORRECT ENVIRONMENT:  HMC-Research

Author: John Gallagher
Created: 2026-02-16
Last Modified: 2026-10-19
Version: 0.2

A model exposes an unconstrained parameter vector q, its log density log π(q)
and the reverse-mode gradient of that log density.
"""
import logging
from abc import ABC, abstractmethod
from typing import NamedTuple, Optional, Sequence, Tuple, List, Callable
import jax
import jax.numpy as jnp
import numpy as np

from .datatypes import LogDensity, Vector, Writer
from .errors import InitializationError

logger = logging.getLogger(__name__)

class ParamSpec(NamedTuple):
    """Named parameter block; shape () is a scalar"""
    name: str
    shape: Tuple[int, ...] = ()

    @property
    def size(self) -> int:
        return int(np.prod(self.shape, dtype=int))

    def flat_names(self) -> List[str]:
        if self.shape == ():
            return [self.name]
        return [self.name + "." + ".".join(str(i + 1) for i in idx)
                for idx in np.ndindex(*self.shape)]

def _as_specs(params) -> List[ParamSpec]:
    specs = []
    for p in params:
        if isinstance(p, ParamSpec):
            specs.append(p)
        elif isinstance(p, str):
            specs.append(ParamSpec(p))
        else:
            name, shape = p
            specs.append(ParamSpec(name, tuple(np.atleast_1d(shape).tolist())))
    return specs

class Model(ABC):
    """
    Capability interface for a differentiable model.

    Parameters are visited in canonical order: the order of param_specs(),
    flattened in C order within each block.
    """
    @abstractmethod
    def param_specs(self) -> List[ParamSpec]:
        """Continuous (unconstrained) parameter blocks"""

    def int_param_specs(self) -> List[ParamSpec]:
        """Discrete parameter blocks; none by default"""
        return []

    def num_params_r(self) -> int:
        return sum(s.size for s in self.param_specs())

    def param_names(self) -> List[str]:
        return [n for s in self.param_specs() for n in s.flat_names()]

    @abstractmethod
    def log_prob(self, q: Vector, ints: Sequence[int] = ()) -> float:
        """log π(q) up to a constant"""

    @abstractmethod
    def log_prob_grad(self, q: Vector, ints: Sequence[int] = ()) -> Tuple[float, np.ndarray]:
        """(log π(q), ∇ log π(q)) via reverse-mode autodiff"""

    def transform_inits(
        self,
        context,
        messages: Optional[Writer] = None
    ) -> Tuple[np.ndarray, List[int]]:
        """
        Read initial values out of an init context.

        Args:
            context: InitContext supplying values by parameter name
            messages: Optional writer for transform diagnostics; models with
                constraining transforms report through it, the plain
                unconstrained read below has nothing to report

        Returns:
            (continuous parameter vector, discrete parameter list)

        Raises:
            InitializationError: a value is missing, mis-sized or non-finite
        """
        cont = [self._read(context, spec) for spec in self.param_specs()]
        disc = []
        for spec in self.int_param_specs():
            vals = self._read(context, spec)
            if np.any(vals != np.round(vals)):
                raise InitializationError(
                    f"integer variable {spec.name} has non-integer values {vals}"
                )
            disc.extend(int(v) for v in vals)
        q = np.concatenate(cont) if cont else np.zeros(0)
        return q, disc

    @staticmethod
    def _read(context, spec: ParamSpec) -> np.ndarray:
        if not context.contains(spec.name):
            raise InitializationError(f"variable {spec.name} not found in init context")
        vals = np.asarray(context.resolve(spec.name), dtype=float).ravel()
        if vals.size != spec.size:
            raise InitializationError(
                f"variable {spec.name} has {vals.size} values, expected {spec.size}"
            )
        if not np.all(np.isfinite(vals)):
            raise InitializationError(f"variable {spec.name} has non-finite values {vals}")
        return vals

class JaxModel(Model):
    """
    Model wrapping a JAX log density over the flat parameter vector.

    log_density(q) is called with a flat jnp array, or log_density(q, ints)
    when discrete parameters are declared. grad_fn replaces jax.grad, which
    lets callers plug in a hand-written gradient to be checked.
    """
    def __init__(
        self,
        log_density: LogDensity,
        params: Sequence,
        int_params: Sequence = (),
        grad_fn: Optional[Callable] = None,
        name: str = "model"
    ):
        self.name = name
        self._params = _as_specs(params)
        self._int_params = _as_specs(int_params)
        if self._int_params:
            fn = log_density
        else:
            def fn(q, ints):
                return log_density(q)
        self._log_prob = jax.jit(fn)
        self._value_and_grad = jax.jit(jax.value_and_grad(fn))
        self._grad_fn = grad_fn
        if not jax.config.jax_enable_x64:
            logger.warning(
                "jax_enable_x64 is off; %s will be evaluated in single precision", name
            )

    def param_specs(self) -> List[ParamSpec]:
        return list(self._params)

    def int_param_specs(self) -> List[ParamSpec]:
        return list(self._int_params)

    def _args(self, q, ints):
        return jnp.asarray(q, dtype=float), jnp.asarray(ints, dtype=int)

    def log_prob(self, q: Vector, ints: Sequence[int] = ()) -> float:
        return float(self._log_prob(*self._args(q, ints)))

    def log_prob_grad(self, q: Vector, ints: Sequence[int] = ()) -> Tuple[float, np.ndarray]:
        q_arr, i_arr = self._args(q, ints)
        if self._grad_fn is None:
            lp, grad = self._value_and_grad(q_arr, i_arr)
        else:
            lp = self._log_prob(q_arr, i_arr)
            grad = (self._grad_fn(q_arr, i_arr) if self._int_params
                    else self._grad_fn(q_arr))
        return float(lp), np.asarray(grad, dtype=float)

# Target generators

def _precision(dim: int, precision_matrix, cov) -> np.ndarray:
    """Square precision matrix from whichever parametrization was given"""
    given = [m for m in (precision_matrix, cov) if m is not None]
    if len(given) > 1:
        raise ValueError("gaussian_model takes precision_matrix or cov, not both")
    if not given:
        return np.eye(dim)

    mat = np.asarray(given[0], dtype=float)
    if mat.ndim != 2 or mat.shape[0] != mat.shape[1]:
        raise ValueError(f"expected a square matrix, got shape {mat.shape}")
    return mat if cov is None else np.linalg.inv(mat)

def gaussian_model(
        dim: int = 2,
        precision_matrix: np.ndarray = None,
        cov: np.ndarray = None,
        grad_fn: Optional[Callable] = None
) -> JaxModel:
    """
    Zero-mean Gaussian target over a single vector parameter q.

    The dimension follows the matrix when one is given, dim otherwise.
    """
    A = jnp.asarray(_precision(dim, precision_matrix, cov))
    n = A.shape[0]

    def log_density(q):
        return -0.5 * q @ A @ q

    return JaxModel(log_density, [ParamSpec("q", (n,))], grad_fn=grad_fn,
                    name="gaussian")
