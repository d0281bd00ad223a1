"""
Description:
    Gradient diagnostic: reverse-mode gradients vs centered finite differences.
    USE THE CORRECT ENVIRONMENT:  HMC-Research

Author: John Gallagher
Created: 2026-10-19
Last Modified: 2026-10-19
Version: 0.2

Run before an expensive sampling job: a wrong hand-written or autodiff
gradient biases every sample silently, finite differences do not depend on it.

Example:
    >>> n_failed = diagnose(model, {"mu": 0.5}, random_seed=1234, chain=1)
"""
import logging
from typing import NamedTuple, Optional, Sequence
import numpy as np

from .context import randomized_context
from .datatypes import GradientComparison, GradientReport, Vector, Writer
from .errors import EvaluationError
from .rng import create_rng
from .writers import BufferWriter, StreamWriter

logger = logging.getLogger(__name__)

class DiagnoseConfig(NamedTuple):
    """Configuration for a diagnose run"""
    random_seed: int = 0
    chain: int = 1
    init_radius: float = 2.0 # half-width of random inits
    epsilon: float = 1e-6 # finite difference step
    error: float = 1e-6 # allowed absolute gradient error

def _require_finite(value, what: str, q: np.ndarray) -> None:
    if not np.all(np.isfinite(value)):
        raise EvaluationError(f"{what} is not finite at {q}")

def finite_diff_grad(
    model,
    q: Vector,
    ints: Sequence[int] = (),
    epsilon: float = 1e-6
) -> np.ndarray:
    """
    Centered finite difference gradient of model.log_prob.

    Args:
        model: Model to evaluate
        q: Unconstrained parameter vector
        ints: Discrete parameters, held fixed
        epsilon: Perturbation applied to one component at a time

    Returns:
        (f(q + ε e_k) - f(q - ε e_k)) / 2ε for every k
    """
    q = np.array(q, dtype=float)
    grad = np.zeros_like(q)
    for k in range(q.size):
        q_k = q[k]
        q[k] = q_k + epsilon
        lp_plus = model.log_prob(q, ints)
        _require_finite(lp_plus, "log density", q)
        q[k] = q_k - epsilon
        lp_minus = model.log_prob(q, ints)
        _require_finite(lp_minus, "log density", q)
        q[k] = q_k
        grad[k] = (lp_plus - lp_minus) / (2 * epsilon)
    return grad

def check_gradients(
    model,
    q: Vector,
    ints: Sequence[int],
    epsilon: float,
    error: float,
    writer: Writer,
    parameter_writer: Optional[Writer] = None
) -> GradientReport:
    """
    Compare model gradients with finite differences at q and write a table.

    A parameter fails when |model - finite_diff| > error.

    Returns:
        GradientReport with one comparison per parameter
    """
    q = np.asarray(q, dtype=float)
    lp, grad = model.log_prob_grad(q, ints)
    _require_finite(lp, "log density", q)
    _require_finite(grad, "gradient", q)
    grad_fd = finite_diff_grad(model, q, ints, epsilon)

    writer("")
    writer(f" Log probability={lp:g}")
    writer("")
    header = (f"{'param idx':>10}{'value':>16}{'model':>16}"
              f"{'finite diff':>16}{'error':>16}")
    writer(header)
    if parameter_writer is not None:
        parameter_writer(header)

    comparisons = []
    num_failed = 0
    for k in range(q.size):
        err = abs(grad[k] - grad_fd[k])
        comparisons.append(GradientComparison(k, float(q[k]), float(grad[k]),
                                              float(grad_fd[k]), float(err)))
        line = f"{k:>10}{q[k]:>16g}{grad[k]:>16g}{grad_fd[k]:>16g}{err:>16g}"
        writer(line)
        if parameter_writer is not None:
            parameter_writer(line)
        if err > error:
            num_failed += 1
    writer("")
    return GradientReport(float(lp), comparisons, num_failed)

def diagnose(
    model,
    init,
    random_seed: int,
    chain: int = 1,
    init_radius: float = 2.0,
    epsilon: float = 1e-6,
    error: float = 1e-6,
    message_writer: Optional[Writer] = None,
    parameter_writer: Optional[Writer] = None
) -> int:
    """
    Check a model's gradients at an initial point.

    Args:
        model: Model to test
        init: Explicit init values (InitContext, mapping or None); random
            draws fill whatever it leaves out
        random_seed: Seed for the generator
        chain: Chain id used to advance the generator
        init_radius: Random inits are drawn from [-init_radius, init_radius]
        epsilon: Finite difference step
        error: Allowed absolute error per parameter
        message_writer: Sink for display output, stdout if omitted
        parameter_writer: Optional sink for the per-parameter table

    Returns:
        Number of parameters whose gradient is off by more than error

    Raises:
        InitializationError: init values cannot be completed
        EvaluationError: the model is not finite at a tested point
    """
    if not epsilon > 0:
        raise ValueError(f"epsilon must be > 0, got {epsilon}")
    if not error >= 0:
        raise ValueError(f"error must be >= 0, got {error}")
    if message_writer is None:
        message_writer = StreamWriter()

    rng = create_rng(random_seed, chain)
    context = randomized_context(model, rng, init_radius, init)

    transform_msgs = BufferWriter()
    q, ints = model.transform_inits(context, transform_msgs)
    for line in transform_msgs.lines:
        message_writer(line)

    message_writer("TEST GRADIENT MODE")

    report = check_gradients(model, q, ints, epsilon, error,
                             message_writer, parameter_writer)
    logger.info("gradient check: %d of %d parameters outside %g",
                report.num_failed, q.size, error)
    return report.num_failed
