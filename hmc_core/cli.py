"""
Description:
    Command line entry point for the gradient diagnostic.
    USE THE CORRECT ENVIRONMENT:  HMC-Research

Author: John Gallagher
Created: 2026-10-19
Last Modified: 2026-10-19
Version: 0.2

Usage:
    hmc-diagnose hmc_core.model:gaussian_model --seed 1234 --chain 2
    hmc-diagnose mypkg.models:build --init mu=0.5 --init beta=1,2,3 --output grad.txt

Exit status:
    0-254  number of mismatched parameters, capped at 254
    255    fatal: bad arguments, model import failure, invalid inits or a
           non-finite evaluation
"""
import argparse
import importlib
import logging
import sys
from typing import Dict, List, Optional

import jax

from .diagnose import DiagnoseConfig, diagnose
from .errors import HMCError
from .model import Model
from .writers import StreamWriter

logger = logging.getLogger(__name__)

MAX_MISMATCH_STATUS = 254
FATAL_EXIT_STATUS = 255

class DiagnoseArgumentParser(argparse.ArgumentParser):
    """ArgumentParser whose usage errors exit with the fatal status, not 2"""
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(FATAL_EXIT_STATUS, f"{self.prog}: error: {message}\n")

def create_parser() -> argparse.ArgumentParser:
    defaults = DiagnoseConfig()
    parser = DiagnoseArgumentParser(
        prog="hmc-diagnose",
        description="Check a model's reverse-mode gradients against finite differences",
    )
    parser.add_argument(
        "model",
        help="Model as package.module:attribute; a callable is invoked without arguments",
    )
    parser.add_argument(
        "--init",
        action="append",
        default=[],
        metavar="NAME=V[,V...]",
        help="Explicit initial value for a parameter (repeatable)",
    )
    parser.add_argument("--seed", type=int, default=defaults.random_seed,
                        help="Random seed (default: %(default)s)")
    parser.add_argument("--chain", type=int, default=defaults.chain,
                        help="Chain id, 1-indexed (default: %(default)s)")
    parser.add_argument("--init-radius", type=float, default=defaults.init_radius,
                        help="Random inits drawn from [-R, R] (default: %(default)s)")
    parser.add_argument("--epsilon", type=float, default=defaults.epsilon,
                        help="Finite difference step (default: %(default)s)")
    parser.add_argument("--error", type=float, default=defaults.error,
                        help="Allowed absolute gradient error (default: %(default)s)")
    parser.add_argument("--output", default=None,
                        help="File receiving the per-parameter gradient table")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser

def parse_init(items: List[str]) -> Dict[str, List[float]]:
    """Turn NAME=V[,V...] strings into an init mapping"""
    init = {}
    for item in items:
        name, sep, values = item.partition("=")
        if not sep or not name:
            raise ValueError(f"init must look like NAME=V[,V...], got {item!r}")
        init[name.strip()] = [float(v) for v in values.split(",")]
    return init

def load_model(target: str) -> Model:
    """Import package.module:attribute, calling it if it is a factory"""
    module_name, sep, attr = target.partition(":")
    if not sep:
        raise ValueError(f"model must look like package.module:attribute, got {target!r}")
    obj = getattr(importlib.import_module(module_name), attr)
    if not isinstance(obj, Model) and callable(obj):
        obj = obj()
    return obj

def main(argv: Optional[List[str]] = None) -> int:
    args = create_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    # Finite differences at ε ~ 1e-6 are meaningless in single precision
    jax.config.update("jax_enable_x64", True)

    config = DiagnoseConfig(
        random_seed=args.seed,
        chain=args.chain,
        init_radius=args.init_radius,
        epsilon=args.epsilon,
        error=args.error,
    )
    logger.debug("diagnosing %s with %s", args.model, config)

    try:
        model = load_model(args.model)
        init = parse_init(args.init)
        if args.output is None:
            n_failed = diagnose(model, init, **config._asdict(),
                                message_writer=StreamWriter())
        else:
            with open(args.output, "w") as fh:
                n_failed = diagnose(model, init, **config._asdict(),
                                    message_writer=StreamWriter(),
                                    parameter_writer=StreamWriter(fh))
    except (HMCError, ValueError, ImportError, AttributeError, OSError) as e:
        logger.error("diagnose failed: %s", e)
        print(f"hmc-diagnose: {e}", file=sys.stderr)
        return FATAL_EXIT_STATUS

    return min(n_failed, MAX_MISMATCH_STATUS)

def run() -> None:
    sys.exit(main())

if __name__ == "__main__":
    run()
