# --- src/gridsim_core/constants.py ---
import logging

logger = logging.getLogger(__name__)

# --- Numerical Constants for the Iterative Solver ---

#: Convergence target on the norm of the BiCGSTAB residual.
#: Residual entries are currents (node rows) or potentials (constraint rows).
DEFAULT_TOLERANCE: float = 1.0e-6

#: Hard cap on BiCGSTAB iterations per solve. Reaching it is not an error,
#: the best-effort guess is used for the step.
DEFAULT_MAX_ITERATIONS: int = 200

#: Order of the vector norm used for the convergence test (2 = Euclidean).
DEFAULT_NORM_ORDER: int = 2

#: Extra throwaway recalculations given to a network whose topology changed,
#: letting the warm-start guess relax before the step's result is trusted.
DEFAULT_SETTLE_PASSES: int = 2

#: Diagonal value written to the row of a fixed-potential node after elimination.
SOURCE_ROW_DIAGONAL: float = -1.0

logger.debug("Defined core constants: DEFAULT_TOLERANCE, DEFAULT_MAX_ITERATIONS, DEFAULT_SETTLE_PASSES")
