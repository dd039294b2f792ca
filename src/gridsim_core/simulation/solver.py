# src/gridsim_core/simulation/solver.py
"""
Stabilized biconjugate gradient (BiCGSTAB) solver for dense nodal systems.

The solver owns its workspace vectors and keeps the last solution as the
starting guess of the next call. Between two simulation steps a network
usually changes very little, so a warm-started solve needs only a handful of
iterations (none at all when nothing changed).
"""
import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..constants import DEFAULT_TOLERANCE, DEFAULT_MAX_ITERATIONS, DEFAULT_NORM_ORDER

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolveResult:
    """Outcome of one solve call. `solution` is a copy of the solver's guess."""
    solution: np.ndarray
    iterations: int
    residual_norm: float
    converged: bool


class BiCGSTABSolver:
    """
    Iterative solver for `A x = b` with a persistent warm-start guess.

    Args:
        tolerance: Absolute target for the residual norm.
        max_iterations: Iteration cap. Reaching it is not an error; the
            best-effort guess is returned with `converged=False`.
        norm_order: Order of the residual norm (2, or 1 for the older variant).
        random_shadow: Use a pseudo-random shadow residual. When False the
            initial residual itself is used.
        seed: Seed for the shadow residual generator.
    """
    def __init__(self,
                 tolerance: float = DEFAULT_TOLERANCE,
                 max_iterations: int = DEFAULT_MAX_ITERATIONS,
                 norm_order: int = DEFAULT_NORM_ORDER,
                 random_shadow: bool = True,
                 seed: Optional[int] = None):
        if tolerance <= 0:
            raise ValueError(f"Solver tolerance must be positive, got {tolerance}.")
        if max_iterations < 1:
            raise ValueError(f"Solver iteration cap must be at least 1, got {max_iterations}.")
        if norm_order not in (1, 2):
            raise ValueError(f"Solver norm order must be 1 or 2, got {norm_order}.")
        self.tolerance = tolerance
        self.max_iterations = max_iterations
        self.norm_order = norm_order
        self.random_shadow = random_shadow
        self._rng = np.random.default_rng(seed)
        self._size = 0
        self._allocate(0)

    @property
    def size(self) -> int:
        return self._size

    @property
    def guess(self) -> np.ndarray:
        """Read-only view of the warm-start guess."""
        view = self._guess.view()
        view.flags.writeable = False
        return view

    def _allocate(self, n: int):
        self._guess = np.zeros(n)
        self._residual = np.zeros(n)
        self._shadow = np.zeros(n)
        self._p = np.zeros(n)
        self._v = np.zeros(n)
        self._h = np.zeros(n)
        self._s = np.zeros(n)
        self._t = np.zeros(n)

    def resize(self, n: int):
        """Reallocates the workspace for a system of size `n`. No-op if the size is unchanged."""
        if n == self._size:
            return
        logger.debug(f"Resizing solver workspace from {self._size} to {n}.")
        self._size = n
        self._allocate(n)

    def reset(self):
        """Zeroes the whole workspace, including the warm-start guess."""
        for vector in (self._guess, self._residual, self._shadow, self._p,
                       self._v, self._h, self._s, self._t):
            vector.fill(0.0)

    def _norm(self, vector: np.ndarray) -> float:
        return float(np.linalg.norm(vector, ord=self.norm_order))

    def _result(self, iterations: int, residual_norm: float, converged: bool) -> SolveResult:
        return SolveResult(
            solution=self._guess.copy(),
            iterations=iterations,
            residual_norm=residual_norm,
            converged=converged,
        )

    def solve(self, A: np.ndarray, b: np.ndarray) -> SolveResult:
        """
        Solves `A x = b` starting from the guess left by the previous call.

        Raises:
            ValueError: If `A` is not square or does not match `b`.
        """
        n = b.shape[0]
        if A.shape != (n, n):
            raise ValueError(f"Matrix shape {A.shape} does not match right-hand side of length {n}.")
        self.resize(n)

        x, r, r_hat = self._guess, self._residual, self._shadow
        p, v, h, s, t = self._p, self._v, self._h, self._s, self._t

        if not np.any(b):
            x.fill(0.0)
            return self._result(0, 0.0, True)

        # r = b - A x
        np.matmul(A, x, out=r)
        np.subtract(b, r, out=r)
        residual_norm = self._norm(r)
        if residual_norm <= self.tolerance:
            return self._result(0, residual_norm, True)

        if self.random_shadow:
            self._rng.random(out=r_hat)
            if np.dot(r_hat, r) == 0.0:
                np.copyto(r_hat, r)
        else:
            np.copyto(r_hat, r)

        rho_old = alpha = omega = 1.0
        p.fill(0.0)
        v.fill(0.0)

        for iteration in range(1, self.max_iterations + 1):
            rho_new = float(np.dot(r_hat, r))
            if rho_new == 0.0 or not np.isfinite(rho_new):
                logger.warning(f"BiCGSTAB breakdown at iteration {iteration}: shadow product is zero or not finite.")
                return self._result(iteration - 1, residual_norm, False)

            if iteration == 1:
                np.copyto(p, r)
            else:
                beta = (rho_new / rho_old) * (alpha / omega)
                # p = r + beta * (p - omega * v)
                p -= omega * v
                p *= beta
                p += r

            np.matmul(A, p, out=v)
            denominator = float(np.dot(r_hat, v))
            if denominator == 0.0:
                logger.warning(f"BiCGSTAB breakdown at iteration {iteration}: shadow residual is orthogonal to A*p.")
                return self._result(iteration - 1, residual_norm, False)
            alpha = rho_new / denominator

            # h = x + alpha * p ; s = r - alpha * v
            np.multiply(p, alpha, out=h)
            h += x
            np.multiply(v, -alpha, out=s)
            s += r

            s_norm = self._norm(s)
            if s_norm <= self.tolerance:
                np.copyto(x, h)
                return self._result(iteration, s_norm, True)

            np.matmul(A, s, out=t)
            t_dot_t = float(np.dot(t, t))
            if t_dot_t == 0.0:
                logger.warning(f"BiCGSTAB breakdown at iteration {iteration}: A*s vanished.")
                np.copyto(x, h)
                return self._result(iteration, s_norm, False)
            omega = float(np.dot(t, s)) / t_dot_t

            # x = h + omega * s ; r = s - omega * t
            np.multiply(s, omega, out=x)
            x += h
            np.multiply(t, -omega, out=r)
            r += s

            residual_norm = self._norm(r)
            if residual_norm <= self.tolerance:
                return self._result(iteration, residual_norm, True)
            if omega == 0.0:
                logger.warning(f"BiCGSTAB stagnated at iteration {iteration}: omega is zero.")
                return self._result(iteration, residual_norm, False)
            rho_old = rho_new

        logger.warning(
            f"BiCGSTAB did not converge in {self.max_iterations} iterations "
            f"(residual norm {residual_norm:.3e}, tolerance {self.tolerance:.1e}); using best-effort solution."
        )
        return self._result(self.max_iterations, residual_norm, False)
