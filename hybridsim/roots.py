"""
Scalar root finding used by the tank, nozzle and initial condition solvers.
"""

import warnings
import scipy.optimize

from hybridsim.errors import ConvergenceWarning

MAXITER = 1000          # Hard cap on secant iterations
REL_TOL = 0.005         # Step tolerance, as a fraction of the initial guess
PERTURBATION = 0.01     # The second starting point is the initial guess moved down by this fraction

def secant(func, x0, args = (), rel_tol = REL_TOL, maxiter = MAXITER):
    """Find a root of func(x, *args) = 0 with the secant method, starting from x0 and x0*(1 - 0.01).

    Iteration stops once successive estimates differ by less than rel_tol*|x0|. Note the tolerance is relative to the
    initial guess, not the current estimate. If the iteration cap is reached the latest estimate is returned anyway, and
    a ConvergenceWarning is issued - check 'converged' on the result if you need to know.

    Args:
        func (callable): Function to find the root of, with signature func(x, *args).
        x0 (float): Initial guess. Must be non-zero.
        args (tuple, optional): Extra arguments to pass to func. Defaults to ().
        rel_tol (float, optional): Step tolerance as a fraction of |x0|. Defaults to 0.005.
        maxiter (int, optional): Maximum number of iterations. Defaults to 1000.

    Returns:
        scipy.optimize.RootResults: Solution, with attributes 'root', 'converged' and 'iterations'.
    """
    assert x0 != 0, "'x0' must be non-zero, since the secant tolerance and second starting point are relative to it"

    sol = scipy.optimize.root_scalar(func,
                                     args = args,
                                     method = "secant",
                                     x0 = x0,
                                     x1 = x0 - PERTURBATION*x0,
                                     xtol = rel_tol*abs(x0),
                                     maxiter = maxiter)

    if not sol.converged:
        warnings.warn(f"Secant solver did not converge after {sol.iterations} iterations (x0 = {x0}). Using the latest estimate x = {sol.root}.", ConvergenceWarning, stacklevel = 2)

    return sol
