"""
Benchmark objective functions.

All functions take a 1-D array and return a float. Their global minima are:

- ``paraboloid``: 0 at ``x_i = i + 1``
- ``schwefel``: ~0 at ``x_i = 420.9687``
- ``rastrigin``: 0 at the origin
- ``rosenbrock``: 0 at ``x_i = 1``
"""

import numpy as np

from ..exceptions import ConfigurationError


def paraboloid(x: np.ndarray) -> float:
    """Shifted paraboloid ``sum((x_i - (i + 1))^2)``."""
    x = np.asarray(x, dtype=np.float64)
    return float(np.sum((x - np.arange(1, x.shape[0] + 1)) ** 2))


def schwefel(x: np.ndarray) -> float:
    x = np.asarray(x, dtype=np.float64)
    return float(418.9829 * x.shape[0] - np.sum(x * np.sin(np.sqrt(np.abs(x)))))


def rastrigin(x: np.ndarray) -> float:
    x = np.asarray(x, dtype=np.float64)
    return float(10.0 * x.shape[0] + np.sum(x**2 - 10.0 * np.cos(2.0 * np.pi * x)))


def rosenbrock(x: np.ndarray) -> float:
    x = np.asarray(x, dtype=np.float64)
    return float(np.sum(100.0 * (x[1:] - x[:-1] ** 2) ** 2 + (1.0 - x[:-1]) ** 2))


BUILTIN_OBJECTIVES = {
    "paraboloid": paraboloid,
    "schwefel": schwefel,
    "rastrigin": rastrigin,
    "rosenbrock": rosenbrock,
}

# Conventional search bounds, used when a configuration gives none
DEFAULT_BOUNDS = {
    "paraboloid": (-100.0, 100.0),
    "schwefel": (-500.0, 500.0),
    "rastrigin": (-5.12, 5.12),
    "rosenbrock": (-5.0, 10.0),
}


def known_optimum(name: str, n_var: int) -> np.ndarray:
    """Location of the global minimum of a built-in objective."""
    if name == "paraboloid":
        return np.arange(1, n_var + 1, dtype=np.float64)
    if name == "schwefel":
        return np.full(n_var, 420.9687)
    if name == "rastrigin":
        return np.zeros(n_var)
    if name == "rosenbrock":
        return np.ones(n_var)
    raise ConfigurationError(
        f"Unknown objective '{name}'. Available: {sorted(BUILTIN_OBJECTIVES)}"
    )


def get_objective(name: str):
    try:
        return BUILTIN_OBJECTIVES[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown objective '{name}'. Available: {sorted(BUILTIN_OBJECTIVES)}"
        ) from None
