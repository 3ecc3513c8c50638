from .functions import (
    BUILTIN_OBJECTIVES,
    DEFAULT_BOUNDS,
    get_objective,
    known_optimum,
    paraboloid,
    rastrigin,
    rosenbrock,
    schwefel,
)

__all__ = ["BUILTIN_OBJECTIVES",
           "DEFAULT_BOUNDS",
           "get_objective",
           "known_optimum",
           "paraboloid",
           "rastrigin",
           "rosenbrock",
           "schwefel"]
