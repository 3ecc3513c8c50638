"""
Goal functions evaluated by the optimizers.
"""

from .base import FunctionGoal, Goal, GoalFromProblem, as_goal, intervals_from_problem

__all__ = [
    "Goal",
    "FunctionGoal",
    "GoalFromProblem",
    "as_goal",
    "intervals_from_problem",
]
