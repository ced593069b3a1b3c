import autograd.numpy as np

from bbsearch import BranchAndBound, SearchParams
from bbsearch.problems import IntegerProgram

# Least squares with an integer-valued coefficient vector
rng = np.random.RandomState(3)
A = rng.randn(20, 4)
x_true = np.array([2.0, -1.0, 3.0, 0.0])
b = A @ x_true + 0.8 * rng.randn(20)


def objective(x):
    r = np.dot(A, x) - b
    return np.dot(r, r)


problem = IntegerProgram(
    objective,
    lower=[-5, -5, -5, -5],
    upper=[5, 5, 5, 5],
    params=SearchParams(rel_tol=1e-6, print_interval=10),
)
engine = BranchAndBound(problem)
solution, num_bounded = engine.run()

print(f"x = {solution.x}, objective = {solution.value:.4f}")
print(f"Nodes bounded: {num_bounded}, max queue size: {engine.stats.max_queue_size}")
