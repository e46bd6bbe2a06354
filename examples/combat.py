"""3 x 3 game + simplex: a rock-scissors-paper variant where one move does double damage."""


import numpy as np
import zsgamesolver

# rows / columns: mighty blow, slash, leap aside
payoff_matrix = np.array([[0, 2, -1],
                          [-1, 0, 1],
                          [1, -1, 0]])

# indices: [row player's move, column player's move]; entries are the row player's gain

solution = zsgamesolver.solve(payoff_matrix)

print(f'value: {solution.value:.3f}')
print(f'row player:    {np.round(solution.row_strategy, 3)}')
print(f'column player: {np.round(solution.col_strategy, 3)}')
# value: 0.083
# row player:    [0.25  0.333 0.417]
# column player: [0.333 0.25  0.417]
