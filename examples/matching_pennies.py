"""2 x 2 game + graphical method: Matching Pennies"""


import zsgamesolver

payoff_matrix = [[1, -1],
                 [-1, 1]]

game = zsgamesolver.ZSGame(payoff_matrix)

solver = zsgamesolver.ZSGameSolver(game, verbose=1)
solution = solver.solve()

print(solution)
# ==================================================
# Solving 2 x 2 zero-sum game (eps = 1e-09)
# Dominance reduction: (2, 2) -> (2, 2) after 1 pass.
# Method: graphical on reduced 2 x 2 game
# Value: 0.00000
# ...
# Solution(value=0.0, row_strategy=[0.5, 0.5], col_strategy=[0.5, 0.5], method='graphical')
