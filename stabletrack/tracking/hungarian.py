"""
Munkres (Hungarian) solver for rectangular assignment problems.

Finds the one-to-one assignment of rows to columns with minimum total
cost. O(k^3) for a k x k matrix; per-frame problems are tens of rows.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray


def solve(cost_matrix: Union[NDArray[np.float64], Sequence[Sequence[float]]]) -> List[Tuple[int, int]]:
    """
    Solve minimum-cost assignment over an n x m cost matrix.

    Args:
        cost_matrix: n x m matrix, rows are tracks and columns detections

    Returns:
        (row, col) pairs, min(n, m) of them, sorted by row
    """
    cost = np.asarray(cost_matrix, dtype=np.float64)
    if cost.size == 0:
        return []
    if cost.ndim != 2:
        raise ValueError(f"cost matrix must be 2-D, got shape {cost.shape}")
    if not np.isfinite(cost).all():
        raise ValueError("cost matrix must contain only finite values")

    n_rows, n_cols = cost.shape
    n = max(n_rows, n_cols)

    # Pad to square; padding never beats a real pair
    matrix = np.full((n, n), cost.max() + 1.0, dtype=np.float64)
    matrix[:n_rows, :n_cols] = cost

    # Row reduction, then column reduction
    matrix -= matrix.min(axis=1, keepdims=True)
    matrix -= matrix.min(axis=0, keepdims=True)

    starred = np.zeros((n, n), dtype=bool)
    primed = np.zeros((n, n), dtype=bool)
    row_covered = np.zeros(n, dtype=bool)
    col_covered = np.zeros(n, dtype=bool)

    # Star zeros greedily, at most one per row and column
    for i in range(n):
        for j in range(n):
            if matrix[i, j] == 0 and not row_covered[i] and not col_covered[j]:
                starred[i, j] = True
                row_covered[i] = True
                col_covered[j] = True
    row_covered[:] = False
    col_covered[:] = starred.any(axis=0)

    while col_covered.sum() < n:
        zero = _find_uncovered_zero(matrix, row_covered, col_covered)
        if zero is None:
            _adjust(matrix, row_covered, col_covered)
            continue

        row, col = zero
        primed[row, col] = True
        star_col = _first_true(starred[row])
        if star_col is not None:
            row_covered[row] = True
            col_covered[star_col] = False
            continue

        _augment(starred, primed, row, col)
        primed[:, :] = False
        row_covered[:] = False
        col_covered[:] = starred.any(axis=0)

    assignment: List[Tuple[int, int]] = []
    for i in range(n_rows):
        j = _first_true(starred[i])
        if j is not None and j < n_cols:
            assignment.append((i, j))
    return assignment


def total_cost(
    cost_matrix: Union[NDArray[np.float64], Sequence[Sequence[float]]],
    assignment: Sequence[Tuple[int, int]],
) -> float:
    """Sum of the costs selected by an assignment."""
    cost = np.asarray(cost_matrix, dtype=np.float64)
    return float(sum(cost[i, j] for i, j in assignment))


def _first_true(mask: NDArray[np.bool_]) -> Optional[int]:
    hits = np.flatnonzero(mask)
    return int(hits[0]) if hits.size else None


def _find_uncovered_zero(
    matrix: NDArray[np.float64],
    row_covered: NDArray[np.bool_],
    col_covered: NDArray[np.bool_],
) -> Optional[Tuple[int, int]]:
    n = matrix.shape[0]
    for i in range(n):
        if row_covered[i]:
            continue
        for j in range(n):
            if not col_covered[j] and matrix[i, j] == 0:
                return i, j
    return None


def _adjust(
    matrix: NDArray[np.float64],
    row_covered: NDArray[np.bool_],
    col_covered: NDArray[np.bool_],
):
    """Add the smallest uncovered value to covered rows, subtract it from uncovered columns."""
    uncovered = ~row_covered[:, None] & ~col_covered[None, :]
    smallest = matrix[uncovered].min()
    matrix[row_covered, :] += smallest
    matrix[:, ~col_covered] -= smallest


def _augment(
    starred: NDArray[np.bool_],
    primed: NDArray[np.bool_],
    row: int,
    col: int,
):
    """Flip stars along the alternating primed/starred path from (row, col)."""
    path = [(row, col)]
    while True:
        star_row = _first_true(starred[:, col])
        if star_row is None:
            break
        path.append((star_row, col))
        col = _first_true(primed[star_row])
        path.append((star_row, col))

    for r, c in path:
        starred[r, c] = not starred[r, c]
