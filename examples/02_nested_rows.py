import numpy as np

from ndpipe import from_array

grid = np.array(
    [
        [11, 12, 13, 14, 15],
        [21, 22, 23, 24, 25],
        [31, 32, 33, 34, 35],
        [41, 42, 43, 44, 45],
        [51, 52, 53, 54, 55],
    ],
    dtype=np.uint32,
)

# Both axes belong to the pipeline shape: the transform sees scalars.
cells = from_array(grid, 2).map(lambda i: i + 1)
print(cells.explain())
print(cells.build())

# Only the outer axis is traversed: each element is a row of five.
rows = from_array(grid).filter(lambda row: row.sum() > 150)
print(rows.explain())
result, stats = rows.map_to(np.float64, lambda row: row.mean()).build_with_stats()
print(result)
print(stats.as_dict())
