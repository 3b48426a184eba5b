import numpy as np

from ndpipe import from_array

values = np.arange(1, 11, dtype=np.uint32)

doubled = from_array(values).map(lambda i: i + 1).map(lambda i: i * 2).build()
print("doubled:", doubled)

kept = from_array(values).map(lambda i: i + 1).filter(lambda i: i > 5).build()
print("kept:", kept)

total = from_array(values).map_to(np.float64, lambda i: i + 0.22).reduce(lambda a, b: a + b)
print(f"total: {total:.2f}")
