from .config   import CONFIG, load_config
from .io       import load_matrix, save_yaml
from .maths    import (
    ArithmeticOverflowError, PreparedVector, AlignedValue,
    prepare, align, take_diffs, accumulate
)
from .reduce   import (
    DescentDepthError, Level, Reduction,
    down, up, reduce_vector, scalar_multiply
)
from .outer    import ScalarCache, outer_product, matrix_multiply
