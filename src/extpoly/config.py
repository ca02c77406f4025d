# Progress reporting
PROGRESS_INTERVAL = 600.0  # seconds between size reports of a growing product

# Term storage
STORE_BACKEND = "file"  # "file" or "memory"
TEMP_PREFIX = "polynomial"
TEMP_SUFFIX = ".tmp"
TEMP_DIR = None  # None uses the platform temporary directory
DELETE_ON_EXIT = True  # remove library-created term files when released

# Simplification
ZERO_TOL = 0.0  # 0.0 keeps the exact-zero test
USE_ARBITRARY_PRECISION = False  # Set to True to accumulate sums with mpmath
MPMATH_DPS = 50  # Decimal places for mpmath (standard float64 ≈ 15-17)

# Logging
LOG_LEVEL = "INFO"
