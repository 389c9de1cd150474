"""Central configuration for the pixel engine.

All tunable parameters are defined here with descriptive names.
The engine functions take these as defaults; EngineConfig in
pixel_engine.config bundles them for the command layer and CLI.
"""

# =============================================================================
# MEDIAN FILTER
# =============================================================================

# Window sizes accepted by the median filter (square, odd)
MEDIAN_WINDOW_SIZES = (3, 5, 7)

# Window size used when a caller does not pick one
DEFAULT_MEDIAN_WINDOW = 3

# What happens to pixels without a full neighborhood:
# "copy" keeps the source value, "zero" blanks the color channels
MEDIAN_BORDER_POLICY = "copy"

# =============================================================================
# HISTOGRAM
# =============================================================================

# Number of distinct intensities in an 8-bit channel
HISTOGRAM_BINS = 256

# Number of output levels for histogram equalization.
# The cumulative distribution is scaled by (levels - 1), so the default of 8
# reproduces the original scaling constant of 7 (output indices 0..7).
EQUALIZATION_LEVELS = 8

# =============================================================================
# POINT OPERATIONS
# =============================================================================

# Grayscale keeps the source alpha unless this is set
GRAYSCALE_FORCE_OPAQUE = False

# =============================================================================
# KERNELS
# =============================================================================

# Canonical high-pass table: "8/-1" (center 8, neighbors -1)
# or "2/-0.25" (center 2, neighbors -1/4)
HIGH_PASS_VARIANT = "8/-1"

# =============================================================================
# IMAGE I/O (CLI and adapter only; the engine itself never touches files)
# =============================================================================

# Supported image extensions when processing a directory
IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp", ".tif", ".tiff", ".webp"}

# File extension used for pipeline step artifacts
ARTIFACT_EXTENSION = ".png"
