# src/combinator/config.py

VERSION = "0.3.0"

MODES = ("clipboard", "temp")
DEFAULT_MODE = "temp"

DEFAULT_HEADER_FORMAT = "file ${index}: ${relpath}"
# Raw form; escapes are decoded by the formatter.
DEFAULT_SEPARATOR = "\\n\\n"
DEFAULT_MAX_KB = 1024

# How many leading bytes the binary heuristic looks at.
BINARY_SAMPLE_SIZE = 8192
# Share of control bytes above which a sample counts as binary.
CONTROL_BYTE_RATIO = 0.02

TEMP_PREFIX = "combined-"
TEMP_SUFFIX = ".txt"
# Memory-backed locations tried on Linux before the platform temp dir.
LINUX_RAM_DIRS = ("/dev/shm",)

EXPECTED_INPUT = '{"paths":["path1","path2"],"workspace_root":"optional"}'
