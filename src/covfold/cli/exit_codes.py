# mirror <sysexits.h> where one applies
EXIT_OK = 0  # Normal success
EXIT_GENERIC = 1  # Generic failure (fallback)
EXIT_THRESHOLD = 2  # Coverage thresholds were not met
EXIT_CONFIG = 78  # Invalid configuration (e.g., bad threshold expression)
