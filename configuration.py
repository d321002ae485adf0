"""
Configuration constants for the fast.com throughput benchmark.

This module contains all configuration parameters including:
- Provider endpoints and the client identifier
- Measurement parameters (concurrency, measurement window)
- Download streaming settings
- Exporter settings
- Unit conversion factors
"""

import os

# =============================================================================
# PROVIDER CONFIGURATION
# =============================================================================

# Landing page that references the bundled app script
FAST_BASE_URL: str = os.getenv("FAST_BASE_URL", "https://fast.com")

# API endpoint that hands out candidate download URLs
FAST_API_URL: str = os.getenv("FAST_API_URL", "https://api.fast.com/netflix/speedtest/v2")

# Client identifier sent with every request
USER_AGENT: str = os.getenv("FAST_USER_AGENT", "fast-bench/v1")

# Number of candidate URLs requested from the API
URL_COUNT: int = 5

# =============================================================================
# MEASUREMENT PARAMETERS
# =============================================================================

MAX_CONCURRENT_REQUESTS: int = 8  # from fast.com
MEASUREMENT_SECONDS: float = 10.0  # from fast.com

# Extra time allowed for in-flight downloads to report after the window closes
DRAIN_GRACE_SECONDS: float = 1.0

# =============================================================================
# DOWNLOAD SETTINGS
# =============================================================================

DOWNLOAD_CHUNK_SIZE: int = 64 * 1024  # Bytes read per chunk while discarding the body

# =============================================================================
# EXPORTER CONFIGURATION
# =============================================================================

EXPORTER_PORT: int = int(os.getenv("EXPORTER_PORT", "9876"))
REFRESH_INTERVAL_SECONDS: float = 30 * 60  # Time between measurements in exporter mode

# =============================================================================
# UNIT CONVERSION
# =============================================================================

BITS_PER_BYTE: int = 8
BITS_PER_MEGABIT: int = 1_000_000
