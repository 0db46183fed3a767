"""yieldstate engine configuration loaded from environment variables.

All time-based parameters are expressed in SECONDS. Values are read once at
import; changing any of them changes engine behavior for every market.
"""
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

# Load .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# ============================================================================
# Time Constants
# ============================================================================

LEVEL_TIME_CONSTANT = float(os.getenv('LEVEL_TIME_CONSTANT', str(60 * 60)))
TREND_TIME_CONSTANT = float(os.getenv('TREND_TIME_CONSTANT', str(30 * 60)))
NOISE_TIME_CONSTANT = float(os.getenv('NOISE_TIME_CONSTANT', str(2 * 60 * 60)))
INSTABILITY_TIME_CONSTANT = float(os.getenv('INSTABILITY_TIME_CONSTANT', str(60 * 60)))
LIQUIDITY_TIME_CONSTANT = float(os.getenv('LIQUIDITY_TIME_CONSTANT', str(12 * 60 * 60)))

# ============================================================================
# Structural Constants
# ============================================================================

# Minimum capital base for the yield to be considered reliable
LIQUIDITY_REFERENCE = float(os.getenv('LIQUIDITY_REFERENCE', '50000000'))

# Upstream sanity cap on reported yields (percent)
MAX_ABS_YIELD = float(os.getenv('MAX_ABS_YIELD', '10000'))

# ============================================================================
# Risk Penalty Weights
# ============================================================================

NOISE_WEIGHT = float(os.getenv('NOISE_WEIGHT', '0.3'))
INSTABILITY_WEIGHT = float(os.getenv('INSTABILITY_WEIGHT', '0.6'))
LIQUIDITY_WEIGHT = float(os.getenv('LIQUIDITY_WEIGHT', '1.0'))

# ============================================================================
# Confidence Dynamics (optional downstream stage)
# ============================================================================

TRACK_CONFIDENCE = bool(int(os.getenv('TRACK_CONFIDENCE', '0')))

CONFIDENCE_RECOVERY_TIME = float(os.getenv('CONFIDENCE_RECOVERY_TIME', str(4 * 60 * 60)))
CONFIDENCE_RECOVERY_POLICY = os.getenv('CONFIDENCE_RECOVERY_POLICY', 'saturating').lower()

INSTABILITY_DECAY = float(os.getenv('INSTABILITY_DECAY', '0.7'))
LIQUIDITY_DECAY = float(os.getenv('LIQUIDITY_DECAY', '1.0'))
TIME_DECAY = float(os.getenv('TIME_DECAY', '0.05'))  # per hour of staleness

# Recovery only happens below these levels
STABLE_INSTABILITY_MAX = float(os.getenv('STABLE_INSTABILITY_MAX', '1.0'))
STABLE_STRESS_MAX = float(os.getenv('STABLE_STRESS_MAX', '0.5'))

CONFIDENCE_MIN = 0.0
CONFIDENCE_MAX = 1.0

MIN_WARMUP_SAMPLES = int(os.getenv('MIN_WARMUP_SAMPLES', '15'))

# ============================================================================
# Decision Thresholds
# ============================================================================

CONFIDENCE_STABLE = float(os.getenv('CONFIDENCE_STABLE', '0.7'))
CONFIDENCE_RISKY = float(os.getenv('CONFIDENCE_RISKY', '0.3'))
LIQUIDITY_STRESS_MAX = float(os.getenv('LIQUIDITY_STRESS_MAX', '0.95'))
INSTABILITY_THRESHOLD = float(os.getenv('INSTABILITY_THRESHOLD', '0.01'))
GAP_THRESHOLD = float(os.getenv('GAP_THRESHOLD', '1800'))

# ============================================================================
# Storage Configuration
# ============================================================================

HISTORY_SIZE = int(os.getenv('HISTORY_SIZE', '500'))

# ============================================================================
# Logging Configuration
# ============================================================================

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
LOG_FILE = os.getenv('LOG_FILE', '')
LOG_FORMAT = os.getenv('LOG_FORMAT', 'detailed')

LOG_FORMATS = {
    'json': '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "message": "%(message)s"}',
    'detailed': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    'simple': '%(levelname)s: %(message)s',
}

# ============================================================================
# Validation
# ============================================================================

RECOVERY_POLICIES = ('linear', 'saturating')


def validate_config() -> None:
    """Validate configuration values."""
    errors = []

    time_constants = {
        'LEVEL_TIME_CONSTANT': LEVEL_TIME_CONSTANT,
        'TREND_TIME_CONSTANT': TREND_TIME_CONSTANT,
        'NOISE_TIME_CONSTANT': NOISE_TIME_CONSTANT,
        'INSTABILITY_TIME_CONSTANT': INSTABILITY_TIME_CONSTANT,
        'LIQUIDITY_TIME_CONSTANT': LIQUIDITY_TIME_CONSTANT,
        'CONFIDENCE_RECOVERY_TIME': CONFIDENCE_RECOVERY_TIME,
    }
    for name, value in time_constants.items():
        if not value > 0:
            errors.append(f"{name} must be positive")

    if not LIQUIDITY_REFERENCE > 0:
        errors.append("LIQUIDITY_REFERENCE must be positive")

    if not MAX_ABS_YIELD > 0:
        errors.append("MAX_ABS_YIELD must be positive")

    # Validate weights
    for name, value in (
        ('NOISE_WEIGHT', NOISE_WEIGHT),
        ('INSTABILITY_WEIGHT', INSTABILITY_WEIGHT),
        ('LIQUIDITY_WEIGHT', LIQUIDITY_WEIGHT),
        ('INSTABILITY_DECAY', INSTABILITY_DECAY),
        ('LIQUIDITY_DECAY', LIQUIDITY_DECAY),
        ('TIME_DECAY', TIME_DECAY),
    ):
        if value < 0:
            errors.append(f"{name} must be non-negative")

    if CONFIDENCE_RECOVERY_POLICY not in RECOVERY_POLICIES:
        errors.append(f"CONFIDENCE_RECOVERY_POLICY must be one of {', '.join(RECOVERY_POLICIES)}")

    # Validate thresholds
    if not (0 <= CONFIDENCE_RISKY <= CONFIDENCE_STABLE <= 1):
        errors.append("CONFIDENCE_RISKY <= CONFIDENCE_STABLE must hold within [0, 1]")

    if not (0 <= LIQUIDITY_STRESS_MAX <= 1):
        errors.append("LIQUIDITY_STRESS_MAX must be between 0 and 1")

    if MIN_WARMUP_SAMPLES < 0:
        errors.append("MIN_WARMUP_SAMPLES must be non-negative")

    if HISTORY_SIZE < 1:
        errors.append("HISTORY_SIZE must be at least 1")

    if LOG_FORMAT not in LOG_FORMATS:
        errors.append(f"LOG_FORMAT must be one of {', '.join(LOG_FORMATS)}")

    if errors:
        raise ValueError("Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors))


# ============================================================================
# Logging Setup
# ============================================================================

def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure root logging for yieldstate processes.

    Args:
        level: Level name overriding LOG_LEVEL (e.g. from a CLI flag).
        log_format: Key of LOG_FORMATS overriding LOG_FORMAT.
    """
    import logging
    import sys

    level_name = (level or LOG_LEVEL).upper()
    resolved_level = getattr(logging, level_name, logging.INFO)
    formatter = logging.Formatter(LOG_FORMATS.get(log_format or LOG_FORMAT, LOG_FORMATS['simple']))

    handlers = [logging.StreamHandler(sys.stdout)]
    if LOG_FILE:
        handlers.append(logging.FileHandler(LOG_FILE))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=resolved_level, handlers=handlers, force=True)
    logging.getLogger('yieldstate').setLevel(resolved_level)

    # Per-tick engine traces are debug-only; keep server access logs quiet
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)


# ============================================================================
# Initialization
# ============================================================================

# Validate config on import
validate_config()

# Setup logging
setup_logging()
