from sqlalchemy.orm import declarative_base
import enum

Base = declarative_base()


# ============================================================================
# ENUMS
# ============================================================================

class SyncStatus(str, enum.Enum):
    """Outcome of one keyword sync run"""
    RUNNING = "running"
    SUCCESS = "success"
    PARTIAL = "partial_success"
    NO_CANDIDATES = "no_candidates"
    FAILED = "failed"
