"""episodeforge: scene ordering, content checks and bulk generation for episodes.

Episodes are ordered lists of scenes produced by an external script generator.
This package keeps scene order consistent, reports advisory quality, host
consistency and duration statistics, and drives the generator over batches of
requested episodes.
"""

__version__ = "0.1.0"

from .analyzers import (  # noqa: E402
    CharacterConsistencyChecker,
    EpisodeAnalytics,
    QualityAnalyzer,
    analyze_episode,
)
from .batch import BulkBatchReport, BulkGenerationOrchestrator  # noqa: E402
from .config import EpisodeForgeSettings, get_logger, get_settings  # noqa: E402
from .exceptions import (  # noqa: E402
    EpisodeForgeError,
    GenerationError,
    NotFoundError,
    ValidationError,
)
from .ordering import SceneEditor  # noqa: E402
from .storage import InMemoryEpisodeStore  # noqa: E402

__all__ = [
    "BulkBatchReport",
    "BulkGenerationOrchestrator",
    "CharacterConsistencyChecker",
    "EpisodeAnalytics",
    "EpisodeForgeError",
    "EpisodeForgeSettings",
    "GenerationError",
    "InMemoryEpisodeStore",
    "NotFoundError",
    "QualityAnalyzer",
    "SceneEditor",
    "ValidationError",
    "__version__",
    "analyze_episode",
    "get_logger",
    "get_settings",
]
