"""hotpotato - decorate files by how recently they were modified."""

from hotpotato.config import Corner, HotPotatoConfig, load_config
from hotpotato.decorator import Decoration, FreshnessDecorator, LabelsChangedEvent
from hotpotato.errors import DeltaTraversalError, HotPotatoError
from hotpotato.freshness import Freshness, RefreshScheduler, Thresholds, classify
from hotpotato.watcher import WorkspaceWatcher

__version__ = "0.1.0"

__all__ = [
    "Corner",
    "Decoration",
    "DeltaTraversalError",
    "Freshness",
    "FreshnessDecorator",
    "HotPotatoConfig",
    "HotPotatoError",
    "LabelsChangedEvent",
    "RefreshScheduler",
    "Thresholds",
    "WorkspaceWatcher",
    "classify",
    "load_config",
]
