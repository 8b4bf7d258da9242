from .batcher import RequestBatcher
from .lazy_loader import LazyLoader

__all__ = ["LazyLoader", "RequestBatcher"]
