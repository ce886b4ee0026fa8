from ..internal.strategies.debounced import DebouncedStrategy
from ..internal.strategies.incremental import IncrementalStrategy
from ..internal.strategies.index_window import IndexWindowStrategy
from ..internal.strategies.protocol import CommitStrategy
from ..internal.strategies.whole_buffer import WholeBufferStrategy

__all__ = [
    "CommitStrategy",
    "DebouncedStrategy",
    "IncrementalStrategy",
    "IndexWindowStrategy",
    "WholeBufferStrategy",
]
