"""Index building and query module."""

from verbroots.lexicon.builder import IndexBuilder
from verbroots.lexicon.index import IndexStats, VerbRootIndex
from verbroots.lexicon.search import rank, score


__all__ = ['IndexBuilder', 'IndexStats', 'VerbRootIndex', 'rank', 'score']
