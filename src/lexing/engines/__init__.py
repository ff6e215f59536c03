from .base import TokenProducer
from .lexical import LexicalTokenProducer

__all__ = ["TokenProducer", "LexicalTokenProducer"]
