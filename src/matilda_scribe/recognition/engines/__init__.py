"""Recognition engines.

- RecognitionEngine: Protocol every engine adapter implements
- ScriptedEngine: Deterministic engine driven programmatically (tests, replay)
"""

from .base import EngineFactory, RecognitionEngine
from .scripted import ScriptedEngine

__all__ = ["EngineFactory", "RecognitionEngine", "ScriptedEngine"]
