from patternmemory.engine.gameplay.engine import GameEngine

__all__ = ["GameEngine"]
