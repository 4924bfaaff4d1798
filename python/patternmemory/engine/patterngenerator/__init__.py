from patternmemory.engine.patterngenerator.generator import PatternGenerator

__all__ = ["PatternGenerator"]
