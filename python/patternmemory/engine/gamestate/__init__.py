from patternmemory.engine.gamestate.state import DEFAULT_ROUND, GameState

__all__ = ["DEFAULT_ROUND", "GameState"]
