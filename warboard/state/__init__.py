from .working_state import WarBoardState

__all__ = ['WarBoardState']
