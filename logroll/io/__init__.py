from .move import move_file
from .resilient import ResilientOutput

__all__ = ["ResilientOutput", "move_file"]
