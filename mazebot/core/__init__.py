# Core module
from .grid import (
    Cell,
    Direction,
    Grid,
    InsufficientOpeningsError,
    MalformedGridError,
    MazeError,
    Opening,
    OutOfBoundsError,
    build_grid,
)
from .traversal import (
    TickOutcome,
    TraversalEngine,
    TraversalSnapshot,
    TraversalState,
    VisitedNode,
)
from .render import render, render_path
from .maze_parser import (
    MazeParseError,
    MazeValidationError,
    ParsedMaze,
    build_engine,
    parse_maze_text,
    load_maze_file,
    load_all_mazes,
    validate_maze_text,
)

__all__ = [
    "Cell",
    "Direction",
    "Grid",
    "InsufficientOpeningsError",
    "MalformedGridError",
    "MazeError",
    "Opening",
    "OutOfBoundsError",
    "build_grid",
    "TickOutcome",
    "TraversalEngine",
    "TraversalSnapshot",
    "TraversalState",
    "VisitedNode",
    "render",
    "render_path",
    "MazeParseError",
    "MazeValidationError",
    "ParsedMaze",
    "build_engine",
    "parse_maze_text",
    "load_maze_file",
    "load_all_mazes",
    "validate_maze_text",
]
