"""
Maze grid, movement and rendering.

The maze is a square grid where roughly 30% of the cells are walls. The
player starts in the top-left corner and the goal is dropped on any other
cell. Nothing guarantees a path exists; the player can always generate a new
maze.
"""

import random

# Cell contents. Each cell is drawn two columns wide so it looks square.
OPEN = " "
WALL = "\u2588"      # full block
PLAYER = "\uf053"    # left half of the player glyph (Nerd Font chevrons)
GOAL = "\u2523"      # heavy vertical and right

# Second column for each cell. Plain cells repeat themselves.
CELL_RIGHT_HALF = {
    OPEN: OPEN,
    WALL: WALL,
    PLAYER: "\uf054",
    GOAL: "\u252b",
}

WALL_PROBABILITY = 0.3

# Frame
TOP_LEFT = "\u250f"
TOP_RIGHT = "\u2513"
BOTTOM_LEFT = "\u2517"
BOTTOM_RIGHT = "\u251b"
HORIZONTAL = "\u2501"
VERTICAL = "\u2503"

# Move the cursor to the start of the previous line
CURSOR_PREVIOUS_LINE = "\x1b[1F"


class Maze:
    """
    A randomly generated maze.

    Coordinates are (x, y) with (0, 0) in the top-left corner.

    Usage:
        maze = Maze(20)
        maze.move_right()
        print(maze.render())
        if maze.completed:
            ...
    """

    def __init__(self, size: int = 40, rng: random.Random | None = None):
        """
        Generate a maze.

        Args:
            size: Width and height in cells. Must be at least 2 so the goal
                  has somewhere to go besides the player's cell.
            rng: Random source (default: a new unseeded random.Random)

        Raises:
            ValueError: If size is less than 2.
        """
        if size < 2:
            raise ValueError(f"Maze size must be at least 2, got {size}")

        self._size = size
        self._rng = rng if rng is not None else random.Random()
        self._x = 0
        self._y = 0
        self._completed = False
        self._moves = 0

        self._cells = [
            [WALL if self._rng.random() < WALL_PROBABILITY else OPEN for _ in range(size)]
            for _ in range(size)
        ]

        goal_x = self._rng.randrange(size)
        if goal_x == self._x:
            goal_y = self._random_except(self._y)
        else:
            goal_y = self._rng.randrange(size)
        self._goal = (goal_x, goal_y)

        self[goal_x, goal_y] = GOAL
        self[self._x, self._y] = PLAYER

    def _random_except(self, unwanted: int) -> int:
        """Random coordinate in [0, size) other than unwanted."""
        while True:
            value = self._rng.randrange(self._size)
            if value != unwanted:
                return value

    def __getitem__(self, position: tuple[int, int]) -> str:
        x, y = position
        return self._cells[y][x]

    def __setitem__(self, position: tuple[int, int], value: str) -> None:
        if value not in CELL_RIGHT_HALF:
            raise ValueError(f"Not a maze cell: {value!r}")
        x, y = position
        self._cells[y][x] = value

    @property
    def size(self) -> int:
        return self._size

    @property
    def position(self) -> tuple[int, int]:
        """Current player position."""
        return self._x, self._y

    @property
    def goal(self) -> tuple[int, int]:
        return self._goal

    @property
    def completed(self) -> bool:
        """Whether the player has reached the goal."""
        return self._completed

    @property
    def moves(self) -> int:
        """Number of successful moves so far."""
        return self._moves

    def move_left(self) -> bool:
        return self._move(-1, 0)

    def move_right(self) -> bool:
        return self._move(1, 0)

    def move_up(self) -> bool:
        return self._move(0, -1)

    def move_down(self) -> bool:
        return self._move(0, 1)

    def _move(self, dx: int, dy: int) -> bool:
        """
        Move the player one cell.

        Returns:
            True if the player moved, False if blocked by the edge or a wall.
        """
        if self._completed:
            return False

        x, y = self._x + dx, self._y + dy
        if not (0 <= x < self._size and 0 <= y < self._size):
            return False
        if not self._can_enter(x, y):
            return False

        self[self._x, self._y] = OPEN
        self._x, self._y = x, y
        self[x, y] = PLAYER
        self._moves += 1
        return True

    def _can_enter(self, x: int, y: int) -> bool:
        """Check if a cell can be moved into. Entering the goal completes the maze."""
        if self[x, y] == GOAL:
            self._completed = True
            return True
        return self[x, y] == OPEN

    def render(self) -> str:
        """Draw the framed board, one line per row, ending with a newline."""
        lines = [TOP_LEFT + HORIZONTAL * (self._size * 2) + TOP_RIGHT]
        for row in self._cells:
            cells = "".join(cell + CELL_RIGHT_HALF[cell] for cell in row)
            lines.append(VERTICAL + cells + VERTICAL)
        lines.append(BOTTOM_LEFT + HORIZONTAL * (self._size * 2) + BOTTOM_RIGHT)
        return "\n".join(lines) + "\n"

    def clear_sequence(self) -> str:
        """
        Text that blanks the board drawn just above the cursor.

        Each step overwrites the current line with spaces (one wider than
        the board, some terminals leave a stray glyph at the right edge) and
        moves up a line, ending on the board's first line.
        """
        blank = " " * (self._size * 2 + 3)
        return (blank + CURSOR_PREVIOUS_LINE) * (self._size + 2)
