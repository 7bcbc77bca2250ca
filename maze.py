import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, NamedTuple

import networkx as nx
import svgwrite


# =========================================================
# エラー
# =========================================================
class MazeError(Exception):
    """迷路まわりの例外の基底クラス。"""


class InvalidSizeError(MazeError, ValueError):
    def __init__(self, width, height):
        super().__init__(f"width/height must be positive integers (got {width!r}x{height!r})")
        self.width = width
        self.height = height


class RenderError(MazeError):
    """テキスト/SVG/PNG/PDF の出力先で失敗したとき。"""


class MazeConsumedError(MazeError, RuntimeError):
    pass


# =========================================================
# 方向と座標
# =========================================================
class Direction(Enum):
    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"

    @classmethod
    def all(cls) -> tuple["Direction", ...]:
        # 固定順 N, E, S, W
        return (cls.NORTH, cls.EAST, cls.SOUTH, cls.WEST)

    @property
    def delta(self) -> tuple[int, int]:
        return DX[self], DY[self]

    @classmethod
    def from_delta(cls, dx: int, dy: int) -> "Direction":
        for d in cls.all():
            if d.delta == (dx, dy):
                return d
        raise ValueError(f"not a unit step: ({dx}, {dy})")

    def opposite(self) -> "Direction":
        return OPPOSITE[self]

    def mirror_horizontal(self) -> "Direction":
        # 左右反転：E<->W
        if self in (Direction.EAST, Direction.WEST):
            return OPPOSITE[self]
        return self

    def mirror_vertical(self) -> "Direction":
        # 上下反転：N<->S
        if self in (Direction.NORTH, Direction.SOUTH):
            return OPPOSITE[self]
        return self


N, E, S, W = Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST
DX = {E: 1, W: -1, N: 0, S: 0}
DY = {E: 0, W: 0, N: -1, S: 1}
OPPOSITE = {N: S, S: N, E: W, W: E}


class Coordinates(NamedTuple):
    """セル座標。x が列、y が行（y=0 が一番上）。"""

    x: int
    y: int

    def next(self, direction: Direction) -> "Coordinates":
        # 範囲チェックはしない（グラフ側の責任）
        return Coordinates(self.x + DX[direction], self.y + DY[direction])

    def __str__(self):
        return f"({self.x}, {self.y})"


# =========================================================
# セル（Field）
# =========================================================
class FieldType(Enum):
    START = "start"
    GOAL = "goal"
    NORMAL = "normal"


@dataclass(frozen=True)
class Field:
    field_type: FieldType
    coordinates: Coordinates
    passages: tuple[Direction, ...]

    def has_passage(self, direction: Direction) -> bool:
        return direction in self.passages


# =========================================================
# グラフ操作（ジェネレータ用）
# =========================================================
def check_size(width, height) -> None:
    for v in (width, height):
        if isinstance(v, bool) or not isinstance(v, int) or v <= 0:
            raise InvalidSizeError(width, height)


def new_grid_graph(width: int, height: int) -> nx.Graph:
    """全セルをノードに持ち、通路（エッジ）がまだ無いグラフ。"""
    check_size(width, height)
    graph = nx.Graph()
    graph.add_nodes_from(Coordinates(x, y) for y in range(height) for x in range(width))
    return graph


def grid_neighbors(cell: Coordinates, width: int, height: int) -> list[tuple[Direction, Coordinates]]:
    out = []
    for d in Direction.all():
        n = cell.next(d)
        if 0 <= n.x < width and 0 <= n.y < height:
            out.append((d, n))
    return out


def carve(graph: nx.Graph, a: Coordinates, b: Coordinates) -> None:
    if abs(a.x - b.x) + abs(a.y - b.y) != 1:
        raise ValueError(f"cells are not adjacent: {a} {b}")
    graph.add_edge(a, b)


# =========================================================
# 迷路
# =========================================================
class Maze:
    """
    通路グラフ（全域木）＋スタート/ゴール＋サイズ。
    ジェネレータが一度だけ組み立て、以後は読み取り専用。
    """

    def __init__(self, graph: nx.Graph, width: int, height: int, start, goal):
        check_size(width, height)
        start = Coordinates(*start)
        goal = Coordinates(*goal)

        expected = {Coordinates(x, y) for y in range(height) for x in range(width)}
        if set(graph.nodes) != expected:
            raise ValueError("graph nodes must be exactly the cells of the rectangle")
        for a, b in graph.edges:
            if abs(a[0] - b[0]) + abs(a[1] - b[1]) != 1:
                raise ValueError(f"passage between non-adjacent cells: {a} {b}")
        if not nx.is_tree(graph):
            raise ValueError("passages must form a spanning tree")
        if start not in expected or goal not in expected:
            raise ValueError("start/goal must lie inside the maze")

        self._graph = graph
        self._size = (width, height)
        self._start = start
        self._goal = goal

    # 外から書き換えられないよう全部プロパティ
    @property
    def size(self) -> tuple[int, int]:
        return self._size

    @property
    def width(self) -> int:
        return self._size[0]

    @property
    def height(self) -> int:
        return self._size[1]

    @property
    def start(self) -> Coordinates:
        return self._start

    @property
    def goal(self) -> Coordinates:
        return self._goal

    def _require_graph(self) -> nx.Graph:
        if self._graph is None:
            raise MazeConsumedError("maze graph has been extracted with into_graph()")
        return self._graph

    def are_coordinates_inside(self, coordinates) -> bool:
        x, y = coordinates
        # セルは整数座標だけ（0.5 や True はセルではない）
        for v in (x, y):
            if isinstance(v, bool) or not isinstance(v, int):
                return False
        return 0 <= x < self.width and 0 <= y < self.height

    def get_field(self, coordinates) -> Field | None:
        graph = self._require_graph()
        if not self.are_coordinates_inside(coordinates):
            return None
        c = Coordinates(*coordinates)

        passages = tuple(d for d in Direction.all() if graph.has_edge(c, c.next(d)))

        if c == self._start:
            field_type = FieldType.START
        elif c == self._goal:
            field_type = FieldType.GOAL
        else:
            field_type = FieldType.NORMAL

        return Field(field_type, c, passages)

    def passages(self) -> Iterator[tuple[Coordinates, Coordinates]]:
        for a, b in self._require_graph().edges:
            yield (a, b) if a < b else (b, a)

    def into_graph(self) -> nx.Graph:
        # 取り出した後は不変条件を保証できないので、この Maze は使えなくなる
        graph = self._require_graph()
        self._graph = None
        return graph

    def __eq__(self, other):
        if not isinstance(other, Maze):
            return NotImplemented
        return (
            self.start == other.start
            and self.goal == other.goal
            and self.size == other.size
            and nx.is_isomorphic(self._require_graph(), other._require_graph())
        )

    __hash__ = None

    def __str__(self):
        return render_text(self)

    def __repr__(self):
        return f"Maze(size={self.size}, start={self.start}, goal={self.goal})"


# =========================================================
# ジェネレータ共通
# =========================================================
class Generator(ABC):
    """
    迷路生成アルゴリズムの共通インターフェース。
    seed が同じなら同じ迷路（int / bytes / str、None ならOSの乱数で初期化）。
    """

    def __init__(self, seed: int | bytes | str | None = None):
        self.rnd = random.Random(seed)

    def generate(self, width: int, height: int) -> Maze:
        check_size(width, height)
        return self._generate(width, height)

    @abstractmethod
    def _generate(self, width: int, height: int) -> Maze:
        ...


# =========================================================
# テキスト描画
# =========================================================
def render_text(maze: Maze) -> str:
    w, h = maze.size
    lines = []
    for y in range(h):
        # 上の壁
        row = []
        for x in range(w):
            row.append("·")
            row.append(" " if maze.get_field((x, y)).has_passage(N) else "-")
        row.append("·")
        lines.append("".join(row))

        # 左の壁とセル
        row = []
        for x in range(w):
            field = maze.get_field((x, y))
            row.append(" " if field.has_passage(W) else "|")
            if field.field_type is FieldType.START:
                row.append("S")
            elif field.field_type is FieldType.GOAL:
                row.append("G")
            else:
                row.append(" ")
        row.append("|")
        lines.append("".join(row))

    lines.append("·-" * w + "·")
    return "\n".join(lines) + "\n"


def save_text(maze: Maze, path: str) -> None:
    text = render_text(maze)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise RenderError(f"could not write text maze to {path}: {e}") from e


# =========================================================
# SVG
# =========================================================
@dataclass(frozen=True)
class SvgOptions:
    padding: int = 10          # 迷路の周囲の余白
    height: int | None = None  # 余白を除いた高さ(px)。None なら (2 + 行数) * padding
    markersize: int = 2        # START/GOAL の円の半径
    strokewidth: int = 2
    strokecol: str = "black"
    startcol: str = "red"
    goalcol: str = "blue"

    def __post_init__(self):
        if self.padding < 0:
            raise ValueError("padding must be >= 0")
        if self.height is not None and self.height <= 0:
            raise ValueError("height must be > 0")


def build_svg(maze: Maze, options: SvgOptions | None = None) -> svgwrite.Drawing:
    opt = options or SvgOptions()
    cols, rows = maze.size
    pad = opt.padding

    height = opt.height if opt.height is not None else (2 + rows) * pad
    width = height * cols // rows  # 縦横比から幅を決める

    # 迷路座標 -> SVG座標の倍率（整数）
    scx = width // cols
    scy = height // rows
    width = scx * cols
    height = scy * rows

    dwg = svgwrite.Drawing(size=(width + 2 * pad, height + 2 * pad))
    dwg.viewbox(-pad, -pad, width + 2 * pad, height + 2 * pad)
    walls = dwg.add(dwg.g(stroke=opt.strokecol, stroke_width=opt.strokewidth, stroke_linecap="square"))

    def marker(x, y, color):
        dwg.add(dwg.circle(
            center=(x * scx + scx // 2, y * scy + scy // 2),
            r=opt.markersize,
            stroke=color,
            stroke_width=opt.markersize + 1,
            fill=color,
        ))

    for y in range(rows):
        for x in range(cols):
            field = maze.get_field((x, y))
            if not field.has_passage(N):
                walls.add(dwg.line((x * scx, y * scy), ((x + 1) * scx, y * scy)))
            if not field.has_passage(W):
                walls.add(dwg.line((x * scx, y * scy), (x * scx, (y + 1) * scy)))

            if field.field_type is FieldType.START:
                marker(x, y, opt.startcol)
            elif field.field_type is FieldType.GOAL:
                marker(x, y, opt.goalcol)

    # 下端と右端の外周
    walls.add(dwg.line((0, rows * scy), (cols * scx, rows * scy)))
    walls.add(dwg.line((cols * scx, 0), (cols * scx, rows * scy)))
    return dwg


def to_svg(maze: Maze, options: SvgOptions | None = None) -> str:
    return '<?xml version="1.0" encoding="utf-8"?>\n' + build_svg(maze, options).tostring()


def save_svg(maze: Maze, path: str, options: SvgOptions | None = None) -> None:
    dwg = build_svg(maze, options)
    try:
        dwg.saveas(path)
    except OSError as e:
        raise RenderError(f"could not write SVG to {path}: {e}") from e
