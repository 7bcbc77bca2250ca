import re
import xml.etree.ElementTree as ET

import networkx as nx
import pytest

from conftest import FIXED_TEXT
from maze import (
    Coordinates,
    Direction,
    FieldType,
    InvalidSizeError,
    Maze,
    MazeConsumedError,
    RenderError,
    SvgOptions,
    carve,
    new_grid_graph,
    render_text,
    save_svg,
    save_text,
    to_svg,
)
from maze_prims import PrimsGenerator

SVG_NS = "{http://www.w3.org/2000/svg}"


# ---- 方向と座標 ----
def test_direction_order_and_opposites():
    assert Direction.all() == (Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST)
    assert Direction.NORTH.opposite() is Direction.SOUTH
    assert Direction.EAST.opposite() is Direction.WEST
    for d in Direction.all():
        assert d.opposite().opposite() is d


def test_direction_mirrors():
    assert Direction.EAST.mirror_horizontal() is Direction.WEST
    assert Direction.NORTH.mirror_horizontal() is Direction.NORTH
    assert Direction.SOUTH.mirror_vertical() is Direction.NORTH
    assert Direction.WEST.mirror_vertical() is Direction.WEST


def test_direction_delta_roundtrip():
    assert Direction.NORTH.delta == (0, -1)
    assert Direction.EAST.delta == (1, 0)
    for d in Direction.all():
        assert Direction.from_delta(*d.delta) is d
    with pytest.raises(ValueError):
        Direction.from_delta(1, 1)


def test_coordinates_next_and_order():
    c = Coordinates(2, 3)
    assert c.next(Direction.NORTH) == (2, 2)
    assert c.next(Direction.SOUTH) == (2, 4)
    assert c.next(Direction.EAST) == (3, 3)
    assert c.next(Direction.WEST) == (1, 3)
    # 範囲チェックはしない
    assert Coordinates(0, 0).next(Direction.WEST) == (-1, 0)

    assert sorted([Coordinates(1, 0), Coordinates(0, 5), Coordinates(0, 1)]) == [
        Coordinates(0, 1), Coordinates(0, 5), Coordinates(1, 0)
    ]
    assert str(c) == "(2, 3)"
    assert {c: 1}[(2, 3)] == 1


# ---- Maze ----
def test_fixed_maze_text(fixed_maze):
    assert render_text(fixed_maze) == FIXED_TEXT
    assert str(fixed_maze) == FIXED_TEXT


def test_get_field(fixed_maze):
    start = fixed_maze.get_field(fixed_maze.start)
    assert start.field_type is FieldType.START
    assert start.passages == (Direction.SOUTH,)
    assert not start.has_passage(Direction.EAST)

    goal = fixed_maze.get_field((0, 2))
    assert goal.field_type is FieldType.GOAL
    assert goal.passages == (Direction.EAST,)

    middle = fixed_maze.get_field(Coordinates(1, 1))
    assert middle.field_type is FieldType.NORMAL
    assert middle.passages == (Direction.EAST, Direction.WEST)
    assert middle.coordinates == (1, 1)


@pytest.mark.parametrize("coords", [(-1, 0), (0, -1), (3, 0), (0, 3), (5, 5)])
def test_get_field_out_of_bounds(fixed_maze, coords):
    assert fixed_maze.get_field(coords) is None


@pytest.mark.parametrize("coords", [(0.5, 0), (1, 1.0), (True, 0), ("0", 0)])
def test_get_field_non_integer_is_not_a_cell(fixed_maze, coords):
    assert not fixed_maze.are_coordinates_inside(coords)
    assert fixed_maze.get_field(coords) is None


def test_maze_is_read_only(fixed_maze):
    with pytest.raises(AttributeError):
        fixed_maze.start = (1, 1)
    with pytest.raises(AttributeError):
        fixed_maze.size = (9, 9)
    assert fixed_maze.size == (3, 3)


def test_passages_are_sorted_pairs(fixed_maze):
    passages = list(fixed_maze.passages())
    assert len(passages) == 8
    assert all(a < b for a, b in passages)
    assert ((0, 0), (0, 1)) in passages


def test_into_graph_consumes(fixed_maze):
    g = fixed_maze.into_graph()
    assert isinstance(g, nx.Graph)
    assert g.number_of_edges() == 8
    with pytest.raises(MazeConsumedError):
        fixed_maze.get_field((0, 0))
    with pytest.raises(MazeConsumedError):
        fixed_maze.into_graph()


def test_constructor_rejects_cycles():
    graph = new_grid_graph(2, 2)
    carve(graph, Coordinates(0, 0), Coordinates(1, 0))
    carve(graph, Coordinates(1, 0), Coordinates(1, 1))
    carve(graph, Coordinates(1, 1), Coordinates(0, 1))
    carve(graph, Coordinates(0, 1), Coordinates(0, 0))
    with pytest.raises(ValueError):
        Maze(graph, 2, 2, (0, 0), (1, 1))


def test_constructor_rejects_disconnected():
    graph = new_grid_graph(2, 2)
    carve(graph, Coordinates(0, 0), Coordinates(1, 0))
    with pytest.raises(ValueError):
        Maze(graph, 2, 2, (0, 0), (1, 1))


def test_constructor_rejects_non_adjacent_and_bad_nodes():
    graph = new_grid_graph(1, 3)
    graph.add_edge(Coordinates(0, 0), Coordinates(0, 2))
    graph.add_edge(Coordinates(0, 0), Coordinates(0, 1))
    with pytest.raises(ValueError):
        Maze(graph, 1, 3, (0, 0), (0, 2))

    with pytest.raises(ValueError):
        carve(new_grid_graph(3, 3), Coordinates(0, 0), Coordinates(1, 1))

    with pytest.raises(ValueError):
        Maze(new_grid_graph(1, 1), 2, 1, (0, 0), (0, 0))


def test_constructor_rejects_bad_size_and_endpoints():
    with pytest.raises(InvalidSizeError):
        Maze(nx.Graph(), 0, 3, (0, 0), (0, 0))
    with pytest.raises(InvalidSizeError):
        new_grid_graph(3, -1)
    with pytest.raises(ValueError):
        Maze(new_grid_graph(1, 1), 1, 1, (0, 0), (1, 0))


def test_single_cell_maze():
    m = Maze(new_grid_graph(1, 1), 1, 1, (0, 0), (0, 0))
    assert m.get_field((0, 0)).passages == ()
    # スタートとゴールが同じなら S が優先
    assert str(m) == "·-·\n|S|\n·-·\n"


# ---- 等価性（同型） ----
def test_equality_is_isomorphism():
    m = PrimsGenerator(5).generate(6, 6)
    # 転置しても (0,0) と (5,5) はそのまま、グラフは同型
    transposed = new_grid_graph(6, 6)
    for a, b in m.passages():
        carve(transposed, Coordinates(a.y, a.x), Coordinates(b.y, b.x))
    assert Maze(transposed, 6, 6, m.start, m.goal) == m


def test_equality_requires_same_endpoints(fixed_maze):
    graph = new_grid_graph(3, 3)
    for a, b in fixed_maze.passages():
        carve(graph, a, b)
    assert Maze(graph, 3, 3, (0, 0), (0, 2)) == fixed_maze

    graph = new_grid_graph(3, 3)
    for a, b in fixed_maze.passages():
        carve(graph, a, b)
    assert Maze(graph, 3, 3, (0, 0), (2, 2)) != fixed_maze
    assert fixed_maze != "maze"


# ---- SVG ----
def test_svg_document(fixed_maze):
    root = ET.fromstring(to_svg(fixed_maze).encode("utf-8"))
    assert root.tag == SVG_NS + "svg"
    # height = (2+3)*10 = 50 -> 1セル16px -> 48 + 余白 2*10
    assert root.get("width") == "68"
    assert root.get("height") == "68"
    assert [int(v) for v in re.split(r"[ ,]+", root.get("viewBox"))] == [-10, -10, 68, 68]

    lines = list(root.iter(SVG_NS + "line"))
    # 北の壁6本 + 西の壁4本 + 下端・右端
    assert len(lines) == 12

    circles = list(root.iter(SVG_NS + "circle"))
    assert len(circles) == 2
    assert circles[0].get("fill") == "red"
    assert (circles[0].get("cx"), circles[0].get("cy")) == ("8", "8")
    assert circles[1].get("fill") == "blue"
    assert (circles[1].get("cx"), circles[1].get("cy")) == ("8", "40")


def test_svg_options(fixed_maze):
    opts = SvgOptions(padding=5, height=90, markersize=4, strokecol="green", goalcol="orange")
    root = ET.fromstring(to_svg(fixed_maze, opts).encode("utf-8"))
    assert root.get("width") == "100"
    group = root.find(SVG_NS + "g")
    assert group.get("stroke") == "green"
    circles = list(root.iter(SVG_NS + "circle"))
    assert circles[1].get("fill") == "orange"
    assert circles[0].get("r") == "4"

    with pytest.raises(ValueError):
        SvgOptions(height=0)
    with pytest.raises(ValueError):
        SvgOptions(padding=-1)


def test_save_text_and_svg(fixed_maze, tmp_path):
    txt = tmp_path / "maze.txt"
    save_text(fixed_maze, str(txt))
    assert txt.read_text(encoding="utf-8") == FIXED_TEXT

    svg = tmp_path / "maze.svg"
    save_svg(fixed_maze, str(svg))
    assert ET.parse(str(svg)).getroot().tag == SVG_NS + "svg"


def test_save_errors_are_render_errors(fixed_maze, tmp_path):
    missing = tmp_path / "no-such-dir"
    with pytest.raises(RenderError):
        save_text(fixed_maze, str(missing / "maze.txt"))
    with pytest.raises(RenderError):
        save_svg(fixed_maze, str(missing / "maze.svg"))
