import os
import sys

import networkx as nx
import pytest

# maze.py などがあるプロジェクトルートを sys.path に追加
CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from maze import Coordinates, Maze, carve, new_grid_graph  # noqa: E402


FIXED_EDGES = [
    ((1, 0), (2, 0)),
    ((0, 0), (0, 1)),
    ((2, 0), (2, 1)),
    ((0, 1), (1, 1)),
    ((1, 1), (2, 1)),
    ((2, 1), (2, 2)),
    ((0, 2), (1, 2)),
    ((1, 2), (2, 2)),
]

FIXED_TEXT = (
    "·-·-·-·\n"
    "|S|   |\n"
    "· ·-· ·\n"
    "|     |\n"
    "·-·-· ·\n"
    "|G    |\n"
    "·-·-·-·\n"
)


@pytest.fixture
def fixed_maze() -> Maze:
    """3x3、スタート(0,0)、ゴール(0,2) の固定レイアウト。"""
    graph = new_grid_graph(3, 3)
    for a, b in FIXED_EDGES:
        carve(graph, Coordinates(*a), Coordinates(*b))
    return Maze(graph, 3, 3, (0, 0), (0, 2))


def passage_graph(maze: Maze) -> nx.Graph:
    g = nx.Graph()
    g.add_nodes_from((x, y) for y in range(maze.height) for x in range(maze.width))
    g.add_edges_from(maze.passages())
    return g


def assert_perfect(maze: Maze) -> None:
    w, h = maze.size
    g = passage_graph(maze)
    assert g.number_of_nodes() == w * h
    assert g.number_of_edges() == w * h - 1
    assert nx.is_connected(g)
    for a, b in g.edges:
        assert abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1
    assert maze.are_coordinates_inside(maze.start)
    assert maze.are_coordinates_inside(maze.goal)
