from dataclasses import dataclass
from enum import Enum

from maze import Coordinates, Generator, Maze, carve, grid_neighbors, new_grid_graph


class SelectionMethod(Enum):
    NEWEST = "newest"  # = 再帰的バックトラック
    RANDOM = "random"  # プリム法っぽくなる
    OLDEST = "oldest"  # 長い直線の通路
    MIXED = "mixed"    # newest_ratio の確率で newest、それ以外は random


@dataclass(frozen=True)
class GrowingTreeConfig:
    method: SelectionMethod = SelectionMethod.NEWEST
    newest_ratio: float = 0.5  # MIXED のときだけ使う

    def __post_init__(self):
        if not isinstance(self.method, SelectionMethod):
            raise ValueError(f"unknown selection method: {self.method!r}")
        if not (0.0 <= self.newest_ratio <= 1.0):
            raise ValueError("newest_ratio must be in [0, 1]")


class GrowingTreeGenerator(Generator):
    """
    Growing Tree。アクティブリストからどのセルを選ぶかで性格が変わる。
    掘り始めはランダムなセル。

    スタート: (0, 0)、ゴール: (width-1, height-1)
    """

    def __init__(self, seed: int | bytes | str | None = None, config: GrowingTreeConfig | None = None):
        super().__init__(seed)
        self.config = config or GrowingTreeConfig()

    def _choose_index(self, n: int) -> int:
        method = self.config.method
        if method is SelectionMethod.NEWEST:
            return n - 1
        if method is SelectionMethod.OLDEST:
            return 0
        if method is SelectionMethod.RANDOM:
            return self.rnd.randrange(n)
        if self.rnd.random() < self.config.newest_ratio:
            return n - 1
        return self.rnd.randrange(n)

    def _generate(self, width: int, height: int) -> Maze:
        graph = new_grid_graph(width, height)

        first = Coordinates(self.rnd.randrange(width), self.rnd.randrange(height))
        visited = {first}
        active = [first]

        while active:
            i = self._choose_index(len(active))
            cell = active[i]
            neighbors = [n for _, n in grid_neighbors(cell, width, height) if n not in visited]

            if not neighbors:
                active.pop(i)
                continue

            nxt = self.rnd.choice(neighbors)
            carve(graph, cell, nxt)
            visited.add(nxt)
            active.append(nxt)

        return Maze(graph, width, height, Coordinates(0, 0), Coordinates(width - 1, height - 1))
