from maze import Coordinates, Generator, Maze, carve, grid_neighbors, new_grid_graph


class PrimsGenerator(Generator):
    """
    ランダム化プリム法。
    候補は (木の中のセル, 木の外の隣セル) の組。ランダムに一つ取り出して掘る。
    同じセルが複数の組で候補になることがあるので、取り出した時点で訪問済みなら捨てる。

    スタート: (0, 0)、ゴール: (width-1, height-1)
    """

    def _generate(self, width: int, height: int) -> Maze:
        graph = new_grid_graph(width, height)
        start = Coordinates(0, 0)
        goal = Coordinates(width - 1, height - 1)

        visited = {start}
        frontier = [(start, n) for _, n in grid_neighbors(start, width, height)]

        while frontier:
            # ランダムな位置と末尾を入れ替えて pop（O(1)）
            i = self.rnd.randrange(len(frontier))
            frontier[i], frontier[-1] = frontier[-1], frontier[i]
            cell, target = frontier.pop()

            if target in visited:
                continue

            carve(graph, cell, target)
            visited.add(target)
            for _, n in grid_neighbors(target, width, height):
                if n not in visited:
                    frontier.append((target, n))

        return Maze(graph, width, height, start, goal)
