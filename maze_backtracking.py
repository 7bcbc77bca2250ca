from maze import Coordinates, Generator, Maze, carve, grid_neighbors, new_grid_graph


class RbGenerator(Generator):
    """
    再帰的バックトラック（深さ優先）。
    再帰の代わりに明示的なスタックを使うので大きな迷路でも深さ制限に当たらない。

    スタート: (0, 0)
    ゴール: スタックが最も深くなった最初のセル（スタートから一番長い通路の先）
    """

    def _generate(self, width: int, height: int) -> Maze:
        graph = new_grid_graph(width, height)
        start = Coordinates(0, 0)

        visited = {start}
        stack = [start]
        goal, goal_depth = start, 0

        while stack:
            cell = stack[-1]
            neighbors = [n for _, n in grid_neighbors(cell, width, height) if n not in visited]

            if not neighbors:
                stack.pop()
                continue

            nxt = self.rnd.choice(neighbors)
            carve(graph, cell, nxt)
            visited.add(nxt)
            stack.append(nxt)

            if len(stack) - 1 > goal_depth:
                goal, goal_depth = nxt, len(stack) - 1

        return Maze(graph, width, height, start, goal)
