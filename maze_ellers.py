from maze import Coordinates, Generator, Maze, carve, new_grid_graph


class EllersGenerator(Generator):
    """
    Eller のアルゴリズム。1行ずつ処理し、前の行には戻らない。
    各セルは「集合ID」を持ち、同じIDのセルはすでに通路でつながっている。

    merge_probability: 隣り合う別集合を横につなぐ確率（デフォルトはコイントス）
    extra_vertical_probability: 各集合で必須の1本以外に下へ掘る確率

    スタート: 最上段のランダムな列、ゴール: 最下段のランダムな列
    """

    def __init__(
        self,
        seed: int | bytes | str | None = None,
        merge_probability: float = 0.5,
        extra_vertical_probability: float = 0.3,
    ):
        super().__init__(seed)
        if not (0.0 <= merge_probability <= 1.0):
            raise ValueError("merge_probability must be in [0, 1]")
        if not (0.0 <= extra_vertical_probability <= 1.0):
            raise ValueError("extra_vertical_probability must be in [0, 1]")
        self.merge_probability = merge_probability
        self.extra_vertical_probability = extra_vertical_probability

    def _generate(self, width: int, height: int) -> Maze:
        graph = new_grid_graph(width, height)
        sets: list[int | None] = [None] * width
        next_id = 0

        for y in range(height):
            last = y == height - 1

            # 上から通路が来ていないセルに新しい集合ID
            for x in range(width):
                if sets[x] is None:
                    sets[x] = next_id
                    next_id += 1

            members = _group_by_set(sets)

            # 横：別集合ならランダムにつなぐ（最終行は必ずつなぐ）
            for x in range(width - 1):
                a, b = sets[x], sets[x + 1]
                if a == b:
                    continue
                if last or self.rnd.random() < self.merge_probability:
                    carve(graph, Coordinates(x, y), Coordinates(x + 1, y))
                    # 小さい方の集合だけ付け替える（行全体を書き換えない）
                    keep, gone = (a, b) if len(members[a]) >= len(members[b]) else (b, a)
                    for i in members[gone]:
                        sets[i] = keep
                    members[keep].extend(members.pop(gone))

            if last:
                break

            # 縦：集合ごとに最低1本は下へ（集合が途切れないように）
            # 集合は行の左から現れた順、メンバーは列の昇順
            below: list[int | None] = [None] * width
            for s, xs in _group_by_set(sets).items():
                forced = self.rnd.choice(xs)
                for x in xs:
                    if x == forced or self.rnd.random() < self.extra_vertical_probability:
                        carve(graph, Coordinates(x, y), Coordinates(x, y + 1))
                        below[x] = s
            sets = below

        start = Coordinates(self.rnd.randrange(width), 0)
        goal = Coordinates(self.rnd.randrange(width), height - 1)
        return Maze(graph, width, height, start, goal)


def _group_by_set(sets) -> dict[int, list[int]]:
    members: dict[int, list[int]] = {}
    for x, s in enumerate(sets):
        members.setdefault(s, []).append(x)
    return members
