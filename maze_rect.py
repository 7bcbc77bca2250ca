from PIL import Image, ImageDraw

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader

from maze import E, S, Maze, RenderError


def render_maze_image(
    maze: Maze,
    cell_size: int = 28,
    margin: int = 24,
    wall: int = 4,
    aa_scale: int = 1,
    bg=(255, 255, 255),
    fg=(0, 0, 0),
    start_color=(220, 40, 40),
    goal_color=(40, 80, 220),
    markers: bool = True,
):
    """
    角欠け対策済みの四角迷路描画。
    START/GOAL はセル中央に丸を描く（markers=False なら描かない）。
    return: (img, start_center_px, goal_center_px)
      - 中心座標は img のピクセル座標（左上原点）。PDF側でアイコンを重ねるのに使う。
    """
    if cell_size <= 0 or wall <= 0 or margin < 0 or aa_scale <= 0:
        raise ValueError("cell/wall/aa must be > 0 and margin >= 0")

    w, h = maze.size

    cs = cell_size * aa_scale
    mg = margin * aa_scale
    wt = wall * aa_scale

    img_w = mg * 2 + w * cs
    img_h = mg * 2 + h * cs
    img = Image.new("RGB", (img_w, img_h), bg)
    draw = ImageDraw.Draw(img)

    def fill_rect(x0, y0, x1, y1, color=fg):
        draw.rectangle([x0, y0, x1, y1], fill=color)

    grid_x = [mg + i * cs for i in range(w + 1)]
    grid_y = [mg + j * cs for j in range(h + 1)]

    # 壁セグメント表
    # v[y][x] : x番目の縦グリッド線上で y→y+1 の壁があるか
    # hs[y][x] : y番目の横グリッド線上で x→x+1 の壁があるか
    v = [[False for _ in range(w + 1)] for __ in range(h)]
    hs = [[False for _ in range(w)] for __ in range(h + 1)]

    # 外周は全部壁
    for y in range(h):
        v[y][0] = True
        v[y][w] = True
    for x in range(w):
        hs[0][x] = True
        hs[h][x] = True

    # 内壁：通路が無いところが壁（E,Sだけで表現）
    for y in range(h):
        for x in range(w):
            field = maze.get_field((x, y))
            if not field.has_passage(E):
                v[y][x + 1] = True
            if not field.has_passage(S):
                hs[y + 1][x] = True

    half_l = wt // 2
    half_r = wt - half_l

    # 縦壁
    for y in range(h):
        y0 = grid_y[y]
        y1 = grid_y[y + 1]
        for xi in range(w + 1):
            if not v[y][xi]:
                continue
            x = grid_x[xi]
            fill_rect(x - half_l, y0, x + half_r - 1, y1 - 1, fg)

    # 横壁
    for yi in range(h + 1):
        y = grid_y[yi]
        for x in range(w):
            if not hs[yi][x]:
                continue
            x0 = grid_x[x]
            x1 = grid_x[x + 1]
            fill_rect(x0, y - half_l, x1 - 1, y + half_r - 1, fg)

    # 交点埋め（角欠け防止）
    for yi in range(h + 1):
        for xi in range(w + 1):
            touches = (
                (yi > 0 and v[yi - 1][xi])
                or (yi < h and v[yi][xi])
                or (xi > 0 and hs[yi][xi - 1])
                or (xi < w and hs[yi][xi])
            )
            if not touches:
                continue

            x = grid_x[xi]
            y = grid_y[yi]
            fill_rect(x - half_l, y - half_l, x + half_r - 1, y + half_r - 1, fg)

    def cell_center(cell):
        cx, cy = cell
        return ((grid_x[cx] + grid_x[cx + 1]) / 2, (grid_y[cy] + grid_y[cy + 1]) / 2)

    start_center = cell_center(maze.start)
    goal_center = cell_center(maze.goal)

    if markers:
        r = max(1, (cs - wt) // 4)
        for (px, py), color in ((start_center, start_color), (goal_center, goal_color)):
            draw.ellipse([px - r, py - r, px + r, py + r], fill=color)

    # AA縮小
    if aa_scale != 1:
        img = img.resize((img_w // aa_scale, img_h // aa_scale), resample=Image.Resampling.LANCZOS)
        start_center = (start_center[0] / aa_scale, start_center[1] / aa_scale)
        goal_center = (goal_center[0] / aa_scale, goal_center[1] / aa_scale)

    return img, start_center, goal_center


def save_png(img: Image.Image, path: str) -> None:
    try:
        img.save(path)
    except (OSError, ValueError) as e:
        raise RenderError(f"could not write image to {path}: {e}") from e


def fit_on_a4(img_size: tuple[int, int], margin_mm: float = 15.0) -> tuple[float, float, float]:
    """
    画像を A4 の余白内に縦横比維持で収めるときの (倍率, 左下x, 左下y)。単位は pt。
    """
    page_w, page_h = A4
    margin = margin_mm * mm
    img_w_px, img_h_px = img_size

    scale = min((page_w - margin * 2) / img_w_px, (page_h - margin * 2) / img_h_px)
    return scale, (page_w - img_w_px * scale) / 2, (page_h - img_h_px * scale) / 2


def save_image_as_a4_pdf(
    img: Image.Image,
    out_pdf_path: str,
    margin_mm: float = 15.0,
    start_icon_path: str | None = None,
    goal_icon_path: str | None = None,
    start_center_px: tuple[float, float] | None = None,  # (x,y) image px, origin top-left
    goal_center_px: tuple[float, float] | None = None,
    icon_mm: float = 8.0,
):
    """
    迷路画像を A4 1ページのPDFに中央配置して保存。
    START/GOALアイコンは迷路の縮尺と関係なく icon_mm の大きさで重ねる。
    アイコンの読み込みやファイル書き込みの失敗は RenderError。
    """
    scale, left, bottom = fit_on_a4(img.size, margin_mm)
    img_h_px = img.size[1]
    icon_pt = icon_mm * mm

    try:
        c = canvas.Canvas(out_pdf_path, pagesize=A4)
        c.drawImage(
            ImageReader(img),
            left, bottom,
            width=img.size[0] * scale,
            height=img_h_px * scale,
            preserveAspectRatio=True,
            mask="auto",
        )

        for icon_path, center_px in ((start_icon_path, start_center_px), (goal_icon_path, goal_center_px)):
            if not icon_path or center_px is None:
                continue
            # 画像座標（左上原点）-> PDF座標（左下原点）
            px, py = center_px
            cx = left + px * scale
            cy = bottom + (img_h_px - py) * scale
            c.drawImage(
                ImageReader(icon_path),
                cx - icon_pt / 2,
                cy - icon_pt / 2,
                width=icon_pt,
                height=icon_pt,
                mask="auto",
            )

        c.showPage()
        c.save()
    except OSError as e:
        raise RenderError(f"could not render PDF {out_pdf_path}: {e}") from e
