import argparse
from datetime import datetime

from maze import Generator, MazeError, SvgOptions, save_svg, save_text
from maze_backtracking import RbGenerator
from maze_ellers import EllersGenerator
from maze_growing_tree import GrowingTreeConfig, GrowingTreeGenerator, SelectionMethod
from maze_prims import PrimsGenerator
from maze_rect import render_maze_image, save_image_as_a4_pdf, save_png


ALGORITHMS = ("backtracking", "prims", "ellers", "growing-tree")


def make_generator(args) -> Generator:
    if args.algorithm == "backtracking":
        return RbGenerator(args.seed)
    if args.algorithm == "prims":
        return PrimsGenerator(args.seed)
    if args.algorithm == "ellers":
        return EllersGenerator(
            args.seed,
            merge_probability=args.merge_prob,
            extra_vertical_probability=args.extra_vertical_prob,
        )
    config = GrowingTreeConfig(SelectionMethod(args.method), newest_ratio=args.newest_ratio)
    return GrowingTreeGenerator(args.seed, config)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="rectangular perfect maze generator")

    ap.add_argument("--algorithm", choices=ALGORITHMS, default="backtracking")
    ap.add_argument("--width", type=int, default=30)
    ap.add_argument("--height", type=int, default=30)
    ap.add_argument("--seed", type=int, default=None)

    # アルゴリズム別パラメータ
    ap.add_argument("--method", choices=[m.value for m in SelectionMethod], default="newest",
                    help="growing-tree: cell selection policy")
    ap.add_argument("--newest-ratio", type=float, default=0.5, help="growing-tree mixed: P(newest)")
    ap.add_argument("--merge-prob", type=float, default=0.5, help="ellers: horizontal merge probability")
    ap.add_argument("--extra-vertical-prob", type=float, default=0.3, help="ellers: extra vertical passage probability")

    # 出力
    ap.add_argument("--text", action="store_true", help="print the maze as text")
    ap.add_argument("--text-out", type=str, default=None, help="write the text maze to a file")
    ap.add_argument("--svg", type=str, default=None, help="output SVG path")
    ap.add_argument("--out", type=str, default=None, help="output PNG path")
    ap.add_argument("--pdf", type=str, default=None, help="output A4 PDF path ('auto' for a timestamped name)")

    # PNG/PDF パラメータ
    ap.add_argument("--cell", type=int, default=28)
    ap.add_argument("--margin", type=int, default=24)
    ap.add_argument("--wall", type=int, default=4)
    ap.add_argument("--aa", type=int, default=1, help="anti-alias scale (2-4 recommended)")
    ap.add_argument("--icon-mm", type=float, default=8.0, help="START/GOAL icon size on A4 in mm")
    ap.add_argument("--start-icon", type=str, default=None)
    ap.add_argument("--goal-icon", type=str, default=None)
    ap.add_argument("--pdf-margin-mm", type=float, default=15.0)

    # SVG パラメータ
    ap.add_argument("--svg-padding", type=int, default=10)
    ap.add_argument("--svg-height", type=int, default=None)

    return ap


def main(argv=None):
    ap = build_parser()
    args = ap.parse_args(argv)

    # 出力指定が無ければテキストで表示
    if not (args.text or args.text_out or args.svg or args.out or args.pdf):
        args.text = True

    try:
        m = make_generator(args).generate(args.width, args.height)

        if args.text:
            print(m, end="")
        if args.text_out:
            save_text(m, args.text_out)
            print(f"Saved text: {args.text_out}")

        if args.svg:
            save_svg(m, args.svg, SvgOptions(padding=args.svg_padding, height=args.svg_height))
            print(f"Saved SVG: {args.svg}")

        if args.out or args.pdf:
            img, start_center, goal_center = render_maze_image(
                m,
                cell_size=args.cell,
                margin=args.margin,
                wall=args.wall,
                aa_scale=args.aa,
            )
            if args.out:
                save_png(img, args.out)
                print(f"Saved PNG: {args.out}")

            if args.pdf:
                # 'auto' なら日時で自動生成
                pdf_path = args.pdf
                if pdf_path == "auto":
                    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
                    pdf_path = f"maze_{args.algorithm}_{ts}.pdf"

                save_image_as_a4_pdf(
                    img,
                    pdf_path,
                    margin_mm=args.pdf_margin_mm,
                    start_icon_path=args.start_icon,
                    goal_icon_path=args.goal_icon,
                    start_center_px=start_center,
                    goal_center_px=goal_center,
                    icon_mm=args.icon_mm,
                )
                print(f"Saved A4 PDF: {pdf_path}")
    except (MazeError, ValueError) as e:
        ap.error(str(e))


if __name__ == "__main__":
    main()
