from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path


def _ensure_repo_root_on_path() -> None:
    """Ensure the repository root (parent of this package) is on ``sys.path``.

    Lets ``python dual_nback/__main__.py`` work as well as ``python -m dual_nback``.
    """
    pkg_dir = Path(__file__).resolve().parent
    repo_root_str = str(pkg_dir.parent)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


if __package__:
    from .preview import format_block, simulate_day
    from .random_source import SeededRandomSource
    from .sequence import SequenceGenerator
else:
    _ensure_repo_root_on_path()
    from dual_nback.preview import format_block, simulate_day
    from dual_nback.random_source import SeededRandomSource
    from dual_nback.sequence import SequenceGenerator


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dual_nback", description="Dual n-back engine developer tools")
    parser.add_argument("-v", "--verbose", action="store_true", help="log block transitions")
    sub = parser.add_subparsers(dest="command", required=True)

    preview = sub.add_parser("preview", help="print one generated block")
    preview.add_argument("--interval", type=int, default=2)
    preview.add_argument("--seed", type=int, default=0)

    simulate = sub.add_parser("simulate", help="play a full day with a scripted trainee")
    simulate.add_argument("--interval", type=int, default=1)
    simulate.add_argument("--seed", type=int, default=0)
    simulate.add_argument("--error-rate", type=float, default=0.1)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the developer CLI."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "preview":
        block = SequenceGenerator(SeededRandomSource(args.seed)).generate(args.interval)
        print(format_block(block))
        return 0

    result = simulate_day(seed=args.seed, initial_interval=args.interval, error_rate=args.error_rate)
    for r in result.records:
        print(
            f"block {r.block_index + 1:2d}  n={r.interval}  "
            f"visual={r.visual_mistakes} audio={r.audio_mistakes}  -> n={r.next_interval}"
        )
    s = result.summary
    print(
        f"blocks={s.blocks} peak n={s.peak_interval} mean n={s.mean_interval:.2f} "
        f"accuracy={s.accuracy * 100.0:.1f}%"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
