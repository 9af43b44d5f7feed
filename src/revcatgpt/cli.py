"""
Command line entry point: ``revcatgpt [--config FILE]``.
"""

from __future__ import annotations

import argparse
import os
from typing import List, Optional


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        prog="revcatgpt",
        description="Serve GPT query context built from the RevCat catalogue.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="location of toml configuration file",
    )
    args = parser.parse_args(argv)

    # Settings are read on import, so the file must be known before that.
    if args.config:
        os.environ["REVCATGPT_CONFIG_FILE"] = args.config

    from .main import serve

    serve()


if __name__ == "__main__":
    main()
