"""Validate the question bank and report its shape.

Usage:
  python tools/check_questions.py [--path PATH] [--json]

Exit status is non-zero when any question fails validation or an id repeats.
"""

from __future__ import annotations

import argparse
import json
import logging

from trivia_server.game.config import ServerConfig
from trivia_server.game.questions import QuestionBank


def check(path: str) -> dict:
    bank = QuestionBank.load(path)
    return {
        "path": path,
        "valid": len(bank),
        "rejected": [r.get("id") if isinstance(r, dict) else None for r in bank.rejected],
        "duplicateIds": bank.duplicate_ids(),
        **bank.distribution(),
    }


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--path", default=ServerConfig.from_env().questions_path)
    ap.add_argument("--json", action="store_true", help="print the report as JSON")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(message)s")
    report = check(args.path)

    if args.json:
        print(json.dumps(report, indent=2))
    else:
        print(f"{report['path']}: {report['valid']} valid, {len(report['rejected'])} rejected")
        for key in ("category", "difficulty"):
            print(f"  by {key}:")
            for name, n in report[key].items():
                print(f"    {name}: {n}")
        if report["rejected"]:
            print(f"  rejected ids: {', '.join(str(i) for i in report['rejected'])}")
        if report["duplicateIds"]:
            print(f"  duplicate ids: {', '.join(report['duplicateIds'])}")

    return 1 if report["rejected"] or report["duplicateIds"] else 0


if __name__ == "__main__":
    raise SystemExit(main())
