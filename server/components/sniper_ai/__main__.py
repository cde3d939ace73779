"""
SniperAI command line.

Usage examples:

  python -m components.sniper_ai analyze "URGENT: verify your bank password now"
  python -m components.sniper_ai train "thanks, see you tomorrow" --label safety=1 --label sentiment=2
  python -m components.sniper_ai train "what time is it?" --intent question
  python -m components.sniper_ai status
  python -m components.sniper_ai reset --db /tmp/sniper_ai.db

Settings come from SNIPER_AI_* environment variables, loaded from a .env file
when one is present.
"""

import argparse
import asyncio
import json
import os
import sys
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from components.sniper_ai import create_sniper_ai
from components.sniper_ai.config import create_config
from components.sniper_ai.errors import ConfigurationError


def parse_labels(pairs: List[str]) -> Dict[str, Any]:
    """``task=value`` pairs; values are JSON so one-hot lists work too"""
    labels: Dict[str, Any] = {}
    for pair in pairs:
        task, sep, raw = pair.partition("=")
        if not sep or not task:
            raise ValueError(f"label must look like task=value, got {pair!r}")
        try:
            labels[task.strip()] = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"label value for {task} is not a number or list: {raw!r}") from e
    return labels


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="sniper_ai", description="On-device text classifier ensemble")
    ap.add_argument("--db", default=None, help="Artifact store path (overrides SNIPER_AI_DB_PATH)")
    ap.add_argument("--env", default=".env", help="Environment file to load")
    sub = ap.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Run all task models on a text")
    analyze.add_argument("text")
    analyze.add_argument("--chat", action="store_true", help="Intent-only chat analysis")

    train = sub.add_parser("train", help="Train one labeled example")
    train.add_argument("text")
    train.add_argument("--label", action="append", default=[], metavar="TASK=VALUE")
    train.add_argument("--intent", default=None, help="Chat intent name or index")

    sub.add_parser("status", help="Show per-task model state and training counts")
    sub.add_parser("reset", help="Wipe all models and training logs")
    return ap


async def run(args: argparse.Namespace) -> Dict[str, Any]:
    overrides = {"db_path": args.db} if args.db else {}
    client = create_sniper_ai(create_config(**overrides))
    try:
        if args.command == "analyze":
            if args.chat:
                return (await client.analyze_chat(args.text)).to_dict()
            return (await client.analyze(args.text)).to_dict()

        if args.command == "train":
            if args.intent is not None:
                intent = int(args.intent) if args.intent.isdigit() else args.intent
                return (await client.train_chat(args.text, intent)).to_dict()
            return (await client.train(args.text, parse_labels(args.label))).to_dict()

        if args.command == "status":
            await client.initialize()
            return {"success": True, "tasks": await client.status()}

        return (await client.reset()).to_dict()
    finally:
        client.terminate()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    env_path = os.path.abspath(args.env)
    if os.path.exists(env_path):
        load_dotenv(env_path, override=False)

    if args.command == "train" and not args.label and args.intent is None:
        print(json.dumps({"success": False, "error": "train needs --label or --intent"}))
        return 2

    try:
        result = asyncio.run(run(args))
    except (ConfigurationError, ValueError) as e:
        print(json.dumps({"success": False, "error": str(e)}))
        return 2

    print(json.dumps(result, indent=2, default=str))
    return 0 if result.get("success", True) else 1


if __name__ == "__main__":
    sys.exit(main())
