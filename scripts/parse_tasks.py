"""Parse a task description or a meeting transcript file from the command line."""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from nltasks.ai.fallback import extract_tasks_with_fallback, parse_task_with_fallback
from nltasks.config import settings


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", help="Single task description, e.g. 'Call client tomorrow 9am P1'")
    source.add_argument("--transcript", type=Path, help="Path to a plain-text meeting transcript")
    parser.add_argument("--now", type=datetime.fromisoformat, default=None,
                        help="Reference moment (ISO-8601); defaults to the current time")
    parser.add_argument("--ai", action="store_true", help="Try the Claude backend first")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level)
    use_ai = True if args.ai else None

    if args.text is not None:
        task, backend = parse_task_with_fallback(args.text, args.now, use_ai)
        result = {"backend": backend, "tasks": [task.to_dict()]}
    else:
        content = args.transcript.read_text(encoding="utf-8")
        tasks, backend = extract_tasks_with_fallback(content, args.now, use_ai)
        result = {"backend": backend, "tasks": [t.to_dict() for t in tasks]}

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
