from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

from baseline_timeline.core.config import get_settings
from baseline_timeline.core.logging import configure_logging, get_logger, run_scope
from baseline_timeline.models.timeline import TimelineData
from baseline_timeline.services.feed_fetch_service import TimelineError
from baseline_timeline.services.timeline_service import TimelineService

configure_logging(service_name="worker", level=get_settings().LOG_LEVEL)
logger = get_logger().bind(worker="timeline_snapshot_bot")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="TimelineSnapshotBot: fetch both availability feeds and write the timeline as JSON.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="File to write the JSON snapshot to. Prints to stdout when omitted.",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation (default: 2).",
    )
    return parser.parse_args(argv)


def render_snapshot(data: TimelineData, *, indent: Optional[int] = 2) -> str:
    payload = data.model_dump(mode="json", by_alias=True)
    return json.dumps(payload, ensure_ascii=False, indent=indent)


async def run_snapshot(
    output: Optional[Path],
    *,
    indent: Optional[int] = 2,
    service: Optional[TimelineService] = None,
) -> int:
    service = service or TimelineService()
    try:
        data = await service.get_timeline_data()
    except TimelineError as exc:
        logger.error("timeline_snapshot_bot_failed", url=exc.url, error=str(exc))
        return 1

    text = render_snapshot(data, indent=indent)
    if output is None:
        sys.stdout.write(text + "\n")
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text + "\n", encoding="utf-8")

    logger.info(
        "timeline_snapshot_bot_finished",
        output=str(output) if output else "stdout",
        widely_available=len(data.widely_available),
        newly_available=len(data.newly_available),
        last_updated=data.last_updated or None,
    )
    return 0


async def main_async(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    with run_scope():
        return await run_snapshot(args.output, indent=args.indent)


def main() -> None:
    exit_code = asyncio.run(main_async())
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
