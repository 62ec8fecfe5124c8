"""Command-line client for manual testing of the dialogue WebSocket."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import pathlib
import time

import websockets

DEFAULT_URL = "ws://127.0.0.1:8000/ws"


async def run_client(url: str, context: str, output: pathlib.Path | None, timeout: float) -> str:
    """Connect to the service, submit ``context`` and return the dialogue."""

    logger = logging.getLogger("dialogue_client")
    start = time.perf_counter()

    async with websockets.connect(url, ping_interval=None) as websocket:
        await websocket.send(json.dumps({"type": "generate", "text": context}))
        logger.info("Sent context (%d chars)", len(context))

        while True:
            message = await asyncio.wait_for(websocket.recv(), timeout=timeout)
            frame = json.loads(message)

            if frame.get("type") != "state":
                logger.error("Received error frame: %s", message)
                raise SystemExit(1)
            if frame["status"] == "pending":
                continue
            if frame["status"] == "failure":
                logger.error("Generation failed: %s", frame["error"])
                raise SystemExit(1)
            if frame["status"] == "success":
                break

    dialogue = frame["dialogue"] or ""
    elapsed = time.perf_counter() - start
    logger.info("Received dialogue (%d chars) in %.2fs", len(dialogue), elapsed)

    if output:
        output.write_text(dialogue, encoding="utf-8")
        logger.info("Dialogue written to %s", output)

    return dialogue


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Test client for the dialogue generator service.")
    parser.add_argument("--url", default=DEFAULT_URL, help="WebSocket URL (default: %(default)s)")
    parser.add_argument("--context", required=True, help="Scene, characters and tone.")
    parser.add_argument("--save", type=pathlib.Path, help="Optional output file (markdown).")
    parser.add_argument(
        "--timeout", type=float, default=60.0, help="Seconds to wait for each server frame."
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    if not args.context.strip():
        logging.getLogger("dialogue_client").warning("Context is blank; nothing to generate")
        return
    try:
        dialogue = asyncio.run(run_client(args.url, args.context, args.save, args.timeout))
    except KeyboardInterrupt:  # pragma: no cover - manual usage only
        return
    print(dialogue)


if __name__ == "__main__":  # pragma: no cover
    main()
