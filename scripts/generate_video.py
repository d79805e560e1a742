#!/usr/bin/env python
"""Script to list video models or generate a video through a running API."""
from __future__ import annotations

import argparse
import asyncio
import sys

from fluxvid.client import VideoApiClient, VideoApiError
from fluxvid.models import GenerationRequest


async def _run(args: argparse.Namespace) -> int:
    client = VideoApiClient(args.base_url)
    try:
        if args.list_models:
            for model in await client.fetch_video_models():
                print(f"{model.id}\t{model.downloads} downloads\t{model.likes} likes\t{model.last_modified}")
            return 0

        request = GenerationRequest(
            prompt=args.prompt,
            model_id=args.model_id,
            duration=args.duration,
            fps=args.fps,
            resolution=args.resolution,
        )
        result = await client.generate_video(request)
        print(result.model_dump_json(by_alias=True, indent=2))
        return 0
    except VideoApiError as exc:
        print(f"error ({exc.status}): {exc.message}", file=sys.stderr)
        return 1
    finally:
        await client.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Flux video generation client")
    parser.add_argument("--base_url", default="http://localhost:8000")
    parser.add_argument("--list_models", action="store_true")
    parser.add_argument("--prompt")
    parser.add_argument("--model_id")
    parser.add_argument("--duration", type=int, default=60)
    parser.add_argument("--fps", type=int, default=24)
    parser.add_argument("--resolution", choices=["480p", "720p", "1080p"], default="720p")
    args = parser.parse_args()

    if not args.list_models and not (args.prompt and args.model_id):
        parser.error("--prompt and --model_id are required unless --list_models is given")

    sys.exit(asyncio.run(_run(args)))


if __name__ == "__main__":
    main()
