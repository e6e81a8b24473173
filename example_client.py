"""Example client: search SauceNAO for an image URL or local file"""

import argparse
import asyncio
import sys

from saucenao import HandlerBuilder, SauceError, load_settings


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Find the source of an image via SauceNAO")
    parser.add_argument("image", help="Image URL (http/https) or path to a local file")
    parser.add_argument("--num-results", type=int, default=None)
    parser.add_argument("--min-similarity", type=float, default=None)
    parser.add_argument("--pretty", action="store_true", help="Indent the JSON output")
    return parser.parse_args(argv)


async def main(argv: list[str]) -> int:
    args = parse_args(argv)
    handler = HandlerBuilder.from_settings(load_settings()).build()

    try:
        if args.pretty:
            output = await handler.get_sauce_as_pretty_json(args.image, args.num_results, args.min_similarity)
        else:
            output = await handler.get_sauce_as_json(args.image, args.num_results, args.min_similarity)
    except SauceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(output)
    print(
        f"Short limit: {handler.get_current_short_limit()}/{handler.get_short_limit()}, "
        f"long limit: {handler.get_current_long_limit()}/{handler.get_long_limit()}",
        file=sys.stderr,
    )
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1:])))
