import json
import sys
from dataclasses import asdict
from .core import classify, resolve


def main():
    if len(sys.argv) < 2:
        print("Usage: python -m vrufleet.resolver.cli <asset id> [<asset id> ...]")
        sys.exit(2)
    print(json.dumps([
        {
            "id": asset_id,
            "asset_class": classify(asset_id).value,
            "config": asdict(resolve(asset_id)),
        }
        for asset_id in sys.argv[1:]
    ], indent=2))


if __name__ == "__main__":
    main()
