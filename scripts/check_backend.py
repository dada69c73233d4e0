#!/usr/bin/env python3
"""Run the backend diagnostic checks from a terminal."""
import argparse
import os
import sys

from backend.app.diagnostics import DiagnosticController, TokenStore

API_BASE = os.getenv("API_BASE", "http://localhost:5000")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Check that the Aiser backend is reachable.")
    parser.add_argument("--base-url", default=API_BASE)
    parser.add_argument("--market", action="store_true", help="also check the market summary endpoint")
    parser.add_argument("--token-file", default=None, help="file holding the auth token")
    args = parser.parse_args(argv)

    controller = DiagnosticController(args.base_url, token_store=TokenStore(args.token_file))
    panels = controller.on_load()
    if args.market:
        panels["market"] = controller.check_market()

    for name, panel in panels.items():
        print(f"[{name}] {panel.text}")

    return 1 if any(p.kind == "error" for p in panels.values()) else 0


if __name__ == "__main__":
    sys.exit(main())
