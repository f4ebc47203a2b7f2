#!/usr/bin/env python3
"""Schematic core CLI - derive, validate and summarize saved pages."""

import argparse
import json
import logging
import os
import sys

from pydantic import ValidationError

from .analysis import find_wire_networks, summarize_page
from .derived import compute
from .models import Page
from .validation import validate_page, validation_summary

logger = logging.getLogger(__name__)


def _json_out(data, code=0):
    print(json.dumps(data))
    sys.exit(code)


def _error_out(message):
    _json_out({"status": "error", "error": message}, code=1)


def _load_page(path):
    """Read a page from a file (or stdin for None / "-")."""
    try:
        if path and path != "-":
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        else:
            data = json.load(sys.stdin)
    except FileNotFoundError:
        _error_out(f"File not found: {path}")
    except json.JSONDecodeError as e:
        _error_out(f"Invalid JSON: {e}")

    # A bare list of objects is accepted as a page
    if isinstance(data, list):
        data = {"objects": data}
    if not isinstance(data, dict):
        _error_out("Expected a page object or a list of objects")

    try:
        page = Page.from_json_dict(data)
    except ValidationError as e:
        _error_out(f"Invalid page: {e.error_count()} error(s): {e.errors()[0]['msg']}")

    logger.debug("Loaded page %r with %d object(s)", page.name, len(page.objects))
    return page


# ── Commands ─────────────────────────────────────────────────────────────────

def cmd_derive(args):
    page = _load_page(args.file)
    state = compute(page.objects)
    _json_out({
        "success": True,
        **state.to_dict()
    })


def cmd_validate(args):
    page = _load_page(args.file)
    issues = validate_page(page.objects)
    summary = validation_summary(issues)

    _json_out({
        "success": True,
        "issues": [issue.to_dict() for issue in issues],
        "summary": summary
    })


def cmd_summarize(args):
    page = _load_page(args.file)
    summary = summarize_page(page.objects, name=page.name)

    _json_out({
        "success": True,
        "summary": summary.to_dict(),
        "networks": [n.to_dict() for n in find_wire_networks(page.objects)]
    })


def cmd_serve(args):
    import uvicorn

    uvicorn.run("schematic_backend.main:app", host=args.host, port=args.port,
                log_level=args.log_level.lower())


# ── Main ─────────────────────────────────────────────────────────────────────

def main(argv=None):
    parser = argparse.ArgumentParser(description="Schematic core CLI")
    parser.add_argument("--log-level", default=os.environ.get("SCHEMATIC_CORE_LOG_LEVEL", "WARNING"),
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command", required=True)

    for name in ("derive", "validate", "summarize"):
        p = sub.add_parser(name)
        p.add_argument("file", nargs="?", default=None, help="Page JSON file (default: stdin)")

    p = sub.add_parser("serve")
    p.add_argument("--host", default=os.environ.get("SCHEMATIC_CORE_HOST", "127.0.0.1"))
    p.add_argument("--port", type=int, default=int(os.environ.get("SCHEMATIC_CORE_PORT", "8765")))

    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, stream=sys.stderr,
                        format="%(levelname)s %(name)s: %(message)s")

    cmd_map = {
        "derive": cmd_derive,
        "validate": cmd_validate,
        "summarize": cmd_summarize,
        "serve": cmd_serve,
    }
    cmd_map[args.command](args)


if __name__ == "__main__":
    main()
