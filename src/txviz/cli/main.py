from __future__ import annotations

import argparse
import datetime as dt
import json
import sys
import time
from typing import List, Optional

from txviz.config import settings
from txviz.core.errors import IllustrationError
from txviz.core.models import IllustrationData, TransactionIllustrationConfig
from txviz.services.resolver_service import TransactionResolver
from txviz.illustration.illustration import create_transaction_illustration
from txviz.illustration.labels import short_cell_info, short_transaction_info
from txviz.io.schemas import illustration_data_from_dict
from txviz.io.output_writer import (
    write_data_json,
    write_scene_html,
    write_scene_json,
    write_scene_svg,
    write_summary_md,
)
from txviz.utils.logging import setup_logging

from txviz.adapters.chain.ckb_rpc_adapter import CkbRpcChainAdapter, default_rpc_url


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="txviz", description="Illustrate a CKB transaction as mirrored input/output trees")
    p.add_argument("--tx-hash", required=False, help="Transaction hash to illustrate")
    p.add_argument("--mainnet", action="store_true", help="Use the public mainnet node (default: testnet)")
    p.add_argument("--url", help="CKB JSON-RPC endpoint (overrides --mainnet and CKB_RPC_URL)")
    p.add_argument("--input-json", help="Render resolved data from a JSON file instead of querying a node")
    p.add_argument("--out", default="out", help="Output folder")
    p.add_argument("--html", action="store_true", help="Also write a standalone HTML page")
    p.add_argument("--json", action="store_true", help="Also write scene.json and transaction.json")
    p.add_argument("--full-labels", action="store_true", help="Label with full hashes and plain capacities instead of shortened ones")
    p.add_argument("--link-template", help="HTML only: URL with {tx_hash} opened when an input cell is clicked")
    p.add_argument("--skip-unresolved", action="store_true", help="Drop inputs whose previous transaction cannot be fetched instead of failing")
    p.add_argument("--max-workers", type=int, default=settings.RESOLVER_MAX_WORKERS, help="Parallel input lookups")
    p.add_argument("--log-level", default=settings.LOG_LEVEL, help="Logging level (DEBUG, INFO, WARNING...)")
    return p


def _make_progress_reporter():
    start_time = time.time()
    is_tty = sys.stdout.isatty()
    total = {"inputs": 0}

    def _short(h: str) -> str:
        if not h or len(h) <= 14:
            return h or ""
        return f"{h[:8]}...{h[-4:]}"

    def _ts() -> str:
        return dt.datetime.now().strftime("%H:%M:%S")

    def _print_line(message: str) -> None:
        if is_tty:
            sys.stdout.write("\r" + message.ljust(88))
            sys.stdout.flush()
        else:
            print(message)

    def _clear_line() -> None:
        if is_tty:
            sys.stdout.write("\r" + (" " * 88) + "\r")
            sys.stdout.flush()

    def progress(event: str, data: dict) -> None:
        if event == "fetch":
            print(f"[{_ts()}] Fetching {_short(data['tx_hash'])}")
            return
        if event == "start":
            total["inputs"] = data["inputs"]
            print(f"[{_ts()}] {data['inputs']} input(s) to resolve • {data['outputs']} output(s)")
            return
        if event == "input_done":
            _print_line(f"Resolved {data['resolved']}/{total['inputs']} input(s)...")
            return
        if event == "input_failed":
            _clear_line()
            print(f"[{_ts()}] Input #{data['index']} failed: {data['error']}", file=sys.stderr)
            return
        if event == "done":
            _clear_line()
            elapsed = time.time() - start_time
            print(
                f"[{_ts()}] Done in {elapsed:.1f}s • "
                f"{data['inputs']} input(s) • {data['outputs']} output(s)"
            )
            return
        if event == "error":
            _clear_line()
            print(f"[{_ts()}] Error: {data.get('message', 'Unknown error')}", file=sys.stderr)

    return progress


def _load_data(path: str) -> IllustrationData:
    with open(path, encoding="utf-8") as f:
        return illustration_data_from_dict(json.load(f))


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.log_level, settings.LOG_FORMAT)
    progress = _make_progress_reporter()

    if not args.tx_hash and not args.input_json:
        print("Missing --tx-hash (or --input-json)", file=sys.stderr)
        return 2

    # Data
    try:
        if args.input_json:
            data = _load_data(args.input_json)
            print(f"Loaded: {args.input_json}")
        else:
            url = args.url or default_rpc_url(is_mainnet=args.mainnet)
            print(f"Node: {url}")
            resolver = TransactionResolver(
                chain=CkbRpcChainAdapter(url=url),
                max_workers=args.max_workers,
                skip_unresolved=args.skip_unresolved,
            )
            data = resolver.resolve(args.tx_hash, on_progress=progress)
    except (IllustrationError, OSError, ValueError, KeyError) as exc:
        progress("error", {"message": f"{exc.__class__.__name__}: {exc}"})
        return 1

    # Illustration
    if args.full_labels:
        config = TransactionIllustrationConfig(data=data)
    else:
        config = TransactionIllustrationConfig(
            data=data,
            render_transaction_info=short_transaction_info,
            render_cell_info=short_cell_info,
        )
    try:
        scene = create_transaction_illustration(config)
    except IllustrationError as exc:
        progress("error", {"message": f"{exc.__class__.__name__}: {exc}"})
        return 1

    # Outputs
    print("Writing outputs...")
    try:
        written = [write_scene_svg(scene, args.out), write_summary_md(data, args.out)]
        if args.html:
            written.append(write_scene_html(
                scene,
                args.out,
                title=f"Transaction {short_transaction_info(data.tx_hash)}" if data.tx_hash else "Transaction",
                link_template=args.link_template,
            ))
        if args.json:
            written.append(write_scene_json(scene, args.out))
            written.append(write_data_json(data, args.out))
    except OSError as exc:
        progress("error", {"message": f"{exc.__class__.__name__}: {exc}"})
        return 1

    for path in written:
        print(f"Wrote: {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
