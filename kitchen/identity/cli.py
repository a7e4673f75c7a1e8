"""CLI entry point for the identity engine."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .canonical import Canonicalizer
from .config import EngineConfig, load_config
from .duplicates import detect_duplicates
from .errors import IdentityError
from .matching import MatchIndex
from .receipts import parse_receipt_text, review_purchases
from .shopping import (
    Reconciler,
    ShoppingListItem,
    apply_plan,
    batch_from_recipes,
    build_batch,
)
from .substitutes import suggest_substitutes
from .text.normalizer import NormalizeMode


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="kitchen-identity",
        description="Ingredient identity tools: normalize, match and reconcile",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to a TOML config file",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # normalize
    norm_parser = sub.add_parser("normalize", help="Reduce lines to display names")
    norm_parser.add_argument("lines", nargs="+", help="Ingredient lines")
    _add_mode(norm_parser)
    norm_parser.add_argument("--json", action="store_true", help="Output JSON")

    # canonicalize
    canon_parser = sub.add_parser("canonicalize", help="Show canonical keys")
    canon_parser.add_argument("lines", nargs="+", help="Ingredient lines")
    _add_mode(canon_parser)
    canon_parser.add_argument("--json", action="store_true", help="Output JSON")

    # match
    match_parser = sub.add_parser("match", help="Look a name up in an inventory")
    match_parser.add_argument("name", help="Item name")
    match_parser.add_argument(
        "--inventory", "-i", required=True, metavar="FILE",
        help="Inventory rows as a JSON list",
    )
    match_parser.add_argument("--unit", default=None, help="Unit of the query")
    match_parser.add_argument("--json", action="store_true", help="Output JSON")

    # dupes
    dupes_parser = sub.add_parser("dupes", help="Flag duplicate lines in a batch")
    dupes_parser.add_argument("file", help="Text file, one line per item ('-' for stdin)")
    _add_mode(dupes_parser)
    dupes_parser.add_argument("--json", action="store_true", help="Output JSON")

    # subs
    subs_parser = sub.add_parser("subs", help="Suggest substitutes from inventory")
    subs_parser.add_argument("name", help="Missing ingredient")
    subs_parser.add_argument(
        "--inventory", "-i", required=True, metavar="FILE",
        help="Inventory rows as a JSON list",
    )
    subs_parser.add_argument("--limit", type=int, default=None)
    subs_parser.add_argument("--json", action="store_true", help="Output JSON")

    # reconcile
    rec_parser = sub.add_parser("reconcile", help="Plan a derived shopping-list sync")
    source = rec_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--lines", metavar="FILE", help="Ingredient lines, one per line")
    source.add_argument("--recipes", metavar="FILE", help="Recipes as a JSON list")
    rec_parser.add_argument(
        "--existing", "-e", metavar="FILE", default=None,
        help="Current shopping-list rows as a JSON list",
    )
    rec_parser.add_argument(
        "--apply", action="store_true", help="Print the rows after applying the plan"
    )
    rec_parser.add_argument("--json", action="store_true", help="Output JSON")

    # receipt
    rcp_parser = sub.add_parser("receipt", help="Parse pasted receipt text")
    rcp_parser.add_argument("file", help="Receipt text file ('-' for stdin)")
    rcp_parser.add_argument(
        "--inventory", "-i", metavar="FILE", default=None,
        help="Inventory rows to match purchases against",
    )
    rcp_parser.add_argument("--json", action="store_true", help="Output JSON")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        canon = Canonicalizer(config.vocabulary())

        match args.command:
            case "normalize":
                _cmd_normalize(config, canon, args)
            case "canonicalize":
                _cmd_canonicalize(config, canon, args)
            case "match":
                _cmd_match(config, canon, args)
            case "dupes":
                _cmd_dupes(config, canon, args)
            case "subs":
                _cmd_subs(config, canon, args)
            case "reconcile":
                _cmd_reconcile(canon, args)
            case "receipt":
                _cmd_receipt(config, canon, args)
    except (IdentityError, FileNotFoundError, json.JSONDecodeError) as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)


def _add_mode(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--mode",
        "-m",
        choices=[m.value for m in NormalizeMode],
        default=None,
        help="Normalizer mode (default from config)",
    )


def _mode(config: EngineConfig, args) -> NormalizeMode:
    if args.mode:
        return NormalizeMode(args.mode)
    return config.normalizer.mode


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _read_json_list(path: str | None) -> list:
    if path is None:
        return []
    data = json.loads(_read_text(path))
    if not isinstance(data, list):
        raise IdentityError(f"{path}: expected a JSON list")
    return data


def _dump(data) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def _cmd_normalize(config, canon: Canonicalizer, args) -> None:
    normalizer = canon.normalizer(_mode(config, args))
    results = [(line, normalizer.normalize(line)) for line in args.lines]
    if args.json:
        _dump([{"raw": raw, "normalized": out} for raw, out in results])
        return
    for _, out in results:
        print(out)


def _cmd_canonicalize(config, canon: Canonicalizer, args) -> None:
    mode = _mode(config, args)
    idents = [canon.canonicalize_line(line, mode) for line in args.lines]
    if args.json:
        _dump([ident.to_dict() for ident in idents])
        return
    for ident in idents:
        print(f"{ident.display_name}")
        print(f"  strict: {ident.canonical_strict}")
        print(f"  loose:  {ident.canonical_loose}")


def _load_index(config, canon: Canonicalizer, path: str | None) -> MatchIndex:
    return MatchIndex.build(
        _read_json_list(path),
        canonicalizer=canon,
        loose_limit=config.matching.loose_limit,
    )


def _cmd_match(config, canon: Canonicalizer, args) -> None:
    index = _load_index(config, canon, args.inventory)
    result = index.lookup(args.name, args.unit)
    if args.json:
        _dump({**result.to_dict(), "label": result.label()})
        return
    if not result.found:
        print(f"No match for {args.name!r}.")
        return
    print(f"{result.kind.value}: {result.label()}")
    for item in result.candidates:
        print(f"  {item.name}")


def _cmd_dupes(config, canon: Canonicalizer, args) -> None:
    mode = _mode(config, args)
    lines = [line for line in _read_text(args.file).splitlines() if line.strip()]
    groups = detect_duplicates(canon.canonicalize_line(line, mode) for line in lines)
    if args.json:
        _dump({key: [m.display_name for m in members] for key, members in groups.items()})
        return
    if not groups:
        print("No duplicates found.")
        return
    for key, members in groups.items():
        print(f"{key} ({len(members)}):")
        for m in members:
            print(f"  {m.display_name}")


def _cmd_subs(config, canon: Canonicalizer, args) -> None:
    index = _load_index(config, canon, args.inventory)
    limit = args.limit if args.limit is not None else config.substitutes.limit
    names = [item.name for item in index.items]
    subs = suggest_substitutes(args.name, names, limit=limit, canonicalizer=canon)
    if args.json:
        _dump(subs)
        return
    if not subs:
        print(f"No substitutes for {args.name!r}.")
        return
    for name in subs:
        print(name)


def _cmd_reconcile(canon: Canonicalizer, args) -> None:
    if args.recipes:
        batch = batch_from_recipes(_read_json_list(args.recipes), canon)
    else:
        lines = [line for line in _read_text(args.lines).splitlines() if line.strip()]
        batch = build_batch(lines, canon)

    existing = [ShoppingListItem.from_dict(row) for row in _read_json_list(args.existing)]
    plan = Reconciler(canon).reconcile(batch, existing)

    if args.apply:
        rows = apply_plan(existing, plan)
        if args.json:
            _dump([row.to_dict() for row in rows])
            return
        for row in rows:
            state = "dismissed" if row.dismissed else row.source_type.value
            print(f"  {row.name:<24} x{row.quantity}  [{state}]")
        return

    if args.json:
        _dump(plan.to_dict())
        return
    print(plan.summary())
    for item in plan.insert:
        print(f"  + {item.name} x{item.quantity}")
    for op in plan.revive:
        print(f"  ^ {op.id}")
    for op in plan.update:
        print(f"  ~ {op.id} -> x{op.quantity}")


def _cmd_receipt(config, canon: Canonicalizer, args) -> None:
    lines = parse_receipt_text(
        _read_text(args.file),
        max_items=config.receipts.max_items,
        canonicalizer=canon,
    )
    index = _load_index(config, canon, args.inventory)
    reviews = review_purchases(lines, index, canon)
    if args.json:
        _dump([r.to_dict() for r in reviews])
        return
    if not reviews:
        print("No items found.")
        return
    for r in reviews:
        label = r.match.label() or "new"
        dup = "  (duplicate)" if r.duplicate_key else ""
        print(f"  {r.line.name:<24} x{r.line.quantity}  [{r.line.category}] {label}{dup}")
