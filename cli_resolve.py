"""Terminal client: build the commune index, resolve names, maintain the artifact."""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Iterable

import uvicorn

from wilaya_resolver.builder import build_from_snapshot
from wilaya_resolver.config import settings
from wilaya_resolver.index import IndexFormatError
from wilaya_resolver.maintenance import (
    NewCommune,
    add_communes,
    audit,
    fix_commune,
    missing_arabic_names,
    patch_arabic_names,
)
from wilaya_resolver.normalizer import normalize
from wilaya_resolver.regions import WILAYAS
from wilaya_resolver.resolver import WilayaResolver
from wilaya_resolver.sources import SourceDataError, load_sources
from wilaya_resolver.storage import load_document, save_document, save_index

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
GREEN = "\033[92m"
RED = "\033[91m"
RESET = "\033[0m"

logger = logging.getLogger("cli_resolve")


def pretty_print_resolution(resolver: WilayaResolver, name: str, hint: str | None) -> None:
    wilaya_id = resolver.resolve_wilaya(name, hint)
    candidates = resolver.candidates(name)
    color = GREEN if candidates else RED
    wilaya = WILAYAS[wilaya_id]
    print(
        f"{name!r} -> {color}{wilaya_id:02d} {wilaya.name_fr}{RESET} ({wilaya.name_ar}) "
        f"| normalized={normalize(name)!r} | candidates={candidates or '-'}"
    )


def interactive_shell(resolver: WilayaResolver, hint: str | None) -> None:
    print("Interactive commune lookup. Type 'exit' to quit.")
    while True:
        try:
            query = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return
        if not query:
            continue
        if query.lower() in {"exit", "quit"}:
            return
        pretty_print_resolution(resolver, query, hint)


def batch_mode(resolver: WilayaResolver, file_path: Path, hint: str | None) -> None:
    with file_path.open("r", encoding="utf-8") as fh:
        for line in fh:
            query = line.strip()
            if not query:
                continue
            pretty_print_resolution(resolver, query, hint)


def cmd_build(args: argparse.Namespace) -> int:
    snapshot = load_sources(args.fr, args.ar, args.fr_extra or None)
    index = build_from_snapshot(snapshot)
    save_index(index, args.out)
    print(f"Generated: {args.out}")
    print(f"Communes in byCode: {len(index)}")
    print(f"Mappings in arToFr: {len(index.ar_to_fr)}")
    return 0


def cmd_resolve(args: argparse.Namespace) -> int:
    resolver = WilayaResolver.from_path(args.index, default_wilaya=settings.default_wilaya)
    if args.batch:
        batch_mode(resolver, args.batch, args.hint)
        return 0
    if args.name:
        pretty_print_resolution(resolver, args.name, args.hint)
        return 0
    interactive_shell(resolver, args.hint)
    return 0


def cmd_audit(args: argparse.Namespace) -> int:
    resolver = WilayaResolver.from_path(args.index, default_wilaya=settings.default_wilaya)
    report = audit(resolver)
    total = report.total or 1
    print(f"Total communes: {report.total}")
    print(f"  French: {report.passed_fr}/{report.total} ({report.passed_fr / total:.1%}), with hint {report.passed_fr_hinted}")
    print(f"  Arabic: {report.passed_ar}/{report.total} ({report.passed_ar / total:.1%}), with hint {report.passed_ar_hinted}")
    for failure in report.failures[: args.limit]:
        mode = "hint" if failure.with_hint else "bare"
        print(
            f"  {RED}{failure.language}{RESET} {failure.code} {failure.name!r} [{mode}]: "
            f"expected {failure.expected}, got {failure.got}"
        )
    if len(report.failures) > args.limit:
        print(f"  ... and {len(report.failures) - args.limit} more")
    return 0


def cmd_patch_ar(args: argparse.Namespace) -> int:
    with args.file.open("r", encoding="utf-8") as fh:
        translations = json.load(fh)
    document, missing = patch_arabic_names(load_document(args.index), translations)
    save_document(document, args.index)
    print(f"Patched {len(translations) - len(missing)} communes, {len(missing)} unknown codes")
    return 0


def cmd_fix(args: argparse.Namespace) -> int:
    document = fix_commune(load_document(args.index), args.code, args.fr, args.ar, wilaya_code=args.wilaya)
    save_document(document, args.index)
    print(f"Fixed {args.code}: {args.fr} / {args.ar}")
    return 0


def cmd_add_communes(args: argparse.Namespace) -> int:
    with args.file.open("r", encoding="utf-8") as fh:
        raw = json.load(fh)
    communes = [NewCommune.model_validate(item) for item in raw]
    document, report = add_communes(load_document(args.index), communes)
    save_document(document, args.index)
    print(f"Added to byCode: {len(report.added)}")
    print(f"Skipped in byCode: {len(report.skipped)}")
    print(f"Added to reverse maps: {report.keys_added}")
    return 0


def cmd_missing_ar(args: argparse.Namespace) -> int:
    missing = missing_arabic_names(load_document(args.index))
    print(f"Total: {len(missing)}")
    for item in missing:
        print(f'{item["code"]}: "{item["fr"]}" (wilaya {item["wilayaCode"]} - {item["wilayaFr"]})')
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    uvicorn.run("wilaya_resolver.main:app", host=args.host, port=args.port, log_level=args.log_level.lower())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Commune to wilaya resolver")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Build the index artifact from the source lists")
    build.add_argument("--fr", default=settings.communes_fr_path, help="Primary French list")
    build.add_argument("--fr-extra", default=settings.communes_fr_extra_path, help="Optional second French list")
    build.add_argument("--ar", default=settings.communes_ar_path, help="Arabic list")
    build.add_argument("--out", default=settings.index_path, help="Output artifact")
    build.set_defaults(func=cmd_build)

    resolve = sub.add_parser("resolve", help="Resolve names. If omitted, starts REPL mode.")
    resolve.add_argument("name", nargs="?", help="Commune name")
    resolve.add_argument("--hint", help="Wilaya id or name used to disambiguate")
    resolve.add_argument("--batch", type=Path, help="File with names to resolve line by line")
    resolve.add_argument("--index", default=settings.index_path)
    resolve.set_defaults(func=cmd_resolve)

    audit_cmd = sub.add_parser("audit", help="Check every indexed name resolves to its own wilaya")
    audit_cmd.add_argument("--index", default=settings.index_path)
    audit_cmd.add_argument("--limit", type=int, default=10, help="Failures to print")
    audit_cmd.set_defaults(func=cmd_audit)

    patch = sub.add_parser("patch-ar", help="Set Arabic names from a {code: name} JSON file")
    patch.add_argument("file", type=Path)
    patch.add_argument("--index", default=settings.index_path)
    patch.set_defaults(func=cmd_patch_ar)

    fix = sub.add_parser("fix", help="Rename a commune, creating it when missing")
    fix.add_argument("code", help="Postal code, e.g. 42015")
    fix.add_argument("fr", help="French name")
    fix.add_argument("ar", help="Arabic name")
    fix.add_argument("--wilaya", type=int, help="Wilaya id when the code prefix is not enough")
    fix.add_argument("--index", default=settings.index_path)
    fix.set_defaults(func=cmd_fix)

    add = sub.add_parser("add-communes", help="Add communes from a JSON array file")
    add.add_argument("file", type=Path)
    add.add_argument("--index", default=settings.index_path)
    add.set_defaults(func=cmd_add_communes)

    missing = sub.add_parser("missing-ar", help="List communes without an Arabic name")
    missing.add_argument("--index", default=settings.index_path)
    missing.set_defaults(func=cmd_missing_ar)

    serve = sub.add_parser("serve", help="Run the HTTP lookup service")
    serve.add_argument("--host", default=settings.api_host)
    serve.add_argument("--port", type=int, default=settings.api_port)
    serve.set_defaults(func=cmd_serve)
    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(level=logging.getLevelName(args.log_level.upper()), format=LOG_FORMAT, force=True)
    try:
        return args.func(args)
    except (SourceDataError, IndexFormatError, ValueError, OSError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
