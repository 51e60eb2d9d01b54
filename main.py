from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from app.core.config import AppConfig
from app.data_builder.normalizers import normalize_bundle
from app.documents.service import build_documents_service
from app.ocr_extract.ocr import OCRUnavailableError
from app.records.models import Role
from app.records.share import ShareDecodeError, decode_bundle, encode_bundle
from app.renderers.dossier import DossierOptions
from app.renderers.pdf_helpers import TemplateError, inspect_form_fields, load_template


def setup_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def load_json_arg(value: str) -> Any:
    """Read JSON from a file path or a raw JSON string."""
    candidate = Path(value)
    if candidate.is_file():
        return json.loads(candidate.read_text(encoding="utf-8"))
    return json.loads(value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Read Spanish vehicle transfer documents and render the transfer paperwork."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    process = sub.add_parser("process", help="Recognize document photos into a bundle.")
    process.add_argument("--vendedor", default="", help="Seller DNI/NIE photo.")
    process.add_argument("--comprador", default="", help="Buyer DNI/NIE photo.")
    process.add_argument("--ficha", default="", help="Vehicle spec sheet photo.")
    process.add_argument("--out", default="", help="Write the bundle JSON here.")

    render = sub.add_parser("render", help="Render a document from a bundle.")
    render.add_argument(
        "--bundle",
        required=True,
        help="Bundle JSON. Either a file path or a raw JSON string.",
    )
    render.add_argument("--type", choices=["contract", "mod02", "xml"], required=True)
    render.add_argument("--out-dir", default=".", help="Directory for the output file.")
    render.add_argument("--agent-id", default="")
    render.add_argument("--agency-id", default="")
    render.add_argument("--local-division-key", default="")
    render.add_argument("--dossier-number", default="")

    inspect = sub.add_parser("inspect-template", help="List form fields of a PDF template.")
    inspect.add_argument("--template", default="", help="Defaults to MOD02_TEMPLATE_PATH.")

    share = sub.add_parser("share", help="Encode or decode a shareable bundle token.")
    share_mode = share.add_mutually_exclusive_group(required=True)
    share_mode.add_argument("--encode", metavar="BUNDLE", help="Bundle JSON file or string.")
    share_mode.add_argument("--decode", metavar="TOKEN", help="Token to decode.")

    sub.add_parser("check-setup", help="Report API key and template availability.")
    return parser


def run_process(args: argparse.Namespace, config: AppConfig) -> int:
    service = build_documents_service(config)
    uploads: dict[Role, bytes] = {}
    for role, path in (
        (Role.SELLER, args.vendedor),
        (Role.BUYER, args.comprador),
        (Role.VEHICLE, args.ficha),
    ):
        if not path:
            continue
        try:
            uploads[role] = Path(path).read_bytes()
        except OSError as exc:
            raise SystemExit(
                f"Cannot read {role.value} image {path}: {exc.strerror or exc}"
            ) from exc
    if not uploads:
        raise SystemExit("Provide at least one of --vendedor, --comprador, --ficha.")
    try:
        result = service.process_uploads(uploads)
    except OCRUnavailableError as exc:
        raise SystemExit(f"Recognition service unavailable: {exc}") from exc

    output = {**result.bundle.to_payload(), "errors": result.errors}
    text = json.dumps(output, ensure_ascii=False, indent=2)
    if args.out:
        Path(args.out).write_text(text, encoding="utf-8")
    print(text)
    return 1 if result.errors else 0


def run_render(args: argparse.Namespace, config: AppConfig) -> int:
    service = build_documents_service(config)
    bundle = normalize_bundle(load_json_arg(args.bundle))
    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    if args.type == "xml":
        options = DossierOptions(
            agent_id=args.agent_id,
            agency_id=args.agency_id,
            local_division_key=args.local_division_key,
            dossier_number=args.dossier_number,
        )
        xml, filename = service.render_xml(bundle, options)
        target = out_dir / filename
        target.write_text(xml, encoding="utf-8")
    else:
        try:
            content, filename = service.render_pdf(bundle, args.type)
        except TemplateError as exc:
            raise SystemExit(str(exc)) from exc
        target = out_dir / filename
        target.write_bytes(content)
    print(str(target))
    return 0


def run_inspect_template(args: argparse.Namespace, config: AppConfig) -> int:
    path = args.template or config.templates.official_form_path
    try:
        rows = inspect_form_fields(load_template(path))
    except TemplateError as exc:
        raise SystemExit(str(exc)) from exc
    print(
        json.dumps(
            [
                {"name": row.name, "type": row.field_type, "page_index": row.page_index}
                for row in rows
            ],
            ensure_ascii=False,
            indent=2,
        )
    )
    return 0


def run_share(args: argparse.Namespace) -> int:
    if args.encode:
        bundle = normalize_bundle(load_json_arg(args.encode), fill_aliases=False)
        print(encode_bundle(bundle))
        return 0
    try:
        bundle = decode_bundle(args.decode)
    except ShareDecodeError as exc:
        raise SystemExit(str(exc)) from exc
    print(json.dumps(bundle.to_payload(), ensure_ascii=False, indent=2))
    return 0


def check_setup(config: AppConfig) -> dict[str, Any]:
    template_path = Path(config.templates.official_form_path)
    return {
        "env_file": Path(".env").is_file(),
        "openai_api_key": bool(config.ocr.api_key),
        "official_form_template": template_path.is_file(),
        "official_form_template_path": str(template_path),
    }


def run_check_setup(config: AppConfig) -> int:
    report = check_setup(config)
    print(json.dumps(report, ensure_ascii=False, indent=2))
    return 0 if report["openai_api_key"] and report["official_form_template"] else 1


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    setup_logging()
    logger = logging.getLogger("main")
    args = build_parser().parse_args(argv)
    config = AppConfig.from_env()
    logger.info("Running command %s (cwd=%s)", args.command, os.getcwd())

    if args.command == "process":
        return run_process(args, config)
    if args.command == "render":
        return run_render(args, config)
    if args.command == "inspect-template":
        return run_inspect_template(args, config)
    if args.command == "share":
        return run_share(args)
    return run_check_setup(config)


if __name__ == "__main__":
    sys.exit(main())
