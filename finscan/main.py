import argparse
import mimetypes
import sys
from pathlib import Path

from finscan.config.settings import Settings
from finscan.database.connection import apply_schema, close_pool, init_pool
from finscan.database.repositories.anomalies_repository import AnomaliesRepository
from finscan.documents.service import DocumentService, ServiceResult, build_document_service
from finscan.logging.logger import Log


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="finscan", description="Financial document processing")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="create database tables")

    upload = sub.add_parser("upload", help="upload a document and process it")
    upload.add_argument("path", type=Path)
    upload.add_argument("--user-id", type=int, required=True)
    upload.add_argument("--content-type")

    listing = sub.add_parser("list", help="list documents")
    listing.add_argument("--user-id", type=int, required=True)
    listing.add_argument("--status")
    listing.add_argument("--search")

    for name in ("show", "delete"):
        cmd = sub.add_parser(name, help=f"{name} a document")
        cmd.add_argument("document_id", type=int)
        cmd.add_argument("--user-id", type=int, required=True)
    return parser


def _report(result: ServiceResult) -> int:
    if not result.success:
        print(f"error: {result.message}", file=sys.stderr)
        return 1
    if result.message:
        print(result.message)
    return 0


def _run(args: argparse.Namespace, service: DocumentService) -> int:
    if args.command == "upload":
        content_type = args.content_type or mimetypes.guess_type(args.path.name)[0] or ""
        result = service.upload(args.path.read_bytes(), args.path.name, content_type, args.user_id)
        if result.success:
            print(f"document {result.data.id}: {result.data.status}")
            # Let the background pipeline finish before the process exits.
            service.pipeline.shutdown(wait=True)
            result = service.get_document(result.data.id, args.user_id)
            if result.success:
                print(f"document {result.data.id}: {result.data.status}")
        return _report(result)

    if args.command == "list":
        result = service.list_documents(args.user_id, status=args.status, search=args.search)
        for doc in result.data or []:
            print(f"{doc.id}\t{doc.status}\t{doc.original_name}\t{doc.merchant or ''}")
        return _report(result)

    if args.command == "show":
        result = service.get_document(args.document_id, args.user_id)
        if result.success:
            doc = result.data
            print(f"{doc.original_name} [{doc.status}] {doc.file_url}")
            if doc.merchant:
                print(f"{doc.transaction_date} {doc.merchant} {doc.amount} {doc.currency} ({doc.category})")
            if doc.extracted_data:
                print(doc.extracted_data)
            for anomaly in AnomaliesRepository().list_for_document(doc.id, args.user_id):
                print(f"anomaly {anomaly.severity}: {anomaly.description}")
        return _report(result)

    return _report(service.delete_document(args.document_id, args.user_id))


def main(argv: list[str] | None = None) -> int:
    """Entry point: settings -> logging -> pool -> command."""
    args = _build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        if args.command == "init-db":
            apply_schema()
            return 0
        service = build_document_service(settings)
        try:
            return _run(args, service)
        finally:
            service.pipeline.shutdown(wait=True)
    finally:
        close_pool()


if __name__ == "__main__":
    sys.exit(main())
