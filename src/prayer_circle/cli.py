"""Command-line interface for Prayer Circle."""

import argparse
import asyncio
import dataclasses
import sys
from collections.abc import Sequence
from pathlib import Path

from prayer_circle import __version__

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="prayer-circle",
        description="Topluluk dua istekleri servisi",
    )
    parser.add_argument("--version", "-v", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Komutlar")

    # serve: verilmeyen seçenekler PRAYER_CIRCLE_* ortam değişkenlerinden gelir
    serve_parser = subparsers.add_parser("serve", help="HTTP API'yi başlat")
    serve_parser.add_argument("--host", "-H", help="Dinlenecek adres (varsayılan: 0.0.0.0)")
    serve_parser.add_argument("--port", "-p", type=int, help="Dinlenecek port (varsayılan: 8080)")
    serve_parser.add_argument("--log-level", "-l", choices=LOG_LEVELS, help="Log seviyesi")
    serve_parser.add_argument(
        "--no-recover",
        action="store_true",
        help="Açılışta bekleyen otomatik kapanışları yeniden planlama",
    )
    _add_store_argument(serve_parser)

    list_parser = subparsers.add_parser("list", help="Kayıtlı duaları tablo olarak göster")
    _add_store_argument(list_parser)
    list_parser.add_argument(
        "--type",
        "-t",
        dest="prayer_type",
        choices=["hidden", "visible"],
        help="Sadece bu türdeki dualar",
    )

    close_parser = subparsers.add_parser(
        "close-overdue",
        help="Bitiş zamanı geçmiş açık duaları sunucu olmadan kapat",
    )
    _add_store_argument(close_parser)

    return parser


def _add_store_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--store",
        "-s",
        help="Veri dosyası yolu ('memory' = bellek içi)",
    )


def _resolve_store_path(value: str | None) -> Path | None:
    from prayer_circle.config import get_config, parse_store_path

    if value is None:
        return get_config().store_path
    return parse_store_path(value)


def cmd_serve(args: argparse.Namespace) -> None:
    """Run the web server."""
    import uvicorn

    from prayer_circle.api.app import create_app
    from prayer_circle.config import get_config, setup_logging

    base = get_config()
    config = dataclasses.replace(
        base,
        host=args.host or base.host,
        port=args.port or base.port,
        log_level=args.log_level or base.log_level,
        store_path=_resolve_store_path(args.store),
        recover_on_startup=base.recover_on_startup and not args.no_recover,
    )
    setup_logging(config.log_level)

    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


def cmd_list(args: argparse.Namespace) -> None:
    """Show stored prayers."""
    from prayer_circle.domain.models import Prayer
    from prayer_circle.infrastructure.document_store import JsonDocumentStore
    from prayer_circle.services.auto_close_service import PRAYERS

    async def _list() -> list[Prayer]:
        store = JsonDocumentStore(_resolve_store_path(args.store))
        await store.load()
        filters = {"prayerType": args.prayer_type} if args.prayer_type else None
        snapshots = await store.query(PRAYERS, filters)
        return [Prayer.from_dict(s.id, s.to_dict()) for s in snapshots]

    prayers = asyncio.run(_list())

    print("=" * 90)
    print(f"{'ID':<22} {'Başlık':<30} {'Tür':<8} {'Durum':<7} {'İzlenim':>8} {'Bitiş':>10}")
    print("-" * 90)
    for prayer in prayers:
        state = "açık" if prayer.is_open else "kapalı"
        end = prayer.end_date_time.strftime("%d.%m.%Y") if prayer.end_date_time else "-"
        print(
            f"{prayer.id:<22} {prayer.title[:30]:<30} {prayer.prayer_type.value:<8} "
            f"{state:<7} {prayer.impression_count:>8} {end:>10}"
        )
    print("=" * 90)
    print(f"Toplam: {len(prayers)}")


def cmd_close_overdue(args: argparse.Namespace) -> None:
    """Close prayers whose end time has passed."""
    from prayer_circle.config import setup_logging
    from prayer_circle.infrastructure.document_store import JsonDocumentStore
    from prayer_circle.infrastructure.event_bus import InMemoryEventBus
    from prayer_circle.infrastructure.notifier import (
        EventBusNotifier,
        register_notification_logging,
    )
    from prayer_circle.infrastructure.scheduler import APSchedulerAdapter
    from prayer_circle.services.auto_close_service import AutoCloseService

    setup_logging("INFO")

    async def _close() -> int:
        store = JsonDocumentStore(_resolve_store_path(args.store))
        await store.load()
        event_bus = InMemoryEventBus()
        register_notification_logging(event_bus)
        service = AutoCloseService(
            store=store,
            notifier=EventBusNotifier(event_bus),
            scheduler=APSchedulerAdapter(),
        )
        return await service.close_overdue()

    closed = asyncio.run(_close())
    print(f"✅ {closed} dua kapatıldı.")


def main(argv: Sequence[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        # Komut verilmezse sunucuyu ortam ayarlarıyla başlat
        args = parser.parse_args(["serve"])

    commands = {
        "serve": cmd_serve,
        "list": cmd_list,
        "close-overdue": cmd_close_overdue,
    }
    commands[args.command](args)
    return 0


if __name__ == "__main__":
    sys.exit(main())
