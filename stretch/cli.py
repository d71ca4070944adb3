"""Stretch CLI 도구

Usage:
    stretch <command> [options]

Commands:
    test                            연결 테스트
    exists <index>                  인덱스 존재 여부
    search <index> [--match f=v]    검색 실행
"""

import argparse
import json
import logging
import sys

from .exceptions import StretchError
from .service import Stretch, create_stretch

logger = logging.getLogger(__name__)


def _parse_pair(raw: str) -> tuple[str, str]:
    """"field=value" → ("field", "value")"""
    field, sep, value = raw.partition("=")
    if not sep or not field:
        raise argparse.ArgumentTypeError(f"expected field=value, got {raw!r}")
    return field, value


def cmd_test(stretch: Stretch, args) -> int:
    """연결 테스트"""
    health = stretch.health()
    print(f"✓ Connected! Cluster: {health.get('cluster_name')}, Status: {health.get('status')}")

    indices = stretch.indices()
    print(f"✓ Indices count: {len(indices)}")
    for name in list(indices)[:5]:
        print(f"  - {name}")
    return 0


def cmd_exists(stretch: Stretch, args) -> int:
    """인덱스 존재 여부"""
    exists = stretch.index_exists(args.index)
    print(f"{args.index}: {'exists' if exists else 'not found'}")
    return 0 if exists else 1


def cmd_search(stretch: Stretch, args) -> int:
    """검색 실행"""
    query = stretch.index(args.index).size(args.size)

    for field, value in args.match:
        query.match(field, value)
    for field, value in args.term:
        query.term(field, value)

    if args.dry_run:
        print(json.dumps(query.build(), ensure_ascii=False, indent=2))
        return 0

    response = query.execute()
    print(json.dumps(response, ensure_ascii=False, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stretch", description="OpenSearch 쿼리 CLI")
    parser.add_argument("--connection", default=None, help="커넥션 이름 (기본: 설정의 기본 커넥션)")
    parser.add_argument("-v", "--verbose", action="store_true", help="DEBUG 로그 출력")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # test
    subparsers.add_parser("test", help="연결 테스트")

    # exists
    p_exists = subparsers.add_parser("exists", help="인덱스 존재 여부")
    p_exists.add_argument("index", help="인덱스 이름")

    # search
    p_search = subparsers.add_parser("search", help="검색 실행")
    p_search.add_argument("index", help="인덱스 이름")
    p_search.add_argument("--match", type=_parse_pair, action="append", default=[], help="field=value")
    p_search.add_argument("--term", type=_parse_pair, action="append", default=[], help="field=value")
    p_search.add_argument("--size", type=int, default=10, help="결과 개수 (기본: 10)")
    p_search.add_argument("--dry-run", action="store_true", help="요청 body만 출력")

    return parser


COMMANDS = {
    "test": cmd_test,
    "exists": cmd_exists,
    "search": cmd_search,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 2

    try:
        stretch = create_stretch()
        if args.connection:
            stretch = stretch.connection(args.connection)
        return handler(stretch, args)
    except StretchError as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"❌ {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
