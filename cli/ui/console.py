"""
cli/ui/console.py - Rich 콘솔 유틸리티

일관된 콘솔 출력과 Rich 로깅 설정을 위한 함수들
"""

import logging
import platform

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from core.config import LogConfig

# botocore 노이즈 로그 제한
logging.getLogger("botocore.httpchecksum").setLevel(logging.WARNING)
logging.getLogger("botocore.credentials").setLevel(logging.WARNING)
logging.getLogger("botocore.loaders").setLevel(logging.WARNING)
logging.getLogger("botocore.session").setLevel(logging.WARNING)


def get_console() -> Console:
    """Rich Console 인스턴스를 생성하고 반환합니다."""
    is_windows = platform.system().lower() == "windows"

    return Console(
        color_system="auto",
        highlight=True,
        soft_wrap=True,
        markup=True,
        emoji=not is_windows,
    )


# 전역 콘솔 인스턴스
console = get_console()


def setup_logging(config: LogConfig | None = None, quiet: bool = False) -> None:
    """루트 logger에 Rich 핸들러 설정

    Args:
        config: 로깅 설정 (None이면 환경변수에서 로드)
        quiet: True면 WARNING 이상만 출력
    """
    config = config or LogConfig.from_env()
    level = logging.WARNING if quiet else logging.getLevelName(config.level)
    if not isinstance(level, int):
        level = logging.INFO

    handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt=config.date_format))

    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, RichHandler)]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)


# =============================================================================
# 표준 출력 스타일
# =============================================================================

SYMBOL_SUCCESS = "✓"
SYMBOL_ERROR = "✗"
SYMBOL_WARNING = "!"


def print_success(message: str) -> None:
    """성공 메시지 출력 (초록색 체크마크)"""
    console.print(f"[green]{SYMBOL_SUCCESS} {message}[/green]")


def print_error(message: str) -> None:
    """에러 메시지 출력 (빨간색 X)"""
    console.print(f"[red]{SYMBOL_ERROR} {message}[/red]")


def print_warning(message: str) -> None:
    """경고 메시지 출력 (노란색 경고)"""
    console.print(f"[yellow]{SYMBOL_WARNING} {message}[/yellow]")


def print_key_value_table(
    title: str,
    rows: dict[str, str],
    key_header: str = "Key",
    value_header: str = "Value",
) -> None:
    """키/값 테이블 출력

    Args:
        title: 테이블 제목
        rows: {키: 값}
        key_header: 키 컬럼 헤더
        value_header: 값 컬럼 헤더
    """
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column(key_header, style="cyan")
    table.add_column(value_header)
    for key, value in rows.items():
        table.add_row(escape(key), escape(value))
    console.print(table)
