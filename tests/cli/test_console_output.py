# tests/cli/test_console_output.py
"""
cli/ui/console.py 단위 테스트
"""

import logging

from rich.logging import RichHandler

from cli.ui import print_error, print_key_value_table, print_success, print_warning, setup_logging
from core.config import LogConfig


class TestPrintHelpers:
    """출력 헬퍼 테스트"""

    def test_symbols(self, capsys):
        """메시지별 심볼"""
        print_success("done")
        print_error("broken")
        print_warning("careful")

        out = capsys.readouterr().out
        assert "✓ done" in out
        assert "✗ broken" in out
        assert "! careful" in out

    def test_table_escapes_markup(self, capsys):
        """대괄호가 포함된 값도 그대로 출력"""
        print_key_value_table("태그 속성", {"s3.tag.env": "[prod]"})

        out = capsys.readouterr().out
        assert "s3.tag.env" in out
        assert "[prod]" in out


class TestSetupLogging:
    """setup_logging 테스트"""

    def test_replaces_rich_handler(self):
        """반복 호출 시 RichHandler는 하나만 유지"""
        root = logging.getLogger()
        handlers = list(root.handlers)
        level = root.level
        try:
            setup_logging(LogConfig(level="DEBUG"))
            setup_logging(LogConfig(level="DEBUG"))

            assert sum(isinstance(h, RichHandler) for h in root.handlers) == 1
            assert root.level == logging.DEBUG

            setup_logging(quiet=True)
            assert root.level == logging.WARNING
        finally:
            root.handlers[:] = handlers
            root.setLevel(level)
