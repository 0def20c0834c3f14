"""
cli/ui - 콘솔 출력 유틸리티
"""

from .console import (
    console,
    print_error,
    print_key_value_table,
    print_success,
    print_warning,
    setup_logging,
)

__all__: list[str] = [
    "console",
    "setup_logging",
    "print_success",
    "print_error",
    "print_warning",
    "print_key_value_table",
]
