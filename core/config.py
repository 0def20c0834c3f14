"""
core/config.py - 중앙 설정

애플리케이션 상수, 환경변수 헬퍼, 로깅 설정, 프로퍼티 파일 로드를 제공합니다.

Usage:
    from core.config import settings, get_default_region, load_property_file

    prefix = settings.TAG_ATTRIBUTE_PREFIX  # "s3.tag."
    region = get_default_region()
    values = load_property_file("tag.yaml")
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from .exceptions import ConfigError

# 환경변수 bool 해석용 값
_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """애플리케이션 설정 (불변)"""

    # AWS
    DEFAULT_REGION: str = "ap-northeast-2"
    API_TIMEOUT: int = 30  # 초
    API_RETRY_COUNT: int = 3

    # 레코드 처리
    PENALTY_SECONDS: int = 30  # failure 라우팅 시 재처리 지연

    # 태그
    TAG_ATTRIBUTE_PREFIX: str = "s3.tag."
    TAG_KEY_MAX_LENGTH: int = 127
    TAG_VALUE_MAX_LENGTH: int = 255


settings = Settings()


# =============================================================================
# 경로 / 버전
# =============================================================================


def get_project_root() -> Path:
    """프로젝트 루트 경로"""
    return Path(__file__).resolve().parent.parent


def get_version() -> str:
    """version.txt에서 버전 문자열 반환"""
    version_file = get_project_root() / "version.txt"
    try:
        return version_file.read_text(encoding="utf-8").strip() or "0.0.0"
    except OSError:
        return "0.0.0"


# =============================================================================
# 환경변수 헬퍼
# =============================================================================


def get_env_bool(name: str, default: bool = False) -> bool:
    """환경변수를 bool로 변환 (해석 불가 시 기본값)"""
    value = os.environ.get(name)
    if value is None:
        return default

    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return default


def get_env_int(name: str, default: int = 0) -> int:
    """환경변수를 int로 변환 (해석 불가 시 기본값)"""
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def get_default_profile() -> str | None:
    """기본 AWS 프로파일 (AWS_PROFILE → AWS_DEFAULT_PROFILE)"""
    return os.environ.get("AWS_PROFILE") or os.environ.get("AWS_DEFAULT_PROFILE")


def get_default_region() -> str:
    """기본 AWS 리전 (AWS_REGION → AWS_DEFAULT_REGION → 설정값)"""
    return os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION") or settings.DEFAULT_REGION


# =============================================================================
# 로깅 설정
# =============================================================================


@dataclass
class LogConfig:
    """로깅 설정

    Attributes:
        level: 로그 레벨 이름
        format: logging 포맷 문자열
        date_format: 날짜 포맷
    """

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_env(cls) -> LogConfig:
        """LOG_LEVEL / LOG_FORMAT 환경변수에서 로드"""
        default = cls()
        return cls(
            level=os.environ.get("LOG_LEVEL", default.level).upper(),
            format=os.environ.get("LOG_FORMAT", default.format),
        )


# =============================================================================
# 프로퍼티 파일
# =============================================================================


def _to_property_string(value: Any) -> str:
    # YAML bool은 프로퍼티 규약("true"/"false")으로 변환
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def load_property_file(path: str | Path) -> dict[str, str]:
    """YAML 프로퍼티 파일 로드

    최상위가 {프로퍼티명: 값} 매핑인 YAML 파일을 읽어 문자열 딕셔너리로 반환합니다.
    값이 null인 항목은 제외됩니다.

    Args:
        path: YAML 파일 경로

    Returns:
        {프로퍼티명: 문자열 값}

    Raises:
        ConfigError: 파일을 읽을 수 없거나 형식이 잘못된 경우
    """
    config_file = Path(path)
    try:
        with config_file.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(str(config_file), "파일을 읽을 수 없음", cause=e) from e
    except yaml.YAMLError as e:
        raise ConfigError(str(config_file), "YAML 파싱 실패", cause=e) from e

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(str(config_file), "최상위는 매핑이어야 함")

    values: dict[str, str] = {}
    for name, value in raw.items():
        if isinstance(value, (dict, list)):
            raise ConfigError(str(config_file), f"'{name}' 값은 스칼라여야 함")
        if value is None:
            continue
        values[str(name)] = _to_property_string(value)

    return values
