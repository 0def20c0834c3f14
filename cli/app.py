"""
cli/app.py - 메인 CLI 엔트리포인트

Click 기반의 CLI 애플리케이션 진입점입니다.

명령어 구조:
    s3tag --version             # 버전 표시
    s3tag describe              # 태깅 처리기 프로퍼티 목록
    s3tag tag [OPTIONS]         # 레코드 하나에 대해 태깅 실행

Usage:
    # 프로퍼티 파일 + 레코드 속성
    $ s3tag tag -c tag.yaml -a filename=reports/2024.csv

    # 옵션으로 직접 지정 (replace 모드, 특정 버전)
    $ s3tag tag --bucket my-bucket --key a.csv --version-id 3HL4kqtJ \\
        --tag-key status --tag-value archived --replace

    # JSON 출력 (CI/CD 연동)
    $ s3tag tag -c tag.yaml -a filename=a.csv -f json

환경변수:
    S3TAG_QUIET: true면 -q와 동일
    S3TAG_PENALTY_SECONDS: failure 레코드 패널티 (초, 기본 30)

종료 코드:
    0: success로 라우팅
    1: failure로 라우팅 또는 설정 오류
"""

import json
import logging

import click
from rich.markup import escape

from cli.ui import console, print_error, print_key_value_table, print_success, print_warning, setup_logging
from core.config import (
    get_default_profile,
    get_default_region,
    get_env_bool,
    get_env_int,
    get_version,
    load_property_file,
    settings,
)
from core.exceptions import ConfigError, format_error_for_user
from core.flow import FlowRecord, ProcessContext, ProcessSession, Relationship
from functions.s3.tag_object import (
    APPEND_TAG,
    BUCKET,
    KEY,
    TAG_ATTRIBUTE_PREFIX,
    TAG_KEY,
    TAG_VALUE,
    VERSION_ID,
    TagS3Object,
)
from functions.s3.tag_store import ObjectTagStore, S3ObjectTagStore

logger = logging.getLogger(__name__)

VERSION = get_version()


def _parse_attributes(pairs: tuple[str, ...]) -> dict[str, str]:
    """'key=value' 목록을 속성 딕셔너리로 변환"""
    attributes: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"'key=value' 형식이어야 함: {pair}", param_hint="--attr")
        attributes[name] = value
    return attributes


def _create_store(profile: str | None, region: str | None, endpoint_url: str | None) -> ObjectTagStore:
    """boto3 Session 기반 S3 태그 저장소 생성"""
    import boto3

    session = boto3.Session(profile_name=profile or get_default_profile())
    return S3ObjectTagStore.from_session(
        session,
        region_name=region or get_default_region(),
        endpoint_url=endpoint_url,
    )


@click.group()
@click.version_option(VERSION, prog_name="s3tag")
def cli() -> None:
    """S3 객체 태그 설정 도구"""


@cli.command()
def describe() -> None:
    """태깅 처리기 프로퍼티 목록"""
    rows = {}
    for descriptor in TagS3Object.PROPERTIES:
        flags = ["필수" if descriptor.required else "선택"]
        if descriptor.default_value is not None:
            flags.append(f"기본값={descriptor.default_value}")
        if descriptor.expression_language_supported:
            flags.append("${...} 지원")
        rows[descriptor.name] = f"{descriptor.description} ({', '.join(flags)})"

    print_key_value_table("TagS3Object 프로퍼티", rows, key_header="Property", value_header="Description")
    print_key_value_table(
        "TagS3Object 관계",
        {rel.value: rel.description for rel in TagS3Object.RELATIONSHIPS},
        key_header="Relationship",
        value_header="Description",
    )


@cli.command()
@click.option(
    "-c", "--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="YAML 프로퍼티 파일"
)
@click.option("--bucket", default=None, help="S3 버킷")
@click.option("--key", default=None, help="객체 키 (기본: ${filename})")
@click.option("--version-id", default=None, help="객체 버전 ID")
@click.option("--tag-key", default=None, help="태그 키")
@click.option("--tag-value", default=None, help="태그 값")
@click.option("--append/--replace", "append_tag", default=None, help="기존 태그 유지(append) 또는 교체(replace)")
@click.option("-a", "--attr", "attributes", multiple=True, help="레코드 속성 key=value (다중 가능)")
@click.option("-p", "--profile", default=None, help="AWS 프로파일")
@click.option("-r", "--region", default=None, help="AWS 리전")
@click.option("--endpoint-url", default=None, help="S3 호환 엔드포인트 URL")
@click.option("-f", "--format", "output_format", type=click.Choice(["console", "json"]), default="console")
@click.option("-q", "--quiet", is_flag=True, help="최소 출력 모드")
def tag(
    config_path: str | None,
    bucket: str | None,
    key: str | None,
    version_id: str | None,
    tag_key: str | None,
    tag_value: str | None,
    append_tag: bool | None,
    attributes: tuple[str, ...],
    profile: str | None,
    region: str | None,
    endpoint_url: str | None,
    output_format: str,
    quiet: bool,
) -> None:
    """레코드 하나에 대해 S3 객체 태깅 실행"""
    quiet = quiet or get_env_bool("S3TAG_QUIET")
    setup_logging(quiet=quiet or output_format == "json")

    record_attributes = _parse_attributes(attributes)

    # 1. 프로퍼티 로드 (파일 → 옵션 순으로 덮어씀)
    try:
        values = load_property_file(config_path) if config_path else {}
    except ConfigError as e:
        if output_format == "json":
            click.echo(json.dumps({"error": e.to_dict()}, ensure_ascii=False, indent=2))
        else:
            print_error(escape(format_error_for_user(e)))
        raise SystemExit(1) from e

    overrides = {
        BUCKET.name: bucket,
        KEY.name: key,
        VERSION_ID.name: version_id,
        TAG_KEY.name: tag_key,
        TAG_VALUE.name: tag_value,
        APPEND_TAG.name: None if append_tag is None else str(append_tag).lower(),
    }
    values.update({name: value for name, value in overrides.items() if value is not None})
    logger.debug(f"프로퍼티 {len(values)}개 로드")

    # 2. 설정 검증
    context = ProcessContext(TagS3Object.PROPERTIES, values)
    errors = context.validate()
    if errors:
        if output_format == "json":
            click.echo(json.dumps({"errors": errors}, ensure_ascii=False, indent=2))
        else:
            for error in errors:
                print_error(escape(error))
        raise SystemExit(1)

    # 3. 실행
    record = FlowRecord(attributes=record_attributes)
    session = ProcessSession([record], penalty_seconds=get_env_int("S3TAG_PENALTY_SECONDS", settings.PENALTY_SECONDS))
    processor = TagS3Object(_create_store(profile, region, endpoint_url))
    relationship = processor.on_trigger(context, session)

    # 4. 결과 출력
    tag_attributes = {k: v for k, v in record.attributes.items() if k.startswith(TAG_ATTRIBUTE_PREFIX)}
    succeeded = relationship is Relationship.SUCCESS

    if output_format == "json":
        click.echo(
            json.dumps(
                {
                    "record_id": record.record_id,
                    "relationship": relationship.value if relationship else None,
                    "attributes": record.attributes,
                },
                ensure_ascii=False,
                indent=2,
            )
        )
    elif succeeded:
        print_success(escape(f"{record} → success"))
        if not quiet:
            print_key_value_table("태그 속성", tag_attributes)
    else:
        print_error(escape(f"{record} → failure"))
        print_warning(f"레코드 패널티 {session.penalty_seconds}초 적용")
        console.print("[dim]자세한 원인은 로그를 확인하세요[/dim]")

    raise SystemExit(0 if succeeded else 1)


if __name__ == "__main__":
    cli()
