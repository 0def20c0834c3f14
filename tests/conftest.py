"""
tests/conftest.py - pytest 공통 픽스처

AWS API 모킹과 테스트 헬퍼를 제공합니다.

Usage:
    def test_something(mock_s3_client, moto_s3):
        # mock_s3_client: MagicMock 기반 S3 클라이언트
        # moto_s3: moto를 사용한 S3 모킹
        pass
"""

import os
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """테스트 환경 설정 (테스트 종료 시 복원)"""
    for name, value in (
        ("AWS_DEFAULT_REGION", "ap-northeast-2"),
        ("AWS_ACCESS_KEY_ID", "testing"),
        ("AWS_SECRET_ACCESS_KEY", "testing"),
    ):
        if name not in os.environ:
            monkeypatch.setenv(name, value)


# =============================================================================
# AWS 모킹 픽스처
# =============================================================================


@pytest.fixture
def mock_s3_client():
    """S3 클라이언트 모킹"""
    mock_client = MagicMock()

    mock_client.get_object_tagging.return_value = {
        "TagSet": [
            {"Key": "color", "Value": "red"},
            {"Key": "size", "Value": "M"},
        ]
    }
    mock_client.put_object_tagging.return_value = {}

    yield mock_client


@pytest.fixture
def mock_tag_store():
    """ObjectTagStore 테스트 더블 (기존 태그 없음)"""
    store = MagicMock()
    store.get_tags.return_value = []
    store.set_tags.return_value = None
    return store


# =============================================================================
# 유틸리티 함수
# =============================================================================


def create_mock_client_error(
    error_code: str,
    error_message: str = "Test error",
    operation_name: str = "TestOperation",
) -> Exception:
    """ClientError 생성 헬퍼"""
    from botocore.exceptions import ClientError

    return ClientError(
        {
            "Error": {
                "Code": error_code,
                "Message": error_message,
            }
        },
        operation_name,
    )


# =============================================================================
# moto 통합
# =============================================================================


@pytest.fixture
def aws_credentials(monkeypatch):
    """moto 사용 시 AWS 자격 증명 설정 (테스트 종료 시 복원)"""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "ap-northeast-2")
    monkeypatch.delenv("AWS_PROFILE", raising=False)


@pytest.fixture
def moto_s3(aws_credentials):
    """moto를 사용한 S3 모킹 (버전 관리가 켜진 test-bucket 포함)"""
    moto = pytest.importorskip("moto")

    with moto.mock_aws():
        import boto3

        s3 = boto3.client("s3", region_name="ap-northeast-2")
        s3.create_bucket(
            Bucket="test-bucket",
            CreateBucketConfiguration={"LocationConstraint": "ap-northeast-2"},
        )
        s3.put_bucket_versioning(Bucket="test-bucket", VersioningConfiguration={"Status": "Enabled"})
        yield s3
