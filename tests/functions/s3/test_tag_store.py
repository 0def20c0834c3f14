"""
tests/functions/s3/test_tag_store.py - S3 객체 태그 저장소 테스트

boto3 호출 파라미터, ClientError 래핑, moto 기반 실제 태깅 흐름을 검증합니다.
"""

from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from core.exceptions import APICallError, is_not_found
from core.flow import FlowRecord, ProcessContext, ProcessSession, Relationship
from functions.s3.tag_object import TagS3Object
from functions.s3.tag_store import S3ObjectTagStore, Tag


class TestTag:
    """Tag 데이터 클래스 테스트"""

    def test_to_api(self):
        """AWS API 형식 변환"""
        assert Tag("env", "prod").to_api() == {"Key": "env", "Value": "prod"}

    def test_from_api(self):
        """AWS API 형식에서 생성"""
        assert Tag.from_api({"Key": "env", "Value": "prod"}) == Tag("env", "prod")


class TestS3ObjectTagStore:
    """S3ObjectTagStore 테스트 (MagicMock 클라이언트)"""

    def test_get_tags(self, mock_s3_client):
        """TagSet을 Tag 목록으로 변환"""
        store = S3ObjectTagStore(mock_s3_client)

        tags = store.get_tags("test-bucket", "a.csv")

        assert tags == [Tag("color", "red"), Tag("size", "M")]
        mock_s3_client.get_object_tagging.assert_called_once_with(Bucket="test-bucket", Key="a.csv")

    def test_get_tags_empty(self, mock_s3_client):
        """태그 없는 객체"""
        mock_s3_client.get_object_tagging.return_value = {"TagSet": []}

        assert S3ObjectTagStore(mock_s3_client).get_tags("test-bucket", "a.csv") == []

    def test_set_tags_without_version(self, mock_s3_client):
        """버전 없으면 VersionId 생략"""
        S3ObjectTagStore(mock_s3_client).set_tags("test-bucket", "a.csv", [Tag("size", "L")])

        mock_s3_client.put_object_tagging.assert_called_once_with(
            Bucket="test-bucket",
            Key="a.csv",
            Tagging={"TagSet": [{"Key": "size", "Value": "L"}]},
        )

    def test_set_tags_with_version(self, mock_s3_client):
        """버전이 있으면 VersionId 전달"""
        S3ObjectTagStore(mock_s3_client).set_tags("test-bucket", "a.csv", [Tag("size", "L")], version="v1")

        _, kwargs = mock_s3_client.put_object_tagging.call_args
        assert kwargs["VersionId"] == "v1"

    def test_get_tags_wraps_client_error(self, mock_s3_client):
        """ClientError → APICallError"""
        mock_s3_client.get_object_tagging.side_effect = ClientError(
            {"Error": {"Code": "NoSuchKey", "Message": "The specified key does not exist."}},
            "GetObjectTagging",
        )

        with pytest.raises(APICallError) as exc_info:
            S3ObjectTagStore(mock_s3_client).get_tags("test-bucket", "missing.csv")

        assert exc_info.value.error_code == "NoSuchKey"
        assert exc_info.value.operation == "get_object_tagging"
        assert isinstance(exc_info.value.__cause__, ClientError)
        assert is_not_found(exc_info.value)

    def test_set_tags_wraps_client_error(self, mock_s3_client):
        """put_object_tagging 실패도 APICallError"""
        mock_s3_client.put_object_tagging.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "Access Denied"}},
            "PutObjectTagging",
        )

        with pytest.raises(APICallError) as exc_info:
            S3ObjectTagStore(mock_s3_client).set_tags("test-bucket", "a.csv", [Tag("a", "b")])

        assert exc_info.value.operation == "put_object_tagging"

    @patch("functions.s3.tag_store.get_client")
    def test_from_session(self, mock_get_client):
        """boto3 Session에서 S3 클라이언트 생성"""
        mock_session = MagicMock()

        S3ObjectTagStore.from_session(mock_session, region_name="us-east-1", endpoint_url="http://localhost:4566")

        mock_get_client.assert_called_once_with(
            mock_session, "s3", region_name="us-east-1", endpoint_url="http://localhost:4566"
        )


class TestTagS3ObjectWithMoto:
    """moto S3 기반 통합 테스트"""

    def _run(self, s3, values, attributes=None):
        record = FlowRecord(attributes=attributes or {})
        session = ProcessSession([record])
        context = ProcessContext(TagS3Object.PROPERTIES, values)
        relationship = TagS3Object(S3ObjectTagStore(s3)).on_trigger(context, session)
        return record, relationship

    def test_append_preserves_existing_tags(self, moto_s3):
        """기존 태그 보존 + 같은 키 갱신"""
        moto_s3.put_object(Bucket="test-bucket", Key="a.csv", Body=b"x", Tagging="color=red&size=M")

        record, relationship = self._run(
            moto_s3,
            {"Bucket": "test-bucket", "tag-key": "size", "tag-value": "L"},
            {"filename": "a.csv"},
        )

        assert relationship is Relationship.SUCCESS
        tag_set = moto_s3.get_object_tagging(Bucket="test-bucket", Key="a.csv")["TagSet"]
        assert {t["Key"]: t["Value"] for t in tag_set} == {"color": "red", "size": "L"}
        assert record.attributes["s3.tag.size"] == "L"

    def test_replace_discards_existing_tags(self, moto_s3):
        """replace 모드는 기존 태그를 모두 제거"""
        moto_s3.put_object(Bucket="test-bucket", Key="a.csv", Body=b"x", Tagging="color=red")

        _, relationship = self._run(
            moto_s3,
            {
                "Bucket": "test-bucket",
                "Object Key": "a.csv",
                "tag-key": "status",
                "tag-value": "archived",
                "append-tag": "false",
            },
        )

        assert relationship is Relationship.SUCCESS
        tag_set = moto_s3.get_object_tagging(Bucket="test-bucket", Key="a.csv")["TagSet"]
        assert tag_set == [{"Key": "status", "Value": "archived"}]

    def test_version_targets_specific_version(self, moto_s3):
        """버전 지정 시 해당 버전만 태깅"""
        first = moto_s3.put_object(Bucket="test-bucket", Key="a.csv", Body=b"v1")
        moto_s3.put_object(Bucket="test-bucket", Key="a.csv", Body=b"v2")

        _, relationship = self._run(
            moto_s3,
            {
                "Bucket": "test-bucket",
                "Object Key": "a.csv",
                "Version": first["VersionId"],
                "tag-key": "stage",
                "tag-value": "old",
                "append-tag": "false",
            },
        )

        assert relationship is Relationship.SUCCESS
        old_tags = moto_s3.get_object_tagging(Bucket="test-bucket", Key="a.csv", VersionId=first["VersionId"])
        current_tags = moto_s3.get_object_tagging(Bucket="test-bucket", Key="a.csv")
        assert old_tags["TagSet"] == [{"Key": "stage", "Value": "old"}]
        assert current_tags["TagSet"] == []

    def test_missing_object_routes_to_failure(self, moto_s3):
        """존재하지 않는 객체는 failure"""
        record, relationship = self._run(
            moto_s3,
            {"Bucket": "test-bucket", "Object Key": "missing.csv", "tag-key": "a", "tag-value": "b"},
        )

        assert relationship is Relationship.FAILURE
        assert record.attributes == {}
