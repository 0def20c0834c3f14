"""
functions/s3 - S3 객체 처리

Modules:
    - tag_store: 객체 태그 저장소 포트 + boto3 구현
    - tag_object: S3 객체 태그 설정 처리기 (TagS3Object)
"""

from .tag_object import TagParameters, TagS3Object, apply_tag, build_tag_set
from .tag_store import ObjectTagStore, S3ObjectTagStore, Tag

__all__: list[str] = [
    "TagS3Object",
    "TagParameters",
    "apply_tag",
    "build_tag_set",
    "ObjectTagStore",
    "S3ObjectTagStore",
    "Tag",
]
