import uuid
from dataclasses import dataclass
from typing import Mapping

from django.apps import apps
from django.db import models
from rest_framework.exceptions import ValidationError


class ContentKind(models.TextChoices):
    SNIPPET = "snippet", "Snippet"
    DOC = "doc", "Doc"
    BUG = "bug", "Bug"


# 종류별 저장 모델 (app_label.ModelName)
CONTENT_MODEL_LABELS = {
    ContentKind.SNIPPET: "contents.Snippet",
    ContentKind.DOC: "contents.Doc",
    ContentKind.BUG: "contents.Bug",
}

# 요청 바디의 대상 필드명 -> 종류
TARGET_FIELDS = {
    "snippet_id": ContentKind.SNIPPET,
    "doc_id": ContentKind.DOC,
    "bug_id": ContentKind.BUG,
}


@dataclass(frozen=True)
class ContentRef:
    """
    댓글/좋아요/북마크/알림이 가리키는 콘텐츠 한 건. (kind, id) 쌍으로만 식별한다.
    DB 에는 content_kind + content_id 두 컬럼으로 저장된다.
    """

    kind: ContentKind
    id: uuid.UUID

    def __post_init__(self):
        object.__setattr__(self, "kind", ContentKind(self.kind))
        if not isinstance(self.id, uuid.UUID):
            object.__setattr__(self, "id", uuid.UUID(str(self.id)))

    @classmethod
    def from_fields(cls, data: Mapping) -> "ContentRef":
        present = [name for name in TARGET_FIELDS if data.get(name)]
        if len(present) != 1:
            raise ValidationError({"non_field_errors": ["Exactly one of snippet_id, doc_id or bug_id must be provided."]})
        name = present[0]
        try:
            return cls(TARGET_FIELDS[name], data[name])
        except ValueError:
            raise ValidationError({name: ["Must be a valid UUID."]})

    @classmethod
    def of(cls, instance) -> "ContentRef":
        return cls(instance.kind, instance.pk)

    @property
    def model(self):
        return apps.get_model(CONTENT_MODEL_LABELS[self.kind])

    def resolve(self):
        return self.model.objects.select_related("author").filter(pk=self.id).first()

    def as_fields(self) -> dict:
        return {"content_kind": self.kind.value, "content_id": self.id}

    def as_payload(self) -> dict:
        return {"kind": self.kind.value, "id": str(self.id)}


class ContentTarget(models.Model):
    content_kind = models.CharField(max_length=16, choices=ContentKind.choices)
    content_id = models.UUIDField()

    class Meta:
        abstract = True

    @property
    def content_ref(self) -> ContentRef:
        return ContentRef(self.content_kind, self.content_id)
