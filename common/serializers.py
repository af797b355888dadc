from rest_framework import serializers

from .content import ContentRef


class ContentTargetIn(serializers.Serializer):
    # snippet_id / doc_id / bug_id 중 정확히 하나. 검증 후 attrs["ref"] 에 ContentRef 를 담는다
    snippet_id = serializers.UUIDField(required=False, allow_null=True)
    doc_id = serializers.UUIDField(required=False, allow_null=True)
    bug_id = serializers.UUIDField(required=False, allow_null=True)

    def validate(self, attrs):
        attrs = super().validate(attrs)
        attrs["ref"] = ContentRef.from_fields(attrs)
        return attrs
