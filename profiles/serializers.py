from rest_framework import serializers

from core.models import User
from core.serializers import MeOut

MAX_TECH_STACK = 20
MAX_TECH_LENGTH = 30


class TechStackField(serializers.ListField):
    child = serializers.CharField(max_length=MAX_TECH_LENGTH, allow_blank=False)

    def to_internal_value(self, data):
        items = super().to_internal_value(data)
        seen = []
        for item in (i.strip() for i in items):
            if item and item not in seen:
                seen.append(item)
        if len(seen) > MAX_TECH_STACK:
            raise serializers.ValidationError(f"At most {MAX_TECH_STACK} entries allowed.")
        return seen


class ProfileOut(serializers.ModelSerializer):
    """공개 프로필 + 집계. 집계 값은 context["stats"] 에서 채운다."""

    snippets_count = serializers.SerializerMethodField()
    docs_count = serializers.SerializerMethodField()
    bugs_count = serializers.SerializerMethodField()
    followers_count = serializers.SerializerMethodField()
    following_count = serializers.SerializerMethodField()
    is_following = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = (
            "id",
            "username",
            "name",
            "bio",
            "avatar",
            "github_url",
            "website",
            "location",
            "company",
            "twitter_username",
            "tech_stack",
            "public_repos",
            "github_followers",
            "github_following",
            "snippets_count",
            "docs_count",
            "bugs_count",
            "followers_count",
            "following_count",
            "is_following",
            "created_at",
        )
        read_only_fields = fields

    def _stat(self, key, default=0):
        return self.context.get("stats", {}).get(key, default)

    def get_snippets_count(self, obj) -> int:
        return self._stat("snippets_count")

    def get_docs_count(self, obj) -> int:
        return self._stat("docs_count")

    def get_bugs_count(self, obj) -> int:
        return self._stat("bugs_count")

    def get_followers_count(self, obj) -> int:
        return self._stat("followers_count")

    def get_following_count(self, obj) -> int:
        return self._stat("following_count")

    def get_is_following(self, obj) -> bool:
        return self._stat("is_following", False)


class ProfileUpdateIn(serializers.ModelSerializer):
    tech_stack = TechStackField(required=False)

    class Meta:
        model = User
        fields = ("name", "bio", "website", "location", "company", "twitter_username", "tech_stack")
        extra_kwargs = {"bio": {"max_length": 500}}


class MyProfileOut(MeOut):
    class Meta(MeOut.Meta):
        fields = MeOut.Meta.fields + ("public_repos", "github_followers", "github_following")
        read_only_fields = fields
