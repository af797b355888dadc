from rest_framework import serializers

from .models import User, UserPreferences


class UserSummaryOut(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ("id", "username", "name", "avatar")
        read_only_fields = fields


class MeOut(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = (
            "id",
            "username",
            "email",
            "name",
            "bio",
            "avatar",
            "github_url",
            "website",
            "location",
            "company",
            "twitter_username",
            "tech_stack",
            "role",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class ProviderProfileIn(serializers.Serializer):
    # OAuth 제공자에서 받은 프로필. id/username/email 이 없으면 로그인 거부
    id = serializers.CharField(max_length=32)
    username = serializers.CharField(max_length=39)
    email = serializers.EmailField()
    name = serializers.CharField(max_length=100, required=False, allow_null=True, allow_blank=True)
    avatar_url = serializers.URLField(max_length=500, required=False, allow_null=True, allow_blank=True)
    html_url = serializers.URLField(max_length=500, required=False, allow_null=True, allow_blank=True)
    bio = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    blog = serializers.CharField(max_length=255, required=False, allow_null=True, allow_blank=True)
    location = serializers.CharField(max_length=100, required=False, allow_null=True, allow_blank=True)
    company = serializers.CharField(max_length=100, required=False, allow_null=True, allow_blank=True)
    twitter_username = serializers.CharField(max_length=50, required=False, allow_null=True, allow_blank=True)
    public_repos = serializers.IntegerField(min_value=0, required=False, default=0)
    followers = serializers.IntegerField(min_value=0, required=False, default=0)
    following = serializers.IntegerField(min_value=0, required=False, default=0)
    created_at = serializers.DateTimeField(required=False, allow_null=True)


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, allow_blank=True)
    all_logout = serializers.BooleanField(required=False, default=False)


class PreferencesSerializer(serializers.ModelSerializer):
    class Meta:
        model = UserPreferences
        fields = ("theme", "email_notifications", "push_notifications", "profile_public", "updated_at")
        read_only_fields = ("updated_at",)
