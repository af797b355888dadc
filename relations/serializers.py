from rest_framework import serializers

from core.serializers import UserSummaryOut
from .models import Follow


class FollowerOut(serializers.ModelSerializer):
    user = UserSummaryOut(source="follower", read_only=True)

    class Meta:
        model = Follow
        fields = ("user", "created_at")


class FollowingOut(serializers.ModelSerializer):
    user = UserSummaryOut(source="following", read_only=True)

    class Meta:
        model = Follow
        fields = ("user", "created_at")


class SuggestionOut(UserSummaryOut):
    follower_total = serializers.IntegerField(read_only=True)

    class Meta(UserSummaryOut.Meta):
        fields = UserSummaryOut.Meta.fields + ("bio", "follower_total")
        read_only_fields = fields
