from rest_framework import serializers

from core.serializers import UserSummaryOut
from core.models import User
from .services import SEARCH_TYPES


class SearchIn(serializers.Serializer):
    q = serializers.CharField(max_length=200, trim_whitespace=True)
    type = serializers.ChoiceField(choices=SEARCH_TYPES, required=False, default="all")


class TrendingIn(serializers.Serializer):
    days = serializers.IntegerField(min_value=1, max_value=365, required=False, default=7)
    limit = serializers.IntegerField(min_value=1, max_value=50, required=False, default=10)


class TagsIn(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=100, required=False, default=20)


class UserHit(UserSummaryOut):
    class Meta(UserSummaryOut.Meta):
        model = User
        fields = UserSummaryOut.Meta.fields + ("bio",)
        read_only_fields = fields
