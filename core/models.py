import uuid

from django.contrib.auth.models import (
    AbstractBaseUser,
    BaseUserManager,
    PermissionsMixin,
)
from django.db import models


class Role(models.TextChoices):
    USER = "USER", "User"
    ADMIN = "ADMIN", "Admin"
    BLOCKED = "BLOCKED", "Blocked"


class UserManager(BaseUserManager):
    def create_user(self, username, **extra_fields):
        if not username:
            raise ValueError("username is required")
        if extra_fields.get("email"):
            extra_fields["email"] = self.normalize_email(extra_fields["email"])
        user = self.model(username=username, **extra_fields)
        # OAuth 전용 계정: 로컬 비밀번호 없음
        user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, username, password=None, **extra_fields):
        extra_fields.setdefault("role", Role.ADMIN)
        extra_fields.setdefault("is_superuser", True)
        user = self.model(username=username, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user


class User(AbstractBaseUser, PermissionsMixin):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    username = models.CharField(max_length=39, unique=True)
    email = models.EmailField(blank=True, default="")
    name = models.CharField(max_length=100, blank=True, default="")
    bio = models.TextField(blank=True, default="")
    avatar = models.URLField(max_length=500, blank=True, default="")

    # GitHub 프로필에서 가져와 로그인마다 갱신되는 값
    github_id = models.CharField(max_length=32, unique=True, null=True, blank=True)
    github_url = models.URLField(max_length=500, blank=True, default="")
    website = models.CharField(max_length=255, blank=True, default="")
    location = models.CharField(max_length=100, blank=True, default="")
    company = models.CharField(max_length=100, blank=True, default="")
    twitter_username = models.CharField(max_length=50, blank=True, default="")
    tech_stack = models.JSONField(default=list, blank=True)
    public_repos = models.PositiveIntegerField(default=0)
    github_followers = models.PositiveIntegerField(default=0)
    github_following = models.PositiveIntegerField(default=0)
    github_created_at = models.DateTimeField(null=True, blank=True)

    role = models.CharField(max_length=10, choices=Role.choices, default=Role.USER)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "username"
    REQUIRED_FIELDS = []

    class Meta:
        db_table = "users"
        indexes = [models.Index(fields=["role", "-created_at"])]

    def __str__(self):
        return self.username

    # BLOCKED 계정은 토큰 인증/갱신이 모두 거부된다
    @property
    def is_active(self):
        return self.role != Role.BLOCKED

    @property
    def is_staff(self):
        return self.role == Role.ADMIN

    @property
    def is_admin(self):
        return self.role == Role.ADMIN


class UserPreferences(models.Model):
    class Theme(models.TextChoices):
        LIGHT = "light", "Light"
        DARK = "dark", "Dark"
        SYSTEM = "system", "System"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="preferences")
    theme = models.CharField(max_length=10, choices=Theme.choices, default=Theme.SYSTEM)
    email_notifications = models.BooleanField(default=True)
    push_notifications = models.BooleanField(default=True)
    profile_public = models.BooleanField(default=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "user_preferences"

    @classmethod
    def for_user(cls, user) -> "UserPreferences":
        prefs, _ = cls.objects.get_or_create(user=user)
        return prefs
