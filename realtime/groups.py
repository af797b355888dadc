import re

# 클라이언트가 보내는 room id 규칙. Channels 그룹명 규칙(^[A-Za-z0-9._-]+$, 100자 미만)도 함께 만족해야 한다
ROOM_ID_MAX_LENGTH = 50
_ROOM_ID_RE = re.compile(r"^[A-Za-z0-9._-]+$")


def is_valid_room_id(value) -> bool:
    return isinstance(value, str) and 0 < len(value) <= ROOM_ID_MAX_LENGTH and bool(_ROOM_ID_RE.match(value))


def user_room(user_id) -> str:
    return f"user.{user_id}"


def content_room(content_id) -> str:
    return f"content.{content_id}"
