import uuid

import jwt
import pendulum

from app.models.post import Post


def generate_jwt_token(
    jwt_secret: str, owner_id: str, exp: int = 1, audience: str = "authenticated"
) -> tuple[str, str]:
    iat = pendulum.now()
    exp = iat.add(hours=exp)
    session_id = str(uuid.uuid4())
    return (
        jwt.encode(
            {
                "aud": audience,
                "exp": exp.int_timestamp,
                "iat": iat.int_timestamp,
                "role": "authenticated",
                "session_id": session_id,
                "sub": owner_id,
            },
            jwt_secret,
        ),
        session_id,
    )


def stored_post(post_uuid: str, owner_id: str, data: dict) -> Post:
    now = pendulum.now("UTC").to_iso8601_string()
    return Post(
        id=post_uuid,
        owner_id=owner_id,
        title=data["title"],
        content=data["content"],
        published=data.get("published", False),
        created_at=now,
        updated_at=now,
    )
