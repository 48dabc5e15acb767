from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from ..types.jwt import JWTPayload
from ..types.setting import Setting


@dataclass(slots=True)
class GenTokenRet:
    access_token: str
    expires_at: datetime


class TokenGenerator:
    def __init__(self, setting: Setting) -> None:
        self._setting = setting

    def gen_access_token(self, user_id: int, username: str) -> GenTokenRet:
        iat = datetime.now(UTC)
        nbf = iat - timedelta(seconds=1)
        exp = iat + timedelta(seconds=self._setting.token.access_duration)

        payload = JWTPayload(
            sub=str(user_id),
            name=username,
            exp=int(exp.timestamp()),
            nbf=int(nbf.timestamp()),
            iat=int(iat.timestamp()),
        )

        token = jwt.encode(
            payload.model_dump(),
            self._setting.token.secret,
            algorithm=self._setting.token.algorithm,
        )
        return GenTokenRet(access_token=token, expires_at=exp)
