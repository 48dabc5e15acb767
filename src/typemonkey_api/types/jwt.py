from pydantic import BaseModel


class JWTPayload(BaseModel):
    """
    sub: user id
    """

    sub: str
    name: str
    exp: int
    nbf: int
    iat: int

    @property
    def user_id(self) -> int:
        return int(self.sub)
