import bcrypt

from ..types.setting import Setting


class PasswordHasher:
    """
    bcrypt only looks at the first 72 bytes of a password, longer passwords
    are rejected by request validation
    """

    def __init__(self, setting: Setting) -> None:
        self._setting = setting

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._setting.auth.bcrypt_rounds)
        return bcrypt.hashpw(password.encode(), salt).decode()

    def verify(self, password: str, hashed: str) -> bool:
        return bcrypt.checkpw(password.encode(), hashed.encode())
