class InvalidToken(Exception):
    pass


class TokenNotProvided(InvalidToken):
    pass


class DBNotReady(Exception):
    pass


class UserNotFound(Exception):
    pass
