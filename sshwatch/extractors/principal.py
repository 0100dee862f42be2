"""Principal strategies — the claimed username on an auth line."""

from sshwatch.extractors import Extractor


class ForUser(Extractor):
    id = "for_user"
    field = "principal"
    description = "'for user <name>' (PAM style)"
    pattern = r"for\s+user\s+(\w+)"


class UserWord(Extractor):
    id = "user_word"
    field = "principal"
    description = "'user <name>' as in Invalid user admin"
    pattern = r"user\s+(\w+)"


class ForWord(Extractor):
    id = "for_word"
    field = "principal"
    description = "'for <name>' as in Accepted publickey for deploy"
    pattern = r"for\s+(\w+)"
