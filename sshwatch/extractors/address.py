"""Address strategies — where sshd puts the client IPv4 address.

sshd is not consistent about it: "Failed password for root from 1.2.3.4
port 22", "Connection closed by 1.2.3.4 port 22", "Invalid user admin
from 1.2.3.4".  The strategies below cover those shapes, most specific
first.
"""

from sshwatch.extractors import Extractor, IPV4


class FromClause(Extractor):
    id = "from_clause"
    field = "address"
    description = "'from <ip>' as in Failed password ... from 1.2.3.4"
    pattern = r"from\s+" + IPV4


class BeforePort(Extractor):
    id = "before_port"
    field = "address"
    description = "'<ip> port' as in Connection closed by 1.2.3.4 port 22"
    pattern = IPV4 + r"\s+port"


class ForAddress(Extractor):
    id = "for_address"
    field = "address"
    description = "'for <ip>' as in reverse mapping checks"
    pattern = r"for\s+" + IPV4


class AfterUser(Extractor):
    # Last resort: any address somewhere after the word "user".
    id = "after_user"
    field = "address"
    description = "first address following 'user'"
    pattern = r"user.*?" + IPV4
