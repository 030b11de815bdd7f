class DomainError(Exception):
    pass


class InvalidArgumentError(DomainError):
    pass
