class ProviderError(Exception):
    pass


class InvalidAddressError(ProviderError):
    pass


class TokenNotFoundError(ProviderError):
    pass


class ProviderUnavailableError(ProviderError):
    pass
