class CoinMarketCapError(Exception):
    pass


class CmcTokenNotFoundError(CoinMarketCapError):
    pass
