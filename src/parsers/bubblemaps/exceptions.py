class BubblemapsError(Exception):
    retryable = False


class TokenNotComputedError(BubblemapsError):
    pass


class UnsupportedChainError(BubblemapsError):
    pass


class BubblemapsFetchError(BubblemapsError):
    retryable = True


class ScreenshotError(Exception):
    pass
