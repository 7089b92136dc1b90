# Error types raised while building the NFT trait table.
# Every fatal error aborts the run; main() turns it into a single log line.


class NftViewerError(Exception):
    pass


class ConfigurationError(NftViewerError):
    pass


class ApiError(NftViewerError):
    def __init__(self, status_code, body):
        self.status_code = status_code
        self.body = body
        super().__init__(f"API request failed with status {status_code}. Response: {body}")


class EmptyResultError(NftViewerError):
    def __init__(self, source='API'):
        self.source = source
        super().__init__(f"No NFTs found for the given address and contract (source: {source}).")


class LayoutError(NftViewerError):
    pass


class ChunkingError(NftViewerError):
    pass


# Not fatal: a corrupted cache row is treated as a miss and the data is fetched again.
class CacheCorruptionWarning(UserWarning):
    pass
