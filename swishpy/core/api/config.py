"""
API configuration module.

Provides comprehensive configuration for the SwissTransfer client.
Open for extension through custom configurations.
"""
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Tuple
import ssl


SERVICE_DOMAIN = 'www.swisstransfer.com'
CHUNK_SIZE = 52428800  # 50 MiB


@dataclass
class ProxyConfig:
    """
    Proxy configuration.

    Supports HTTP and HTTPS proxies.
    """
    url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    def to_aiohttp_proxy(self) -> Optional[str]:
        """Convert to aiohttp proxy format."""
        if not self.url:
            return None

        if self.username and self.password:
            # Insert credentials into URL
            if '://' in self.url:
                protocol, rest = self.url.split('://', 1)
                return f"{protocol}://{self.username}:{self.password}@{rest}"

        return self.url


@dataclass
class SSLConfig:
    """
    SSL/TLS configuration.

    Allows customization of SSL behavior for security requirements.
    """
    verify: bool = True
    ca_file: Optional[str] = None
    check_hostname: bool = True

    def create_ssl_context(self):
        """Create SSL context from configuration (False disables verification)."""
        if not self.verify:
            return False

        context = ssl.create_default_context()

        if self.ca_file:
            context.load_verify_locations(self.ca_file)

        context.check_hostname = self.check_hostname

        return context


@dataclass
class TimeoutConfig:
    """
    Timeout configuration.

    Chunk uploads move 50 MiB per request, so there is no total timeout
    by default; stalled sockets are caught by sock_read instead.
    """
    total: Optional[float] = None
    connect: float = 30.0
    sock_read: float = 120.0
    sock_connect: float = 30.0

    def to_aiohttp_timeout(self):
        """Convert to aiohttp ClientTimeout."""
        import aiohttp
        return aiohttp.ClientTimeout(
            total=self.total,
            connect=self.connect,
            sock_read=self.sock_read,
            sock_connect=self.sock_connect
        )


@dataclass
class RetryConfig:
    """
    Retry configuration for POST requests answered with status >= 400.

    Set base_delay to 0 to retry immediately.
    """
    max_retries: int = 3
    base_delay: float = 0.5
    max_delay: float = 8.0
    exponential_base: float = 2.0
    max_total_delay: float = 30.0

    def calculate_delay(self, attempt: int) -> float:
        """Calculate delay for given attempt number."""
        delay = self.base_delay * (self.exponential_base ** attempt)
        return min(delay, self.max_delay)


@dataclass
class ScanPollConfig:
    """
    Virus-scan polling configuration.

    A freshly uploaded link is not downloadable until the service has
    scanned it; the resolver polls with exponential backoff until
    timeout seconds have been spent waiting.
    """
    initial_delay: float = 5.0
    backoff_factor: float = 2.0
    max_delay: float = 60.0
    timeout: float = 600.0

    def calculate_delay(self, attempt: int) -> float:
        """Calculate delay before poll number attempt + 1."""
        delay = self.initial_delay * (self.backoff_factor ** attempt)
        return min(delay, self.max_delay)


@dataclass
class APIConfig:
    """
    Complete client configuration.

    Centralizes all configuration options for the SwissTransfer client.
    Follows Open/Closed principle - extend by creating new config classes.
    """
    # Service settings
    domain: str = SERVICE_DOMAIN

    # Identification headers sent on every request
    user_agent: str = 'swisstransfer-webext/1.0'
    cookie: str = 'webext=1'
    referer: str = 'swish/0.1'

    # Upload settings
    chunk_size: int = CHUNK_SIZE
    max_parallel_chunks: int = 1
    lang: str = 'en_GB'

    # Sub-configurations
    proxy: Optional[ProxyConfig] = None
    ssl: SSLConfig = field(default_factory=SSLConfig)
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    scan_poll: ScanPollConfig = field(default_factory=ScanPollConfig)

    # Additional headers appended after the baseline set
    extra_headers: Dict[str, str] = field(default_factory=dict)

    # Logging level applied to the transport logger; None leaves it alone
    log_level: Optional[int] = None

    # Connection pool settings
    limit_per_host: int = 10
    limit: int = 100

    @property
    def api_url(self) -> str:
        """Base URL of the JSON API."""
        return f"https://{self.domain}/api"

    def share_link(self, link_uuid: str) -> str:
        """Public share URL for a link UUID."""
        return f"https://{self.domain}/d/{link_uuid}"

    @classmethod
    def default(cls) -> 'APIConfig':
        """Create default configuration."""
        return cls()

    @classmethod
    def with_proxy(cls, proxy_url: str, **kwargs) -> 'APIConfig':
        """Create configuration with proxy."""
        return cls(
            proxy=ProxyConfig(url=proxy_url),
            **kwargs
        )

    @classmethod
    def insecure(cls, **kwargs) -> 'APIConfig':
        """Create configuration with SSL verification disabled."""
        return cls(
            ssl=SSLConfig(verify=False, check_hostname=False),
            **kwargs
        )

    def baseline_headers(self) -> List[Tuple[str, str]]:
        """Identification headers carried by every request, in order."""
        headers = [
            ('User-Agent', self.user_agent),
            ('Cookie', self.cookie),
            ('Referer', self.referer),
        ]
        headers.extend(self.extra_headers.items())
        return headers

    def get_connector_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp TCPConnector."""
        return {
            'limit': self.limit,
            'limit_per_host': self.limit_per_host,
            'ssl': self.ssl.create_ssl_context(),
        }

    def get_session_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp ClientSession."""
        return {
            'timeout': self.timeout.to_aiohttp_timeout(),
        }
