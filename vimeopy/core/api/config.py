"""
API configuration module.

Provides configuration for the Vimeo API client, the upload session and
the picture activation retry.
"""
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import ssl


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
    """
    verify: bool = True
    cert_file: Optional[str] = None
    key_file: Optional[str] = None
    ca_file: Optional[str] = None
    check_hostname: bool = True

    def create_ssl_context(self) -> Optional[ssl.SSLContext]:
        """Create SSL context from configuration."""
        if not self.verify:
            return False  # Disable SSL verification

        context = ssl.create_default_context()

        if self.ca_file:
            context.load_verify_locations(self.ca_file)

        if self.cert_file:
            context.load_cert_chain(
                self.cert_file,
                keyfile=self.key_file
            )

        context.check_hostname = self.check_hostname

        return context


@dataclass
class TimeoutConfig:
    """
    Timeout configuration.

    Every timeout is disabled by default: streaming a multi-gigabyte video
    may legitimately take hours.
    """
    total: Optional[float] = None
    connect: Optional[float] = None
    sock_read: Optional[float] = None
    sock_connect: Optional[float] = None

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
class UploadSettings:
    """
    Upload session settings.

    Attributes:
        buffer_size: Bytes read from disk per write, progress granularity
        content_type: Content-Type sent with the video bytes
        fail_fast_on_auth: Abort the session when a transfer PUT is
            rejected with 401/403 instead of falling through to verification
        max_stalled_attempts: Consecutive attempts without new confirmed
            bytes before giving up (None retries forever)
    """
    buffer_size: int = 1024 * 1024
    content_type: str = 'video/x-ms-wmv'
    fail_fast_on_auth: bool = True
    max_stalled_attempts: Optional[int] = None

    def __post_init__(self):
        if self.buffer_size <= 0:
            raise ValueError("Buffer size must be positive")
        if self.max_stalled_attempts is not None and self.max_stalled_attempts <= 0:
            raise ValueError("max_stalled_attempts must be positive")


@dataclass
class ActivationRetryConfig:
    """
    Picture activation retry configuration.

    Activation may race the server's post-upload processing, so it is
    retried with a fixed delay until the deadline has elapsed.
    """
    delay: float = 1.0
    deadline: float = 10.0


@dataclass
class APIConfig:
    """
    Complete API configuration.

    Centralizes all configuration options for the Vimeo API client.
    """
    # Gateway settings
    gateway: str = 'https://api.vimeo.com'
    api_version: str = '3.2'

    # User agent
    user_agent: str = 'vimeopy/1.0.0'

    # Sub-configurations
    proxy: Optional[ProxyConfig] = None
    ssl: SSLConfig = field(default_factory=SSLConfig)
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    upload: UploadSettings = field(default_factory=UploadSettings)
    activation: ActivationRetryConfig = field(default_factory=ActivationRetryConfig)

    # Additional headers
    extra_headers: Dict[str, str] = field(default_factory=dict)

    # Logging
    log_level: int = 20  # logging.INFO

    # Connection pool settings
    limit_per_host: int = 10
    limit: int = 100

    @property
    def accept_header(self) -> str:
        """Accept header pinning the API version."""
        return f"application/vnd.vimeo.*+json;version={self.api_version}"

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

    def get_connector_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp TCPConnector."""
        return {
            'limit': self.limit,
            'limit_per_host': self.limit_per_host,
            'ssl': self.ssl.create_ssl_context(),
        }

    def get_session_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp ClientSession."""
        headers = {
            'User-Agent': self.user_agent,
            **self.extra_headers
        }

        return {
            'headers': headers,
            'timeout': self.timeout.to_aiohttp_timeout(),
        }
