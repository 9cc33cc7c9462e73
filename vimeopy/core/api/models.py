"""
Data models for Vimeo API responses.

Only the fields the client displays are mapped; unknown keys are ignored
and missing ones fall back to defaults.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..exceptions import TicketError


def _get(data: Optional[Dict[str, Any]], key: str, default: Any = None) -> Any:
    """dict.get that tolerates None and null values."""
    if not data:
        return default
    value = data.get(key)
    return default if value is None else value


@dataclass
class QuotaSpace:
    """Upload space in bytes."""
    free: int = 0
    max: int = 0
    used: int = 0

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'QuotaSpace':
        return cls(
            free=_get(data, 'free', 0),
            max=_get(data, 'max', 0),
            used=_get(data, 'used', 0),
        )


@dataclass
class UploadQuota:
    """
    Upload quota of an account.

    Attributes:
        space: Free / max / used bytes
        hd: HD uploads allowed
        sd: SD uploads allowed
    """
    space: QuotaSpace = field(default_factory=QuotaSpace)
    hd: bool = False
    sd: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'UploadQuota':
        quota = _get(data, 'quota', {})
        return cls(
            space=QuotaSpace.from_dict(_get(data, 'space', {})),
            hd=bool(_get(quota, 'hd', False)),
            sd=bool(_get(quota, 'sd', False)),
        )

    def has_space_for(self, file_size: int) -> bool:
        """Check if the account has enough space for a file."""
        return self.space.free >= file_size


@dataclass
class ConnectionItem:
    """A metadata connection of the user resource (albums, videos, ...)."""
    uri: str = ''
    options: List[str] = field(default_factory=list)
    total: int = 0

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'ConnectionItem':
        return cls(
            uri=_get(data, 'uri', ''),
            options=list(_get(data, 'options', [])),
            total=_get(data, 'total', 0),
        )


@dataclass
class UserInfo:
    """
    Vimeo account information.

    Attributes:
        uri: User resource URI
        name: Display name
        link: Profile URL
        created_time: ISO timestamp
        account: Account type (basic, plus, pro, ...)
        upload_quota: Upload quota
        connections: Metadata connections keyed by name
    """
    uri: str = ''
    name: str = ''
    link: str = ''
    created_time: str = ''
    account: str = ''
    upload_quota: UploadQuota = field(default_factory=UploadQuota)
    connections: Dict[str, ConnectionItem] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UserInfo':
        raw_connections = _get(_get(data, 'metadata', {}), 'connections', {})
        return cls(
            uri=_get(data, 'uri', ''),
            name=_get(data, 'name', ''),
            link=_get(data, 'link', ''),
            created_time=_get(data, 'created_time', ''),
            account=_get(data, 'account', ''),
            upload_quota=UploadQuota.from_dict(_get(data, 'upload_quota', {})),
            connections={
                name: ConnectionItem.from_dict(item)
                for name, item in raw_connections.items()
            },
        )


@dataclass
class VideoPrivacy:
    view: str = ''
    embed: str = ''
    comments: str = ''
    download: bool = False
    add: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'VideoPrivacy':
        return cls(
            view=_get(data, 'view', ''),
            embed=_get(data, 'embed', ''),
            comments=_get(data, 'comments', ''),
            download=bool(_get(data, 'download', False)),
            add=bool(_get(data, 'add', False)),
        )


@dataclass
class VideoEntry:
    """
    A single video resource.

    Attributes:
        uri: Video resource URI (/videos/<id>)
        name: Title
        status: Transcoding status (available, uploading, transcoding, ...)
        duration: Seconds
        plays: Play count
    """
    uri: str = ''
    name: str = ''
    description: str = ''
    link: str = ''
    language: str = ''
    license: str = ''
    status: str = ''
    created_time: str = ''
    modified_time: str = ''
    duration: int = 0
    width: int = 0
    height: int = 0
    privacy: VideoPrivacy = field(default_factory=VideoPrivacy)
    plays: int = 0

    @property
    def video_id(self) -> str:
        """Trailing segment of the resource URI."""
        return self.uri.rstrip('/').rsplit('/', 1)[-1] if self.uri else ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VideoEntry':
        return cls(
            uri=_get(data, 'uri', ''),
            name=_get(data, 'name', ''),
            description=_get(data, 'description', ''),
            link=_get(data, 'link', ''),
            language=_get(data, 'language', ''),
            license=_get(data, 'license', ''),
            status=_get(data, 'status', ''),
            created_time=_get(data, 'created_time', ''),
            modified_time=_get(data, 'modified_time', ''),
            duration=_get(data, 'duration', 0),
            width=_get(data, 'width', 0),
            height=_get(data, 'height', 0),
            privacy=VideoPrivacy.from_dict(_get(data, 'privacy', {})),
            plays=_get(_get(data, 'stats', {}), 'plays', 0),
        )


@dataclass
class VideoPage:
    """
    One page of the user's video list.
    """
    total: int = 0
    page: int = 0
    per_page: int = 0
    next: Optional[str] = None
    previous: Optional[str] = None
    data: List[VideoEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VideoPage':
        paging = _get(data, 'paging', {})
        return cls(
            total=_get(data, 'total', 0),
            page=_get(data, 'page', 0),
            per_page=_get(data, 'per_page', 0),
            next=_get(paging, 'next'),
            previous=_get(paging, 'previous'),
            data=[VideoEntry.from_dict(item) for item in _get(data, 'data', [])],
        )

    def __iter__(self):
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class UploadTicket:
    """
    Server-issued handle authorizing one streaming upload.

    Attributes:
        resource_uri: URI of the video being created
        ticket_id: Ticket identifier
        upload_link: Opaque URL receiving the video bytes
        complete_uri: Resource to DELETE once every byte is confirmed
    """
    resource_uri: str
    ticket_id: str
    upload_link: str
    complete_uri: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UploadTicket':
        """
        Create from the ticket creation response.

        Raises:
            TicketError: If the upload link or completion URI is missing
        """
        upload_link = _get(data, 'upload_link_secure', '')
        complete_uri = _get(data, 'complete_uri', '')
        if not upload_link or not complete_uri:
            raise TicketError(f"Upload ticket is missing upload_link_secure or complete_uri: {data}")
        return cls(
            resource_uri=_get(data, 'uri', ''),
            ticket_id=_get(data, 'ticket_id', ''),
            upload_link=upload_link,
            complete_uri=complete_uri,
        )


@dataclass(frozen=True)
class PictureTicket:
    """
    Picture resource created for a video, waiting for its image bytes.

    Attributes:
        uri: Picture resource URI (target of the activation PATCH)
        link: Upload URL for the image bytes
        active: Whether the picture is already the active thumbnail
    """
    uri: str
    link: str
    active: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PictureTicket':
        uri = _get(data, 'uri', '')
        link = _get(data, 'link', '')
        if not uri or not link:
            raise TicketError(f"Picture ticket is missing uri or link: {data}")
        return cls(uri=uri, link=link, active=bool(_get(data, 'active', False)))
