"""Tests for picture upload and activation."""
import pytest
from unittest.mock import AsyncMock, Mock

from conftest import PICTURE_LINK
from vimeopy.core.api.config import ActivationRetryConfig
from vimeopy.core.api.errors import NetworkError, UnexpectedStatusError
from vimeopy.core.exceptions import ActivationTimeoutError
from vimeopy.core.upload import PictureSession, PictureTicket


@pytest.fixture
def image(make_file):
    return make_file('clip.jpg', 3000)


@pytest.fixture
def session(api_client, fake_clock):
    return PictureSession(api_client, clock=fake_clock, sleep=fake_clock.sleep)


class TestPictureSession:
    """Test suite for PictureSession."""

    @pytest.mark.asyncio
    async def test_attach(self, session, fake_server, image):
        ticket = await session.attach('123456', image)

        assert ticket.active is True
        assert ticket.uri == '/videos/123456/pictures/555'
        assert bytes(fake_server.picture_bytes) == image.read_bytes()

        put = [r for r in fake_server.calls('PUT') if r['url'] == PICTURE_LINK][0]
        assert put['headers']['Content-Length'] == '3000'
        activation = fake_server.calls('PATCH', '/videos/123456/pictures/555')
        assert len(activation) == 1
        assert activation[0]['body'] == b'active=true'

    @pytest.mark.asyncio
    async def test_activation_succeeds_before_deadline(self, session, fake_server, fake_clock, image):
        """Activation failing for 9.5s then succeeding is a success."""
        fake_server.activation_ready = lambda: fake_clock.now >= 9.5

        await session.attach('123456', image)

        assert fake_clock.now >= 9.5
        assert fake_clock.sleeps == [1.0] * 10
        assert len(fake_server.calls('PATCH', '/videos/123456/pictures/555')) == 11

    @pytest.mark.asyncio
    async def test_activation_times_out(self, session, fake_server, fake_clock, image):
        fake_server.activation_ready = lambda: False

        with pytest.raises(ActivationTimeoutError) as exc_info:
            await session.attach('123456', image)

        error = exc_info.value
        assert error.attempts == 11
        assert error.elapsed == pytest.approx(10.0)
        assert isinstance(error.__cause__, UnexpectedStatusError)
        assert fake_clock.now == pytest.approx(10.0)

    @pytest.mark.asyncio
    async def test_custom_deadline(self, api_client, fake_server, fake_clock, image):
        session = PictureSession(
            api_client,
            ActivationRetryConfig(delay=0.5, deadline=2.0),
            clock=fake_clock,
            sleep=fake_clock.sleep
        )
        fake_server.activation_ready = lambda: False

        with pytest.raises(ActivationTimeoutError):
            await session.attach('123456', image)

        assert fake_clock.sleeps == [0.5] * 4

    @pytest.mark.asyncio
    async def test_transfer_failure_is_absorbed(self, fake_clock, image):
        api = Mock()
        api.config = None
        api.create_picture = AsyncMock(return_value=PictureTicket(
            uri='/videos/1/pictures/2', link='https://i.vimeo.com/2'
        ))
        api.execute = AsyncMock(side_effect=NetworkError('reset', 'PUT', 'https://i.vimeo.com/2'))
        api.activate_picture = AsyncMock(return_value=None)
        session = PictureSession(api, clock=fake_clock, sleep=fake_clock.sleep)

        ticket = await session.attach('1', image)

        assert ticket.active is True
        api.activate_picture.assert_awaited_once_with('/videos/1/pictures/2')

    @pytest.mark.asyncio
    async def test_missing_image(self, session, fake_server, tmp_path):
        with pytest.raises(FileNotFoundError):
            await session.attach('123456', tmp_path / 'missing.jpg')

        assert fake_server.requests == []

    @pytest.mark.asyncio
    async def test_set_time(self, session, fake_server):
        await session.set_time('123456', 12.5)

        posts = fake_server.calls('POST', '/videos/123456/pictures')
        assert len(posts) == 1
        assert posts[0]['body'] == b'time=12.5&active=true'
        assert fake_server.calls('PUT') == []

    @pytest.mark.asyncio
    async def test_set_negative_time(self, session):
        with pytest.raises(ValueError):
            await session.set_time('123456', -1)
