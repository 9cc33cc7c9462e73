"""Tests for the vimeo command line."""
import pytest
from typer.testing import CliRunner
from unittest.mock import Mock

from conftest import TOKEN, FakeVimeoServer
from vimeopy import VimeoClient
from vimeopy.cli import main as cli
from vimeopy.core.credentials import SQLiteTokenStore

runner = CliRunner()
QUOTA_PATH = '/me?fields=name,upload_quota'


@pytest.fixture
def server():
    return FakeVimeoServer()


def set_quota(server, free):
    server.routes[('GET', QUOTA_PATH)] = (200, {
        'name': 'Andrea',
        'upload_quota': {'space': {'free': free, 'max': free, 'used': 0}},
    })


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path, server):
    """Keep the token store in tmp_path and route clients to the fake server."""
    monkeypatch.delenv('VIMEO_TOKEN', raising=False)
    monkeypatch.setattr(cli, 'get_token_path', lambda: tmp_path / 'token')
    monkeypatch.setattr(
        cli, 'create_client', lambda token: VimeoClient(token, transport=server)
    )
    cli.state['token'] = None


class TestTokenResolution:

    def test_no_token(self):
        result = runner.invoke(cli.app, ['status', '1'])

        assert result.exit_code == 1
        assert 'No access token' in result.output

    def test_save_token(self, tmp_path):
        result = runner.invoke(cli.app, ['save-token', f'bearer {TOKEN}'])

        assert result.exit_code == 0
        with SQLiteTokenStore(str(tmp_path / 'token')) as store:
            assert store.get_token() == TOKEN

    def test_save_token_prompt(self, tmp_path):
        result = runner.invoke(cli.app, ['save-token'], input=f'{TOKEN}\n')

        assert result.exit_code == 0
        assert (tmp_path / 'token.session').exists()

    def test_save_empty_token(self, tmp_path):
        result = runner.invoke(cli.app, ['save-token', '   '])

        assert result.exit_code == 1
        assert not (tmp_path / 'token.session').exists()

    def test_saved_token_is_used(self, server):
        server.routes[('GET', '/me/videos/1?fields=status')] = (200, {'status': 'available'})
        runner.invoke(cli.app, ['save-token', TOKEN])

        result = runner.invoke(cli.app, ['status', '1'])

        assert result.exit_code == 0
        assert '1: available' in result.output

    def test_env_token(self, server, monkeypatch):
        server.routes[('GET', '/me/videos/1?fields=status')] = (200, {'status': 'transcoding'})
        monkeypatch.setenv('VIMEO_TOKEN', TOKEN)

        result = runner.invoke(cli.app, ['status', '1'])

        assert result.exit_code == 0
        assert 'transcoding' in result.output

    def test_rejected_token(self):
        result = runner.invoke(cli.app, ['--token', 'wrong', 'whoami'])

        assert result.exit_code == 1
        assert 'Error' in result.output


class TestCommands:
    """Commands against the fake server."""

    def invoke(self, *args, **kwargs):
        return runner.invoke(cli.app, ['--token', TOKEN, *args], **kwargs)

    def test_whoami(self, server):
        server.routes[('GET', '/me')] = (200, {
            'name': 'Andrea',
            'account': 'pro',
            'metadata': {'connections': {'videos': {'uri': '/users/42/videos', 'total': 4}}},
        })

        result = self.invoke('whoami')

        assert result.exit_code == 0
        assert 'Andrea' in result.output
        assert 'videos' in result.output

    def test_quota(self, server):
        server.routes[('GET', QUOTA_PATH)] = (200, {
            'name': 'Andrea',
            'upload_quota': {'space': {'free': 2 * 1024 * 1024, 'max': 0, 'used': 0}},
        })

        result = self.invoke('quota')

        assert result.exit_code == 0
        assert '2.0 MB' in result.output

    def test_videos(self, server):
        server.routes[('GET', '/me/videos?fields=uri,name,status,created_time,modified_time')] = (200, {
            'total': 5,
            'data': [{'uri': '/videos/11', 'name': 'Eleven', 'status': 'available'}],
        })

        result = self.invoke('videos')

        assert result.exit_code == 0
        assert 'Eleven' in result.output
        assert '1 of 5 videos' in result.output

    def test_info(self, server):
        server.routes[('GET', '/me/videos/7')] = (200, {
            'uri': '/videos/7', 'name': 'Seven', 'description': 'About seven',
        })

        result = self.invoke('info', '7')

        assert result.exit_code == 0
        assert 'Seven' in result.output
        assert 'About seven' in result.output

    def test_upload(self, server, tmp_path):
        video = tmp_path / 'trip.mp4'
        video.write_bytes(b'v' * 5000)
        set_quota(server, 10000)

        result = self.invoke('upload', str(video), '--name', 'Trip')

        assert result.exit_code == 0, result.output
        assert 'Video ID: 123456' in result.output
        assert bytes(server.stored) == video.read_bytes()
        assert server.calls('PATCH')[0]['body'] == b'name=Trip'

    def test_upload_missing_file(self, tmp_path):
        result = self.invoke('upload', str(tmp_path / 'missing.mp4'))

        assert result.exit_code != 0

    def test_upload_over_quota(self, server, tmp_path):
        video = tmp_path / 'trip.mp4'
        video.write_bytes(b'v' * 5000)
        set_quota(server, 4999)

        result = self.invoke('upload', str(video))

        assert result.exit_code == 1
        assert 'Not enough upload quota' in result.output
        assert server.calls('POST') == []
        assert server.calls('PUT') == []

    def test_upload_picture_must_be_file(self, server, tmp_path):
        video = tmp_path / 'trip.mp4'
        video.write_bytes(b'v' * 100)
        set_quota(server, 10000)

        result = self.invoke('upload', str(video), '--picture', str(tmp_path))

        assert result.exit_code != 0
        assert server.requests == []

    def test_upload_failure(self, server, tmp_path):
        video = tmp_path / 'trip.mp4'
        video.write_bytes(b'v' * 100)
        set_quota(server, 10000)
        server.completion_location = None

        result = self.invoke('upload', str(video))

        assert result.exit_code == 1
        assert 'Error' in result.output

    def test_delete_force(self, server):
        server.routes[('DELETE', '/videos/9')] = (204, None)

        result = self.invoke('delete', '9', '--force')

        assert result.exit_code == 0
        assert len(server.calls('DELETE', '/videos/9')) == 1

    def test_delete_declined(self, server):
        result = self.invoke('delete', '9', input='n\n')

        assert result.exit_code == 1
        assert server.requests == []

    def test_edit_requires_field(self, server):
        result = self.invoke('edit', '123456')

        assert result.exit_code == 1
        assert server.requests == []

    def test_edit(self, server):
        result = self.invoke('edit', '123456', '--description', 'New')

        assert result.exit_code == 0
        assert server.calls('PATCH')[0]['body'] == b'description=New'

    @pytest.mark.parametrize('extra', [[], ['--time', '3', '--file', 'pyproject.toml']])
    def test_set_picture_needs_one_source(self, server, extra):
        result = self.invoke('set-picture', '123456', *extra)

        assert result.exit_code != 0
        assert server.requests == []

    def test_set_picture_time(self, server):
        result = self.invoke('set-picture', '123456', '--time', '2.5')

        assert result.exit_code == 0
        assert server.calls('POST', '/videos/123456/pictures')[0]['body'] == b'time=2.5&active=true'

    def test_scan(self, server, tmp_path):
        check = tmp_path / 'check'
        dest = tmp_path / 'dest'
        check.mkdir()
        (check / 'clip.mov').write_bytes(b'm' * 300)

        result = self.invoke('scan', str(check), str(dest))

        assert result.exit_code == 0, result.output
        assert 'clip.mov -> 123456' in result.output
        assert (dest / 'clip.mov').exists()

    def test_scan_missing_folder(self, tmp_path):
        result = self.invoke('scan', str(tmp_path / 'nope'), str(tmp_path / 'dest'))

        assert result.exit_code == 1
        assert 'not found' in result.output


class TestUploadProgressBar:

    def test_counts_from_resume_offset(self):
        progress = Mock()
        bar = cli.UploadProgressBar(progress, 'task')

        bar.on_resume(4000, 10000)
        bar.on_progress(6000, 10000)

        progress.update.assert_called_with('task', completed=10000, total=10000)

    def test_first_attempt(self):
        progress = Mock()
        bar = cli.UploadProgressBar(progress, 'task')

        bar.on_progress(1000, 10000)

        progress.update.assert_called_with('task', completed=1000, total=10000)

    def test_resumed_upload_reaches_total(self, server, tmp_path, monkeypatch):
        """The bar ends at the file size even after a dropped connection."""
        video = tmp_path / 'trip.mp4'
        video.write_bytes(b'v' * 300000)
        set_quota(server, 10 ** 6)
        server.transfer_limits = [100000]
        updates = []

        class RecordingBar(cli.UploadProgressBar):
            def on_progress(self, sent, total):
                super().on_progress(sent, total)
                updates.append(self.offset + sent)

        monkeypatch.setattr(cli, 'UploadProgressBar', RecordingBar)
        result = runner.invoke(cli.app, ['--token', TOKEN, 'upload', str(video)])

        assert result.exit_code == 0, result.output
        assert len(server.transfer_offsets) == 2
        assert updates[-1] == 300000
