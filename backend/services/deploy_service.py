"""Deployment: mirror the generated site to a remote host over SFTP."""

from __future__ import annotations

import logging
import posixpath
from typing import TYPE_CHECKING, Protocol

import paramiko

from backend.exceptions import ConfigError, DeployError
from backend.services.settings_service import deployment_config

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from backend.filesystem.document_store import SettingsStore
    from backend.schemas.settings import DeploymentConfig

logger = logging.getLogger(__name__)

_TRANSFER_ERRORS = (paramiko.SSHException, OSError, EOFError)
# Host name encoding failures surface from socket.getaddrinfo as UnicodeError.
_CONNECT_ERRORS = (*_TRANSFER_ERRORS, ValueError)


class RemoteFiles(Protocol):
    """The subset of an SFTP client the deployer needs."""

    def mkdir(self, path: str) -> None: ...

    def stat(self, path: str) -> object: ...

    def put(self, localpath: str, remotepath: str) -> object: ...

    def close(self) -> None: ...


class SftpSession:
    """An SSH connection together with its SFTP channel."""

    def __init__(self, ssh: paramiko.SSHClient, sftp: paramiko.SFTPClient) -> None:
        self.ssh = ssh
        self.sftp = sftp

    def mkdir(self, path: str) -> None:
        self.sftp.mkdir(path)

    def stat(self, path: str) -> object:
        return self.sftp.stat(path)

    def put(self, localpath: str, remotepath: str) -> object:
        return self.sftp.put(localpath, remotepath)

    def close(self) -> None:
        try:
            self.sftp.close()
        finally:
            self.ssh.close()


def open_sftp_session(deployment: DeploymentConfig, timeout: float) -> SftpSession:
    """Connect with password authentication and open an SFTP channel."""
    ssh = paramiko.SSHClient()
    ssh.load_system_host_keys()
    ssh.set_missing_host_key_policy(paramiko.WarningPolicy())
    try:
        ssh.connect(
            hostname=deployment.host,
            port=deployment.port or 22,
            username=deployment.username,
            password=deployment.password or None,
            timeout=timeout,
            banner_timeout=timeout,
            auth_timeout=timeout,
            allow_agent=False,
            look_for_keys=False,
        )
        sftp = ssh.open_sftp()
        sftp.get_channel().settimeout(timeout)
    except Exception:
        ssh.close()
        raise
    return SftpSession(ssh, sftp)


def ensure_remote_dir(remote: RemoteFiles, path: str) -> None:
    """Create ``path`` if absent; an existing directory is not an error."""
    try:
        remote.mkdir(path)
    except OSError:
        try:
            remote.stat(path)
        except OSError as exc:
            raise DeployError(f"Cannot create remote directory {path}: {exc}") from exc


def _ensure_remote_root(remote: RemoteFiles, remote_path: str) -> None:
    """Create every component of ``remote_path`` (like ``mkdir -p``)."""
    prefix = "/" if remote_path.startswith("/") else ""
    current = prefix
    for part in [p for p in remote_path.split("/") if p]:
        current = posixpath.join(current, part) if current else part
        ensure_remote_dir(remote, current)


def upload_directory(remote: RemoteFiles, local_dir: Path, remote_dir: str) -> int:
    """Recursively upload ``local_dir`` into ``remote_dir``. Returns files sent."""
    uploaded = 0
    for entry in sorted(local_dir.iterdir()):
        destination = posixpath.join(remote_dir, entry.name)
        if entry.is_dir():
            ensure_remote_dir(remote, destination)
            uploaded += upload_directory(remote, entry, destination)
        else:
            remote.put(str(entry), destination)
            logger.debug("Uploaded %s -> %s", entry, destination)
            uploaded += 1
    return uploaded


class Deployer:
    """Uploads the output directory using the stored deployment settings."""

    def __init__(
        self,
        settings_store: SettingsStore,
        output_dir: Path,
        secret_key: str,
        timeout: float = 30.0,
        session_factory: Callable[[DeploymentConfig, float], RemoteFiles] = open_sftp_session,
    ) -> None:
        self.settings_store = settings_store
        self.output_dir = output_dir
        self.secret_key = secret_key
        self.timeout = timeout
        self.session_factory = session_factory

    def load_target(self) -> DeploymentConfig:
        """Return the deployment target, or raise ConfigError if incomplete."""
        target = deployment_config(self.settings_store.get(), self.secret_key)
        missing = target.missing_fields()
        if missing:
            raise ConfigError(
                f"Deployment configuration is incomplete (missing: {', '.join(missing)})"
            )
        return target

    def deploy(self) -> int:
        """Mirror the output directory to the remote path. Returns files uploaded."""
        target = self.load_target()
        self.output_dir.mkdir(parents=True, exist_ok=True)

        logger.info(
            "Deploying %s to %s@%s:%s",
            self.output_dir,
            target.username,
            target.host,
            target.remote_path,
        )
        try:
            remote = self.session_factory(target, self.timeout)
        except paramiko.AuthenticationException as exc:
            raise DeployError(
                f"Authentication failed for {target.username}@{target.host}"
            ) from exc
        except _CONNECT_ERRORS as exc:
            raise DeployError(f"Cannot connect to {target.host}:{target.port}: {exc}") from exc

        try:
            _ensure_remote_root(remote, target.remote_path)
            uploaded = upload_directory(remote, self.output_dir, target.remote_path)
        except DeployError:
            raise
        except _TRANSFER_ERRORS as exc:
            raise DeployError(f"Transfer failed: {exc}") from exc
        finally:
            try:
                remote.close()
            except _TRANSFER_ERRORS:
                logger.warning("Error closing deployment connection", exc_info=True)

        logger.info("Deployment complete: %d files uploaded", uploaded)
        return uploaded
