import paramiko
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

STATEMENT_EXTENSIONS = (".csv", ".xlsx", ".xlsm", ".xls")


def is_statement_file(filename, extensions=STATEMENT_EXTENSIONS):
    return filename.lower().endswith(tuple(extensions))


class SFTPClient:
    """
        Password-authenticated SFTP session for the statement drop directory.

        As a context manager it connects on entry (``ConnectionError`` on failure)
        and closes both channels on exit.
    """

    def __init__(self, host, port, username, password):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.ssh_client = None
        self.sftp_client = None

    def __enter__(self):
        if not self.connect():
            raise ConnectionError(f"Could not connect to SFTP server {self.host}:{self.port}")
        return self

    def __exit__(self, exc_type, exc, tb):
        self.disconnect()

    def connect(self):
        try:
            self.ssh_client = paramiko.SSHClient()
            # Unknown host keys are logged, not silently trusted
            self.ssh_client.set_missing_host_key_policy(paramiko.WarningPolicy())
            self.ssh_client.connect(
                hostname=self.host,
                port=self.port,
                username=self.username,
                password=self.password,
                timeout=10
            )
            self.sftp_client = self.ssh_client.open_sftp()
        except Exception as e:
            logger.error(f"SFTP connection failed: {e}")
            self.disconnect()
            return False

        logger.info(f"Connected to SFTP server {self.host}:{self.port}")
        return True

    def disconnect(self):
        for channel in (self.sftp_client, self.ssh_client):
            if channel:
                channel.close()
        self.sftp_client = None
        self.ssh_client = None

    def list_files(self, remote_dir="/uploads"):
        try:
            files = self.sftp_client.listdir(remote_dir)
        except Exception as e:
            logger.error(f"Failed to list files: {e}")
            return []

        logger.info(f"Found {len(files)} files in {remote_dir}")
        return files

    def fetch(self, filename, remote_dir, local_dir):
        """Copy one remote file into ``local_dir``; returns its size in bytes."""
        local_path = f"{local_dir}/{filename}"
        Path(local_path).parent.mkdir(parents=True, exist_ok=True)
        self.sftp_client.get(f"{remote_dir}/{filename}", local_path)
        return Path(local_path).stat().st_size

    def download_statement_files(self, remote_dir="/uploads", local_dir="./statements",
                                 extensions=STATEMENT_EXTENSIONS):
        """Download tenant and payment statement files; returns the names fetched."""
        try:
            statement_files = [f for f in self.list_files(remote_dir) if is_statement_file(f, extensions)]
        except Exception as e:
            logger.error(f"Bulk download failed: {e}")
            return []

        logger.info(f"Found {len(statement_files)} statement files to download")
        downloaded = []
        for filename in statement_files:
            try:
                size = self.fetch(filename, remote_dir, local_dir)
            except Exception as e:
                logger.error(f"Failed to download {filename}: {e}")
                continue
            logger.info(f"Downloaded {filename} ({size} bytes)")
            downloaded.append(filename)

        logger.info(f"Downloaded {len(downloaded)}/{len(statement_files)} files")
        return downloaded
