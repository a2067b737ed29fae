import os


class Settings:
    """Configuration settings for the rent reconciliation process."""

    # Matching
    MATCH_TOLERANCE = float(os.getenv("RECON_MATCH_TOLERANCE", "0.01"))

    # Statement inputs
    BANK_SKIP_ROWS = int(os.getenv("RECON_BANK_SKIP_ROWS", "0"))
    DOWNLOAD_DIR = os.getenv("RECON_DOWNLOAD_DIR", "./statements")

    # Report export
    EXPORT_GROUP_ORDER = os.getenv("RECON_EXPORT_GROUP_ORDER", "first_seen")

    # SFTP Configuration
    SFTP_HOST = os.getenv("SFTP_HOST", "sftp-server")
    SFTP_PORT = int(os.getenv("SFTP_PORT", "22"))
    SFTP_USERNAME = os.getenv("SFTP_USERNAME", "testuser")
    SFTP_PASSWORD = os.getenv("SFTP_PASSWORD", "testpass")
    SFTP_REMOTE_DIR = os.getenv("SFTP_REMOTE_DIR", "/uploads")

    # MongoDB Configuration (result store is disabled while MONGO_URI is empty)
    MONGO_URI = os.getenv("MONGO_URI", "")
    DB_NAME = os.getenv("MONGO_DB_NAME", "rent_recon")
    RECONCILIATION_COLLECTION = os.getenv("RECONCILIATION_COLLECTION", "reconciliation_runs")

    LOG_LEVEL = os.getenv("RECON_LOG_LEVEL", "INFO")


# Create a singleton instance
settings = Settings()
