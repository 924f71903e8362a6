#!/usr/bin/env python3
"""
S3 Bucket Retention Manager

This script inspects an S3-compatible bucket (Hetzner Object Storage by default)
and configures retention for deleted objects. It can enable versioning and merge
a lifecycle rule into the existing bucket configuration, keeping every unrelated
rule untouched. It can also list delete markers and noncurrent versions.

Usage:
    manage-s3-bucket [--deleted] [--debug] [--env-file PATH] [--backup-dir DIR]

Dependencies:
    pip install boto3 python-dotenv
"""

import argparse
import copy
import getpass
import json
import logging
import os
import sys
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

import boto3
import urllib3
from botocore.exceptions import BotoCoreError, ClientError
from dotenv import dotenv_values

LOGGER_NAME = 's3_retention_manager'

RETENTION_RULE_ID = 'DeletedObjectsRetention60Days'
NONCURRENT_DAYS = 60
ABORT_MULTIPART_DAYS = 7

REQUIRED_ENV_VARS = ('S3_ENDPOINT', 'S3_BUCKET', 'S3_REGION', 'S3_ACCESS_KEY')


class Colors:
    """ANSI color codes for terminal output."""
    RED = '\033[0;31m'
    GREEN = '\033[0;32m'
    YELLOW = '\033[1;33m'
    RESET = '\033[0m'

    @staticmethod
    def red(text: str) -> str:
        """Return text in red color."""
        return f"{Colors.RED}{text}{Colors.RESET}"

    @staticmethod
    def green(text: str) -> str:
        """Return text in green color."""
        return f"{Colors.GREEN}{text}{Colors.RESET}"

    @staticmethod
    def yellow(text: str) -> str:
        """Return text in yellow color."""
        return f"{Colors.YELLOW}{text}{Colors.RESET}"


class ConfigError(Exception):
    """Raised when the connection settings are incomplete."""

    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__(f"Missing required environment variables: {', '.join(missing)}")


class VersioningState(Enum):
    """Versioning status of a bucket as reported by GetBucketVersioning."""
    DISABLED = 'Disabled'
    ENABLED = 'Enabled'
    SUSPENDED = 'Suspended'


@dataclass
class BucketVersioning:
    """Versioning settings of a bucket."""
    state: VersioningState
    mfa_delete: Optional[str] = None

    @classmethod
    def from_response(cls, response: Mapping[str, Any]) -> 'BucketVersioning':
        """Build from a GetBucketVersioning response."""
        # Buckets that never had versioning answer without a Status
        status = response.get('Status') or VersioningState.DISABLED.value
        return cls(state=VersioningState(status), mfa_delete=response.get('MFADelete'))


@dataclass
class ObjectVersionRecord:
    """One object version from ListObjectVersions."""
    key: str
    version_id: str
    last_modified: Any
    size: int
    storage_class: str
    is_latest: bool


@dataclass
class DeleteMarkerRecord:
    """One delete marker from ListObjectVersions."""
    key: str
    version_id: str
    last_modified: Any


@dataclass
class DeletedObjectsReport:
    """Delete markers and noncurrent versions found in a bucket."""
    delete_markers: List[DeleteMarkerRecord] = field(default_factory=list)
    noncurrent_versions: List[ObjectVersionRecord] = field(default_factory=list)

    @property
    def delete_marker_count(self) -> int:
        return len(self.delete_markers)

    @property
    def noncurrent_count(self) -> int:
        return len(self.noncurrent_versions)

    @property
    def total(self) -> int:
        return self.delete_marker_count + self.noncurrent_count

    @property
    def is_empty(self) -> bool:
        return self.total == 0


@dataclass
class S3Config:
    """Connection settings for one bucket, passed explicitly to the manager."""
    endpoint: str
    bucket: str
    region: str
    access_key: str
    secret_key: str
    verify_ssl: bool = True
    ca_bundle: Optional[str] = None

    def client_kwargs(self) -> Dict[str, Any]:
        """Build keyword arguments for ``boto3.client('s3', ...)``."""
        if not self.verify_ssl:
            verify: Any = False
        elif self.ca_bundle:
            verify = self.ca_bundle
        else:
            verify = True

        return {
            'endpoint_url': self.endpoint,
            'region_name': self.region,
            'aws_access_key_id': self.access_key,
            'aws_secret_access_key': self.secret_key,
            'verify': verify,
        }


def setup_logging(debug: bool = False) -> logging.Logger:
    """Setup logging configuration for the manager's logger."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    # Clear existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if debug:
        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
    else:
        formatter = logging.Formatter('%(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


def load_config(env_file: Optional[str] = '.env',
                environ: Optional[Mapping[str, str]] = None,
                secret_prompt: Callable[[str], str] = getpass.getpass,
                logger: Optional[logging.Logger] = None) -> S3Config:
    """Load connection settings from the process environment and a dotenv file.

    Values from the dotenv file take precedence over the process environment.
    When ``S3_SECRET_KEY`` is not set the secret is read with ``secret_prompt``.

    Args:
        env_file: Path to a dotenv file; ignored when it does not exist
        environ: Base environment (defaults to ``os.environ``)
        secret_prompt: Masked prompt used for a missing secret key
        logger: Logger for status messages

    Returns:
        Populated S3Config

    Raises:
        ConfigError: If any required variable is missing
    """
    logger = logger or logging.getLogger(LOGGER_NAME)
    values: Dict[str, Optional[str]] = dict(os.environ if environ is None else environ)

    if env_file and Path(env_file).is_file():
        logger.debug(f"Loading settings from {env_file}")
        values.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
    elif env_file:
        logger.debug(f"No env file at {env_file}, using process environment only")

    missing = [name for name in REQUIRED_ENV_VARS if not values.get(name)]
    if missing:
        raise ConfigError(missing)

    secret_key = values.get('S3_SECRET_KEY')
    if secret_key:
        logger.info(Colors.green("Using secret key from environment"))
    else:
        secret_key = secret_prompt("Enter your S3 secret key: ")

    return S3Config(
        endpoint=values['S3_ENDPOINT'],
        bucket=values['S3_BUCKET'],
        region=values['S3_REGION'],
        access_key=values['S3_ACCESS_KEY'],
        secret_key=secret_key,
        verify_ssl=(values.get('S3_VERIFY_SSL') or 'true').lower() != 'false',
        ca_bundle=values.get('S3_CA_BUNDLE') or None,
    )


def build_retention_rule(simplified: bool = False) -> Dict[str, Any]:
    """Build the deleted-objects retention rule.

    The simplified shape drops AbortIncompleteMultipartUpload and uses an
    explicit empty prefix filter, which some S3-compatible services accept
    where they reject the full rule.
    """
    rule: Dict[str, Any] = {
        'ID': RETENTION_RULE_ID,
        'Status': 'Enabled',
        'Filter': {'Prefix': ''} if simplified else {},
        'NoncurrentVersionExpiration': {
            'NoncurrentDays': NONCURRENT_DAYS
        },
    }
    if not simplified:
        rule['AbortIncompleteMultipartUpload'] = {
            'DaysAfterInitiation': ABORT_MULTIPART_DAYS
        }
    return rule


def merge_retention_rule(existing: Optional[Dict[str, Any]],
                         rule: Dict[str, Any]) -> Dict[str, Any]:
    """Merge a rule into an existing lifecycle configuration.

    Merge Logic:
    - If the bucket has no configuration: the result holds only ``rule``
    - Otherwise: every rule with the same ID is replaced by ``rule``, all
      other rules are carried over unchanged and rule IDs stay unique

    Args:
        existing: Current lifecycle configuration, or None when absent
        rule: Rule to install

    Returns:
        New configuration dictionary; ``existing`` is not modified
    """
    if existing is None:
        return {'Rules': [copy.deepcopy(rule)]}

    rule_id = rule['ID']
    candidates = [r for r in existing.get('Rules', []) if r.get('ID') != rule_id]
    candidates.append(copy.deepcopy(rule))

    merged: List[Dict[str, Any]] = []
    seen = set()
    # Older copies of rule_id are already gone; other duplicates keep their first copy
    for candidate in candidates:
        candidate_id = candidate.get('ID')
        if candidate_id is not None and candidate_id in seen:
            continue
        seen.add(candidate_id)
        merged.append(copy.deepcopy(candidate))

    return {'Rules': merged}


def configs_equal(config1: Optional[Dict[str, Any]],
                  config2: Optional[Dict[str, Any]]) -> bool:
    """Compare two lifecycle configurations, ignoring rule order.

    Args:
        config1: First configuration
        config2: Second configuration

    Returns:
        True if configurations are equal, False otherwise
    """
    def normalize_config(config):
        if config is None:
            return None
        rules = sorted(config.get('Rules', []), key=lambda r: str(r.get('ID')))
        return json.dumps(rules, sort_keys=True, separators=(',', ':'), default=str)

    return normalize_config(config1) == normalize_config(config2)


def build_deleted_report(pages: Iterable[Mapping[str, Any]]) -> DeletedObjectsReport:
    """Collect delete markers and noncurrent versions from ListObjectVersions pages.

    Raises:
        KeyError: If an entry lacks a required field
    """
    report = DeletedObjectsReport()
    for page in pages:
        for marker in page.get('DeleteMarkers') or []:
            report.delete_markers.append(DeleteMarkerRecord(
                key=marker['Key'],
                version_id=marker['VersionId'],
                last_modified=marker['LastModified'],
            ))
        for version in page.get('Versions') or []:
            if version.get('IsLatest', True):
                continue
            report.noncurrent_versions.append(ObjectVersionRecord(
                key=version['Key'],
                version_id=version['VersionId'],
                last_modified=version['LastModified'],
                size=version.get('Size', 0),
                storage_class=version.get('StorageClass', 'STANDARD'),
                is_latest=False,
            ))
    return report


def _format_timestamp(value: Any) -> str:
    """Render a LastModified value as ISO 8601 text."""
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def format_deleted_report(report: DeletedObjectsReport, bucket: str, endpoint: str,
                          retention_days: int = NONCURRENT_DAYS) -> List[str]:
    """Render a deleted-objects report as printable lines."""
    if report.is_empty:
        return [
            Colors.green("No deleted files found."),
            Colors.green("All objects in the bucket are current versions."),
        ]

    lines: List[str] = []
    if report.delete_markers:
        lines.append(Colors.red("Files with delete markers (deleted but recoverable):"))
        lines.append(Colors.red("-" * 52))
        for marker in report.delete_markers:
            lines.append(f"  File: {marker.key}")
            lines.append(f"  Deleted on: {_format_timestamp(marker.last_modified)}")
            lines.append(f"  Delete Marker ID: {marker.version_id}")
            lines.append("")

    if report.noncurrent_versions:
        lines.append(Colors.yellow("Noncurrent versions (old versions of modified files):"))
        lines.append(Colors.yellow("-" * 52))
        for version in report.noncurrent_versions:
            lines.append(f"  File: {version.key}")
            lines.append(f"  Modified: {_format_timestamp(version.last_modified)}")
            lines.append(f"  Size: {version.size} bytes")
            lines.append(f"  Version ID: {version.version_id}")
            lines.append(f"  Storage Class: {version.storage_class}")
            lines.append("")

    lines.append(Colors.yellow("Summary:"))
    lines.append(f"  Total deleted files (delete markers): {report.delete_marker_count}")
    lines.append(f"  Total noncurrent versions: {report.noncurrent_count}")
    lines.append(f"  {Colors.green(f'Total recoverable objects: {report.total}')}")
    lines.append("")
    lines.append(f"{Colors.yellow('Note:')} These files will be automatically removed after "
                 f"{retention_days} days according to your lifecycle policy.")
    lines.append(Colors.yellow("To restore a deleted file, use:"))
    lines.append(f"  aws s3api delete-object --bucket {bucket} --key <filename> "
                 f"--version-id <delete-marker-id> --endpoint-url {endpoint}")
    return lines


def _is_yes(answer: Optional[str]) -> bool:
    """Return True for a y/yes answer in any case."""
    return (answer or '').strip().lower() in ('y', 'yes')


def _error_detail(error: Exception) -> str:
    """Return "Code: Message" for a ClientError, the plain text otherwise."""
    if isinstance(error, ClientError):
        err = error.response.get('Error', {})
        return f"{err.get('Code', 'Unknown')}: {err.get('Message', str(error))}"
    return str(error)


class S3RetentionManager:
    """Inspects a bucket and manages retention of its deleted objects."""

    def __init__(self, config: S3Config, s3_client: Any = None,
                 logger: Optional[logging.Logger] = None,
                 backup_dir: Optional[str] = None):
        """Initialize the retention manager.

        Args:
            config: Connection settings
            s3_client: Preconfigured S3 client (created from config when omitted)
            logger: Logger for operator output
            backup_dir: Directory for lifecycle backups, disabled when None
        """
        self.config = config
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self.backup_dir = backup_dir
        self.s3_client = s3_client or self._create_client()

    @property
    def bucket(self) -> str:
        return self.config.bucket

    def _create_client(self):
        """Create the boto3 S3 client from the explicit config."""
        self.logger.debug(f"Using S3 endpoint: {self.config.endpoint}")
        if not self.config.verify_ssl:
            self.logger.debug("SSL verification is disabled")
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
            if self.config.ca_bundle:
                self.logger.warning(f"S3_CA_BUNDLE is set ({self.config.ca_bundle}) but SSL "
                                    "verification is disabled - CA bundle will be ignored")
        return boto3.client('s3', **self.config.client_kwargs())

    # Bucket probing

    def check_bucket(self) -> bool:
        """Check that the bucket exists and the credentials can reach it."""
        try:
            self.s3_client.head_bucket(Bucket=self.bucket)
        except (ClientError, BotoCoreError) as e:
            self.logger.error(Colors.red(
                f"✗ Cannot access bucket '{self.bucket}'. Please check your credentials."))
            self.logger.debug(f"HeadBucket failed: {_error_detail(e)}")
            return False

        self.logger.info(Colors.green(f"✓ Bucket '{self.bucket}' is accessible"))
        return True

    def get_bucket_location(self) -> Optional[str]:
        """Return the bucket location, or None if it could not be retrieved."""
        try:
            response = self.s3_client.get_bucket_location(Bucket=self.bucket)
        except (ClientError, BotoCoreError) as e:
            self.logger.debug(f"GetBucketLocation failed: {_error_detail(e)}")
            return None
        return response.get('LocationConstraint') or 'default'

    def get_versioning(self) -> Optional[BucketVersioning]:
        """Return the bucket versioning settings, or None if they could not be retrieved."""
        try:
            response = self.s3_client.get_bucket_versioning(Bucket=self.bucket)
        except (ClientError, BotoCoreError) as e:
            self.logger.debug(f"GetBucketVersioning failed: {_error_detail(e)}")
            return None
        try:
            return BucketVersioning.from_response(response)
        except ValueError:
            self.logger.warning(f"Unexpected versioning status: {response.get('Status')}")
            return None

    def get_current_lifecycle_config(self) -> Optional[Dict[str, Any]]:
        """Get current lifecycle configuration from the bucket.

        Returns:
            Current lifecycle configuration or None if none exists

        Raises:
            ClientError: For any error other than NoSuchLifecycleConfiguration
            BotoCoreError: On connection or credential failures
        """
        try:
            response = self.s3_client.get_bucket_lifecycle_configuration(Bucket=self.bucket)
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') == 'NoSuchLifecycleConfiguration':
                self.logger.debug("No existing lifecycle configuration found")
                return None
            raise

        # Remove ResponseMetadata and return only the configuration
        config = {k: v for k, v in response.items() if k != 'ResponseMetadata'}
        self.logger.debug(f"Retrieved lifecycle configuration: {json.dumps(config, indent=2, default=str)}")
        return config

    def show_bucket_info(self) -> None:
        """Print location, versioning status and lifecycle rules."""
        self.logger.info("")
        self.logger.info(Colors.yellow("Current Bucket Settings:"))
        self.logger.info(Colors.yellow("-" * 24))

        self.logger.info("")
        self.logger.info(Colors.green("Location:"))
        location = self.get_bucket_location()
        self.logger.info(location if location is not None else "Could not retrieve location")

        self.logger.info("")
        self.logger.info(Colors.green("Versioning Status:"))
        versioning = self.get_versioning()
        if versioning is None:
            self.logger.info("Could not retrieve versioning status")
        else:
            self.logger.info(f"Versioning: {versioning.state.value}")
            if versioning.mfa_delete:
                self.logger.info(f"MFA Delete: {versioning.mfa_delete}")

        self.logger.info("")
        self.logger.info(Colors.green("Lifecycle Rules:"))
        try:
            lifecycle = self.get_current_lifecycle_config()
        except (ClientError, BotoCoreError) as e:
            self.logger.info(f"Could not retrieve lifecycle rules ({_error_detail(e)})")
            return

        if lifecycle is None:
            self.logger.info("No lifecycle rules configured")
            return
        if lifecycle.get('Rules') == []:
            self.logger.info("Lifecycle configuration has no rules")
            return
        try:
            for rule in lifecycle['Rules']:
                self.logger.info(f"- Rule ID: {rule['ID']} (Status: {rule['Status']})")
        except (KeyError, TypeError):
            self.logger.info("Could not parse lifecycle rules")

    # Mutations

    def enable_versioning(self) -> bool:
        """Enable versioning on the bucket.

        Returns:
            True if successful, False otherwise
        """
        self.logger.info("")
        self.logger.info(Colors.yellow("Enabling versioning on bucket..."))
        try:
            self.s3_client.put_bucket_versioning(
                Bucket=self.bucket,
                VersioningConfiguration={'Status': VersioningState.ENABLED.value}
            )
        except (ClientError, BotoCoreError) as e:
            self.logger.error(Colors.red(f"✗ Failed to enable versioning: {_error_detail(e)}"))
            return False

        self.logger.info(Colors.green("✓ Versioning enabled successfully"))
        return True

    def apply_lifecycle_config(self, config: Dict[str, Any]) -> bool:
        """Apply lifecycle configuration to the bucket.

        Args:
            config: Lifecycle configuration to apply

        Returns:
            True if successful, False otherwise
        """
        self.logger.debug(f"Configuration payload: {json.dumps(config, indent=2, default=str)}")
        try:
            self.s3_client.put_bucket_lifecycle_configuration(
                Bucket=self.bucket,
                LifecycleConfiguration=config
            )
        except (ClientError, BotoCoreError) as e:
            self.logger.error(Colors.red("✗ Failed to create lifecycle rule"))
            self.logger.error(Colors.red(f"Error details: {_error_detail(e)}"))
            return False
        return True

    def backup_lifecycle_config(self, config: Dict[str, Any]) -> Optional[Path]:
        """Write the current configuration to the backup directory, if one is set."""
        if not self.backup_dir:
            return None

        timestamp = datetime.now().strftime('%Y%m%d-%H%M%S')
        backup_file = Path(self.backup_dir) / f"lifecycle-backup-{self.bucket}-{timestamp}.json"
        try:
            backup_file.parent.mkdir(parents=True, exist_ok=True)
            with open(backup_file, 'w') as f:
                json.dump(config, f, indent=2, default=str)
        except OSError as e:
            self.logger.warning(f"Failed to create backup: {e}")
            return None

        self.logger.info(f"Current configuration backed up to: {backup_file}")
        return backup_file

    def apply_retention_rule(self) -> bool:
        """Merge the retention rule into the bucket's lifecycle configuration.

        If the full rule is rejected, one retry is made with the simplified
        rule. There are no further retries.

        Returns:
            True if the rule is in place, False otherwise
        """
        self.logger.info("")
        self.logger.info(Colors.yellow(
            f"Setting up lifecycle rule for {NONCURRENT_DAYS}-day retention of deleted objects..."))
        self.logger.info(Colors.yellow("Checking for existing lifecycle rules..."))
        try:
            existing = self.get_current_lifecycle_config()
        except (ClientError, BotoCoreError) as e:
            self.logger.error(Colors.red(f"✗ Could not read lifecycle rules: {_error_detail(e)}"))
            return False

        merged = merge_retention_rule(existing, build_retention_rule())
        if existing is None:
            self.logger.info(Colors.green("No existing lifecycle rules found. Creating new configuration..."))
        else:
            if configs_equal(existing, merged):
                self.logger.info(Colors.green("✓ Lifecycle configuration is up to date (no changes needed)"))
                return True
            self.logger.info(Colors.yellow("Found existing lifecycle rules. Merging with new rule..."))
            self.logger.info(Colors.yellow("New lifecycle configuration:"))
            self.logger.info(json.dumps(merged, indent=2, default=str))
            self.backup_lifecycle_config(existing)

        if self.apply_lifecycle_config(merged):
            self.logger.info(Colors.green("✓ Lifecycle rule created successfully"))
            self.logger.info(Colors.green(f"  - Deleted objects will be retained for {NONCURRENT_DAYS} days"))
            self.logger.info(Colors.green(
                f"  - Incomplete multipart uploads will be cleaned up after {ABORT_MULTIPART_DAYS} days"))
            return True

        self.logger.info("")
        self.logger.info(Colors.yellow("Trying simpler configuration..."))
        simplified = merge_retention_rule(existing, build_retention_rule(simplified=True))
        if self.apply_lifecycle_config(simplified):
            self.logger.info(Colors.green("✓ Lifecycle rule created successfully with simplified configuration"))
            return True

        self.logger.error(Colors.red("✗ Still failed with simplified configuration"))
        return False

    # Reporting

    def list_deleted_objects(self) -> Optional[DeletedObjectsReport]:
        """List delete markers and noncurrent versions in the bucket.

        Returns:
            Report, or None if the listing could not be retrieved or parsed
        """
        paginator = self.s3_client.get_paginator('list_object_versions')
        try:
            pages = list(paginator.paginate(Bucket=self.bucket))
        except (ClientError, BotoCoreError) as e:
            self.logger.error(Colors.red(f"Could not list object versions: {_error_detail(e)}"))
            return None

        try:
            return build_deleted_report(pages)
        except (KeyError, TypeError, AttributeError) as e:
            self.logger.error(Colors.red(f"Could not parse object versions: {e}"))
            return None

    def run_report(self) -> DeletedObjectsReport:
        """Print the deleted-objects report.

        Returns:
            The report; empty when the listing failed
        """
        self.logger.info("")
        self.logger.info(Colors.yellow("Listing deleted files (noncurrent versions)..."))
        self.logger.info(Colors.yellow("=" * 48))
        self.logger.info("")

        report = self.list_deleted_objects()
        if report is None:
            return DeletedObjectsReport()

        for line in format_deleted_report(report, self.bucket, self.config.endpoint):
            self.logger.info(line)
        return report

    # Interactive flow

    def run_interactive(self, ask: Optional[Callable[[str], str]] = None) -> bool:
        """Show settings and walk the operator through the retention setup.

        Args:
            ask: Input provider, called with the prompt text (defaults to input)

        Returns:
            True if the retention rule was applied, False otherwise
        """
        ask = ask or input
        self.show_bucket_info()

        self.logger.info("")
        answer = ask(Colors.yellow(
            f"Do you want to set up {NONCURRENT_DAYS}-day retention for deleted objects? (y/n) "))
        if not _is_yes(answer):
            return False

        applied = False
        versioning = self.get_versioning()
        if versioning is not None and versioning.state is VersioningState.ENABLED:
            applied = self.apply_retention_rule()
        else:
            self.logger.info("")
            self.logger.info(Colors.yellow("Note: Versioning must be enabled to retain deleted objects."))
            self.logger.info(Colors.yellow(
                "Once enabled, versioning can only be suspended, never disabled again."))
            answer = ask(Colors.yellow("Do you want to enable versioning? (y/n) "))
            if not _is_yes(answer):
                self.logger.info(Colors.red("Cannot set up deleted object retention without versioning."))
            elif not self.enable_versioning():
                self.logger.info(Colors.red("Cannot proceed without versioning enabled."))
            else:
                applied = self.apply_retention_rule()

        self.logger.info("")
        self.logger.info(Colors.yellow("Updated bucket settings:"))
        self.show_bucket_info()
        return applied


def main(argv: Optional[List[str]] = None) -> int:
    """Main function to handle command line arguments and execute actions."""
    parser = argparse.ArgumentParser(
        description='S3 Bucket Retention Manager',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show bucket settings and set up retention interactively
  manage-s3-bucket

  # List deleted files (delete markers and noncurrent versions)
  manage-s3-bucket --deleted

  # Keep a copy of the current lifecycle rules before changing them
  manage-s3-bucket --backup-dir ./backups

Environment Variables (process environment or .env file):
  S3_ENDPOINT    - S3 endpoint URL (required)
  S3_BUCKET      - Bucket name (required)
  S3_REGION      - Region, e.g. fsn1 (required)
  S3_ACCESS_KEY  - Access key ID (required)
  S3_SECRET_KEY  - Secret access key (prompted for when missing)
  S3_VERIFY_SSL  - Verify SSL certificates (default: true)
  S3_CA_BUNDLE   - Path to CA certificate bundle (optional)
  DEBUG          - Enable debug mode (true/false, default: false)
        """
    )
    parser.add_argument('--deleted', action='store_true',
                        help='List deleted files (delete markers and noncurrent versions) and exit')
    parser.add_argument('--debug', action='store_true',
                        help='Enable debug mode with verbose output')
    parser.add_argument('--env-file', default='.env',
                        help='Path to the .env file with connection settings (default: .env)')
    parser.add_argument('--backup-dir',
                        help='Directory to back up the current lifecycle configuration to before changing it')

    args = parser.parse_args(argv)

    # Check for DEBUG environment variable if --debug flag is not set
    debug_mode = args.debug or os.getenv('DEBUG', 'false').lower() in ('true', '1', 'yes', 'on')
    logger = setup_logging(debug_mode)

    logger.info(Colors.yellow("Hetzner S3 Bucket Management Script"))
    logger.info(Colors.yellow("=" * 37))
    logger.info("")

    try:
        config = load_config(args.env_file, logger=logger)
        manager = S3RetentionManager(config, logger=logger, backup_dir=args.backup_dir)

        logger.info("")
        logger.info(Colors.green("Checking bucket configuration..."))
        if not manager.check_bucket():
            return 1

        if args.deleted:
            manager.run_report()
        else:
            manager.run_interactive()
        return 0

    except ConfigError as e:
        logger.error(Colors.red(f"Error: {e}"))
        logger.error(f"Set them in the environment or in {args.env_file}")
        return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 1
    except Exception as e:
        print(f"Unexpected error: {e}")
        if debug_mode:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
