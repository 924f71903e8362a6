#!/usr/bin/env python3
"""
Pytest configuration for s3-retention-manager tests.

This file contains shared fixtures for the unit tests. No test talks to a
real endpoint: S3 clients are MagicMock objects or botocore Stubbers.
"""

import os
import sys
import logging
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../')))

from s3_retention_manager import LOGGER_NAME, S3Config, S3RetentionManager


def client_error(code, operation='Operation', message='stubbed error'):
    """Build a botocore ClientError with the given error code."""
    return ClientError({'Error': {'Code': code, 'Message': message}}, operation)


@pytest.fixture
def s3_config():
    """Fixture providing connection settings for a test bucket."""
    return S3Config(
        endpoint='https://fsn1.your-objectstorage.com',
        bucket='test-bucket',
        region='fsn1',
        access_key='test-access-key',
        secret_key='test-secret-key',
    )


@pytest.fixture
def mock_s3_client():
    """Fixture providing a MagicMock S3 client with an empty, unversioned bucket."""
    client = MagicMock()
    client.head_bucket.return_value = {}
    client.get_bucket_location.return_value = {'LocationConstraint': 'fsn1'}
    client.get_bucket_versioning.return_value = {}
    client.get_bucket_lifecycle_configuration.side_effect = client_error(
        'NoSuchLifecycleConfiguration', 'GetBucketLifecycleConfiguration')
    client.get_paginator.return_value.paginate.return_value = [{}]
    return client


@pytest.fixture
def manager(s3_config, mock_s3_client, caplog):
    """Fixture providing a manager wired to the mock client, logging at INFO."""
    caplog.set_level(logging.INFO, logger=LOGGER_NAME)
    return S3RetentionManager(s3_config, s3_client=mock_s3_client)


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers installed by setup_logging so they don't outlive captured streams."""
    yield
    logging.getLogger(LOGGER_NAME).handlers.clear()
