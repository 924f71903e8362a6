#!/usr/bin/env python3
"""
Unit tests for the deleted-objects report (--deleted mode).
"""

from datetime import datetime, timezone

from conftest import client_error
from s3_retention_manager import build_deleted_report, format_deleted_report

MODIFIED = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def delete_marker(key, version_id):
    return {'Key': key, 'VersionId': version_id, 'IsLatest': True, 'LastModified': MODIFIED}


def version(key, version_id, is_latest, size=1024):
    return {
        'Key': key,
        'VersionId': version_id,
        'IsLatest': is_latest,
        'LastModified': MODIFIED,
        'Size': size,
        'StorageClass': 'STANDARD',
    }


SAMPLE_PAGE = {
    'DeleteMarkers': [
        delete_marker('reports/q1.pdf', 'dm-1'),
        delete_marker('reports/q2.pdf', 'dm-2'),
    ],
    'Versions': [
        version('reports/q1.pdf', 'v-1', False),
        version('reports/q2.pdf', 'v-2', False),
        version('notes.txt', 'v-3', True),
        version('notes.txt', 'v-4', False, size=12),
        version('readme.md', 'v-5', True),
    ],
}


class TestBuildDeletedReport:

    def test_counts_markers_and_noncurrent_versions(self):
        report = build_deleted_report([SAMPLE_PAGE])
        assert report.delete_marker_count == 2
        assert report.noncurrent_count == 3
        assert report.total == 5

    def test_current_versions_are_excluded(self):
        report = build_deleted_report([SAMPLE_PAGE])
        assert 'v-3' not in {v.version_id for v in report.noncurrent_versions}
        assert all(not v.is_latest for v in report.noncurrent_versions)

    def test_empty_listing(self):
        report = build_deleted_report([{}])
        assert (report.delete_marker_count, report.noncurrent_count, report.total) == (0, 0, 0)
        assert report.is_empty

    def test_collects_every_page(self):
        pages = [
            {'DeleteMarkers': [delete_marker('a', 'dm-a')]},
            {'Versions': [version('b', 'v-b', False)], 'DeleteMarkers': [delete_marker('c', 'dm-c')]},
        ]
        report = build_deleted_report(pages)
        assert report.total == 3


class TestFormatDeletedReport:

    def test_empty_report_message(self):
        lines = format_deleted_report(build_deleted_report([{}]), 'test-bucket', 'https://s3.example')
        text = '\n'.join(lines)
        assert 'No deleted files found.' in text
        assert 'Summary' not in text

    def test_sections_and_summary(self):
        report = build_deleted_report([SAMPLE_PAGE])
        text = '\n'.join(format_deleted_report(report, 'test-bucket', 'https://s3.example'))

        assert 'Files with delete markers' in text
        assert 'File: reports/q1.pdf' in text
        assert 'Delete Marker ID: dm-2' in text
        assert 'Noncurrent versions' in text
        assert 'Size: 12 bytes' in text
        assert 'Storage Class: STANDARD' in text
        assert 'Total deleted files (delete markers): 2' in text
        assert 'Total noncurrent versions: 3' in text
        assert 'Total recoverable objects: 5' in text
        assert 'removed after 60 days' in text
        assert '--bucket test-bucket' in text
        assert '--endpoint-url https://s3.example' in text


class TestListDeletedObjects:

    def test_report_mode_output(self, manager, mock_s3_client, caplog):
        mock_s3_client.get_paginator.return_value.paginate.return_value = [SAMPLE_PAGE]

        report = manager.run_report()

        mock_s3_client.get_paginator.assert_called_once_with('list_object_versions')
        mock_s3_client.get_paginator.return_value.paginate.assert_called_once_with(Bucket='test-bucket')
        assert report.total == 5
        assert 'Total recoverable objects: 5' in caplog.text

    def test_no_deleted_files(self, manager, caplog):
        report = manager.run_report()
        assert report.total == 0
        assert 'No deleted files found.' in caplog.text

    def test_listing_failure_is_reported(self, manager, mock_s3_client, caplog):
        mock_s3_client.get_paginator.return_value.paginate.side_effect = client_error(
            'AccessDenied', 'ListObjectVersions')

        assert manager.list_deleted_objects() is None
        assert 'Could not list object versions' in caplog.text

    def test_unexpected_shape_is_reported(self, manager, mock_s3_client, caplog):
        mock_s3_client.get_paginator.return_value.paginate.return_value = [
            {'DeleteMarkers': [{'VersionId': 'dm-1'}]}]

        assert manager.list_deleted_objects() is None
        assert 'Could not parse object versions' in caplog.text
