"""Unit tests for database operations."""
import pytest
import tempfile
import os
from src.database import AdvisoryDatabase


class TestAdvisoryDatabase:
    """Test cases for AdvisoryDatabase class."""

    @pytest.fixture
    def db(self):
        """Create a temporary database for testing."""
        fd, path = tempfile.mkstemp(suffix='.db')
        os.close(fd)

        database = AdvisoryDatabase(path)

        yield database

        # Cleanup
        try:
            os.unlink(path)
        except OSError:
            pass

    @pytest.fixture
    def sample_document(self):
        """Create a sample enriched advisory document."""
        return {
            'advisoryid': 42,
            'summary': 'SpaceX test',
            'details': 'Static Fire Launch Day 3 JUN/4 JUN 1200Z-1800Z',
            'advisorystarttime': '2024-06-01T00:00:00Z',
            'parsedDetails': [
                {
                    'label': 'Fire Launch Day',
                    'startDate': '2024-06-03',
                    'endDate': '2024-06-04',
                    'startTime': '12:00:00Z',
                    'endTime': '18:00:00Z',
                    'startDatetime': '2024-06-03T12:00:00Z',
                    'endDatetime': '2024-06-04T18:00:00Z',
                }
            ],
        }

    def test_insert_advisory(self, db, sample_document):
        """Test inserting a new advisory."""
        assert db.upsert_advisory(sample_document) == "inserted"
        assert db.count() == 1
        assert db.get_advisory(42) == sample_document

    def test_upsert_replaces_wholesale(self, db, sample_document):
        """Test that a second write with the same id replaces the document."""
        db.upsert_advisory(sample_document)

        replacement = {
            'advisoryid': 42,
            'summary': 'SpaceX test (revised)',
            'details': '',
            'advisorystarttime': '2024-06-01T00:00:00Z',
            'parsedDetails': [],
        }
        assert db.upsert_advisory(replacement) == "updated"

        assert db.count() == 1
        assert db.get_advisory(42) == replacement

    def test_get_missing_advisory(self, db):
        assert db.get_advisory(999) is None

    def test_get_all_advisories(self, db, sample_document):
        """Test find-all returns every document ordered by id."""
        other = dict(sample_document, advisoryid=7, parsedDetails=[])
        db.upsert_advisory(sample_document)
        db.upsert_advisory(other)

        documents = db.get_all_advisories()

        assert [d['advisoryid'] for d in documents] == [7, 42]

    def test_statistics(self, db, sample_document):
        """Test statistics calculation."""
        db.upsert_advisory(sample_document)
        db.upsert_advisory(dict(sample_document, advisoryid=7, parsedDetails=[]))

        stats = db.get_statistics()

        assert stats['total_advisories'] == 2
        assert stats['advisories_with_windows'] == 1
        assert stats['total_windows'] == 1

    def test_statistics_empty(self, db):
        stats = db.get_statistics()

        assert stats == {
            'total_advisories': 0,
            'advisories_with_windows': 0,
            'total_windows': 0,
        }

    def test_concurrent_insert_is_replaced(self, db, sample_document):
        """Test that a write from another connection between check and write is replaced, not a conflict."""
        competing = dict(sample_document, summary='written by another run', parsedDetails=[])
        other_db = AdvisoryDatabase(db.db_path)
        original_exists = db._exists

        def exists_then_competing_write(cursor, advisory_id):
            found = original_exists(cursor, advisory_id)
            other_db.upsert_advisory(competing)
            return found

        db._exists = exists_then_competing_write

        assert db.upsert_advisory(sample_document) == "inserted"
        assert db.count() == 1
        assert db.get_advisory(42) == sample_document

    def test_document_without_id_rejected(self, db):
        with pytest.raises(KeyError):
            db.upsert_advisory({'summary': 'no id'})
