import pytest
from blockbucket import Bucket


@pytest.fixture
def bucket_path(tmp_path):
    """Path of a bucket file inside a temporary directory."""
    return str(tmp_path / 'data.db')


@pytest.fixture
def bucket(bucket_path):
    """Fresh, empty Bucket."""
    return Bucket(bucket_path)


@pytest.fixture
def abc_bucket(bucket):
    """Bucket holding keys a, b, c in that order."""
    bucket.set_many([(b"a", b"1"), (b"b", b"2"), (b"c", b"3")])
    return bucket
