import pytest

from gitodb import data


@pytest.fixture
def repo(tmp_path):
    root = tmp_path / '.gitodb'
    data.init(root)
    return root
