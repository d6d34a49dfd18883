import pytest

from recommender.types import Record


@pytest.fixture
def scenario_records():
    return [
        Record(id=1, title="Space War", description="a war in space", genres=("SciFi",)),
        Record(id=2, title="Love Story", description="a romance in paris", genres=("Romance",)),
        Record(id=3, title="Space Romance", description="love and war in space", genres=("SciFi", "Romance")),
    ]
