import pytest

from tests.fakes import MockRecipeStore


@pytest.fixture
def store() -> MockRecipeStore:
    return MockRecipeStore()
