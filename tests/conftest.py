"""Shared pytest fixtures."""

from pathlib import Path

import pytest

from jobsearch.config.models import AppConfig
from jobsearch.domain.models import CandidateProfile
from jobsearch.logging.context import clear_log_context

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def read_fixture():
    """Return a loader for text fixtures under tests/fixtures."""

    def _read(relative_path: str) -> str:
        return (FIXTURES_DIR / relative_path).read_text(encoding="utf-8")

    return _read


@pytest.fixture
def app_config() -> AppConfig:
    """Default configuration with short deadlines for tests."""
    return AppConfig.model_validate(
        {
            "search": {"aggregator_timeout": "5s", "max_results": 10},
            "scoring": {"batch_timeout": "10s", "call_timeout": "5s"},
        }
    )


@pytest.fixture
def profile() -> CandidateProfile:
    return CandidateProfile.model_validate(
        {
            "first_name": "Camille",
            "last_name": "Dupont",
            "summary": "Infrastructure engineer looking for DevOps roles.",
            "skills": ["AWS", "Terraform", "Python"],
            "experiences": [
                {
                    "position": "Senior DevOps Engineer",
                    "company": "Example SA",
                    "start_date": "2022-03-01",
                },
                {
                    "position": "System Administrator",
                    "company": "Hosting SPRL",
                    "start_date": "2019-09-01",
                },
            ],
            "educations": [{"degree": "Master in Computer Science", "institution": "ULB"}],
        }
    )


@pytest.fixture(autouse=True)
def reset_log_context():
    """Keep logging context from leaking between tests."""
    clear_log_context()
    yield
    clear_log_context()
