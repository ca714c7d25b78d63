import os
import pytest


@pytest.fixture(scope="session")
def fpath_test_dir() -> str:
    """
    Path to `tests/data/` folder.
    """
    return os.path.join(os.path.dirname(__file__), "data")


@pytest.fixture(scope="session")
def fpath_sample_csv(fpath_test_dir: str) -> str:
    """
    A small export with 6 valid readings on 4 distinct days plus one blank
    line, one sentinel reading and one impossible date.
    """
    return os.path.join(fpath_test_dir, "sample_export.csv")


@pytest.fixture(scope="session")
def sample_bytes(fpath_sample_csv: str) -> bytes:
    with open(fpath_sample_csv, "rb") as fh:
        return fh.read()


HEADER = "Date,Time,Systolic (mmHg),Diastolic (mmHg),Pulse (bpm),Device,Measurement Mode\n"


@pytest.fixture
def make_csv():
    """Build CSV bytes from data lines under the standard header."""
    def _make(*lines: str) -> bytes:
        return (HEADER + "".join(f"{line}\n" for line in lines)).encode("utf-8")
    return _make
