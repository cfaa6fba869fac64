"""Shared dataset fixtures.

The sample network has two unconnected parts:

* Bus R1 from Stop A (0,0) to Stop B (0,0.01), with no hub.
* Taxi R2 departing Central Rank (10,10), visiting Rank Stop (10,10),
  Township Stop (10.001,10.001) and Mall Stop (11,11).
"""

import zipfile
from pathlib import Path

import pytest

from transit_hub.data.dataset_loader import DatasetLoader


@pytest.fixture
def sample_dataset_dir(tmp_path: Path) -> Path:
    """Create a sample dataset directory with all four CSV exports."""
    dataset_dir = tmp_path / "dataset"
    dataset_dir.mkdir()

    (dataset_dir / "hubs.csv").write_text(
        "id,name,latitude,longitude,address,transport_type,image_url\n"
        "H1,Central Rank,10.0,10.0,1 Main Road,Taxi,\n"
    )

    (dataset_dir / "routes.csv").write_text(
        "id,name,start_point,end_point,cost,transport_type,hub_id\n"
        "R1,Line 1,Stop A,Stop B,8.5,Bus,\n"
        "R2,Mall Express,Central Rank,Mall Stop,12,Taxi,H1\n"
    )

    (dataset_dir / "stops.csv").write_text(
        "id,name,latitude,longitude,order_number,route_id,cost,image_url\n"
        "A,Stop A,0.0,0.0,1,R1,,\n"
        "B,Stop B,0.0,0.01,2,R1,,\n"
        "C,Rank Stop,10.0,10.0,,,,\n"
        "E,Township Stop,10.001,10.001,,,,\n"
        "D,Mall Stop,11.0,11.0,,,,https://example.com/mall.jpg\n"
    )

    # rows out of visiting order on purpose
    (dataset_dir / "route_stops.csv").write_text(
        "route_id,stop_id,order_number\n"
        "R1,B,2\n"
        "R1,A,1\n"
        "R2,D,3\n"
        "R2,C,1\n"
        "R2,E,2\n"
    )

    return dataset_dir


@pytest.fixture
def sample_dataset_zip(sample_dataset_dir: Path, tmp_path: Path) -> Path:
    """Create a sample dataset ZIP file from the directory."""
    zip_path = tmp_path / "dataset.zip"
    with zipfile.ZipFile(zip_path, "w") as zf:
        for file_path in sample_dataset_dir.iterdir():
            zf.write(file_path, file_path.name)
    return zip_path


@pytest.fixture
async def sample_db(sample_dataset_dir: Path, tmp_path: Path) -> Path:
    """Ingest the sample dataset into a SQLite database."""
    db_path = tmp_path / "transit.db"
    await DatasetLoader(db_path).ingest(sample_dataset_dir)
    return db_path
