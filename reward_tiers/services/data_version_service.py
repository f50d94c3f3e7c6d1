from sqlalchemy.orm import Session

from reward_tiers.models.data_version import DataVersion


# data written before the marker existed has the version 1 catalog shape
BASELINE_DATA_VERSION = 1


def get_data_version(db: Session, brand: str) -> int:
    row = db.query(DataVersion).filter(DataVersion.brand == brand).first()
    if row is None:
        return BASELINE_DATA_VERSION
    return int(row.version)


def set_data_version(db: Session, brand: str, version: int) -> DataVersion:
    row = db.query(DataVersion).filter(DataVersion.brand == brand).first()
    if row is None:
        row = DataVersion(brand=brand, version=int(version))
        db.add(row)
    else:
        row.version = int(version)
    db.flush()
    return row
