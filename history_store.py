"""
History store: append-only log of BMI measurements in a sqlite file.

The store is an explicit handle. Call initialize() once before use and
close() when done. Every failure is logged here and turned into a
False / None / [] return, so callers never see a sqlite3 exception.
"""
import logging
import sqlite3
from dataclasses import dataclass
from typing import List, Optional

from bmi import classify

logger = logging.getLogger(__name__)

UNINITIALIZED = "uninitialized"
READY = "ready"
CLOSED = "closed"

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS bmi_entries (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    date TEXT,
    weight REAL,
    height REAL,
    bmi REAL
)
"""


@dataclass(frozen=True)
class Measurement:
    """
    One entry in the BMI history.

    Attributes:
        id: Row id assigned by the store; strictly increasing, never reused.
        date: Calendar date string captured when the entry was created.
        weight: Weight in pounds.
        height: Height in inches.
        bmi: Full-precision BMI as computed at creation.
        category: Label derived from bmi.
    """

    id: int
    date: str
    weight: float
    height: float
    bmi: float
    category: str


class HistoryStore:
    def __init__(self, db_file: str):
        self.db_file = db_file
        self._state = UNINITIALIZED

    @property
    def state(self) -> str:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state == READY

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_file)
        conn.row_factory = sqlite3.Row
        return conn

    def initialize(self) -> bool:
        """Create the table if it is missing. Safe to call more than once."""
        if self._state == CLOSED:
            logger.error("Cannot initialize a closed history store (%s)", self.db_file)
            return False

        try:
            conn = self._connect()
            try:
                conn.execute(CREATE_TABLE_SQL)
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error:
            logger.exception("Error creating database table in %s", self.db_file)
            return False

        self._state = READY
        logger.info("Database table ready: %s", self.db_file)
        return True

    def append(self, date: str, weight: float, height: float, bmi: float) -> Optional[Measurement]:
        """
        Insert one entry and return it once committed.

        Returns None if the store is not ready or the write fails; in
        that case nothing was recorded.
        """
        if not self.is_ready:
            logger.error("Cannot append BMI entry: history store is %s", self._state)
            return None

        try:
            conn = self._connect()
            try:
                cur = conn.cursor()
                cur.execute(
                    "INSERT INTO bmi_entries (date, weight, height, bmi) VALUES (?, ?, ?, ?)",
                    (date, weight, height, bmi)
                )
                conn.commit()
                entry_id = cur.lastrowid
            finally:
                conn.close()
        except sqlite3.Error:
            logger.exception("Error inserting BMI entry")
            return None

        logger.info("BMI entry inserted successfully (id=%d)", entry_id)
        return Measurement(
            id=entry_id,
            date=date,
            weight=weight,
            height=height,
            bmi=bmi,
            category=classify(bmi),
        )

    def load_all(self) -> List[Measurement]:
        """All entries in insertion order, categories recomputed from bmi."""
        if not self.is_ready:
            logger.error("Cannot load BMI history: history store is %s", self._state)
            return []

        try:
            conn = self._connect()
            try:
                cur = conn.cursor()
                cur.execute("SELECT id, date, weight, height, bmi FROM bmi_entries ORDER BY id")
                rows = cur.fetchall()
            finally:
                conn.close()
        except sqlite3.Error:
            logger.exception("Error loading BMI history")
            return []

        return [
            Measurement(
                id=row["id"],
                date=row["date"],
                weight=row["weight"],
                height=row["height"],
                bmi=row["bmi"],
                category=classify(row["bmi"]),
            )
            for row in rows
        ]

    def close(self) -> None:
        self._state = CLOSED
        logger.info("History store closed: %s", self.db_file)
